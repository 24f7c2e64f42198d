"""Terminal display of engine results using rich."""

from typing import Iterable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from pokercore.game.cards import Card
from pokercore.game.equity import EquityResult
from pokercore.game.evaluator import HandEvaluation
from pokercore.solver.strategy import ActionType, GtoStrategy


# Standard hand matrix layout (13x13)
RANKS = "AKQJT98765432"

# Pairs on diagonal, suited above, offsuit below
HAND_MATRIX = []
for i, r1 in enumerate(RANKS):
    row = []
    for j, r2 in enumerate(RANKS):
        if i == j:
            row.append(f"{r1}{r2}")  # Pair
        elif i < j:
            row.append(f"{r1}{r2}s")  # Suited (above diagonal)
        else:
            row.append(f"{r2}{r1}o")  # Offsuit (below diagonal)
    HAND_MATRIX.append(row)

ACTION_COLORS = {
    ActionType.FOLD: "red",
    ActionType.CHECK: "grey50",
    ActionType.CALL: "blue",
    ActionType.RAISE: "green",
}


def format_cards(cards: Iterable[Card]) -> str:
    """Cards with suit symbols, e.g. 'A♥ K♥'."""
    text = " ".join(c.symbol for c in cards)
    return text or "-"


def evaluation_panel(
    evaluation: HandEvaluation,
    hole: Iterable[Card],
    board: Iterable[Card],
) -> Panel:
    """Panel with the best hand and its strength."""
    lines = [
        f"[bold]Hole:[/] {format_cards(hole)}",
        f"[bold]Board:[/] {format_cards(board)}",
        f"[bold]Hand:[/] {evaluation.description}",
        f"[bold]Category:[/] {evaluation.category.label}",
        f"[bold]Strength:[/] {evaluation.strength:.3f}",
    ]
    return Panel("\n".join(lines), title="[bold]Hand Evaluation[/]", border_style="cyan")


def equity_table(result: EquityResult, title: str = "Equity vs Random Hand") -> Table:
    """Win/tie/loss table."""
    table = Table(title=title, show_header=False)
    table.add_column("Stat", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Win", f"[green]{result.win_rate:.1%}[/]")
    table.add_row("Tie", f"{result.tie_rate:.1%}")
    table.add_row("Lose", f"[red]{result.lose_rate:.1%}[/]")
    table.add_row("Equity", f"{result.equity:.1%}")
    table.add_row("Trials", f"{result.iterations:,}")
    table.add_row("Confidence", f"{result.confidence:.3f}")

    return table


def strategy_table(strategy: GtoStrategy, title: str = "Approximate Strategy") -> Table:
    """One row per action, colour coded."""
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Action")
    table.add_column("Freq", justify="right")
    table.add_column("Sizing", justify="right")
    table.add_column("EV", justify="right")
    table.add_column("Reasoning", style="dim")

    for action in sorted(strategy.actions, key=lambda a: -a.frequency):
        color = ACTION_COLORS[action.action]
        sizing = f"{action.sizing:.1f}" if action.sizing is not None else ""
        table.add_row(
            f"[{color}]{action.action.value.upper()}[/]",
            f"{action.frequency:.0%}",
            sizing,
            f"{action.expected_value:+.2f}",
            action.reasoning,
        )

    table.caption = (
        f"EV {strategy.expected_value:+.2f} | "
        f"exploitability {strategy.exploitability:.3f} | "
        f"strength {strategy.strength:.2f}"
    )
    return table


def range_matrix(hands: Iterable[str], title: str = "Range") -> Table:
    """13x13 matrix with the given hands highlighted."""
    selected = set(hands)
    table = Table(title=title, show_header=True, header_style="bold")

    table.add_column("", style="bold")
    for rank in RANKS:
        table.add_column(rank, justify="center")

    for i, rank in enumerate(RANKS):
        row = [rank]
        for j in range(13):
            hand = HAND_MATRIX[i][j]
            if hand in selected:
                style = Style(bgcolor="green", color="white")
            else:
                style = Style(bgcolor="grey30", color="grey50")
            row.append(Text(hand.center(3), style=style))
        table.add_row(*row)

    return table


def display_analysis(
    evaluation: HandEvaluation,
    hole: list[Card],
    board: list[Card],
    equity: Optional[EquityResult] = None,
    strategy: Optional[GtoStrategy] = None,
    console: Optional[Console] = None,
) -> None:
    """Print everything known about a spot."""
    console = console or Console()

    console.print(evaluation_panel(evaluation, hole, board))
    if equity is not None:
        console.print(equity_table(equity))
    if strategy is not None:
        console.print(strategy_table(strategy))
        for note in strategy.notes:
            console.print(f"[dim]- {note}[/]")
