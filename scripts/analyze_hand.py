#!/usr/bin/env python3
"""Analyze a hand: best hand, equity vs a random hand and an approximate strategy."""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from pokercore.engine import EngineConfig, PokerEngine
from pokercore.game.cards import DuplicateCardError, InvalidCardError, parse_cards
from pokercore.solver.ranges import Position
from pokercore.viz import display_analysis, range_matrix


def main():
    parser = argparse.ArgumentParser(
        description="Evaluate a hand, estimate equity and suggest a strategy"
    )
    parser.add_argument(
        "--hole",
        required=True,
        help="Hole cards (e.g., 'AhKh' or 'Ah Kh')",
    )
    parser.add_argument(
        "-b", "--board",
        default="",
        help="Board cards, 0-5 (e.g., 'QhJhTh')",
    )
    parser.add_argument(
        "-p", "--pot",
        type=float,
        default=100.0,
        help="Pot size (default: 100)",
    )
    parser.add_argument(
        "-s", "--stack",
        type=float,
        default=1000.0,
        help="Stack size (default: 1000)",
    )
    parser.add_argument(
        "--position",
        choices=[p.value for p in Position],
        default=Position.MIDDLE.value,
        help="Table position (default: middle)",
    )
    parser.add_argument(
        "-i", "--iterations",
        type=int,
        default=None,
        help="Monte Carlo trials for equity (default: engine setting)",
    )
    parser.add_argument(
        "--full",
        action="store_true",
        help="Use the full-analysis iteration count",
    )
    parser.add_argument(
        "--show-range",
        action="store_true",
        help="Show the opening range for the position",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible runs",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )

    args = parser.parse_args()
    console = Console()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    try:
        hole = parse_cards(args.hole)
        board = parse_cards(args.board)
    except InvalidCardError as e:
        console.print(f"[red]{e}[/]")
        return 1

    if len(hole) != 2:
        console.print("[red]Hole must have exactly 2 cards[/]")
        return 1
    if len(board) > 5:
        console.print("[red]Board can have at most 5 cards[/]")
        return 1

    config = EngineConfig(seed=args.seed)
    position = Position(args.position)

    with PokerEngine(config) as engine:
        try:
            evaluation = engine.evaluate_hand(hole, board)
        except DuplicateCardError as e:
            console.print(f"[red]{e}[/]")
            return 1

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Running simulations...")

            if args.full:
                equity_future = engine.calculate_full_equity(hole, board)
            else:
                equity_future = engine.calculate_equity(hole, board, args.iterations)
            strategy_future = engine.calculate_gto_strategy(
                hole, board, args.pot, args.stack, position
            )

            equity = equity_future.result()
            strategy = strategy_future.result()

        display_analysis(evaluation, hole, board, equity, strategy, console=console)

        if args.show_range:
            console.print()
            console.print(range_matrix(
                engine.generate_optimal_ranges(position),
                title=f"{position.value.title()} position opening range",
            ))

    return 0


if __name__ == "__main__":
    sys.exit(main())
