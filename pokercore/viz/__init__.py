"""Visualization module."""

from .display import (
    display_analysis,
    equity_table,
    evaluation_panel,
    range_matrix,
    strategy_table,
)

__all__ = [
    "display_analysis",
    "equity_table",
    "evaluation_panel",
    "range_matrix",
    "strategy_table",
]
