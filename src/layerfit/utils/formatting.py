"""Text and number formatting utilities."""

from __future__ import annotations


def format_percentage(value: float) -> str:
    """Format a percentage with at most two decimals.

    Args:
        value: Percentage (100 = unchanged)

    Returns:
        Formatted percentage string, e.g. ``"40%"`` or ``"33.33%"``
    """
    return f"{round(value, 2):g}%"


def format_size(width: float, height: float, unit: str = "px") -> str:
    """Format a width/height pair.

    Args:
        width: Width value
        height: Height value
        unit: Unit suffix

    Returns:
        Formatted size string, e.g. ``"80x40 px"``
    """
    return f"{width:g}x{height:g} {unit}"
