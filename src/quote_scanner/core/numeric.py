"""Numeric helpers shared by the scoring and lead value engines."""

import math


def clamp(value: float, low: int = 0, high: int = 100) -> int:
    """Clamp a score into [low, high] and return it as an int."""
    return int(max(low, min(high, value)))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up.

    Scores and prices are published to the browser and ad platforms, which
    round .5 upward; Python's round() would send 72.5 to 72.
    """
    return int(math.floor(value + 0.5))


def round_to_step(value: float, step: int) -> int:
    """Round a value to the nearest multiple of step."""
    return round_half_up(value / step) * step


def format_currency(amount: int) -> str:
    """Format a whole-dollar amount, e.g. 1500 -> '$1,500'."""
    return f"${amount:,}"
