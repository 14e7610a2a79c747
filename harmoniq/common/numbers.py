"""
Harmoniq Safety - Rounding
"""
import math


def round_half_up(value: float, ndigits: int = 0):
    """Round .5 away from zero for positives (Python's round() is bankers' rounding)."""
    factor = 10 ** ndigits
    result = math.floor(value * factor + 0.5) / factor
    return int(result) if ndigits == 0 else result
