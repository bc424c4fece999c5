import math


def round_half_up(x: float) -> int:
    """Nearest integer, halves rounded up (round() would round them to even)."""
    return int(math.floor(x + 0.5))


def round_tenths(x: float) -> float:
    return round_half_up(x * 10) / 10
