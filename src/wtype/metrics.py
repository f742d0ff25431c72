import math

CHARS_PER_WORD = 5


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def accuracy(correct: int, total: int) -> int:
    """Percentage of correct keystrokes; no keystrokes counts as perfect."""
    if total <= 0:
        return 100
    return max(0, min(100, round_half_up(100 * correct / total)))


def wpm(chars: int, minutes: float) -> int:
    """Words per minute with the usual five characters per word."""
    if minutes <= 0:
        return 0
    return max(0, round_half_up((chars / CHARS_PER_WORD) / minutes))


def elapsed_minutes(start: float, end: float) -> float:
    return max(0.0, end - start) / 60.0
