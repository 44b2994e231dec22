from __future__ import annotations

from .variants import HANGMAN

# Points for solving word/PIN puzzles, keyed by attempt number.
ATTEMPT_POINTS = {1: 500, 2: 400, 3: 300, 4: 200, 5: 100, 6: 50}

HANGMAN_BASE_POINTS = 500
HANGMAN_PENALTY_PER_MISS = 50


# PUBLIC_INTERFACE
def points_for(count: int, variant: str) -> int:
    """Points awarded for a solve.

    - word/pin: count is the attempt that solved it; 500 for the first
      attempt down to 50 for the sixth, 0 beyond.
    - hangman: count is the number of incorrect letters; 500 minus 50
      per miss, floored at zero.
    """
    if variant == HANGMAN:
        misses = max(0, int(count))
        return max(0, HANGMAN_BASE_POINTS - HANGMAN_PENALTY_PER_MISS * misses)
    attempts = max(1, int(count))
    return ATTEMPT_POINTS.get(attempts, 0)
