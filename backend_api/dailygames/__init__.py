"""
Daily games app.

Re-exports the puzzle engine so callers can import from dailygames directly,
e.g.:

    from dailygames import get_variant, guess_letter
"""

# PUBLIC_INTERFACE
from .puzzles import (
    AttemptStateMachine,
    LetterStatus,
    VariantRegistry,
    build_revealed_view,
    compute_feedback,
    get_variant,
    guess_letter,
    normalize,
    points_for,
)

__all__ = [
    "AttemptStateMachine",
    "LetterStatus",
    "VariantRegistry",
    "build_revealed_view",
    "compute_feedback",
    "get_variant",
    "guess_letter",
    "normalize",
    "points_for",
]
