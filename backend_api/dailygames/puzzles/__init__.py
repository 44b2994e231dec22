"""
Puzzle engine: normalization, feedback, hangman reveal, scoring and the
attempt state machine.

Exports:
- normalize for accent-folded comparisons
- compute_feedback, LetterStatus and keyboard merge helpers
- VariantRegistry and get_variant for resolving games (word, pin, hangman)
- guess_letter and build_revealed_view for hangman
- points_for scoring policy
- AttemptStateMachine and its data types
- the PuzzleError taxonomy

These modules are framework-agnostic and can be reused by views or services
without importing request objects or Django models.
"""

from .engines import LetterStatus, compute_feedback, merge_keyboard, best_status
from .errors import (
    PuzzleError,
    InvalidInputError,
    SecretNotFoundError,
    AlreadySolvedError,
    AttemptsExhaustedError,
    NoSecretAvailableError,
    PersistenceFailureError,
)
from .hangman import guess_letter, build_revealed_view
from .normalize import normalize
from .registry import VariantRegistry, get_variant
from .scoring import points_for
from .state import AttemptStateMachine, AttemptRecord, GuessEntry, Secret

__all__ = [
    "LetterStatus",
    "compute_feedback",
    "merge_keyboard",
    "best_status",
    "PuzzleError",
    "InvalidInputError",
    "SecretNotFoundError",
    "AlreadySolvedError",
    "AttemptsExhaustedError",
    "NoSecretAvailableError",
    "PersistenceFailureError",
    "guess_letter",
    "build_revealed_view",
    "normalize",
    "VariantRegistry",
    "get_variant",
    "points_for",
    "AttemptStateMachine",
    "AttemptRecord",
    "GuessEntry",
    "Secret",
]
