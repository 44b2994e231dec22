"""
Hangman reveal engine.

Pure functions over a secret word and the set of letters guessed so far.
Letters are compared in normalized form, so guessing "A" reveals "Á".
Nothing here persists state; see state.AttemptStateMachine for that.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List

from .errors import InvalidInputError
from .normalize import normalize, normalize_char

MAX_INCORRECT = 6
PLACEHOLDER = "_"


@dataclass(frozen=True)
class LetterOutcome:
    letter: str
    is_correct: bool
    has_won: bool
    has_lost: bool
    incorrect_guesses: int
    guessed_letters: FrozenSet[str]


def normalize_letters(letters: Iterable[str]) -> FrozenSet[str]:
    """Normalize a string or iterable of letters into a set, ignoring blanks."""
    result = set()
    for raw in letters or ():
        for ch in normalize(raw):
            if not ch.isspace() and ch != ",":
                result.add(ch)
    return frozenset(result)


def validate_letter(raw: str) -> str:
    letter = normalize((raw or "").strip())
    if len(letter) != 1 or not letter.isalpha():
        raise InvalidInputError("Guess must be a single letter.")
    return letter


def is_complete(secret: str, guessed: Iterable[str]) -> bool:
    """True when every letter of the secret has been guessed; non-letters always count."""
    known = normalize_letters(guessed)
    return all(ch in known for ch in normalize(secret) if ch.isalpha())


def count_incorrect(secret: str, guessed: Iterable[str]) -> int:
    """Number of guessed letters that do not occur in the secret."""
    target = normalize(secret)
    return sum(1 for ch in normalize_letters(guessed) if ch not in target)


# PUBLIC_INTERFACE
def guess_letter(
    secret: str,
    letter: str,
    guessed_so_far: Iterable[str],
    incorrect_so_far: int,
    max_incorrect: int = MAX_INCORRECT,
) -> LetterOutcome:
    """Evaluate a single letter guess.

    Parameters:
        secret: the day's word, accents allowed.
        letter: the raw guessed letter.
        guessed_so_far: letters guessed before this one.
        incorrect_so_far: incorrect guesses before this one.

    Returns:
        LetterOutcome with is_correct, has_won, has_lost and the resulting
        incorrect count and guessed-letter set.

    Raises:
        InvalidInputError: if letter is not exactly one alphabetic character.
    """
    norm_letter = validate_letter(letter)
    is_correct = norm_letter in normalize(secret)
    incorrect = incorrect_so_far + (0 if is_correct else 1)
    guessed = normalize_letters(guessed_so_far) | {norm_letter}
    return LetterOutcome(
        letter=norm_letter,
        is_correct=is_correct,
        has_won=is_complete(secret, guessed),
        has_lost=incorrect >= max_incorrect,
        incorrect_guesses=incorrect,
        guessed_letters=guessed,
    )


# PUBLIC_INTERFACE
def build_revealed_view(secret: str, guessed: Iterable[str], placeholder: str = PLACEHOLDER) -> str:
    """Return the secret with unguessed letters replaced by the placeholder.

    Guessed positions show the original character, accents included.
    Spaces and other non-letters are always shown.
    """
    known = normalize_letters(guessed)
    view = []
    for ch in secret:
        folded = normalize_char(ch)
        if not folded.isalpha() or folded in known:
            view.append(ch)
        else:
            view.append(placeholder)
    return "".join(view)


def revealed_positions(secret: str, guessed: Iterable[str]) -> List[Dict[str, Any]]:
    known = normalize_letters(guessed)
    return [
        {"position": i, "letter": ch}
        for i, ch in enumerate(secret)
        if normalize_char(ch) in known
    ]
