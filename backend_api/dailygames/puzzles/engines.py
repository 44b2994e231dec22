from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple


class LetterStatus(str, Enum):
    """Per-position feedback, ordered ABSENT < PRESENT < CORRECT."""

    CORRECT = "correct"
    PRESENT = "present"
    ABSENT = "absent"

    @property
    def rank(self) -> int:
        return _RANK[self]


_RANK = {
    LetterStatus.ABSENT: 1,
    LetterStatus.PRESENT: 2,
    LetterStatus.CORRECT: 3,
}

_COMPACT = {
    LetterStatus.CORRECT: "g",
    LetterStatus.PRESENT: "y",
    LetterStatus.ABSENT: "b",
}
_FROM_COMPACT = {v: k for k, v in _COMPACT.items()}


# PUBLIC_INTERFACE
def compute_feedback(guess: str, secret: str) -> List[LetterStatus]:
    """Compute per-position feedback with the two-pass Wordle rules.

    - correct: same character at the same position
    - present: character occurs at another secret position not yet used
    - absent: otherwise

    Secret positions are consumed left to right, first available match
    wins, so repeated characters are never over-reported. Both inputs
    must already be normalized and of equal length.
    """
    n = len(secret)
    result: List[LetterStatus] = [LetterStatus.ABSENT] * n
    used = [False] * n

    for i in range(n):
        if guess[i] == secret[i]:
            result[i] = LetterStatus.CORRECT
            used[i] = True

    for i in range(n):
        if result[i] is LetterStatus.CORRECT:
            continue
        for j in range(n):
            if not used[j] and guess[i] == secret[j]:
                result[i] = LetterStatus.PRESENT
                used[j] = True
                break

    return result


def feedback_to_compact(feedback: Sequence[LetterStatus]) -> str:
    """Compact representation to store in DB (g=correct, y=present, b=absent)."""
    return "".join(_COMPACT[LetterStatus(x)] for x in feedback)


def compact_to_feedback(compact: str) -> List[LetterStatus]:
    """Inverse of feedback_to_compact; raises ValueError on an unknown code."""
    try:
        return [_FROM_COMPACT[ch] for ch in (compact or "")]
    except KeyError as exc:
        raise ValueError(f"Unknown feedback code {exc.args[0]!r} in {compact!r}.") from None


# PUBLIC_INTERFACE
def best_status(current: Optional[LetterStatus], new: LetterStatus) -> LetterStatus:
    """Return the higher of two statuses; a key never regresses."""
    if current is None or new.rank > current.rank:
        return new
    return current


# PUBLIC_INTERFACE
def merge_keyboard(
    keyboard: Mapping[str, LetterStatus],
    guess: str,
    feedback: Sequence[LetterStatus],
) -> Dict[str, LetterStatus]:
    """Fold one guess's feedback into a keyboard state, returning a new mapping.

    Characters never guessed are simply absent from the mapping ("unknown").
    """
    merged = dict(keyboard)
    for ch, status in zip(guess, feedback):
        merged[ch] = best_status(merged.get(ch), LetterStatus(status))
    return merged


def keyboard_from_history(entries: Iterable[Tuple[str, Sequence[LetterStatus]]]) -> Dict[str, LetterStatus]:
    """Rebuild the keyboard state from (guess, feedback) pairs in play order."""
    keyboard: Dict[str, LetterStatus] = {}
    for guess, feedback in entries:
        keyboard = merge_keyboard(keyboard, guess, feedback)
    return keyboard
