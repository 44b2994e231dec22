from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from .engines import compute_feedback
from .errors import InvalidInputError
from .hangman import validate_letter
from .normalize import normalize

WORD = "word"
PIN = "pin"
HANGMAN = "hangman"


class WordSource(Protocol):
    """Dictionary collaborator used to pick a day's secret word."""

    # PUBLIC_INTERFACE
    def pick_random_word(self, min_length: int, max_length: Optional[int] = None) -> Optional[str]:
        """Return an eligible word (original spelling) or None if there is none."""


@dataclass
class WordVariant:
    """Daily word guess: 5 letters, accents folded for comparison."""

    name: str = WORD
    title: str = "Adivinar la Palabra"
    length: int = 5
    letter_game: bool = False

    def validate_guess(self, raw: str) -> str:
        guess = normalize((raw or "").strip())
        if len(guess) != self.length:
            raise InvalidInputError(f"Guess must be exactly {self.length} letters.")
        if not guess.isalpha():
            raise InvalidInputError("Guess must contain only letters.")
        return guess

    # PUBLIC_INTERFACE
    def evaluate(self, secret: str, guess: str) -> Dict[str, Any]:
        """Evaluate a validated guess against the secret.

        Returns a dict:
        {
            "feedback": List[LetterStatus],   # same length as secret
            "is_correct": bool,
            "metadata": Dict[str, Any]
        }
        """
        secret_n = normalize(secret)
        guess_n = normalize(guess)
        if len(secret_n) != len(guess_n):
            raise InvalidInputError("Secret and guess length must match.")
        return {
            "feedback": compute_feedback(guess_n, secret_n),
            "is_correct": guess_n == secret_n,
            "metadata": {"variant": self.name},
        }

    def generate_secret(self, words: Optional[WordSource], rng: random.Random) -> Optional[str]:
        if words is None:
            return None
        return words.pick_random_word(self.length, self.length)

    def describe(self) -> Dict[str, Any]:
        return {"game": self.name, "title": self.title, "length": self.length, "letter_game": self.letter_game}


@dataclass
class PinVariant(WordVariant):
    """Daily PIN guess: 4 digits, same feedback rules over the digit alphabet."""

    name: str = PIN
    title: str = "Adivinar el PIN"
    length: int = 4

    def validate_guess(self, raw: str) -> str:
        guess = (raw or "").strip()
        if len(guess) != self.length or not (guess.isascii() and guess.isdigit()):
            raise InvalidInputError(f"PIN must be exactly {self.length} digits.")
        return guess

    def generate_secret(self, words: Optional[WordSource], rng: random.Random) -> Optional[str]:
        return f"{rng.randrange(10 ** self.length):0{self.length}d}"


@dataclass
class HangmanVariant:
    """Daily hangman: a word of at least 7 letters guessed one letter at a time."""

    name: str = HANGMAN
    title: str = "Ahorcado"
    min_length: int = 7
    letter_game: bool = True

    def validate_guess(self, raw: str) -> str:
        return validate_letter(raw)

    def generate_secret(self, words: Optional[WordSource], rng: random.Random) -> Optional[str]:
        if words is None:
            return None
        return words.pick_random_word(self.min_length)

    def describe(self) -> Dict[str, Any]:
        return {"game": self.name, "title": self.title, "min_length": self.min_length, "letter_game": self.letter_game}
