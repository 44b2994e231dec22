"""
Attempt state machine for daily puzzles.

One AttemptRecord per (player, secret) moves through
NoAttempt -> InProgress -> Solved | Exhausted. Every mutation happens
inside the attempt store's transaction with the record loaded for update,
so concurrent guesses by the same player on the same secret are
serialized by the store. Points are awarded after that transaction
commits, and a failing scoring sink never fails the guess.

The module is framework-agnostic: collaborators are described by the
Protocols below and wired up in dailygames.stores.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Callable, ContextManager, Dict, FrozenSet, Iterable, List, Optional, Protocol

from .engines import LetterStatus, keyboard_from_history
from .errors import (
    AlreadySolvedError,
    AttemptsExhaustedError,
    InvalidInputError,
    SecretNotFoundError,
)
from .hangman import (
    MAX_INCORRECT,
    build_revealed_view,
    count_incorrect,
    guess_letter,
    is_complete,
    normalize_letters,
    revealed_positions,
)
from .normalize import normalize
from .registry import get_variant
from .scoring import points_for

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 6


@dataclass(frozen=True)
class Secret:
    """The hidden answer of one game for one calendar day."""

    id: Any
    game: str
    day: date
    value: str

    @property
    def length(self) -> int:
        return len(normalize(self.value))


@dataclass
class AttemptRecord:
    player_id: Any
    secret_id: Any
    attempts: int = 0
    solved: bool = False
    last_played_at: Optional[datetime] = None
    guessed_letters: FrozenSet[str] = frozenset()
    incorrect_guesses: int = 0


@dataclass(frozen=True)
class GuessEntry:
    """One persisted word/PIN guess, used to rebuild a session."""

    attempt_number: int
    guess: str
    feedback: List[LetterStatus]
    is_correct: bool


@dataclass(frozen=True)
class GuessOutcome:
    secret_id: Any
    attempts: int
    max_attempts: int
    solved: bool
    feedback: List[LetterStatus]
    points_awarded: int = 0

    @property
    def finished(self) -> bool:
        return self.solved or self.attempts >= self.max_attempts


@dataclass(frozen=True)
class HangmanOutcome:
    secret_id: Any
    letter: str
    is_correct: bool
    has_won: bool
    has_lost: bool
    repeated: bool
    incorrect_guesses: int
    max_incorrect: int
    guessed_letters: FrozenSet[str]
    revealed: str
    points_awarded: int = 0


@dataclass
class DailyStatus:
    secret_id: Any
    game: str
    day: date
    length: int
    attempts: int
    max_attempts: int
    solved: bool
    finished: bool
    value: Optional[str] = None
    guesses: List[GuessEntry] = field(default_factory=list)
    keyboard: Dict[str, LetterStatus] = field(default_factory=dict)
    guessed_letters: FrozenSet[str] = frozenset()
    incorrect_guesses: int = 0
    revealed: Optional[str] = None


class SecretRepository(Protocol):
    """Daily puzzle selector: one immutable secret per (game, day)."""

    def get(self, secret_id: Any) -> Optional[Secret]: ...

    def find(self, game: str, day: date) -> Optional[Secret]: ...

    def get_or_create(self, game: str, day: date) -> Secret: ...


class AttemptStore(Protocol):
    """Persistence for attempt records; save() must be atomic per call."""

    def transaction(self) -> ContextManager[Any]: ...

    def load(self, player_id: Any, secret_id: Any, for_update: bool = False) -> Optional[AttemptRecord]:
        """Return the record, or None if there is none.

        With for_update=True the record is created if missing and stays
        locked until the transaction ends, so the result is never None.
        """

    def save(self, record: AttemptRecord, guess: Optional[GuessEntry] = None) -> None: ...

    def history(self, player_id: Any, secret_id: Any) -> List[GuessEntry]: ...


class ScoringSink(Protocol):
    def award(self, player_id: Any, points: int) -> int: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# PUBLIC_INTERFACE
class AttemptStateMachine:
    """Request-scoped rules engine for guesses, letters and session status."""

    def __init__(
        self,
        secrets: SecretRepository,
        store: AttemptStore,
        sink: Optional[ScoringSink] = None,
        max_attempts: int = MAX_ATTEMPTS,
        max_incorrect: int = MAX_INCORRECT,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.secrets = secrets
        self.store = store
        self.sink = sink
        self.max_attempts = max_attempts
        self.max_incorrect = max_incorrect
        self.clock = clock or _utcnow

    # -------------------------
    # Word / PIN
    # -------------------------

    # PUBLIC_INTERFACE
    def submit_guess(self, player_id: Any, secret_id: Any, guess: str) -> GuessOutcome:
        """Evaluate a word or PIN guess and record the attempt.

        Raises:
            SecretNotFoundError: unknown secret.
            InvalidInputError: wrong length or alphabet, or a hangman secret.
            AlreadySolvedError: the player already solved this secret.
            AttemptsExhaustedError: the attempt ceiling was reached.
            PersistenceFailureError: raised by the store.
        """
        secret = self._get_secret(secret_id)
        variant = get_variant(secret.game)
        if variant.letter_game:
            raise InvalidInputError("Hangman puzzles take one letter at a time.")
        normalized = variant.validate_guess(guess)
        if len(normalized) != secret.length:
            raise InvalidInputError(f"Guess must be exactly {secret.length} characters.")

        with self.store.transaction():
            record = self._load(player_id, secret.id, for_update=True)
            if record.solved:
                raise AlreadySolvedError("You already solved this puzzle.")
            if record.attempts >= self.max_attempts:
                raise AttemptsExhaustedError(
                    f"You reached the limit of {self.max_attempts} attempts."
                )

            result = variant.evaluate(secret.value, normalized)
            record.attempts += 1
            record.solved = bool(result["is_correct"])
            record.last_played_at = self.clock()
            entry = GuessEntry(
                attempt_number=record.attempts,
                guess=normalized,
                feedback=list(result["feedback"]),
                is_correct=record.solved,
            )
            self.store.save(record, entry)

        points = 0
        if record.solved:
            points = points_for(record.attempts, secret.game)
            logger.info(
                "Player %s solved %s #%s in %s attempts",
                player_id, secret.game, secret.id, record.attempts,
            )
            self._award(player_id, points)

        return GuessOutcome(
            secret_id=secret.id,
            attempts=record.attempts,
            max_attempts=self.max_attempts,
            solved=record.solved,
            feedback=entry.feedback,
            points_awarded=points,
        )

    # -------------------------
    # Hangman
    # -------------------------

    # PUBLIC_INTERFACE
    def submit_letter(self, player_id: Any, secret_id: Any, letter: str) -> HangmanOutcome:
        """Evaluate a hangman letter against the server-held progress.

        A letter that was already guessed is reported but not counted again.
        """
        secret = self._get_hangman_secret(secret_id)
        norm_letter = get_variant(secret.game).validate_guess(letter)

        with self.store.transaction():
            record = self._load(player_id, secret.id, for_update=True)
            self._ensure_hangman_open(record)

            if norm_letter in record.guessed_letters:
                repeated = True
                has_won = has_lost = False
                is_correct = norm_letter in normalize(secret.value)
            else:
                repeated = False
                outcome = guess_letter(
                    secret.value,
                    norm_letter,
                    record.guessed_letters,
                    record.incorrect_guesses,
                    self.max_incorrect,
                )
                is_correct, has_won, has_lost = outcome.is_correct, outcome.has_won, outcome.has_lost
                record.guessed_letters = outcome.guessed_letters
                record.incorrect_guesses = outcome.incorrect_guesses
                record.attempts += 1
                record.solved = has_won
                record.last_played_at = self.clock()
                self.store.save(record)

        points = 0
        if has_won:
            points = points_for(record.incorrect_guesses, secret.game)
            logger.info(
                "Player %s solved hangman #%s with %s misses",
                player_id, secret.id, record.incorrect_guesses,
            )
            self._award(player_id, points)

        return HangmanOutcome(
            secret_id=secret.id,
            letter=norm_letter,
            is_correct=is_correct,
            has_won=has_won,
            has_lost=has_lost,
            repeated=repeated,
            incorrect_guesses=record.incorrect_guesses,
            max_incorrect=self.max_incorrect,
            guessed_letters=record.guessed_letters,
            revealed=build_revealed_view(secret.value, record.guessed_letters),
            points_awarded=points,
        )

    # PUBLIC_INTERFACE
    def update_progress(self, player_id: Any, secret_id: Any, guessed_letters: Iterable[str]) -> AttemptRecord:
        """Checkpoint hangman progress; safe to retry with the same letters.

        Letters are merged into the stored set and the incorrect count is
        recomputed from the secret. Solved rounds are returned unchanged.
        A checkpoint that reaches the miss limit is a lost round even if
        it also spells the word, as submit_letter locks the round first.
        """
        secret = self._get_hangman_secret(secret_id)
        letters = normalize_letters(guessed_letters)
        if any(not ch.isalpha() for ch in letters):
            raise InvalidInputError("Guessed letters must be alphabetic.")

        won = False
        with self.store.transaction():
            record = self._load(player_id, secret.id, for_update=True)
            merged = record.guessed_letters | letters
            if record.solved or merged == record.guessed_letters:
                return record
            if record.incorrect_guesses >= self.max_incorrect:
                raise AttemptsExhaustedError(
                    f"You reached the limit of {self.max_incorrect} incorrect letters."
                )
            incorrect = count_incorrect(secret.value, merged)
            if incorrect > self.max_incorrect:
                raise InvalidInputError(
                    f"Progress exceeds the limit of {self.max_incorrect} incorrect letters."
                )

            record.guessed_letters = merged
            record.incorrect_guesses = incorrect
            record.attempts = max(record.attempts, len(merged))
            record.solved = won = incorrect < self.max_incorrect and is_complete(secret.value, merged)
            record.last_played_at = self.clock()
            self.store.save(record)

        if won:
            self._award(player_id, points_for(record.incorrect_guesses, secret.game))
        return record

    # PUBLIC_INTERFACE
    def revealed(self, player_id: Any, secret_id: Any) -> Dict[str, Any]:
        """Revealed view of a hangman secret for this player's guessed letters."""
        secret = self._get_hangman_secret(secret_id)
        with self.store.transaction():
            record = self._load(player_id, secret.id)
        return {
            "secret_id": secret.id,
            "length": len(secret.value),
            "revealed": build_revealed_view(secret.value, record.guessed_letters),
            "positions": revealed_positions(secret.value, record.guessed_letters),
            "is_complete": is_complete(secret.value, record.guessed_letters),
        }

    # -------------------------
    # Session resume
    # -------------------------

    # PUBLIC_INTERFACE
    def daily_status(self, player_id: Any, game: str, day: date, today: Optional[date] = None) -> DailyStatus:
        """Status of the player's round for a game on a day.

        The secret is created on demand only for today; earlier days are
        looked up and later days are rejected. The secret's value is only
        included once the player has solved it.
        """
        try:
            variant = get_variant(game)
        except KeyError:
            raise SecretNotFoundError(f"Unknown game {game!r}.") from None

        if today is None or day == today:
            secret = self.secrets.get_or_create(variant.name, day)
        elif day > today:
            raise InvalidInputError("Puzzles for future days are not available.")
        else:
            secret = self.secrets.find(variant.name, day)
            if secret is None:
                raise SecretNotFoundError(f"No {variant.name} puzzle for {day.isoformat()}.")

        with self.store.transaction():
            record = self._load(player_id, secret.id)
            guesses = [] if variant.letter_game else self.store.history(player_id, secret.id)

        if variant.letter_game:
            finished = record.solved or record.incorrect_guesses >= self.max_incorrect
            max_attempts = self.max_incorrect
        else:
            finished = record.solved or record.attempts >= self.max_attempts
            max_attempts = self.max_attempts

        status = DailyStatus(
            secret_id=secret.id,
            game=secret.game,
            day=secret.day,
            length=secret.length,
            attempts=record.attempts,
            max_attempts=max_attempts,
            solved=record.solved,
            finished=finished,
            value=secret.value if record.solved else None,
        )
        if variant.letter_game:
            status.guessed_letters = record.guessed_letters
            status.incorrect_guesses = record.incorrect_guesses
            status.revealed = build_revealed_view(secret.value, record.guessed_letters)
        else:
            status.guesses = guesses
            status.keyboard = keyboard_from_history((g.guess, g.feedback) for g in guesses)
        return status

    # -------------------------
    # Helpers
    # -------------------------

    def _get_secret(self, secret_id: Any) -> Secret:
        secret = self.secrets.get(secret_id)
        if secret is None:
            raise SecretNotFoundError(f"Puzzle {secret_id!r} not found.")
        return secret

    def _get_hangman_secret(self, secret_id: Any) -> Secret:
        secret = self._get_secret(secret_id)
        if not get_variant(secret.game).letter_game:
            raise InvalidInputError("This puzzle is not a hangman puzzle.")
        return secret

    def _load(self, player_id: Any, secret_id: Any, for_update: bool = False) -> AttemptRecord:
        record = self.store.load(player_id, secret_id, for_update=for_update)
        if record is None:
            record = AttemptRecord(player_id=player_id, secret_id=secret_id)
        return record

    def _ensure_hangman_open(self, record: AttemptRecord) -> None:
        if record.solved:
            raise AlreadySolvedError("You already solved this puzzle.")
        if record.incorrect_guesses >= self.max_incorrect:
            raise AttemptsExhaustedError(
                f"You reached the limit of {self.max_incorrect} incorrect letters."
            )

    def _award(self, player_id: Any, points: int) -> None:
        if self.sink is None or points <= 0:
            return
        try:
            total = self.sink.award(player_id, points)
        except Exception:
            # Points and attempt state are separate failure domains.
            logger.warning("Could not award %s points to player %s", points, player_id, exc_info=True)
            return
        logger.info("Awarded %s points to player %s (total %s)", points, player_id, total)
