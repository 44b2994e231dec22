"""
Django ORM implementations of the puzzle engine's collaborators.

- DictionaryWordSource: random eligible word from DictionaryWord
- DailyPuzzleSelector: one DailySecret per (game, date), created on demand
- DjangoAttemptStore: PlayerAttempt/GuessLog persistence with row locking
- PointsScoringSink: cumulative PlayerScore points
"""
from __future__ import annotations

import logging
import random
from contextlib import contextmanager
from datetime import date
from typing import Any, Iterator, List, Optional

from django.db import DatabaseError, transaction
from django.db.models import F
from django.utils import timezone

from .conf import puzzle_setting
from .models import DailySecret, DictionaryWord, GuessLog, PlayerAttempt, PlayerScore
from .puzzles.engines import compact_to_feedback, feedback_to_compact
from .puzzles.errors import NoSecretAvailableError, PersistenceFailureError
from .puzzles.registry import get_variant
from .puzzles.state import AttemptRecord, AttemptStateMachine, GuessEntry, Secret

logger = logging.getLogger(__name__)


def utc_today() -> date:
    """Current UTC calendar day; a new daily secret starts at UTC midnight."""
    return timezone.now().date()


def _to_secret(row: DailySecret) -> Secret:
    return Secret(id=row.pk, game=row.game, day=row.date, value=row.value)


# PUBLIC_INTERFACE
class DictionaryWordSource:
    """Picks daily secret words from the DictionaryWord table."""

    def pick_random_word(self, min_length: int, max_length: Optional[int] = None) -> Optional[str]:
        qs = DictionaryWord.objects.filter(is_active=True, length__gte=min_length)
        if max_length is not None:
            qs = qs.filter(length__lte=max_length)
        word = qs.order_by("?").first()
        return word.text if word else None


# PUBLIC_INTERFACE
class DailyPuzzleSelector:
    """Get-or-create-once access to the secret of each (game, date)."""

    def __init__(self, words=None, rng: Optional[random.Random] = None):
        self.words = words if words is not None else DictionaryWordSource()
        self.rng = rng or random.Random()

    def get(self, secret_id: Any) -> Optional[Secret]:
        try:
            row = DailySecret.objects.filter(pk=secret_id).first()
        except DatabaseError as exc:
            raise PersistenceFailureError("Could not read the daily secret.") from exc
        return _to_secret(row) if row else None

    def find(self, game: str, day: date) -> Optional[Secret]:
        try:
            row = DailySecret.objects.filter(game=game, date=day).first()
        except DatabaseError as exc:
            raise PersistenceFailureError("Could not read the daily secret.") from exc
        return _to_secret(row) if row else None

    def get_or_create(self, game: str, day: date) -> Secret:
        """Return the secret for (game, day), creating it on first request.

        Raises:
            NoSecretAvailableError: if the variant cannot produce a value.
            PersistenceFailureError: on database errors.
        """
        existing = self.find(game, day)
        if existing is not None:
            return existing

        value = get_variant(game).generate_secret(self.words, self.rng)
        if not value:
            raise NoSecretAvailableError(f"No word available for the {game} puzzle.")

        try:
            # Concurrent first requests race on the (game, date) unique key;
            # get_or_create returns the winner's row to everyone.
            row, created = DailySecret.objects.get_or_create(game=game, date=day, defaults={"value": value})
        except DatabaseError as exc:
            raise PersistenceFailureError("Could not create the daily secret.") from exc
        if created:
            logger.info("Created %s secret #%s for %s", game, row.pk, day.isoformat())
        return _to_secret(row)


# PUBLIC_INTERFACE
class DjangoAttemptStore:
    """Attempt persistence; guesses for one (player, secret) are serialized by row locks."""

    @contextmanager
    def transaction(self) -> Iterator[None]:
        try:
            with transaction.atomic():
                yield
        except DatabaseError as exc:
            raise PersistenceFailureError("Could not store the attempt.") from exc

    def load(self, player_id: Any, secret_id: Any, for_update: bool = False) -> Optional[AttemptRecord]:
        if for_update:
            # Created under the lock; a concurrent first guess waits on this row.
            row, created = PlayerAttempt.objects.select_for_update().get_or_create(
                player_id=player_id, secret_id=secret_id
            )
            if created:
                logger.debug("Started attempt for player %s on secret #%s", player_id, secret_id)
        else:
            row = PlayerAttempt.objects.filter(player_id=player_id, secret_id=secret_id).first()
            if row is None:
                return None
        return AttemptRecord(
            player_id=row.player_id,
            secret_id=row.secret_id,
            attempts=row.attempts,
            solved=row.solved,
            last_played_at=row.last_played_at,
            guessed_letters=frozenset(row.guessed_letters),
            incorrect_guesses=row.incorrect_guesses,
        )

    def save(self, record: AttemptRecord, guess: Optional[GuessEntry] = None) -> None:
        """Write a record previously loaded with for_update=True."""
        fields = {
            "attempts": record.attempts,
            "solved": record.solved,
            "incorrect_guesses": record.incorrect_guesses,
            "guessed_letters": "".join(sorted(record.guessed_letters)),
            "last_played_at": record.last_played_at or timezone.now(),
            "updated_at": timezone.now(),
        }
        qs = PlayerAttempt.objects.filter(player_id=record.player_id, secret_id=record.secret_id)
        if not qs.update(**fields):
            raise PersistenceFailureError("Attempt must be loaded for update before it is saved.")
        if guess is not None:
            GuessLog.objects.create(
                attempt_id=qs.values_list("pk", flat=True).get(),
                attempt_number=guess.attempt_number,
                guess=guess.guess,
                result=feedback_to_compact(guess.feedback),
                is_correct=guess.is_correct,
            )

    def history(self, player_id: Any, secret_id: Any) -> List[GuessEntry]:
        rows = GuessLog.objects.filter(
            attempt__player_id=player_id, attempt__secret_id=secret_id
        ).order_by("attempt_number")
        try:
            return [
                GuessEntry(
                    attempt_number=g.attempt_number,
                    guess=g.guess,
                    feedback=compact_to_feedback(g.result),
                    is_correct=g.is_correct,
                )
                for g in rows
            ]
        except ValueError as exc:
            raise PersistenceFailureError("Stored guess history is corrupt.") from exc


# PUBLIC_INTERFACE
class PointsScoringSink:
    """Adds awarded points to the player's cumulative PlayerScore."""

    def award(self, player_id: Any, points: int) -> int:
        with transaction.atomic():
            score, _ = PlayerScore.objects.select_for_update().get_or_create(player_id=player_id)
            PlayerScore.objects.filter(pk=score.pk).update(points=F("points") + points, updated_at=timezone.now())
            score.refresh_from_db(fields=["points"])
        return score.points


# PUBLIC_INTERFACE
def build_state_machine() -> AttemptStateMachine:
    """Wire the state machine to the ORM-backed collaborators and settings."""
    return AttemptStateMachine(
        secrets=DailyPuzzleSelector(),
        store=DjangoAttemptStore(),
        sink=PointsScoringSink(),
        max_attempts=puzzle_setting("MAX_ATTEMPTS"),
        max_incorrect=puzzle_setting("MAX_INCORRECT"),
        clock=timezone.now,
    )
