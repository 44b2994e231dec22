from datetime import date

from django.contrib.auth import get_user_model
from django.test import TestCase

from dailygames.models import DailySecret, GuessLog, PlayerAttempt
from dailygames.puzzles.engines import LetterStatus
from dailygames.puzzles.errors import PersistenceFailureError
from dailygames.puzzles.state import AttemptRecord, GuessEntry
from dailygames.stores import DjangoAttemptStore


class AttemptStoreTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="ana", password="secreto-123")
        self.secret = DailySecret.objects.create(game="hangman", date=date(2026, 10, 19), value="CANCIÓN")
        self.store = DjangoAttemptStore()

    def test_read_does_not_create_row(self):
        with self.store.transaction():
            self.assertIsNone(self.store.load(self.user.pk, self.secret.pk))
        self.assertFalse(PlayerAttempt.objects.exists())

    def test_locked_load_creates_row_once(self):
        with self.store.transaction():
            record = self.store.load(self.user.pk, self.secret.pk, for_update=True)
            self.assertEqual(record.attempts, 0)
            self.assertEqual(record.guessed_letters, frozenset())
            record.guessed_letters = frozenset({"X"})
            record.incorrect_guesses = 1
            record.attempts = 1
            self.store.save(record)

        # a second first-guess request sees the stored letters, not an empty record
        with self.store.transaction():
            again = self.store.load(self.user.pk, self.secret.pk, for_update=True)
        self.assertEqual(again.guessed_letters, frozenset({"X"}))
        self.assertEqual(again.incorrect_guesses, 1)
        self.assertEqual(PlayerAttempt.objects.count(), 1)

    def test_save_requires_locked_load(self):
        record = AttemptRecord(player_id=self.user.pk, secret_id=self.secret.pk, attempts=1)
        with self.assertRaises(PersistenceFailureError):
            with self.store.transaction():
                self.store.save(record)
        self.assertFalse(PlayerAttempt.objects.exists())

    def test_history_round_trip_and_corruption(self):
        entry = GuessEntry(attempt_number=1, guess="PERRO", feedback=[LetterStatus.ABSENT] * 5, is_correct=False)
        with self.store.transaction():
            record = self.store.load(self.user.pk, self.secret.pk, for_update=True)
            record.attempts = 1
            self.store.save(record, entry)
        self.assertEqual(self.store.history(self.user.pk, self.secret.pk), [entry])

        GuessLog.objects.update(result="bbbqb")
        with self.assertRaises(PersistenceFailureError):
            self.store.history(self.user.pk, self.secret.pk)
