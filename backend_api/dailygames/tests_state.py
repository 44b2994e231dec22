import copy
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, timezone

from django.test import SimpleTestCase

from dailygames.puzzles.engines import LetterStatus
from dailygames.puzzles.errors import (
    AlreadySolvedError,
    AttemptsExhaustedError,
    InvalidInputError,
    SecretNotFoundError,
)
from dailygames.puzzles.state import AttemptStateMachine, Secret

TODAY = date(2026, 10, 19)
YESTERDAY = date(2026, 10, 18)


class MemorySecrets:
    def __init__(self, *secrets, values=None):
        self.by_id = {s.id: s for s in secrets}
        self.values = values or {}

    def get(self, secret_id):
        return self.by_id.get(secret_id)

    def find(self, game, day):
        for s in self.by_id.values():
            if s.game == game and s.day == day:
                return s
        return None

    def get_or_create(self, game, day):
        existing = self.find(game, day)
        if existing is not None:
            return existing
        secret = Secret(id=len(self.by_id) + 1, game=game, day=day, value=self.values[game])
        self.by_id[secret.id] = secret
        return secret


class MemoryStore:
    def __init__(self):
        self.records = {}
        self.guesses = {}
        self.saves = 0
        self.loads = []

    @contextmanager
    def transaction(self):
        snapshot = copy.deepcopy((self.records, self.guesses))
        try:
            yield
        except Exception:
            self.records, self.guesses = snapshot
            raise

    def load(self, player_id, secret_id, for_update=False):
        self.loads.append(for_update)
        record = self.records.get((player_id, secret_id))
        return replace(record) if record else None

    def save(self, record, guess=None):
        key = (record.player_id, record.secret_id)
        self.records[key] = replace(record)
        if guess is not None:
            self.guesses.setdefault(key, []).append(guess)
        self.saves += 1

    def history(self, player_id, secret_id):
        return list(self.guesses.get((player_id, secret_id), []))


class RecordingSink:
    def __init__(self):
        self.awards = []

    def award(self, player_id, points):
        self.awards.append((player_id, points))
        return sum(p for pid, p in self.awards if pid == player_id)


class BrokenSink:
    def award(self, player_id, points):
        raise RuntimeError("scoreboard offline")


WORD = Secret(id=1, game="word", day=TODAY, value="ÁRBOL")
PIN = Secret(id=2, game="pin", day=TODAY, value="4271")
HANGMAN = Secret(id=3, game="hangman", day=TODAY, value="CANCIÓN")
OLD_WORD = Secret(id=4, game="word", day=YESTERDAY, value="PERRO")


class StateMachineTestBase(SimpleTestCase):
    def setUp(self):
        self.secrets = MemorySecrets(WORD, PIN, HANGMAN, OLD_WORD, values={"hangman": "MARIPOSA"})
        self.store = MemoryStore()
        self.sink = RecordingSink()
        self.machine = self.build()

    def build(self, sink=None):
        return AttemptStateMachine(
            self.secrets,
            self.store,
            sink or self.sink,
            clock=lambda: datetime(2026, 10, 19, 12, tzinfo=timezone.utc),
        )


class SubmitGuessTests(StateMachineTestBase):
    def test_solve_awards_points_by_attempt(self):
        first = self.machine.submit_guess(7, WORD.id, "labor")
        self.assertFalse(first.solved)
        self.assertEqual(first.attempts, 1)
        self.assertEqual(first.points_awarded, 0)

        second = self.machine.submit_guess(7, WORD.id, "Arbol")
        self.assertTrue(second.solved)
        self.assertTrue(second.finished)
        self.assertEqual(second.feedback, [LetterStatus.CORRECT] * 5)
        self.assertEqual(second.points_awarded, 400)
        self.assertEqual(self.sink.awards, [(7, 400)])

    def test_rejects_guess_after_solve(self):
        self.machine.submit_guess(7, WORD.id, "ARBOL")
        with self.assertRaises(AlreadySolvedError):
            self.machine.submit_guess(7, WORD.id, "ARBOL")
        self.assertEqual(self.store.records[(7, WORD.id)].attempts, 1)

    def test_attempt_ceiling(self):
        for n in range(1, 7):
            outcome = self.machine.submit_guess(7, WORD.id, "PERRO")
            self.assertEqual(outcome.attempts, n)
        self.assertTrue(outcome.finished)
        self.assertFalse(outcome.solved)
        with self.assertRaises(AttemptsExhaustedError):
            self.machine.submit_guess(7, WORD.id, "ARBOL")
        self.assertEqual(self.store.records[(7, WORD.id)].attempts, 6)
        self.assertFalse(self.store.records[(7, WORD.id)].solved)
        self.assertEqual(self.sink.awards, [])

    def test_players_are_independent(self):
        self.machine.submit_guess(7, WORD.id, "ARBOL")
        outcome = self.machine.submit_guess(8, WORD.id, "PERRO")
        self.assertEqual(outcome.attempts, 1)
        self.assertFalse(outcome.solved)

    def test_invalid_guess_is_not_recorded(self):
        for bad in ["ARBO", "ARB0L", ""]:
            with self.subTest(bad=bad):
                with self.assertRaises(InvalidInputError):
                    self.machine.submit_guess(7, WORD.id, bad)
        self.assertEqual(self.store.records, {})

    def test_pin_guess(self):
        outcome = self.machine.submit_guess(7, PIN.id, "4172")
        C, P = LetterStatus.CORRECT, LetterStatus.PRESENT
        self.assertEqual(outcome.feedback, [C, P, C, P])
        with self.assertRaises(InvalidInputError):
            self.machine.submit_guess(7, PIN.id, "42a1")

    def test_unknown_secret(self):
        with self.assertRaises(SecretNotFoundError):
            self.machine.submit_guess(7, 999, "ARBOL")

    def test_hangman_secret_rejected(self):
        with self.assertRaises(InvalidInputError):
            self.machine.submit_guess(7, HANGMAN.id, "CANCION")

    def test_broken_sink_does_not_fail_guess(self):
        machine = self.build(sink=BrokenSink())
        with self.assertLogs("dailygames", level="WARNING") as logs:
            outcome = machine.submit_guess(7, WORD.id, "ARBOL")
        self.assertTrue(outcome.solved)
        self.assertEqual(outcome.points_awarded, 500)
        self.assertTrue(self.store.records[(7, WORD.id)].solved)
        self.assertIn("Could not award", logs.output[0])

    def test_history_is_recorded(self):
        self.machine.submit_guess(7, WORD.id, "labor")
        history = self.store.history(7, WORD.id)
        self.assertEqual([h.guess for h in history], ["LABOR"])
        self.assertEqual(history[0].attempt_number, 1)
        self.assertFalse(history[0].is_correct)


class HangmanTests(StateMachineTestBase):
    def test_win_flow(self):
        outcomes = [self.machine.submit_letter(7, HANGMAN.id, ch) for ch in "CANIO"]
        self.assertEqual([o.has_won for o in outcomes], [False] * 4 + [True])
        self.assertEqual(outcomes[-1].revealed, "CANCIÓN")
        self.assertEqual(outcomes[-1].points_awarded, 500)
        self.assertEqual(self.sink.awards, [(7, 500)])
        with self.assertRaises(AlreadySolvedError):
            self.machine.submit_letter(7, HANGMAN.id, "Z")

    def test_client_counters_are_not_trusted(self):
        self.machine.submit_letter(7, HANGMAN.id, "X")
        outcome = self.machine.submit_letter(7, HANGMAN.id, "C")
        self.assertEqual(outcome.incorrect_guesses, 1)
        self.assertEqual(outcome.guessed_letters, frozenset({"X", "C"}))
        self.assertEqual(outcome.revealed, "C__C___")

    def test_repeated_letter_not_counted(self):
        self.machine.submit_letter(7, HANGMAN.id, "Z")
        saves = self.store.saves
        outcome = self.machine.submit_letter(7, HANGMAN.id, "z")
        self.assertTrue(outcome.repeated)
        self.assertFalse(outcome.is_correct)
        self.assertEqual(outcome.incorrect_guesses, 1)
        self.assertEqual(self.store.saves, saves)

    def test_sixth_miss_loses_and_locks(self):
        for ch in "XYZWQK":
            outcome = self.machine.submit_letter(7, HANGMAN.id, ch)
        self.assertTrue(outcome.has_lost)
        self.assertEqual(outcome.incorrect_guesses, 6)
        with self.assertRaises(AttemptsExhaustedError):
            self.machine.submit_letter(7, HANGMAN.id, "C")
        self.assertEqual(self.sink.awards, [])

    def test_points_drop_with_misses(self):
        for ch in "XYCANIO":
            outcome = self.machine.submit_letter(7, HANGMAN.id, ch)
        self.assertTrue(outcome.has_won)
        self.assertEqual(outcome.points_awarded, 400)

    def test_word_secret_rejected(self):
        with self.assertRaises(InvalidInputError):
            self.machine.submit_letter(7, WORD.id, "A")

    def test_invalid_letter(self):
        with self.assertRaises(InvalidInputError):
            self.machine.submit_letter(7, HANGMAN.id, "AB")


class UpdateProgressTests(StateMachineTestBase):
    def test_idempotent(self):
        first = self.machine.update_progress(7, HANGMAN.id, ["C", "x"])
        saves = self.store.saves
        second = self.machine.update_progress(7, HANGMAN.id, ["x", "C"])
        self.assertEqual(first, second)
        self.assertEqual(second.incorrect_guesses, 1)
        self.assertEqual(self.store.saves, saves)

    def test_merges_with_stored_letters(self):
        self.machine.submit_letter(7, HANGMAN.id, "A")
        record = self.machine.update_progress(7, HANGMAN.id, "C,N")
        self.assertEqual(record.guessed_letters, frozenset({"A", "C", "N"}))
        self.assertFalse(record.solved)

    def test_completing_word_awards_once(self):
        record = self.machine.update_progress(7, HANGMAN.id, "CANIO")
        self.assertTrue(record.solved)
        self.machine.update_progress(7, HANGMAN.id, "CANIO")
        self.assertEqual(self.sink.awards, [(7, 500)])

    def test_too_many_misses_rejected(self):
        with self.assertRaises(InvalidInputError):
            self.machine.update_progress(7, HANGMAN.id, "BDEFGHJ")
        self.assertEqual(self.store.records, {})

    def test_non_letters_rejected(self):
        with self.assertRaises(InvalidInputError):
            self.machine.update_progress(7, HANGMAN.id, ["A", "1"])

    def test_word_spelled_at_miss_limit_is_lost(self):
        record = self.machine.update_progress(7, HANGMAN.id, "CANIOBDEFGH")
        self.assertFalse(record.solved)
        self.assertEqual(record.incorrect_guesses, 6)
        self.assertEqual(self.sink.awards, [])
        with self.assertRaises(AttemptsExhaustedError):
            self.machine.submit_letter(7, HANGMAN.id, "Z")
        status = self.machine.daily_status(7, "hangman", TODAY, today=TODAY)
        self.assertTrue(status.finished)
        self.assertIsNone(status.value)


class LockingTests(StateMachineTestBase):
    def test_mutations_load_for_update(self):
        self.machine.submit_guess(7, WORD.id, "PERRO")
        self.machine.submit_letter(7, HANGMAN.id, "C")
        self.machine.update_progress(7, HANGMAN.id, "A")
        self.assertEqual(self.store.loads, [True, True, True])

    def test_reads_do_not_lock(self):
        self.machine.daily_status(7, "word", TODAY, today=TODAY)
        self.machine.revealed(7, HANGMAN.id)
        self.assertEqual(self.store.loads, [False, False])


class DailyStatusTests(StateMachineTestBase):
    def test_value_hidden_until_solved(self):
        self.machine.submit_guess(7, WORD.id, "LABOR")
        status = self.machine.daily_status(7, "word", TODAY, today=TODAY)
        self.assertIsNone(status.value)
        self.assertEqual(status.attempts, 1)
        self.assertEqual(status.length, 5)
        self.assertFalse(status.finished)
        self.assertEqual(status.keyboard["A"], LetterStatus.PRESENT)

        self.machine.submit_guess(7, WORD.id, "ARBOL")
        status = self.machine.daily_status(7, "word", TODAY, today=TODAY)
        self.assertEqual(status.value, "ÁRBOL")
        self.assertEqual(len(status.guesses), 2)
        self.assertEqual(status.keyboard["A"], LetterStatus.CORRECT)

    def test_exhausted_round_stays_hidden(self):
        for _ in range(6):
            self.machine.submit_guess(7, WORD.id, "PERRO")
        status = self.machine.daily_status(7, "word", TODAY, today=TODAY)
        self.assertTrue(status.finished)
        self.assertIsNone(status.value)

    def test_creates_today_secret_on_demand(self):
        status = self.machine.daily_status(7, "HANGMAN", TODAY, today=TODAY)
        # an existing hangman secret for today is reused
        self.assertEqual(status.secret_id, HANGMAN.id)
        self.assertEqual(status.revealed, "_______")
        self.assertEqual(status.max_attempts, 6)

        other_day = date(2026, 10, 17)
        status = self.machine.daily_status(7, "hangman", other_day, today=other_day)
        self.assertNotEqual(status.secret_id, HANGMAN.id)
        self.assertEqual(self.secrets.get(status.secret_id).value, "MARIPOSA")
        self.assertEqual(status.length, 8)

    def test_past_day(self):
        status = self.machine.daily_status(7, "word", YESTERDAY, today=TODAY)
        self.assertEqual(status.secret_id, OLD_WORD.id)
        with self.assertRaises(SecretNotFoundError):
            self.machine.daily_status(7, "pin", YESTERDAY, today=TODAY)

    def test_future_day_rejected(self):
        with self.assertRaises(InvalidInputError):
            self.machine.daily_status(7, "word", date(2026, 10, 20), today=TODAY)

    def test_unknown_game(self):
        with self.assertRaises(SecretNotFoundError):
            self.machine.daily_status(7, "sudoku", TODAY, today=TODAY)
