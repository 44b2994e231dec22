from django.test import SimpleTestCase

from dailygames.puzzles.errors import InvalidInputError
from dailygames.puzzles.hangman import (
    build_revealed_view,
    count_incorrect,
    guess_letter,
    is_complete,
    normalize_letters,
    revealed_positions,
)


def play(secret, letters):
    guessed, incorrect, outcomes = frozenset(), 0, []
    for letter in letters:
        outcome = guess_letter(secret, letter, guessed, incorrect)
        guessed, incorrect = outcome.guessed_letters, outcome.incorrect_guesses
        outcomes.append(outcome)
    return outcomes


class GuessLetterTests(SimpleTestCase):
    def test_win_only_on_last_missing_letter(self):
        for order in ("ARBOL", "LOBRA", "BLARO"):
            with self.subTest(order=order):
                outcomes = play("ÁRBOL", order)
                self.assertTrue(all(o.is_correct for o in outcomes))
                self.assertEqual([o.has_won for o in outcomes], [False] * 4 + [True])
                self.assertEqual(outcomes[-1].incorrect_guesses, 0)

    def test_accented_letter_matches(self):
        outcome = guess_letter("CANCIÓN", "ó", frozenset(), 0)
        self.assertTrue(outcome.is_correct)
        self.assertEqual(outcome.letter, "O")
        self.assertIn("O", outcome.guessed_letters)

    def test_sixth_miss_loses(self):
        outcomes = play("ÁRBOL", "XYZWQK")
        self.assertEqual([o.incorrect_guesses for o in outcomes], [1, 2, 3, 4, 5, 6])
        self.assertEqual([o.has_lost for o in outcomes], [False] * 5 + [True])
        self.assertFalse(any(o.has_won for o in outcomes))

    def test_custom_limit(self):
        outcome = guess_letter("ÁRBOL", "Z", {"X", "Y"}, 2, max_incorrect=3)
        self.assertTrue(outcome.has_lost)

    def test_rejects_non_letters(self):
        for bad in ["", " ", "AB", "1", "-", None]:
            with self.subTest(bad=bad):
                with self.assertRaises(InvalidInputError):
                    guess_letter("ÁRBOL", bad, frozenset(), 0)


class RevealedViewTests(SimpleTestCase):
    def test_nothing_guessed(self):
        self.assertEqual(build_revealed_view("ÁRBOL", []), "_____")

    def test_keeps_original_spelling(self):
        self.assertEqual(build_revealed_view("ÁRBOL", {"A"}), "Á____")
        self.assertEqual(build_revealed_view("CANCIÓN", "on"), "__N__ÓN")

    def test_non_letters_always_shown(self):
        self.assertEqual(build_revealed_view("LA CASA", {"A"}), "_A _A_A")
        self.assertTrue(is_complete("LA CASA", {"L", "A", "C", "S"}))

    def test_custom_placeholder(self):
        self.assertEqual(build_revealed_view("SOL", {"O"}, placeholder="*"), "*O*")

    def test_positions(self):
        self.assertEqual(
            revealed_positions("ÁRBOL", {"A", "L"}),
            [{"position": 0, "letter": "Á"}, {"position": 4, "letter": "L"}],
        )


class HelperTests(SimpleTestCase):
    def test_normalize_letters_accepts_strings_and_lists(self):
        self.assertEqual(normalize_letters("a, é"), frozenset({"A", "E"}))
        self.assertEqual(normalize_letters(["ñ", "B"]), frozenset({"N", "B"}))
        self.assertEqual(normalize_letters(None), frozenset())

    def test_count_incorrect(self):
        self.assertEqual(count_incorrect("ÁRBOL", {"A", "X", "Z"}), 2)
        self.assertEqual(count_incorrect("ÁRBOL", set()), 0)
