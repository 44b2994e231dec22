from collections import Counter

from django.test import SimpleTestCase

from dailygames.puzzles.engines import (
    LetterStatus,
    best_status,
    compact_to_feedback,
    compute_feedback,
    feedback_to_compact,
    keyboard_from_history,
    merge_keyboard,
)
from dailygames.puzzles.errors import InvalidInputError
from dailygames.puzzles.normalize import normalize
from dailygames.puzzles.registry import VariantRegistry, get_variant
from dailygames.puzzles.scoring import points_for

C, P, A = LetterStatus.CORRECT, LetterStatus.PRESENT, LetterStatus.ABSENT

PAIRS = [
    ("LLAMA", "MAMAS"),
    ("SPEED", "ABIDE"),
    ("EERIE", "THEME"),
    ("ARBOL", "LABOR"),
    ("AAAAA", "ABACA"),
    ("4172", "4271"),
    ("1111", "1212"),
    ("0000", "9999"),
]


class NormalizeTests(SimpleTestCase):
    def test_folds_accents_and_upper_cases(self):
        self.assertEqual(normalize("árbol"), "ARBOL")
        self.assertEqual(normalize("Ñandú"), "NANDU")
        self.assertEqual(normalize("canción"), "CANCION")

    def test_idempotent(self):
        for text in ["árbol", "PINGÜINO", "la casa", "4271", "", "Ça va"]:
            once = normalize(text)
            self.assertEqual(normalize(once), once)

    def test_empty_and_none(self):
        self.assertEqual(normalize(None), "")
        self.assertEqual(normalize(""), "")


class FeedbackTests(SimpleTestCase):
    def test_duplicate_letters_llama_vs_mamas(self):
        self.assertEqual(compute_feedback("LLAMA", "MAMAS"), [A, A, P, P, P])

    def test_pin_example(self):
        # 4 and 7 sit in place; 1 and 2 exist elsewhere exactly once.
        self.assertEqual(compute_feedback("4172", "4271"), [C, P, C, P])

    def test_repeated_guess_letter_only_reported_once(self):
        self.assertEqual(compute_feedback("SPEED", "ABIDE"), [A, A, P, A, P])

    def test_exact_match_consumed_before_present(self):
        self.assertEqual(compute_feedback("EERIE", "THEME"), [P, A, A, A, C])

    def test_exact_match(self):
        self.assertEqual(compute_feedback("ARBOL", "ARBOL"), [C] * 5)

    def test_anagram_with_shared_positions(self):
        self.assertEqual(compute_feedback("LABOR", "ARBOL"), [P, P, C, C, P])

    def test_properties_hold(self):
        for guess, secret in PAIRS:
            with self.subTest(guess=guess, secret=secret):
                result = compute_feedback(guess, secret)
                self.assertEqual(len(result), len(guess))
                matching = sum(1 for g, s in zip(guess, secret) if g == s)
                self.assertEqual(result.count(C), matching)
                g_counts, s_counts = Counter(guess), Counter(secret)
                for ch in g_counts:
                    hits = sum(1 for g, st in zip(guess, result) if g == ch and st is not A)
                    self.assertLessEqual(hits, min(g_counts[ch], s_counts[ch]))
                self.assertEqual(result, compute_feedback(guess, secret))

    def test_compact_form(self):
        self.assertEqual(feedback_to_compact([C, P, A]), "gyb")
        self.assertEqual(compact_to_feedback("gyb"), [C, P, A])

    def test_unknown_compact_code_is_rejected(self):
        with self.assertRaises(ValueError):
            compact_to_feedback("gyx")


class KeyboardTests(SimpleTestCase):
    def test_best_status_never_downgrades(self):
        self.assertEqual(best_status(None, A), A)
        self.assertEqual(best_status(A, P), P)
        self.assertEqual(best_status(C, P), C)
        self.assertEqual(best_status(C, A), C)

    def test_merge_keeps_best_across_guesses(self):
        kb = merge_keyboard({}, "LABOR", compute_feedback("LABOR", "ARBOL"))
        self.assertEqual(kb["A"], P)
        kb = merge_keyboard(kb, "ARBOL", compute_feedback("ARBOL", "ARBOL"))
        self.assertEqual(kb["A"], C)
        kb = merge_keyboard(kb, "AAAAA", compute_feedback("AAAAA", "ARBOL"))
        self.assertEqual(kb["A"], C)
        self.assertNotIn("Z", kb)

    def test_repeated_letter_in_one_guess_keeps_best(self):
        # second A is absent, first A is correct
        kb = merge_keyboard({}, "AAXXX", compute_feedback("AAXXX", "ABCDE"))
        self.assertEqual(kb["A"], C)
        self.assertEqual(kb["X"], A)

    def test_rebuild_from_history(self):
        history = [("LABOR", compute_feedback("LABOR", "ARBOL")), ("ARBOL", [C] * 5)]
        kb = keyboard_from_history(history)
        self.assertEqual(set(kb.values()), {C})


class VariantTests(SimpleTestCase):
    def test_word_guess_validation(self):
        word = get_variant("word")
        self.assertEqual(word.validate_guess(" árbol "), "ARBOL")
        with self.assertRaises(InvalidInputError):
            word.validate_guess("ARBO")
        with self.assertRaises(InvalidInputError):
            word.validate_guess("ARB0L")

    def test_word_evaluate_is_accent_insensitive(self):
        result = get_variant("word").evaluate("ÁRBOL", "ARBOL")
        self.assertTrue(result["is_correct"])
        self.assertEqual(result["feedback"], [C] * 5)

    def test_pin_guess_validation(self):
        pin = get_variant("pin")
        self.assertEqual(pin.validate_guess("0042"), "0042")
        for bad in ["042", "12a4", "12345", "١٢٣٤"]:
            with self.subTest(bad=bad):
                with self.assertRaises(InvalidInputError):
                    pin.validate_guess(bad)

    def test_hangman_takes_single_letters(self):
        hangman = get_variant("hangman")
        self.assertEqual(hangman.validate_guess(" é "), "E")
        with self.assertRaises(InvalidInputError):
            hangman.validate_guess("AB")

    def test_pin_generation_is_four_digits(self):
        import random

        rng = random.Random(7)
        for _ in range(20):
            value = get_variant("pin").generate_secret(None, rng)
            self.assertEqual(len(value), 4)
            self.assertTrue(value.isdigit())

    def test_registry(self):
        self.assertEqual(sorted(VariantRegistry.names()), ["hangman", "pin", "word"])
        self.assertEqual(get_variant(" WORD ").name, "word")
        with self.assertRaises(KeyError):
            VariantRegistry.get("sudoku")


class ScoringTests(SimpleTestCase):
    def test_word_table(self):
        expected = {1: 500, 2: 400, 3: 300, 4: 200, 5: 100, 6: 50, 7: 0}
        for attempts, points in expected.items():
            self.assertEqual(points_for(attempts, "word"), points)
            self.assertEqual(points_for(attempts, "pin"), points)

    def test_hangman_formula(self):
        self.assertEqual(points_for(0, "hangman"), 500)
        self.assertEqual(points_for(3, "hangman"), 350)
        self.assertEqual(points_for(6, "hangman"), 200)
        self.assertEqual(points_for(20, "hangman"), 0)

    def test_non_increasing(self):
        for variant in ("word", "pin", "hangman"):
            scores = [points_for(n, variant) for n in range(0, 15)]
            self.assertEqual(scores, sorted(scores, reverse=True))
            self.assertEqual(scores, [points_for(n, variant) for n in range(0, 15)])
