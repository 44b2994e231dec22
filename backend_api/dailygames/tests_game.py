from datetime import timedelta
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.urls import reverse
from rest_framework.test import APITestCase

from dailygames.models import DailySecret, DictionaryWord, GuessLog, PlayerAttempt, PlayerScore
from dailygames.stores import utc_today


class DailyGameTestCase(APITestCase):
    def setUp(self):
        # One eligible word per game so the daily pick is predictable
        DictionaryWord.objects.create(text="árbol")
        DictionaryWord.objects.create(text="canción")
        self.user = get_user_model().objects.create_user(username="ana", password="secreto-123")
        self.client.force_authenticate(user=self.user)

    def daily(self, game, **params):
        return self.client.get(reverse("daily-status", kwargs={"game": game}), params)

    def guess(self, secret_id, guess):
        return self.client.post(reverse("guess"), {"secret_id": secret_id, "guess": guess}, format="json")

    def letter(self, secret_id, letter):
        return self.client.post(reverse("hangman-guess"), {"secret_id": secret_id, "letter": letter}, format="json")


class MetaEndpointTests(DailyGameTestCase):
    def test_health(self):
        resp = self.client.get(reverse("Health"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "Server is up!"})

    def test_list_games(self):
        resp = self.client.get(reverse("list-games"))
        self.assertEqual(resp.status_code, 200)
        games = {g["game"] for g in resp.json()}
        self.assertEqual(games, {"word", "pin", "hangman"})

    def test_dictionary(self):
        resp = self.client.get(reverse("dictionary"))
        self.assertEqual(resp.json(), ["ARBOL"])
        resp = self.client.get(reverse("dictionary"), {"length": 7})
        self.assertEqual(resp.json(), ["CANCION"])
        resp = self.client.get(reverse("dictionary"), {"length": "x"})
        self.assertEqual(resp.status_code, 400)

    def test_leaderboard_empty(self):
        resp = self.client.get(reverse("leaderboard"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), [])

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        resp = self.daily("word")
        self.assertIn(resp.status_code, (401, 403))
        resp = self.guess(1, "ARBOL")
        self.assertIn(resp.status_code, (401, 403))


class DailyStatusTests(DailyGameTestCase):
    def test_creates_secret_once(self):
        first = self.daily("word")
        self.assertEqual(first.status_code, 200)
        data = first.json()
        self.assertEqual(data["game"], "word")
        self.assertEqual(data["day"], utc_today().isoformat())
        self.assertEqual(data["length"], 5)
        self.assertEqual(data["attempts"], 0)
        self.assertIsNone(data["value"])

        second = self.daily("word")
        self.assertEqual(second.json()["secret_id"], data["secret_id"])
        self.assertEqual(DailySecret.objects.filter(game="word").count(), 1)

    def test_same_secret_for_every_player(self):
        mine = self.daily("word").json()["secret_id"]
        other = get_user_model().objects.create_user(username="luis", password="secreto-456")
        self.client.force_authenticate(user=other)
        self.assertEqual(self.daily("word").json()["secret_id"], mine)

    def test_no_eligible_word(self):
        DictionaryWord.objects.all().delete()
        resp = self.daily("word")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["code"], "no_secret_available")

    def test_unknown_game(self):
        resp = self.daily("sudoku")
        self.assertEqual(resp.status_code, 404)

    def test_dates(self):
        yesterday = utc_today() - timedelta(days=1)
        resp = self.daily("word", date=yesterday.isoformat())
        self.assertEqual(resp.status_code, 404)

        DailySecret.objects.create(game="word", date=yesterday, value="PERRO")
        resp = self.daily("word", date=yesterday.isoformat())
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["length"], 5)

        tomorrow = utc_today() + timedelta(days=1)
        self.assertEqual(self.daily("word", date=tomorrow.isoformat()).status_code, 400)
        self.assertEqual(self.daily("word", date="19/10/2026").status_code, 400)

    def test_resume_shows_history_and_value_after_solve(self):
        secret_id = self.daily("word").json()["secret_id"]
        self.guess(secret_id, "LABOR")
        data = self.daily("word").json()
        self.assertEqual(data["attempts"], 1)
        self.assertEqual(data["guesses"][0]["guess"], "LABOR")
        self.assertEqual(data["guesses"][0]["feedback"], ["present", "present", "correct", "correct", "present"])
        self.assertEqual(data["keyboard"]["A"], "present")
        self.assertIsNone(data["value"])

        self.guess(secret_id, "ÁRBOL")
        data = self.daily("word").json()
        self.assertTrue(data["solved"])
        self.assertTrue(data["finished"])
        self.assertEqual(data["value"], "ÁRBOL")
        self.assertEqual(data["keyboard"]["A"], "correct")


class GuessFlowTests(DailyGameTestCase):
    def setUp(self):
        super().setUp()
        self.secret_id = self.daily("word").json()["secret_id"]

    def test_guess_and_win(self):
        resp = self.guess(self.secret_id, "labor")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertFalse(data["solved"])
        self.assertEqual(data["attempts"], 1)
        self.assertEqual(data["points_awarded"], 0)

        resp = self.guess(self.secret_id, "arbol")
        data = resp.json()
        self.assertTrue(data["solved"])
        self.assertTrue(data["finished"])
        self.assertEqual(data["feedback"], ["correct"] * 5)
        self.assertEqual(data["points_awarded"], 400)

        self.assertEqual(PlayerScore.objects.get(player=self.user).points, 400)
        attempt = PlayerAttempt.objects.get(player=self.user, secret_id=self.secret_id)
        self.assertTrue(attempt.solved)
        self.assertEqual(
            list(GuessLog.objects.filter(attempt=attempt).values_list("result", flat=True)),
            ["yyggy", "ggggg"],
        )

    def test_camel_case_keys(self):
        resp = self.client.post(reverse("guess"), {"secretId": self.secret_id, "Guess": "PERRO"}, format="json")
        self.assertEqual(resp.status_code, 200)
        resp = self.client.post(reverse("guess"), {"gameWordId": self.secret_id, "GUESS": "PERRO"}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["attempts"], 2)

    def test_invalid_guess(self):
        resp = self.guess(self.secret_id, "ARBO")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "invalid_input")
        self.assertEqual(self.guess(self.secret_id, "ARB0L").status_code, 400)
        self.assertFalse(PlayerAttempt.objects.exists())

    def test_missing_field(self):
        resp = self.client.post(reverse("guess"), {"guess": "ARBOL"}, format="json")
        self.assertEqual(resp.status_code, 400)

    def test_unknown_secret(self):
        resp = self.guess(self.secret_id + 100, "ARBOL")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["code"], "not_found")

    def test_already_solved(self):
        self.guess(self.secret_id, "ARBOL")
        resp = self.guess(self.secret_id, "ARBOL")
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["code"], "already_solved")
        self.assertEqual(PlayerScore.objects.get(player=self.user).points, 500)

    def test_attempts_exhausted(self):
        for _ in range(6):
            self.assertEqual(self.guess(self.secret_id, "PERRO").status_code, 200)
        resp = self.guess(self.secret_id, "ARBOL")
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["code"], "attempts_exhausted")
        attempt = PlayerAttempt.objects.get(player=self.user, secret_id=self.secret_id)
        self.assertEqual(attempt.attempts, 6)
        self.assertFalse(attempt.solved)

    def test_store_failure_is_server_error(self):
        with mock.patch.object(GuessLog.objects, "create", side_effect=DatabaseError("disk full")):
            with self.assertLogs("dailygames", level="ERROR"):
                resp = self.guess(self.secret_id, "PERRO")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["code"], "persistence_failure")
        self.assertFalse(PlayerAttempt.objects.exists())
        self.assertEqual(self.daily("word").json()["attempts"], 0)

    def test_leaderboard_after_win(self):
        self.guess(self.secret_id, "ARBOL")
        resp = self.client.get(reverse("leaderboard"))
        self.assertEqual(resp.json(), [{"rank": 1, "player": "ana", "points": 500}])

    def test_hangman_letter_on_word_puzzle(self):
        resp = self.letter(self.secret_id, "A")
        self.assertEqual(resp.status_code, 400)


class PinFlowTests(DailyGameTestCase):
    def test_pin_feedback(self):
        secret_id = self.daily("pin").json()["secret_id"]
        DailySecret.objects.filter(pk=secret_id).update(value="4271")

        resp = self.guess(secret_id, "4172")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["feedback"], ["correct", "present", "correct", "present"])

        self.assertEqual(self.guess(secret_id, "42a1").status_code, 400)
        resp = self.guess(secret_id, "4271")
        self.assertTrue(resp.json()["solved"])
        self.assertEqual(resp.json()["points_awarded"], 400)


class HangmanFlowTests(DailyGameTestCase):
    def setUp(self):
        super().setUp()
        data = self.daily("hangman").json()
        self.secret_id = data["secret_id"]
        self.assertEqual(data["revealed"], "_______")

    def test_win(self):
        resp = self.letter(self.secret_id, "c")
        data = resp.json()
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(data["is_correct"])
        self.assertEqual(data["revealed"], "C__C___")

        self.letter(self.secret_id, "x")
        for ch in "ANI":
            self.letter(self.secret_id, ch)
        data = self.letter(self.secret_id, "ó").json()
        self.assertTrue(data["has_won"])
        self.assertEqual(data["revealed"], "CANCIÓN")
        self.assertEqual(data["incorrect_guesses"], 1)
        self.assertEqual(data["points_awarded"], 450)

        status = self.daily("hangman").json()
        self.assertEqual(status["value"], "CANCIÓN")
        self.assertEqual(status["guessed_letters"], "ACINOX")

    def test_client_counters_ignored(self):
        self.letter(self.secret_id, "Z")
        resp = self.client.post(
            reverse("hangman-guess"),
            {"gameWordId": self.secret_id, "guessLetter": "C", "guessedLetters": [], "incorrectGuesses": 0},
            format="json",
        )
        data = resp.json()
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(data["incorrect_guesses"], 1)
        self.assertEqual(data["guessed_letters"], "CZ")

    def test_repeated_letter(self):
        self.letter(self.secret_id, "Z")
        data = self.letter(self.secret_id, "Z").json()
        self.assertTrue(data["repeated"])
        self.assertEqual(data["incorrect_guesses"], 1)

    def test_loss(self):
        for ch in "BDEFGH":
            data = self.letter(self.secret_id, ch).json()
        self.assertTrue(data["has_lost"])
        resp = self.letter(self.secret_id, "C")
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["code"], "attempts_exhausted")
        self.assertFalse(PlayerScore.objects.filter(player=self.user).exists())

    def test_invalid_letter(self):
        self.assertEqual(self.letter(self.secret_id, "7").status_code, 400)
        self.assertEqual(self.letter(self.secret_id, "AB").status_code, 400)

    def test_progress_is_idempotent(self):
        url = reverse("hangman-progress")
        payload = {"secret_id": self.secret_id, "guessed_letters": ["c", "x"]}
        first = self.client.post(url, payload, format="json")
        second = self.client.post(url, payload, format="json")
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.json(), second.json())
        self.assertEqual(second.json()["incorrect_guesses"], 1)
        self.assertEqual(second.json()["guessed_letters"], "CX")

    def test_revealed(self):
        self.letter(self.secret_id, "N")
        resp = self.client.get(reverse("hangman-revealed", kwargs={"secret_id": self.secret_id}))
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["revealed"], "__N___N")
        self.assertEqual([p["position"] for p in data["positions"]], [2, 6])
        self.assertFalse(data["is_complete"])

    def test_guess_endpoint_rejects_hangman(self):
        self.assertEqual(self.guess(self.secret_id, "CANCION").status_code, 400)
