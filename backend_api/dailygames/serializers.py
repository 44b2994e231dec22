from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict

from rest_framework import serializers

from .puzzles.engines import LetterStatus

FEEDBACK_CHOICES = [s.value for s in LetterStatus]


def _squash(key: Any) -> str:
    """Fold a field name so secretId, SecretId and secret_id compare equal."""
    return str(key).replace("_", "").replace("-", "").lower()


# PUBLIC_INTERFACE
class CaseInsensitiveSerializer(serializers.Serializer):
    """Serializer accepting field names in any case, camelCase or snake_case.

    Subclasses may declare `aliases` mapping alternative input names to
    field names (e.g. {"gameWordId": "secret_id"}).
    """

    aliases: Dict[str, str] = {}

    def to_internal_value(self, data):
        if isinstance(data, Mapping):
            lookup = {_squash(name): name for name in self.fields}
            lookup.update({_squash(alias): name for alias, name in self.aliases.items()})
            data = {lookup.get(_squash(key), key): value for key, value in data.items()}
        return super().to_internal_value(data)


class LettersField(serializers.Field):
    """Letters given either as a string ("ABE") or a list (["A", "B", "E"])."""

    def to_internal_value(self, data):
        if data is None:
            return ""
        if isinstance(data, str):
            return data
        if isinstance(data, (list, tuple)) and all(isinstance(x, str) for x in data):
            return "".join(data)
        raise serializers.ValidationError("Expected a string or a list of letters.")

    def to_representation(self, value):
        return "".join(sorted(value))


# PUBLIC_INTERFACE
class GuessRequestSerializer(CaseInsensitiveSerializer):
    """Request payload to submit a word or PIN guess."""

    aliases = {"gameWordId": "secret_id", "gamePinId": "secret_id"}

    secret_id = serializers.IntegerField()
    guess = serializers.CharField(trim_whitespace=True, max_length=32)


# PUBLIC_INTERFACE
class GuessResponseSerializer(serializers.Serializer):
    """Response payload after submitting a guess."""

    secret_id = serializers.IntegerField()
    attempts = serializers.IntegerField()
    max_attempts = serializers.IntegerField()
    solved = serializers.BooleanField()
    finished = serializers.BooleanField()
    feedback = serializers.ListField(child=serializers.ChoiceField(choices=FEEDBACK_CHOICES))
    points_awarded = serializers.IntegerField()


# PUBLIC_INTERFACE
class HangmanGuessRequestSerializer(CaseInsensitiveSerializer):
    """Request payload for a hangman letter.

    guessed_letters_so_far / incorrect_guesses_so_far are accepted for
    compatibility with older clients; the server's stored progress is
    what the letter is evaluated against.
    """

    aliases = {
        "gameWordId": "secret_id",
        "guessLetter": "letter",
        "guessedLetters": "guessed_letters_so_far",
        "incorrectGuesses": "incorrect_guesses_so_far",
    }

    secret_id = serializers.IntegerField()
    letter = serializers.CharField(trim_whitespace=True, max_length=4)
    guessed_letters_so_far = LettersField(required=False)
    incorrect_guesses_so_far = serializers.IntegerField(required=False, min_value=0)


# PUBLIC_INTERFACE
class HangmanGuessResponseSerializer(serializers.Serializer):
    """Response payload after a hangman letter."""

    secret_id = serializers.IntegerField()
    letter = serializers.CharField()
    is_correct = serializers.BooleanField()
    has_won = serializers.BooleanField()
    has_lost = serializers.BooleanField()
    repeated = serializers.BooleanField()
    incorrect_guesses = serializers.IntegerField()
    max_incorrect = serializers.IntegerField()
    guessed_letters = LettersField()
    revealed = serializers.CharField()
    points_awarded = serializers.IntegerField()


# PUBLIC_INTERFACE
class HangmanProgressRequestSerializer(CaseInsensitiveSerializer):
    """Checkpoint of the letters a player has guessed so far."""

    aliases = {"gameWordId": "secret_id"}

    secret_id = serializers.IntegerField()
    guessed_letters = LettersField()


# PUBLIC_INTERFACE
class HangmanProgressResponseSerializer(serializers.Serializer):
    secret_id = serializers.IntegerField()
    guessed_letters = LettersField()
    incorrect_guesses = serializers.IntegerField()
    attempts = serializers.IntegerField()
    solved = serializers.BooleanField()


# PUBLIC_INTERFACE
class RevealedResponseSerializer(serializers.Serializer):
    secret_id = serializers.IntegerField()
    length = serializers.IntegerField()
    revealed = serializers.CharField()
    positions = serializers.ListField(child=serializers.DictField())
    is_complete = serializers.BooleanField()


class GuessHistorySerializer(serializers.Serializer):
    attempt_number = serializers.IntegerField()
    guess = serializers.CharField()
    feedback = serializers.ListField(child=serializers.ChoiceField(choices=FEEDBACK_CHOICES))
    is_correct = serializers.BooleanField()


# PUBLIC_INTERFACE
class DailyStatusResponseSerializer(serializers.Serializer):
    """Status of the player's round for today's (or a past day's) puzzle.

    value is only filled in once the player has solved the puzzle.
    """

    secret_id = serializers.IntegerField()
    game = serializers.CharField()
    day = serializers.DateField()
    length = serializers.IntegerField()
    attempts = serializers.IntegerField()
    max_attempts = serializers.IntegerField()
    solved = serializers.BooleanField()
    finished = serializers.BooleanField()
    value = serializers.CharField(allow_null=True)
    guesses = GuessHistorySerializer(many=True)
    keyboard = serializers.DictField(child=serializers.ChoiceField(choices=FEEDBACK_CHOICES))
    guessed_letters = LettersField()
    incorrect_guesses = serializers.IntegerField()
    revealed = serializers.CharField(allow_null=True)


# PUBLIC_INTERFACE
class LeaderboardEntrySerializer(serializers.Serializer):
    """Leaderboard entry."""

    rank = serializers.IntegerField()
    player = serializers.CharField()
    points = serializers.IntegerField()
