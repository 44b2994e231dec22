from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from dailygames.puzzles.normalize import normalize


# PUBLIC_INTERFACE
class TimeStampedModel(models.Model):
    """Abstract base model providing created/updated timestamps.

    Notes:
        Keep this abstract model free of any logic that would access the Django
        app registry or execute queries at module import time.
    """
    created_at = models.DateTimeField(auto_now_add=True, help_text="Time when the record was created.")
    updated_at = models.DateTimeField(auto_now=True, help_text="Time when the record was last updated.")

    class Meta:
        abstract = True


GAME_CHOICES = (
    ("word", "Adivinar la Palabra"),
    ("pin", "Adivinar el PIN"),
    ("hangman", "Ahorcado"),
)


# PUBLIC_INTERFACE
class DictionaryWord(TimeStampedModel):
    """A word that can be picked as a daily secret.

    Fields:
    - text: upper-cased word as displayed, accents preserved
    - normalized: accent-folded form used for lookups
    - length: length of the normalized form
    - is_active: whether this word can be selected as a secret
    """
    text = models.CharField(max_length=64, unique=True, help_text="Upper-case word, accents preserved.")
    normalized = models.CharField(max_length=64, db_index=True, help_text="Accent-folded upper-case word.")
    length = models.PositiveSmallIntegerField(db_index=True, help_text="Length of the normalized word.")
    is_active = models.BooleanField(default=True, help_text="If true, can be picked as a daily secret.")

    class Meta:
        ordering = ["length", "normalized"]
        verbose_name = "Dictionary word"
        verbose_name_plural = "Dictionary words"

    def save(self, *args, **kwargs):
        # Derive normalized form and length on save
        if self.text:
            self.text = self.text.strip().upper()
            self.normalized = normalize(self.text)
            self.length = len(self.normalized)
        super().save(*args, **kwargs)

    def __str__(self) -> str:  # pragma: no cover
        return self.text


# PUBLIC_INTERFACE
class DailySecret(TimeStampedModel):
    """The hidden answer of one game for one UTC day.

    Created lazily by the daily puzzle selector, never modified or deleted.
    """
    game = models.CharField(max_length=16, choices=GAME_CHOICES)
    date = models.DateField(help_text="UTC day this secret belongs to.")
    value = models.CharField(max_length=64, help_text="Word (accents preserved) or PIN.")

    class Meta:
        ordering = ["-date", "game"]
        unique_together = (("game", "date"),)
        verbose_name = "Daily secret"
        verbose_name_plural = "Daily secrets"

    @property
    def length(self) -> int:
        return len(normalize(self.value))

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.game} {self.date.isoformat()}"


# PUBLIC_INTERFACE
class PlayerAttempt(TimeStampedModel):
    """Attempt record for one player and one daily secret.

    Fields:
    - attempts: guesses made so far (letters for hangman)
    - solved: set once, never cleared
    - incorrect_guesses / guessed_letters: hangman progress
    - last_played_at: time of the latest guess
    """
    player = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="puzzle_attempts")
    secret = models.ForeignKey(DailySecret, on_delete=models.PROTECT, related_name="attempts")
    attempts = models.PositiveSmallIntegerField(default=0)
    solved = models.BooleanField(default=False)
    incorrect_guesses = models.PositiveSmallIntegerField(default=0)
    guessed_letters = models.CharField(max_length=64, blank=True, default="", help_text="Normalized letters guessed.")
    last_played_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-last_played_at"]
        unique_together = (("player", "secret"),)
        verbose_name = "Player attempt"
        verbose_name_plural = "Player attempts"

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.player_id} on {self.secret}: {self.attempts} attempts"


# PUBLIC_INTERFACE
class GuessLog(TimeStampedModel):
    """A single word or PIN guess, kept to rebuild a session later.

    - result: compact feedback pattern (g=correct, y=present, b=absent)
    """
    attempt = models.ForeignKey(PlayerAttempt, on_delete=models.CASCADE, related_name="guesses")
    attempt_number = models.PositiveSmallIntegerField(help_text="1-based attempt number.")
    guess = models.CharField(max_length=32, help_text="Normalized guess text.")
    result = models.CharField(max_length=32, help_text="Compact feedback pattern.")
    is_correct = models.BooleanField(default=False)

    class Meta:
        ordering = ["attempt_number"]
        unique_together = (("attempt", "attempt_number"),)
        verbose_name = "Guess"
        verbose_name_plural = "Guesses"

    def __str__(self) -> str:  # pragma: no cover
        return f"Guess {self.attempt_number} in attempt {self.attempt_id}: {self.guess}"


# PUBLIC_INTERFACE
class PlayerScore(TimeStampedModel):
    """Cumulative points of a player across all daily games."""
    player = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="puzzle_score")
    points = models.IntegerField(default=0)

    class Meta:
        ordering = ["-points"]
        verbose_name = "Player score"
        verbose_name_plural = "Player scores"

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.player_id}: {self.points}"
