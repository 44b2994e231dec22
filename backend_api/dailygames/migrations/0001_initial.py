import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="DictionaryWord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, help_text="Time when the record was created.")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Time when the record was last updated.")),
                ("text", models.CharField(help_text="Upper-case word, accents preserved.", max_length=64, unique=True)),
                ("normalized", models.CharField(db_index=True, help_text="Accent-folded upper-case word.", max_length=64)),
                ("length", models.PositiveSmallIntegerField(db_index=True, help_text="Length of the normalized word.")),
                ("is_active", models.BooleanField(default=True, help_text="If true, can be picked as a daily secret.")),
            ],
            options={
                "verbose_name": "Dictionary word",
                "verbose_name_plural": "Dictionary words",
                "ordering": ["length", "normalized"],
            },
        ),
        migrations.CreateModel(
            name="DailySecret",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, help_text="Time when the record was created.")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Time when the record was last updated.")),
                ("game", models.CharField(choices=[("word", "Adivinar la Palabra"), ("pin", "Adivinar el PIN"), ("hangman", "Ahorcado")], max_length=16)),
                ("date", models.DateField(help_text="UTC day this secret belongs to.")),
                ("value", models.CharField(help_text="Word (accents preserved) or PIN.", max_length=64)),
            ],
            options={
                "verbose_name": "Daily secret",
                "verbose_name_plural": "Daily secrets",
                "ordering": ["-date", "game"],
                "unique_together": {("game", "date")},
            },
        ),
        migrations.CreateModel(
            name="PlayerAttempt",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, help_text="Time when the record was created.")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Time when the record was last updated.")),
                ("attempts", models.PositiveSmallIntegerField(default=0)),
                ("solved", models.BooleanField(default=False)),
                ("incorrect_guesses", models.PositiveSmallIntegerField(default=0)),
                ("guessed_letters", models.CharField(blank=True, default="", help_text="Normalized letters guessed.", max_length=64)),
                ("last_played_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("player", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="puzzle_attempts", to=settings.AUTH_USER_MODEL)),
                ("secret", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="attempts", to="dailygames.dailysecret")),
            ],
            options={
                "verbose_name": "Player attempt",
                "verbose_name_plural": "Player attempts",
                "ordering": ["-last_played_at"],
                "unique_together": {("player", "secret")},
            },
        ),
        migrations.CreateModel(
            name="GuessLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, help_text="Time when the record was created.")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Time when the record was last updated.")),
                ("attempt_number", models.PositiveSmallIntegerField(help_text="1-based attempt number.")),
                ("guess", models.CharField(help_text="Normalized guess text.", max_length=32)),
                ("result", models.CharField(help_text="Compact feedback pattern.", max_length=32)),
                ("is_correct", models.BooleanField(default=False)),
                ("attempt", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="guesses", to="dailygames.playerattempt")),
            ],
            options={
                "verbose_name": "Guess",
                "verbose_name_plural": "Guesses",
                "ordering": ["attempt_number"],
                "unique_together": {("attempt", "attempt_number")},
            },
        ),
        migrations.CreateModel(
            name="PlayerScore",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, help_text="Time when the record was created.")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Time when the record was last updated.")),
                ("points", models.IntegerField(default=0)),
                ("player", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="puzzle_score", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Player score",
                "verbose_name_plural": "Player scores",
                "ordering": ["-points"],
            },
        ),
    ]
