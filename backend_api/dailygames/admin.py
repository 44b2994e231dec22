from django.contrib import admin

from .models import DictionaryWord, DailySecret, PlayerAttempt, GuessLog, PlayerScore


@admin.register(DictionaryWord)
class DictionaryWordAdmin(admin.ModelAdmin):
    list_display = ("text", "normalized", "length", "is_active", "created_at")
    list_filter = ("is_active", "length")
    search_fields = ("text", "normalized")
    ordering = ("length", "normalized")


@admin.register(DailySecret)
class DailySecretAdmin(admin.ModelAdmin):
    list_display = ("date", "game", "value", "created_at")
    list_filter = ("game",)
    date_hierarchy = "date"
    readonly_fields = ("game", "date", "value", "created_at", "updated_at")

    def has_delete_permission(self, request, obj=None):
        return False


class GuessLogInline(admin.TabularInline):
    model = GuessLog
    extra = 0
    fields = ("attempt_number", "guess", "result", "is_correct", "created_at")
    readonly_fields = ("created_at",)


@admin.register(PlayerAttempt)
class PlayerAttemptAdmin(admin.ModelAdmin):
    list_display = (
        "player",
        "secret",
        "attempts",
        "solved",
        "incorrect_guesses",
        "guessed_letters",
        "last_played_at",
    )
    list_filter = ("solved", "secret__game")
    search_fields = ("player__username", "secret__value")
    inlines = [GuessLogInline]
    readonly_fields = ("created_at", "updated_at")


@admin.register(PlayerScore)
class PlayerScoreAdmin(admin.ModelAdmin):
    list_display = ("player", "points", "updated_at")
    search_fields = ("player__username",)
    ordering = ("-points",)
