from django.apps import AppConfig


class DailyGamesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "dailygames"
    verbose_name = "Daily games"
