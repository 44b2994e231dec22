from django.urls import path
from .views import (
    health,
    list_games,
    daily_status,
    submit_guess,
    hangman_guess,
    hangman_progress,
    hangman_revealed,
    get_leaderboard,
    get_dictionary,
)

urlpatterns = [
    path('health/', health, name='Health'),
    path('games', list_games, name='list-games'),
    path('daily/<str:game>', daily_status, name='daily-status'),
    path('guess', submit_guess, name='guess'),
    path('hangman/guess', hangman_guess, name='hangman-guess'),
    path('hangman/progress', hangman_progress, name='hangman-progress'),
    path('hangman/<int:secret_id>/revealed', hangman_revealed, name='hangman-revealed'),
    path('leaderboard', get_leaderboard, name='leaderboard'),
    path('dictionary', get_dictionary, name='dictionary'),
]
