from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List

from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from .models import DictionaryWord, PlayerScore
from .puzzles.errors import (
    AlreadySolvedError,
    AttemptsExhaustedError,
    InvalidInputError,
    NoSecretAvailableError,
    PersistenceFailureError,
    PuzzleError,
    SecretNotFoundError,
)
from .puzzles.registry import VariantRegistry, get_variant
from .serializers import (
    DailyStatusResponseSerializer,
    GuessRequestSerializer,
    GuessResponseSerializer,
    HangmanGuessRequestSerializer,
    HangmanGuessResponseSerializer,
    HangmanProgressRequestSerializer,
    HangmanProgressResponseSerializer,
    LeaderboardEntrySerializer,
    RevealedResponseSerializer,
)
from .stores import build_state_machine, utc_today

logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    SecretNotFoundError: status.HTTP_404_NOT_FOUND,
    NoSecretAvailableError: status.HTTP_404_NOT_FOUND,
    AlreadySolvedError: status.HTTP_409_CONFLICT,
    AttemptsExhaustedError: status.HTTP_409_CONFLICT,
    PersistenceFailureError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _error_response(exc: PuzzleError) -> Response:
    """Map an engine error to its HTTP response."""
    http_status = status.HTTP_400_BAD_REQUEST
    for exc_type, mapped in _ERROR_STATUS.items():
        if isinstance(exc, exc_type):
            http_status = mapped
            break
    if http_status >= 500:
        logger.error("Puzzle request failed: %s", exc, exc_info=exc)
    return Response({"error": str(exc), "code": exc.code}, status=http_status)


def _statuses(feedback) -> List[str]:
    return [s.value for s in feedback]


# PUBLIC_INTERFACE
@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def health(request):
    """Health check endpoint for the API.

    Returns:
    - 200 OK with {"message": "Server is up!"}
    """
    return Response({"message": "Server is up!"})


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="get",
    operation_id="list_games",
    operation_summary="List available daily games",
    operation_description="Returns each game's identifier, title and guess rules.",
    tags=["meta"],
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def list_games(request):
    """List the daily games and their rules."""
    return Response([get_variant(name).describe() for name in VariantRegistry.names()], status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="get",
    operation_id="daily_status",
    operation_summary="Get the daily puzzle and the player's progress",
    operation_description="""
Returns today's puzzle for the given game (creating it on first request)
together with the caller's progress, so an interrupted session can resume.

Path parameters:
- game: word | pin | hangman

Query params:
- date (optional, YYYY-MM-DD): an earlier day's puzzle; future days are rejected.

The secret value is only returned once the player has solved it.
""",
    manual_parameters=[
        openapi.Parameter("date", openapi.IN_QUERY, type=openapi.TYPE_STRING, format=openapi.FORMAT_DATE, required=False),
    ],
    responses={200: DailyStatusResponseSerializer},
    tags=["game"],
)
@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def daily_status(request, game: str):
    """Resume the caller's round for a game's daily puzzle."""
    today = utc_today()
    raw_date = (request.GET.get("date") or "").strip()
    try:
        day = date.fromisoformat(raw_date) if raw_date else today
    except ValueError:
        return Response({"error": "date must be YYYY-MM-DD.", "code": InvalidInputError.code},
                        status=status.HTTP_400_BAD_REQUEST)

    try:
        st = build_state_machine().daily_status(request.user.pk, game, day, today=today)
    except PuzzleError as e:
        return _error_response(e)

    resp = {
        "secret_id": st.secret_id,
        "game": st.game,
        "day": st.day,
        "length": st.length,
        "attempts": st.attempts,
        "max_attempts": st.max_attempts,
        "solved": st.solved,
        "finished": st.finished,
        "value": st.value,
        "guesses": [
            {
                "attempt_number": g.attempt_number,
                "guess": g.guess,
                "feedback": _statuses(g.feedback),
                "is_correct": g.is_correct,
            }
            for g in st.guesses
        ],
        "keyboard": {ch: s.value for ch, s in st.keyboard.items()},
        "guessed_letters": st.guessed_letters,
        "incorrect_guesses": st.incorrect_guesses,
        "revealed": st.revealed,
    }
    return Response(DailyStatusResponseSerializer(resp).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="submit_guess",
    operation_summary="Submit a word or PIN guess",
    operation_description="""
Submit a guess against a daily word or PIN puzzle. Validates length and
alphabet, enforces the attempt ceiling, records the attempt and returns
per-position feedback.

Request body:
- secret_id (int, required)
- guess (string, required)

Errors: 400 invalid guess, 404 unknown puzzle, 409 already solved or no attempts left.
""",
    request_body=GuessRequestSerializer,
    responses={200: GuessResponseSerializer},
    tags=["game"],
)
@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def submit_guess(request):
    """Submit a guess for a daily word or PIN puzzle."""
    serializer = GuessRequestSerializer(data=request.data or {})
    serializer.is_valid(raise_exception=True)
    vd = serializer.validated_data

    try:
        outcome = build_state_machine().submit_guess(request.user.pk, vd["secret_id"], vd["guess"])
    except PuzzleError as e:
        return _error_response(e)

    resp = {
        "secret_id": outcome.secret_id,
        "attempts": outcome.attempts,
        "max_attempts": outcome.max_attempts,
        "solved": outcome.solved,
        "finished": outcome.finished,
        "feedback": _statuses(outcome.feedback),
        "points_awarded": outcome.points_awarded,
    }
    return Response(GuessResponseSerializer(resp).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="hangman_guess",
    operation_summary="Guess a hangman letter",
    operation_description="""
Evaluate one letter against the daily hangman word. Progress is kept on the
server: a letter already guessed is reported with repeated=true and is not
counted again.

Request body:
- secret_id (int, required)
- letter (string, required): a single letter, accents ignored
- guessed_letters_so_far, incorrect_guesses_so_far (optional, ignored)
""",
    request_body=HangmanGuessRequestSerializer,
    responses={200: HangmanGuessResponseSerializer},
    tags=["hangman"],
)
@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def hangman_guess(request):
    """Guess a single letter of the daily hangman word."""
    serializer = HangmanGuessRequestSerializer(data=request.data or {})
    serializer.is_valid(raise_exception=True)
    vd = serializer.validated_data

    try:
        outcome = build_state_machine().submit_letter(request.user.pk, vd["secret_id"], vd["letter"])
    except PuzzleError as e:
        return _error_response(e)

    resp: Dict[str, Any] = {
        "secret_id": outcome.secret_id,
        "letter": outcome.letter,
        "is_correct": outcome.is_correct,
        "has_won": outcome.has_won,
        "has_lost": outcome.has_lost,
        "repeated": outcome.repeated,
        "incorrect_guesses": outcome.incorrect_guesses,
        "max_incorrect": outcome.max_incorrect,
        "guessed_letters": outcome.guessed_letters,
        "revealed": outcome.revealed,
        "points_awarded": outcome.points_awarded,
    }
    return Response(HangmanGuessResponseSerializer(resp).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="hangman_progress",
    operation_summary="Checkpoint hangman progress",
    operation_description="""
Merge the given letters into the caller's stored hangman progress. Safe to
retry: sending the same letters twice leaves the state unchanged. The
incorrect count is always recomputed by the server.
""",
    request_body=HangmanProgressRequestSerializer,
    responses={200: HangmanProgressResponseSerializer},
    tags=["hangman"],
)
@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def hangman_progress(request):
    """Idempotently store the letters guessed so far."""
    serializer = HangmanProgressRequestSerializer(data=request.data or {})
    serializer.is_valid(raise_exception=True)
    vd = serializer.validated_data

    try:
        record = build_state_machine().update_progress(request.user.pk, vd["secret_id"], vd["guessed_letters"])
    except PuzzleError as e:
        return _error_response(e)

    resp = {
        "secret_id": record.secret_id,
        "guessed_letters": record.guessed_letters,
        "incorrect_guesses": record.incorrect_guesses,
        "attempts": record.attempts,
        "solved": record.solved,
    }
    return Response(HangmanProgressResponseSerializer(resp).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="get",
    operation_id="hangman_revealed",
    operation_summary="Get the revealed hangman word",
    operation_description="Returns the word with unguessed letters blanked and the revealed positions.",
    responses={200: RevealedResponseSerializer},
    tags=["hangman"],
)
@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def hangman_revealed(request, secret_id: int):
    """Revealed view of a hangman puzzle for the caller."""
    try:
        data = build_state_machine().revealed(request.user.pk, secret_id)
    except PuzzleError as e:
        return _error_response(e)
    return Response(RevealedResponseSerializer(data).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="get",
    operation_id="leaderboard",
    operation_summary="Get the players ranking",
    operation_description="""
Returns players ordered by cumulative points (desc), then by who reached
their score first.

Query params:
- limit (optional, default 50, max 200)
""",
    manual_parameters=[
        openapi.Parameter("limit", openapi.IN_QUERY, type=openapi.TYPE_INTEGER, required=False),
    ],
    responses={200: LeaderboardEntrySerializer(many=True)},
    tags=["game"],
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def get_leaderboard(request):
    """Ranking of players by points."""
    try:
        limit = int(request.GET.get("limit") or 50)
    except ValueError:
        limit = 50
    limit = max(1, min(limit, 200))

    qs = PlayerScore.objects.select_related("player").order_by("-points", "updated_at")[:limit]
    entries: List[Dict[str, Any]] = [
        {"rank": i, "player": s.player.get_username(), "points": s.points}
        for i, s in enumerate(qs, start=1)
    ]
    serializer = LeaderboardEntrySerializer(entries, many=True)
    return Response(serializer.data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="get",
    operation_id="dictionary",
    operation_summary="List dictionary words",
    operation_description="Returns active accent-folded words of the given length (default 5) for client-side validation.",
    manual_parameters=[
        openapi.Parameter("length", openapi.IN_QUERY, type=openapi.TYPE_INTEGER, required=False),
    ],
    tags=["meta"],
    responses={200: openapi.Response("OK", schema=openapi.Schema(type=openapi.TYPE_ARRAY, items=openapi.Items(type=openapi.TYPE_STRING)))},
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def get_dictionary(request):
    """Active dictionary words of one length."""
    try:
        length = int(request.GET.get("length") or get_variant("word").length)
    except ValueError:
        return Response({"error": "length must be an integer.", "code": InvalidInputError.code},
                        status=status.HTTP_400_BAD_REQUEST)
    words = (
        DictionaryWord.objects.filter(is_active=True, length=length)
        .order_by("normalized")
        .values_list("normalized", flat=True)
        .distinct()
    )
    return Response(list(words), status=status.HTTP_200_OK)
