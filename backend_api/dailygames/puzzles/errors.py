"""
Error taxonomy for the puzzle engine.

Rule rejections (invalid input, already solved, attempts exhausted) are
expected outcomes a player can see. PersistenceFailureError is systemic
and is reported as a server error by the HTTP layer.
"""


class PuzzleError(Exception):
    """Base class for every failure the engine reports."""

    code = "puzzle_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message())

    @classmethod
    def default_message(cls) -> str:
        return cls.code.replace("_", " ").capitalize() + "."


class InvalidInputError(PuzzleError, ValueError):
    """Malformed guess: wrong length or wrong alphabet."""

    code = "invalid_input"


class SecretNotFoundError(PuzzleError):
    """The requested secret does not exist."""

    code = "not_found"


class AlreadySolvedError(PuzzleError):
    code = "already_solved"


class AttemptsExhaustedError(PuzzleError):
    code = "attempts_exhausted"


class NoSecretAvailableError(PuzzleError):
    """The selector could not produce a secret (e.g. empty dictionary)."""

    code = "no_secret_available"


class PersistenceFailureError(PuzzleError):
    """The attempt store or selector failed to read or write."""

    code = "persistence_failure"
