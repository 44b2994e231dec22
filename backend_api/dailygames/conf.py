"""
App-level settings.

Projects override any key through a DAILY_PUZZLES dict in Django settings:

    DAILY_PUZZLES = {"MAX_ATTEMPTS": 6, "MAX_INCORRECT": 6}
"""
from typing import Any

from django.conf import settings

DEFAULTS = {
    "MAX_ATTEMPTS": 6,
    "MAX_INCORRECT": 6,
}


# PUBLIC_INTERFACE
def puzzle_setting(name: str) -> Any:
    """Return a DAILY_PUZZLES setting, falling back to DEFAULTS."""
    overrides = getattr(settings, "DAILY_PUZZLES", None) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
