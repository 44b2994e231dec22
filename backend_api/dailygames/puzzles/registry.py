from __future__ import annotations

from typing import Dict, Type

from .variants import HangmanVariant, PinVariant, WordVariant


# PUBLIC_INTERFACE
class VariantRegistry:
    """Registry mapping game identifiers to puzzle variant classes."""

    _registry: Dict[str, Type] = {
        "word": WordVariant,
        "pin": PinVariant,
        "hangman": HangmanVariant,
    }

    @classmethod
    def get(cls, game: str):
        """Return the variant class for a game identifier, or raise KeyError."""
        key = (game or "").strip().lower()
        if key not in cls._registry:
            raise KeyError(f"Unknown game: {game!r}")
        return cls._registry[key]

    @classmethod
    def names(cls):
        return list(cls._registry)


# PUBLIC_INTERFACE
def get_variant(game: str):
    """Convenience function returning a ready-to-use variant instance.

    Example:
        variant = get_variant("word")
        result = variant.evaluate(secret="ARBOL", guess="LABOR")
    """
    return VariantRegistry.get(game)()
