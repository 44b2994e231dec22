from __future__ import annotations

import unicodedata
from typing import Optional


# PUBLIC_INTERFACE
def normalize(text: Optional[str]) -> str:
    """Fold accents and upper-case text for comparisons.

    Decomposes (NFD), drops non-spacing marks, recomposes (NFC) and
    upper-cases, so "árbol" and "ARBOL" compare equal. Idempotent.
    The original text is what gets displayed; this form is for
    equality and containment checks only.
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    return unicodedata.normalize("NFC", stripped).upper()


# PUBLIC_INTERFACE
def normalize_char(ch: str) -> str:
    """Normalize a single character, keeping position alignment with the original."""
    folded = normalize(ch)
    # upper() can expand a few characters (e.g. "ß" -> "SS"); keep the first.
    return folded[:1] if folded else ch
