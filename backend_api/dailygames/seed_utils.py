from typing import List

from django.db import transaction

from .models import DictionaryWord
from .puzzles.normalize import normalize

DEFAULT_SEED: List[str] = [
    # 5 letters: daily word
    "ÁRBOL", "PERRO", "GATOS", "CASAS", "MESAS", "LIBRO", "PLAZA", "NUBES",
    "LÁPIZ", "CAMPO", "FRESA", "LIMÓN", "MANGO", "TIGRE", "SUEÑO", "PLUMA",
    "BARCO", "CIELO", "HIELO", "TRIGO", "VERDE", "DULCE", "NOCHE", "RELOJ",
    # 7+ letters: hangman
    "MARIPOSA", "ELEFANTE", "CANCIÓN", "BIBLIOTECA", "MONTAÑA", "VENTANA",
    "CAMINANTE", "ESTRELLA", "PINTURAS", "TORTUGA", "HELICÓPTERO", "PALMERAS",
]


def _build(words: List[str]) -> List[DictionaryWord]:
    # bulk_create skips save(), so derive fields here
    objs = []
    for w in words:
        text = w.strip().upper()
        normalized = normalize(text)
        objs.append(DictionaryWord(text=text, normalized=normalized, length=len(normalized), is_active=True))
    return objs


# PUBLIC_INTERFACE
def ensure_seed_words(seed_words: List[str] | None = None) -> int:
    """Ensure the DictionaryWord table has at least a minimal playable list.

    Returns number of words inserted (0 if already present).
    """
    if DictionaryWord.objects.exists():
        return 0
    words = seed_words or DEFAULT_SEED
    with transaction.atomic():
        DictionaryWord.objects.bulk_create(_build(words), ignore_conflicts=True)
    return len(words)
