"""Text normalization helpers."""

import re
import unicodedata

_ESPACOS = re.compile(r"\s+")


def remover_acentos(texto: str) -> str:
    """Strip combining accents (``"Ação"`` -> ``"Acao"``)."""
    decomposto = unicodedata.normalize("NFD", texto)
    return "".join(c for c in decomposto if not unicodedata.combining(c))


def normalizar_titulo(titulo: str) -> str:
    """
    Normalize an advice title for duplicate detection.

    Comparison is case, accent and whitespace insensitive, so
    "Otimização  Pró-Labore" and "otimizacao pro-labore" collide.

    Args:
        titulo: Raw title

    Returns:
        Normalized key
    """
    texto = remover_acentos(titulo).casefold()
    return _ESPACOS.sub(" ", texto).strip()
