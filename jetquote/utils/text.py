import unicodedata


def normalize_text(value: str) -> str:
    """Strip accents, case-fold and collapse whitespace"""
    decomposed = unicodedata.normalize("NFD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(stripped.casefold().split())
