"""Utilidades de texto: slugs y saneamiento de términos de búsqueda."""
import re
import unicodedata
from html import escape

SAFE_PATTERN = re.compile(r'[^\w\s-]', re.UNICODE)
NON_ALNUM = re.compile(r'[^a-z0-9]+')


def slugify(value: str) -> str:
    """Slug URL-safe: minúsculas, alfanuméricos y guiones simples.

    Los acentos se pliegan a ASCII antes de colapsar el resto de
    caracteres a un guion; los guiones de los extremos se eliminan.
    """
    if value is None:
        return ""
    folded = unicodedata.normalize("NFKD", str(value)).encode("ascii", "ignore").decode("ascii")
    return NON_ALNUM.sub("-", folded.lower()).strip("-")


def sanitize_text(value: str) -> str:
    """Remove potentially dangerous characters and escape HTML."""
    if value is None:
        return ""
    sanitized = SAFE_PATTERN.sub('', value)
    return escape(sanitized.strip())


def truncate(value: str | None, length: int) -> str | None:
    if value is None:
        return None
    return value[:length]
