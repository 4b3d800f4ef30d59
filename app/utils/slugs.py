import re
from typing import Iterable

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

def slugify(title: str) -> str:
    """Convierte un título en slug: minúsculas, separadores '-', sin guiones en los extremos."""
    return _NON_ALNUM.sub("-", title.lower().strip()).strip("-")

def unique_slug(title: str, existing: Iterable[str]) -> str:
    """
    Resuelve colisiones con sufijo numérico: base, base-1, base-2...

    Args:
        title (str): Título del álbum.
        existing (Iterable[str]): Slugs ya en uso.

    Returns:
        str: Slug no presente en `existing`.
    """
    taken = set(existing)
    base = slugify(title) or "album"
    slug = base
    suffix = 1
    while slug in taken:
        slug = f"{base}-{suffix}"
        suffix += 1
    return slug
