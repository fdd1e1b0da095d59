"""URL slug generation shared by posts, categories and tags."""

from __future__ import annotations

import re
import unicodedata

_ACCENT_FOLDS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[áàâã]"), "a"),
    (re.compile(r"[éêè]"), "e"),
    (re.compile(r"[íìî]"), "i"),
    (re.compile(r"[óòôõ]"), "o"),
    (re.compile(r"[úùû]"), "u"),
    (re.compile(r"ç"), "c"),
)
_DISALLOWED_RE = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
_HYPHENS_RE = re.compile(r"-+")


def slugify(value: str) -> str:
    """Turn a human-readable name or title into a slug.

    Lower-cases, folds Portuguese accented vowels and ``ç`` to ASCII, drops
    anything outside ``[a-z0-9 -]``, joins words with single hyphens and trims
    hyphens from both ends.

    >>> slugify("Ética & Ação")
    'etica-acao'
    """
    slug = value.lower()
    for pattern, replacement in _ACCENT_FOLDS:
        slug = pattern.sub(replacement, slug)
    slug = _DISALLOWED_RE.sub("", slug)
    slug = _WHITESPACE_RE.sub("-", slug)
    slug = _HYPHENS_RE.sub("-", slug)
    return slug.strip("-")


def name_sort_key(name: str) -> str:
    """Collation key ordering names alphabetically regardless of case or accents.

    >>> sorted(["Beatriz", "ana", "Álvaro"], key=name_sort_key)
    ['Álvaro', 'ana', 'Beatriz']
    """
    decomposed = unicodedata.normalize("NFKD", name.casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))
