"""URL slug helpers for merchant storefronts."""

from __future__ import annotations

import re
import unicodedata
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

DEFAULT_SLUG = "merchant"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_APOSTROPHES = re.compile(r"['’]")


def slugify(value: str) -> str:
    """Lowercase ASCII slug: ``"Joe's Café & Bar"`` -> ``"joes-cafe-and-bar"``."""

    normalized = unicodedata.normalize("NFKD", value)
    ascii_value = normalized.encode("ascii", "ignore").decode("ascii")
    ascii_value = _APOSTROPHES.sub("", ascii_value.replace("&", " and "))
    slug = _NON_ALNUM.sub("-", ascii_value.lower()).strip("-")
    return slug or DEFAULT_SLUG


def unique_slug(value: str, exists: Callable[[str], bool]) -> str:
    """Probe ``slug``, ``slug-1``, ``slug-2``, ... until ``exists`` says no."""

    base = slugify(value)
    candidate = base
    suffix = 0
    while exists(candidate):
        suffix += 1
        candidate = f"{base}-{suffix}"
    return candidate
