"""Person-key normalization.

Segments written over time used slightly different slug rules, so besides
the canonical key this module can expand a key into the variants older
rows may have been stored under.
"""

from __future__ import annotations

import re
from typing import List, Optional

from ..core.constants import PERSON_KEY_PREFIX

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slugify(text: Optional[str]) -> str:
    """Lowercase, drop anything outside ``[a-z0-9\\s-]`` and hyphenate whitespace.

    Total: ``None`` or punctuation-only input yields ``""``.
    """
    if not text:
        return ""
    slug = text.lower().strip()
    slug = _DISALLOWED.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def key_from_name(name: Optional[str]) -> str:
    return f"{PERSON_KEY_PREFIX}{slugify(name)}"


def canonicalize_id(id_or_name: Optional[str]) -> str:
    """Canonical person key for either an existing key or a display name.

    Idempotent: ``canonicalize_id(canonicalize_id(x)) == canonicalize_id(x)``.
    """
    raw = (id_or_name or "").strip()
    if raw.startswith(PERSON_KEY_PREFIX):
        return f"{PERSON_KEY_PREFIX}{slugify(raw[len(PERSON_KEY_PREFIX):])}"
    return key_from_name(raw)


def candidate_keys(key: str) -> List[str]:
    """Canonical key first, then the historical variants, deduplicated in order."""
    unprefixed = key[len(PERSON_KEY_PREFIX):] if key.startswith(PERSON_KEY_PREFIX) else key
    variants = [key, unprefixed, key.rstrip("-"), unprefixed.rstrip("-")]
    return list(dict.fromkeys(variants))


def person_key_from_photo_filename(filename: str) -> str:
    """``person-jane-doe-1700000000000.jpg`` -> ``person-jane-doe``."""
    stem = filename.rsplit(".", 1)[0] if "." in filename else filename
    if "-" not in stem:
        return stem
    return stem.rsplit("-", 1)[0]
