"""Dedup key derivation (core domain)."""

from __future__ import annotations

import re
from typing import Tuple

from core.errors import ParseError

FRAGMENT_SEPARATOR = "#"


def _collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def entry_key_from_identity(identity: str) -> str:
    """Return the stable part of an entry id used to address its record.

    Release-note ids carry the release date as a URL fragment
    (``...release-notes#June_18_2024``); the fragment is the key. Only the
    segment between the first and second ``#`` is used, so ``feed#a#b`` keys
    as ``a``. Ids without a fragment are used whole.
    """

    segments = identity.split(FRAGMENT_SEPARATOR)
    key = segments[1] if len(segments) > 1 else identity
    key = _collapse_whitespace(key)
    if not key:
        raise ParseError(f"Cannot derive a dedup key from entry id {identity!r}")
    return key


def derive_dedup_key(identity: str, kind: str) -> Tuple[str, str]:
    """Return ``(key, entry_key)`` where key is ``{kind}/{entry_key}``."""

    entry_key = entry_key_from_identity(identity)
    return f"{kind}/{entry_key}", entry_key
