from __future__ import annotations

import re


SANITIZE_PREFIX = "r_"
FALLBACK_IDENTIFIER = "r_cmd"

_INVALID = re.compile(r"[^A-Za-z0-9_]")


def reverse(name: str) -> str:
    """Reverse ``name`` code point by code point."""
    return name[::-1]


def sanitize(name: str) -> str:
    """Turn ``name`` into a valid shell function identifier.

    Anything outside ``[A-Za-z0-9_]`` becomes ``_``, a leading digit gets the
    ``r_`` prefix and an empty result falls back to ``r_cmd``.
    """
    ident = _INVALID.sub("_", name)
    if not ident:
        return FALLBACK_IDENTIFIER
    if ident[0].isdigit():
        ident = SANITIZE_PREFIX + ident
    return ident
