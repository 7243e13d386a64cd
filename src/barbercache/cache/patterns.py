"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Glob-style key patterns used by `CacheStore.clear`.

Only `*` is special: it matches any run of characters, including an empty
one. Every other character is literal and the pattern must cover the whole
key, so `"pagination:*"` matches `"pagination:reviews:1:10:default:asc"` but
`"reviews"` only matches the key `"reviews"`.
"""

from __future__ import annotations

import re
from functools import lru_cache


@lru_cache(maxsize=256)
def compile_key_pattern(pattern: str) -> re.Pattern[str]:
    """Compile one key pattern into an anchored regular expression."""
    parts = (re.escape(part) for part in pattern.split("*"))
    return re.compile(".*".join(parts), re.DOTALL)


def key_matches(pattern: str, key: str) -> bool:
    return compile_key_pattern(pattern).fullmatch(key) is not None
