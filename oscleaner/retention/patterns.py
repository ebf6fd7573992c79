"""
Glob matching for index names.

Only ``*`` is a wildcard; every other character, including ``?`` and
brackets, matches itself.
"""

import re
from functools import lru_cache
from typing import Iterable, List, Pattern, TypeVar

T = TypeVar("T")


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> Pattern[str]:
    """Compile a glob pattern into an anchored regular expression."""
    parts = [re.escape(segment) for segment in pattern.split("*")]
    return re.compile(".*".join(parts), re.DOTALL)


def matches(pattern: str, name: str) -> bool:
    """Return True if ``name`` matches ``pattern`` as a whole (case-sensitive)."""
    return compile_pattern(pattern).fullmatch(name) is not None


def filter_by_pattern(items: Iterable[T], pattern: str, key=lambda item: item.name) -> List[T]:
    """Keep the items whose name matches ``pattern``, preserving order."""
    regex = compile_pattern(pattern)
    return [item for item in items if regex.fullmatch(key(item)) is not None]
