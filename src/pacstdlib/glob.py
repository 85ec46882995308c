"""
glob
====

Shell expression matching for ``shExpMatch``.  A shell expression is not
a regular expression: ``*`` matches any run of characters (including the
empty one), ``?`` matches exactly one character and ``[abc]`` /
``[!abc]`` match one character from (or outside) a set.  Everything else
is literal.  Matching is anchored and case-sensitive.

Compiled expressions are kept in a small LRU cache because PAC scripts
evaluate the same handful of patterns for every request.
"""

from __future__ import annotations

import logging
import re
import threading
from collections import OrderedDict
from typing import Pattern

logger = logging.getLogger(__name__)


def _character_class(bracket: str) -> str:
    """Regex for a ``[...]`` bracket; literal text when it is not a valid set."""
    body = bracket[1:-1]
    negate = body[0] in "!^"
    if negate:
        body = body[1:]
    if not body:
        return re.escape(bracket)
    regex = "[" + ("^" if negate else "") + body.replace("\\", "\\\\").replace("[", "\\[") + "]"
    try:
        re.compile(regex)
    except re.error as exc:
        logger.debug("Treat bracket %r as literal text: %s", bracket, exc)
        return re.escape(bracket)
    return regex


def convert_glob_to_regex(expression: str) -> str:
    """Translate a shell expression into an anchored regular expression."""
    parts = ["^"]
    i = 0
    n = len(expression)
    while i < n:
        c = expression[i]
        if c == "*":
            parts.append(".*")
        elif c == "?":
            parts.append(".")
        elif c == "[":
            end = expression.find("]", i + 2)
            if end == -1:
                parts.append(re.escape(c))
            else:
                parts.append(_character_class(expression[i:end + 1]))
                i = end
        else:
            parts.append(re.escape(c))
        i += 1
    parts.append(r"\Z")
    return "".join(parts)


class GlobPatternMatcher:
    """Thread-safe cache of compiled shell expressions.

    Parameters
    ----------
    capacity: int
        Maximum number of compiled expressions kept.  The least recently
        used one is dropped when the cache is full.
    """

    def __init__(self, capacity: int = 256) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._cache: "OrderedDict[str, Pattern[str]]" = OrderedDict()
        self._lock = threading.Lock()

    def to_pattern(self, expression: str) -> Pattern[str]:
        with self._lock:
            pattern = self._cache.get(expression)
            if pattern is not None:
                self._cache.move_to_end(expression)
                return pattern
        regex = convert_glob_to_regex(expression.strip())
        logger.debug("Compiled shell expression %r as %r", expression, regex)
        pattern = re.compile(regex, re.DOTALL)
        with self._lock:
            self._cache[expression] = pattern
            self._cache.move_to_end(expression)
            while len(self._cache) > self.capacity:
                self._cache.popitem(last=False)
        return pattern

    def matches(self, text: str, expression: str) -> bool:
        return self.to_pattern(expression).match(text) is not None

    def __len__(self) -> int:
        return len(self._cache)
