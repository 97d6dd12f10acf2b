"""Glob matching for site-relative paths.

Patterns and paths are compared in POSIX form with any leading ``/`` or
``./`` removed, so ``./drafts``, ``/drafts`` and ``drafts`` are equivalent.
``*``, ``?`` and ``[...]`` stay within one path segment; only a ``**``
segment spans directories.
"""

import re
from collections.abc import Iterable
from functools import lru_cache


def _strip(value: str) -> str:
    value = value.replace("\\", "/")
    while value.startswith("./"):
        value = value[2:]
    return value.lstrip("/")


def _translate_segment(segment: str) -> str:
    parts: list[str] = []
    i = 0
    while i < len(segment):
        char = segment[i]
        if char == "*":
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        elif char == "[":
            end = segment.find("]", i + 2 if segment[i + 1 : i + 2] in ("!", "^") else i + 1)
            if end == -1:
                parts.append(re.escape(char))
            else:
                body = segment[i + 1 : end].replace("\\", "\\\\")
                if body.startswith("!"):
                    body = "^" + body[1:]
                parts.append(f"[{body}]")
                i = end
        else:
            parts.append(re.escape(char))
        i += 1
    return "".join(parts)


@lru_cache(maxsize=256)
def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a glob pattern into a regular expression matching whole paths.

    Args:
        pattern: Glob pattern (e.g., "**/*.html", "drafts/**")

    Returns:
        Compiled expression for use with ``fullmatch``
    """
    segments = _strip(pattern).rstrip("/").split("/")
    regex = ""
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if segment == "**":
            if not last:
                regex += "(?:[^/]+/)*"
            elif regex:
                # "dir/**" also matches "dir" itself
                regex = f"{regex[:-1]}(?:/.*)?"
            else:
                regex += ".*"
        else:
            regex += _translate_segment(segment) + ("" if last else "/")
    return re.compile(regex, re.DOTALL)


def match_glob(path: str, pattern: str, *, match_parents: bool = False) -> bool:
    """Check whether a path matches a glob pattern.

    Args:
        path: Site-relative path or URL (e.g., "/about/index.html")
        pattern: Glob pattern (e.g., "**/*.html", "./drafts")
        match_parents: Also match when one of the path's parent
            directories matches, so a directory pattern covers its contents

    Returns:
        True if the path (or, with ``match_parents``, a parent) matches
    """
    target = _strip(path).rstrip("/")
    if not _strip(pattern).rstrip("/") or not target:
        return False

    regex = compile_glob(pattern)
    if not match_parents:
        return regex.fullmatch(target) is not None

    parts = target.split("/")
    return any(regex.fullmatch("/".join(parts[: i + 1])) for i in range(len(parts)))


def matches_any(
    path: str,
    patterns: Iterable[str] | None,
    *,
    match_parents: bool = False,
) -> bool:
    """Check whether a path matches any of the given patterns."""
    if not patterns:
        return False
    return any(match_glob(path, pattern, match_parents=match_parents) for pattern in patterns)
