"""Ignore-pattern matching for repo-relative paths.

Glob semantics: ``*`` stays inside one segment, ``**`` spans segments,
dotfiles match, matching is case-sensitive, brace sets expand and
slash-free patterns match against the basename. A bare ``name`` pattern is
also tried as ``**/name`` so it applies at any depth.
"""

from typing import Iterable

from wcmatch import glob

from .paths import normalize_path

GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.DOTGLOB | glob.MATCHBASE | glob.FORCEUNIX

# Any path with a hidden segment, not only hidden direct children
HIDDEN_PATTERN = "**/.*"

_SCOPE_SUFFIX = "/**"


def _directory_scope(pattern: str) -> str:
    scope = pattern[: -len(_SCOPE_SUFFIX)]
    if scope.startswith("./"):
        scope = scope[2:]
    elif scope.startswith("/"):
        scope = scope[1:]
    return scope


def matches_ignore_pattern(normalized_path: str, pattern: str) -> bool:
    """Check a single pattern against an already-normalized path."""
    if pattern == HIDDEN_PATTERN:
        return any(segment.startswith(".") for segment in normalized_path.split("/"))

    glob_pattern = pattern.replace("\\", "/")
    if glob.globmatch(normalized_path, glob_pattern, flags=GLOB_FLAGS) or glob.globmatch(
        normalized_path, f"**/{glob_pattern}", flags=GLOB_FLAGS
    ):
        return True

    if pattern.endswith(_SCOPE_SUFFIX):
        scope = _directory_scope(pattern)
        return (
            normalized_path == scope
            or normalized_path.startswith(f"{scope}/")
            or f"/{scope}/" in normalized_path
        )

    return False


def should_ignore(path: str, patterns: Iterable[str]) -> bool:
    """True when any pattern matches the normalized path."""
    normalized_path = normalize_path(path)
    return any(matches_ignore_pattern(normalized_path, pattern) for pattern in patterns)
