"""Repository-relative path normalization."""

import posixpath


def normalize_path(value: str) -> str:
    """Canonicalize a repo-relative path to POSIX form.

    Backslashes become forward slashes, a leading ``./`` is stripped and
    ``.``/``..`` segments are collapsed. The empty string maps to itself.
    """
    normalized = value.replace("\\", "/")
    if normalized.startswith("./"):
        normalized = normalized[2:]
    if not normalized:
        return normalized
    return posixpath.normpath(normalized)


def get_directory(path: str) -> str:
    """Parent directory of a normalized path, ``(root)`` for top-level files."""
    directory = posixpath.dirname(path)
    return directory if directory and directory != "." else "(root)"


def get_extension(path: str) -> str:
    """Lower-cased extension without the dot, ``(none)`` when absent."""
    _, extension = posixpath.splitext(path)
    return extension[1:].lower() if extension else "(none)"
