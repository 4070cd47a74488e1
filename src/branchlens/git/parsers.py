"""Parsers for ``git diff --numstat`` and ``git diff --name-status`` output.

Both parsers preserve row order and normalize every path. Lines that do not
carry a resolvable path are dropped rather than raising.
"""

import re
from typing import List, Optional, Tuple

from ..models import NameStatusRow, NumstatRow
from .paths import normalize_path

# Leading integer, mirroring lenient "parse the number prefix" semantics
_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")

# Compact rename notation used by numstat without -z:
#   "src/{old => new}.ts"  or  "old.ts => new.ts"
_BRACE_RENAME_RE = re.compile(r"^(?P<prefix>.*)\{(?P<old>[^{}]*) => (?P<new>[^{}]*)\}(?P<suffix>.*)$")
_PLAIN_RENAME_SEP = " => "


def _parse_count(raw: str) -> int:
    match = _INT_PREFIX_RE.match(raw)
    return int(match.group(1)) if match else 0


def _split_rename_path(raw: str) -> Tuple[Optional[str], str]:
    """Expand git's compact rename path into (previous_path, path)."""
    match = _BRACE_RENAME_RE.match(raw)
    if match:
        prefix, suffix = match.group("prefix"), match.group("suffix")
        old = f"{prefix}{match.group('old')}{suffix}"
        new = f"{prefix}{match.group('new')}{suffix}"
        # "{ => dir}/x" style leaves doubled or leading slashes behind
        return normalize_path(old.lstrip("/")), normalize_path(new.lstrip("/"))
    if _PLAIN_RENAME_SEP in raw:
        old, new = raw.split(_PLAIN_RENAME_SEP, 1)
        return normalize_path(old), normalize_path(new)
    return None, normalize_path(raw)


def parse_numstat(output: str) -> List[NumstatRow]:
    """Parse numstat text: ``<added>\\t<removed>\\t<path>[\\t<path>]`` per line.

    With two path fields the first is the previous path (rename). A ``-``
    count marks a binary file, whose counts are forced to zero.
    """
    rows: List[NumstatRow] = []

    for line in output.split("\n"):
        if not line.strip():
            continue

        parts = line.split("\t")
        if len(parts) < 3:
            continue

        added_raw, removed_raw, *path_parts = parts
        raw_path = path_parts[-1].rstrip("\r")
        if not raw_path:
            continue

        if len(path_parts) > 1:
            previous_path: Optional[str] = (
                normalize_path(path_parts[0]) if path_parts[0] else None
            )
            path = normalize_path(raw_path)
        else:
            previous_path, path = _split_rename_path(raw_path)

        binary = added_raw == "-" or removed_raw == "-"
        rows.append(
            NumstatRow(
                path=path,
                previous_path=previous_path,
                added=0 if binary else _parse_count(added_raw),
                removed=0 if binary else _parse_count(removed_raw),
                binary=binary,
            )
        )

    return rows


def parse_name_status(output: str) -> List[NameStatusRow]:
    """Parse name-status text: ``<status>\\t<path>`` or ``<status>\\t<old>\\t<new>``.

    The status code is the upper-cased first character of the status token,
    so ``R100`` and ``C075`` become ``R`` and ``C``.
    """
    rows: List[NameStatusRow] = []

    for line in output.split("\n"):
        if not line.strip():
            continue

        parts = [part.rstrip("\r") for part in line.split("\t")]
        if len(parts) < 2:
            continue

        status_code = parts[0].strip()[:1].upper()
        if len(parts) > 2:
            previous_raw, path_raw = parts[1], parts[2]
        else:
            previous_raw, path_raw = "", parts[1]

        if not path_raw:
            continue

        rows.append(
            NameStatusRow(
                path=normalize_path(path_raw),
                previous_path=normalize_path(previous_raw) if previous_raw else None,
                status_code=status_code,
            )
        )

    return rows
