"""Git access: command runner, reference resolution, diff parsing, path filters."""

from .client import GitClient, GitRunner, create_git_client, normalize_branch_names
from .ignore import matches_ignore_pattern, should_ignore
from .parsers import parse_name_status, parse_numstat
from .paths import get_directory, get_extension, normalize_path
from .refs import (
    CompareTarget,
    ComparisonRefs,
    read_diff_outputs,
    resolve_compare_target,
    resolve_comparison_refs,
)

__all__ = [
    "GitClient",
    "GitRunner",
    "create_git_client",
    "normalize_branch_names",
    "matches_ignore_pattern",
    "should_ignore",
    "parse_name_status",
    "parse_numstat",
    "get_directory",
    "get_extension",
    "normalize_path",
    "CompareTarget",
    "ComparisonRefs",
    "read_diff_outputs",
    "resolve_compare_target",
    "resolve_comparison_refs",
]
