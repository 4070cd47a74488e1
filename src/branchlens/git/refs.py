"""Reference resolution: turn a request into concrete diff endpoints.

Two comparison axes are supported:

- ``mode``: ``merge-base`` diffs from the common ancestor of the two
  branches, ``tip-to-tip`` diffs the base tip directly.
- ``compare_source``: ``branch-tip`` diffs against the committed compare
  branch, ``working-tree`` diffs against the live checkout (the compare
  branch must be the checked-out branch).
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import List, Optional

from ..exceptions import CheckoutMismatchError, MergeBaseNotFoundError, NoActiveBranchError
from ..models import DiffOutputs
from .client import GitRunner

WORKING_TREE_SUFFIX = " (working tree)"


@dataclass(frozen=True)
class ComparisonRefs:
    left_ref: str
    right_ref: str
    merge_base: Optional[str] = None


@dataclass(frozen=True)
class CompareTarget:
    diff_right_ref: Optional[str]  # None => diff against the working tree
    display_right_ref: str


async def resolve_comparison_refs(
    git: GitRunner, base_branch: str, compare_branch: str, mode: str
) -> ComparisonRefs:
    if mode == "tip-to-tip":
        return ComparisonRefs(left_ref=base_branch, right_ref=compare_branch)

    merge_base = (await git.raw(["merge-base", base_branch, compare_branch])).strip()
    if not merge_base:
        raise MergeBaseNotFoundError(base_branch, compare_branch)

    return ComparisonRefs(left_ref=merge_base, right_ref=compare_branch, merge_base=merge_base)


async def resolve_compare_target(
    git: GitRunner, compare_branch: str, compare_source: str
) -> CompareTarget:
    if compare_source == "branch-tip":
        return CompareTarget(diff_right_ref=compare_branch, display_right_ref=compare_branch)

    current_branch = (await git.raw(["rev-parse", "--abbrev-ref", "HEAD"])).strip()
    if not current_branch or current_branch == "HEAD":
        raise NoActiveBranchError()
    if current_branch != compare_branch:
        raise CheckoutMismatchError(compare_branch, current_branch)

    return CompareTarget(
        diff_right_ref=None,
        display_right_ref=f"{compare_branch}{WORKING_TREE_SUFFIX}",
    )


def build_diff_args(format_flag: str, left_ref: str, right_ref: Optional[str]) -> List[str]:
    args = ["diff", format_flag, "--find-renames", left_ref]
    if right_ref:
        args.append(right_ref)
    args.append("--")
    return args


async def read_diff_outputs(
    git: GitRunner, left_ref: str, right_ref: Optional[str]
) -> DiffOutputs:
    """Run numstat and name-status diffs concurrently over the same endpoints."""
    numstat_output, name_status_output = await asyncio.gather(
        git.raw(build_diff_args("--numstat", left_ref, right_ref)),
        git.raw(build_diff_args("--name-status", left_ref, right_ref)),
    )
    return DiffOutputs(numstat_output=numstat_output, name_status_output=name_status_output)
