"""Analysis service: git resolution, two-tier caching and signature polling.

Each poll re-runs reference resolution and both diffs (git is the source of
truth), then reduces the raw diff text to a signature. Identical text means
an identical result, so:

- a caller holding the current signature gets ``changed=False`` and no
  payload, skipping all parsing and aggregation;
- parsed diffs live in the snapshot cache, keyed by request identity plus
  signature, and are shared by every ignore-pattern variant;
- filtered, aggregated results live in the result cache, keyed by snapshot
  key plus ignore patterns.

Cache mutation happens synchronously after the last await of a poll, so
concurrent polls on one event loop never interleave inside it.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..git.client import GitRunner, create_git_client
from ..git.ignore import should_ignore
from ..git.parsers import parse_name_status, parse_numstat
from ..git.paths import get_directory, get_extension
from ..git.refs import read_diff_outputs, resolve_compare_target, resolve_comparison_refs
from ..logging_config import get_logger
from ..models import (
    AnalysisRequest,
    AnalysisResult,
    DiffOutputs,
    FileRecord,
    NameStatusRow,
    NumstatRow,
    PollResponse,
    ResolvedRefs,
    Snapshot,
)
from .aggregators import build_datasets, build_summary, status_code_to_file_status
from .lru import LruCache
from .validation import coerce_request

logger = get_logger(__name__)

DEFAULT_SNAPSHOT_CACHE_LIMIT = 24
DEFAULT_RESULT_CACHE_LIMIT = 48

GitFactory = Callable[[str], GitRunner]
RequestInput = Union[AnalysisRequest, Mapping[str, Any]]


def build_snapshot_signature(refs: ResolvedRefs, diff_outputs: DiffOutputs) -> str:
    """Digest of the resolved endpoints and both raw diff texts."""
    payload = json.dumps(
        [
            refs.left_ref,
            refs.right_ref,
            diff_outputs.numstat_output,
            diff_outputs.name_status_output,
        ]
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def normalize_previous_signature(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def resolve_numstat_for_path(
    snapshot: Snapshot, path: str, status_row: Optional[NameStatusRow]
) -> Optional[NumstatRow]:
    """Numstat row for a path, falling back to the pre-rename path."""
    row = snapshot.numstat_by_path.get(path)
    if row is not None:
        return row
    if status_row is not None and status_row.previous_path:
        return snapshot.numstat_by_path.get(status_row.previous_path)
    return None


def build_file_records(snapshot: Snapshot, ignore_patterns: Sequence[str]) -> List[FileRecord]:
    """Join numstat and name-status rows per path, dropping ignored paths."""
    files: List[FileRecord] = []

    for path in snapshot.all_paths:
        if should_ignore(path, ignore_patterns):
            continue

        status_row = snapshot.status_by_path.get(path)
        numstat_row = resolve_numstat_for_path(snapshot, path, status_row)

        status_code = status_row.status_code if status_row and status_row.status_code else "M"
        added = numstat_row.added if numstat_row else 0
        removed = numstat_row.removed if numstat_row else 0
        previous_path = (status_row.previous_path if status_row else None) or (
            numstat_row.previous_path if numstat_row else None
        )

        files.append(
            FileRecord(
                path=path,
                status=status_code_to_file_status(status_code),
                added=added,
                removed=removed,
                churn=added + removed,
                directory=get_directory(path),
                extension=get_extension(path),
                previous_path=previous_path,
            )
        )

    files.sort(key=lambda f: f.path)
    return files


class AnalysisService:
    """Pollable, cached branch diff analysis.

    Stateless across calls apart from the caches: every "previous" value
    (the last signature) is supplied by the caller.
    """

    def __init__(
        self,
        snapshot_cache_limit: int = DEFAULT_SNAPSHOT_CACHE_LIMIT,
        result_cache_limit: int = DEFAULT_RESULT_CACHE_LIMIT,
        git_factory: Optional[GitFactory] = None,
    ):
        self._snapshot_cache: LruCache[Snapshot] = LruCache(snapshot_cache_limit, name="snapshots")
        self._result_cache: LruCache[AnalysisResult] = LruCache(result_cache_limit, name="results")
        self._git_factory: GitFactory = git_factory or create_git_client

    @property
    def snapshot_cache_size(self) -> int:
        return len(self._snapshot_cache)

    @property
    def result_cache_size(self) -> int:
        return len(self._result_cache)

    async def poll(
        self, request: RequestInput, previous_signature: Optional[str] = None
    ) -> PollResponse:
        """Return the current signature, plus a result when it differs from ``previous_signature``.

        Raises:
            RequestValidationError: If the request is malformed (no git call is made)
            RepositoryStateError: If refs cannot be resolved for the request
            GitCommandError: If a git invocation fails
        """
        validated = coerce_request(request)
        previous = normalize_previous_signature(previous_signature)

        resolved_refs, diff_outputs = await self._resolve_git_state(validated)
        signature = build_snapshot_signature(resolved_refs, diff_outputs)

        if previous is not None and previous == signature:
            logger.debug("Signature unchanged for %s", validated.repo_path)
            return PollResponse(signature=signature, changed=False)

        result = self._build_result(validated, resolved_refs, diff_outputs, signature)
        return PollResponse(signature=signature, changed=True, result=result)

    async def run_analysis(self, request: RequestInput) -> AnalysisResult:
        """One-shot analysis; equivalent to a poll with no previous signature."""
        validated = coerce_request(request)
        resolved_refs, diff_outputs = await self._resolve_git_state(validated)
        signature = build_snapshot_signature(resolved_refs, diff_outputs)
        return self._build_result(validated, resolved_refs, diff_outputs, signature)

    async def get_signature(self, request: RequestInput) -> str:
        """Current snapshot signature without building a result."""
        validated = coerce_request(request)
        resolved_refs, diff_outputs = await self._resolve_git_state(validated)
        return build_snapshot_signature(resolved_refs, diff_outputs)

    def clear_caches(self) -> None:
        self._snapshot_cache.clear()
        self._result_cache.clear()

    async def _resolve_git_state(
        self, request: AnalysisRequest
    ) -> Tuple[ResolvedRefs, DiffOutputs]:
        git = self._git_factory(request.repo_path)
        refs = await resolve_comparison_refs(
            git, request.base_branch, request.compare_branch, request.mode
        )
        target = await resolve_compare_target(git, request.compare_branch, request.compare_source)
        diff_outputs = await read_diff_outputs(git, refs.left_ref, target.diff_right_ref)

        resolved_refs = ResolvedRefs(
            left_ref=refs.left_ref,
            right_ref=target.display_right_ref,
            merge_base=refs.merge_base,
            compare_source=request.compare_source,
        )
        return resolved_refs, diff_outputs

    def _build_result(
        self,
        request: AnalysisRequest,
        resolved_refs: ResolvedRefs,
        diff_outputs: DiffOutputs,
        signature: str,
    ) -> AnalysisResult:
        snapshot = self._resolve_snapshot(request, resolved_refs, diff_outputs, signature)
        return self._resolve_result(snapshot, request.ignore_patterns)

    def _resolve_snapshot(
        self,
        request: AnalysisRequest,
        resolved_refs: ResolvedRefs,
        diff_outputs: DiffOutputs,
        signature: str,
    ) -> Snapshot:
        key = (request.core_key, signature)
        cached = self._snapshot_cache.get(key)
        if cached is not None:
            logger.debug("Snapshot cache hit for %s", request.repo_path)
            return cached

        numstat_rows = parse_numstat(diff_outputs.numstat_output)
        name_status_rows = parse_name_status(diff_outputs.name_status_output)
        numstat_by_path: Dict[str, NumstatRow] = {row.path: row for row in numstat_rows}
        status_by_path: Dict[str, NameStatusRow] = {row.path: row for row in name_status_rows}
        all_paths = tuple(dict.fromkeys([*numstat_by_path, *status_by_path]))

        logger.debug(
            "Built snapshot for %s: %d numstat rows, %d status rows",
            request.repo_path,
            len(numstat_rows),
            len(name_status_rows),
        )
        return self._snapshot_cache.set(
            key,
            Snapshot(
                key=key,
                signature=signature,
                resolved_refs=resolved_refs,
                numstat_by_path=numstat_by_path,
                status_by_path=status_by_path,
                all_paths=all_paths,
            ),
        )

    def _resolve_result(self, snapshot: Snapshot, ignore_patterns: Sequence[str]) -> AnalysisResult:
        key = (snapshot.key, tuple(ignore_patterns))
        cached = self._result_cache.get(key)
        if cached is not None:
            logger.debug("Result cache hit")
            return cached

        files = build_file_records(snapshot, ignore_patterns)
        summary = build_summary(files)
        datasets = build_datasets(files, summary)

        return self._result_cache.set(
            key,
            AnalysisResult(
                resolved_refs=snapshot.resolved_refs,
                summary=summary,
                datasets=datasets,
                files=tuple(files),
            ),
        )
