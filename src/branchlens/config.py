"""Configuration loading and management for Branch Lens.

Configuration sources are merged in priority order:
    1. Defaults (defined in BranchLensConfig)
    2. Global config (~/.branchlens.toml)
    3. Project config (./branchlens.toml)
    4. Explicit config file
    5. Environment variables (BRANCHLENS_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(verbose=True, result_cache_limit=96)
    >>> config.verbosity
    'verbose'
    >>> config.result_cache_limit
    96
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError
from .models import ANALYSIS_MODES, COMPARE_SOURCES, DEFAULT_ANALYSIS_MODE, DEFAULT_COMPARE_SOURCE

Verbosity = Literal["quiet", "normal", "verbose"]

DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    "**/.*",
    "node_modules/**",
    "__tests__/**",
    "**/*.{md,svg,png,jpg,jpeg}",
    "*.pem",
)

ENV_PREFIX = "BRANCHLENS_"


def _default_settings_dir() -> str:
    return str(Path.home() / ".branchlens" / "settings")


@dataclass(frozen=True)
class BranchLensConfig:
    """Runtime configuration.

    Attributes:
        Caching:
            snapshot_cache_limit: Parsed diff snapshots kept in memory
            result_cache_limit: Filtered, aggregated results kept in memory

        Polling:
            poll_interval_seconds: Delay between polls in watch mode

        Git:
            git_binary: Executable used for git invocations

        Persistence:
            settings_dir: Directory of the per-repo settings store

        Request defaults (used when neither CLI nor stored settings give a value):
            default_ignore_patterns: Ignore globs for new repositories
            default_mode: merge-base or tip-to-tip
            default_compare_source: working-tree or branch-tip

        Output control:
            verbosity: Logging verbosity level
    """

    # Caching
    snapshot_cache_limit: int = 24
    result_cache_limit: int = 48

    # Polling
    poll_interval_seconds: float = 1.0

    # Git
    git_binary: str = "git"

    # Persistence
    settings_dir: str = field(default_factory=_default_settings_dir)

    # Request defaults
    default_ignore_patterns: list[str] = field(
        default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS)
    )
    default_mode: str = DEFAULT_ANALYSIS_MODE
    default_compare_source: str = DEFAULT_COMPARE_SOURCE

    # Output control
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.snapshot_cache_limit < 1:
            raise ValueError("snapshot_cache_limit must be at least 1")
        if self.result_cache_limit < 1:
            raise ValueError("result_cache_limit must be at least 1")

        if self.poll_interval_seconds <= 0:
            raise ValueError("poll_interval_seconds must be positive")

        if not self.git_binary:
            raise ValueError("git_binary must not be empty")

        if any(not isinstance(p, str) or not p for p in self.default_ignore_patterns):
            raise ValueError("default_ignore_patterns must contain non-empty strings")
        if self.default_mode not in ANALYSIS_MODES:
            raise ValueError(f"default_mode must be one of {', '.join(ANALYSIS_MODES)}")
        if self.default_compare_source not in COMPARE_SOURCES:
            raise ValueError(
                f"default_compare_source must be one of {', '.join(COMPARE_SOURCES)}"
            )

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be quiet, normal or verbose")


def load_config(config_file: Optional[Path] = None, **overrides) -> BranchLensConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated BranchLensConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
        InvalidConfigError: If a value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / ".branchlens.toml"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / "branchlens.toml"
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    unknown = sorted(set(merged) - set(BranchLensConfig.__dataclass_fields__))
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

    try:
        return BranchLensConfig(**merged)
    except ValueError as e:
        # Validation messages lead with the offending field name
        key = str(e).split(" ", 1)[0]
        raise InvalidConfigError(key, merged.get(key), str(e)) from e


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from BRANCHLENS_* environment variables.

    Supported environment variables:
        BRANCHLENS_SNAPSHOT_CACHE_LIMIT: int
        BRANCHLENS_RESULT_CACHE_LIMIT: int
        BRANCHLENS_POLL_INTERVAL_SECONDS: float
        BRANCHLENS_GIT_BINARY: str
        BRANCHLENS_SETTINGS_DIR: str
        BRANCHLENS_DEFAULT_MODE: merge-base/tip-to-tip
        BRANCHLENS_DEFAULT_COMPARE_SOURCE: working-tree/branch-tip
        BRANCHLENS_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any BRANCHLENS_* vars found.
    """
    type_hints = get_type_hints(BranchLensConfig)

    result: dict[str, Any] = {}

    for field_name in BranchLensConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e)) from e
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns None for types that are not settable from the environment.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Lists (default_ignore_patterns) are config-file only
    if origin is list or type_hint is list:
        return None

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return its [branchlens] table or top-level keys."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}") from e

    section = data.get("branchlens")
    return dict(section) if isinstance(section, dict) else data
