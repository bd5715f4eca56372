"""Run configuration loading and validation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

from relsplit.constants import (
    DEFAULT_BACKUP_DIRNAME,
    DEFAULT_BUFFER_BYTES,
    DEFAULT_CHUNK_BYTES,
    DEFAULT_MAX_BYTES,
    DEFAULT_PART_WIDTH,
    DEFAULT_RELEASE_DIRNAME,
)
from relsplit.exceptions import ConfigurationError


@dataclass(frozen=True)
class RunConfiguration:
    """Everything one split run needs, fixed for the duration of the run.

    Built once at startup (defaults < JSON file < CLI flags) and passed
    explicitly to each component. Call :meth:`validate` before any I/O.
    """

    root_dir: Path
    repo_root: Path = field(default_factory=Path.cwd)
    backup_root: Path | None = None
    max_bytes: int = DEFAULT_MAX_BYTES
    chunk_bytes: int = DEFAULT_CHUNK_BYTES
    buffer_bytes: int = DEFAULT_BUFFER_BYTES
    part_width: int = DEFAULT_PART_WIDTH
    dry_run: bool = False

    def __post_init__(self) -> None:
        """Coerce path fields and resolve the default backup root."""
        object.__setattr__(self, "root_dir", Path(self.root_dir))
        object.__setattr__(self, "repo_root", Path(self.repo_root))
        if self.backup_root is None:
            object.__setattr__(
                self, "backup_root", self.repo_root / DEFAULT_BACKUP_DIRNAME
            )
        else:
            object.__setattr__(self, "backup_root", Path(self.backup_root))

    @property
    def max_parts(self) -> int:
        """Highest part number representable with ``part_width`` digits."""
        return 10**self.part_width - 1

    def validate(self) -> RunConfiguration:
        """Check size parameters for consistency.

        Returns:
            self, so construction and validation can be chained.

        Raises:
            ConfigurationError: On any non-positive size, a chunk size above
                the ceiling, or a part width below 1.
        """
        for name in ("max_bytes", "chunk_bytes", "buffer_bytes"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"Invalid {name}: {value!r}")
        if self.chunk_bytes > self.max_bytes:
            raise ConfigurationError(
                f"chunk_bytes ({self.chunk_bytes}) must be <= "
                f"max_bytes ({self.max_bytes})"
            )
        width = self.part_width
        if isinstance(width, bool) or not isinstance(width, int) or width < 1:
            raise ConfigurationError(f"Invalid part_width: {self.part_width!r}")
        return self

    def with_overrides(self, **overrides: object) -> RunConfiguration:
        """Return a copy with every non-None override applied.

        Moving ``repo_root`` without naming ``backup_root`` keeps the
        backup tree under the new repo root.
        """
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        if "repo_root" in changes and "backup_root" not in changes:
            changes["backup_root"] = Path(changes["repo_root"]) / DEFAULT_BACKUP_DIRNAME
        return replace(self, **changes)


def default_config(repo_root: Path | None = None) -> RunConfiguration:
    """Configuration matching the stock release layout under *repo_root*."""
    repo_root = Path(repo_root) if repo_root is not None else Path.cwd()
    return RunConfiguration(
        root_dir=repo_root / DEFAULT_RELEASE_DIRNAME,
        repo_root=repo_root,
    )


def load_config(
    config_path: Path, base: RunConfiguration | None = None
) -> RunConfiguration:
    """Load run configuration from JSON, merging over *base* (or defaults).

    Unrecognised keys are ignored. ``dry_run`` is a per-invocation flag
    and cannot be set from the file.

    Args:
        config_path: Path to split_config.json
        base: Configuration to merge over. Defaults to :func:`default_config`.

    Returns:
        RunConfiguration with values from file merged over defaults.
        Not yet validated.

    Raises:
        ConfigurationError: If the file is not a JSON object or a path
            entry is not a string.
    """
    with open(config_path) as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path}: expected a JSON object")

    base = base or default_config()
    field_names = {f.name for f in fields(RunConfiguration)} - {"dry_run"}
    kwargs: dict[str, object] = {}
    for key, value in data.items():
        if key not in field_names:
            continue
        if key in ("root_dir", "repo_root", "backup_root"):
            if not isinstance(value, str):
                raise ConfigurationError(f"{config_path}: {key} must be a string")
            kwargs[key] = Path(value)
        else:
            kwargs[key] = value

    return base.with_overrides(**kwargs)
