"""Deployed version resolution.

The version comes from one of two sources, in order:

1. the ``VERSION`` override (environment), used verbatim when non-empty;
2. the ``VERSION`` file in the working directory, whitespace-trimmed.

When neither is available the sentinel ``unknown`` is returned. The result is
normalized by removing a trailing ``-SNAPSHOT`` build marker.
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from deployinfo.core.logging import get_logger

SNAPSHOT_SUFFIX = "-SNAPSHOT"
UNKNOWN_VERSION = "unknown"
DEFAULT_VERSION_FILE = Path("VERSION")


def read_text_file(path: Path) -> str:
    return path.read_text(encoding="utf-8")


@dataclass(frozen=True)
class VersionSource:
    """Snapshot of the configuration the resolver looks at."""

    override: str | None = None
    path: Path = DEFAULT_VERSION_FILE
    reader: Callable[[Path], str] = field(default=read_text_file, repr=False)


def normalize_version(raw: str) -> str:
    """Strip the trailing build marker.

    Only a match anchored at the end counts, so ``1.0-SNAPSHOT-beta`` is kept
    as is. Stacked markers are all removed (``1.0-SNAPSHOT-SNAPSHOT`` gives
    ``1.0``, not ``1.0-SNAPSHOT``); stripping only once would break
    ``normalize_version(normalize_version(s)) == normalize_version(s)``.
    """
    while raw.endswith(SNAPSHOT_SUFFIX):
        raw = raw[: -len(SNAPSHOT_SUFFIX)]
    return raw


def resolve_version(source: VersionSource) -> str:
    if source.override:
        return normalize_version(source.override)

    try:
        raw = source.reader(source.path)
    except (OSError, UnicodeDecodeError) as exc:
        get_logger().warning(
            "version.file_unreadable", path=str(source.path), error=str(exc)
        )
        return UNKNOWN_VERSION

    return normalize_version(raw.strip())
