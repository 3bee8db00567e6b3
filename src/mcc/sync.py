"""Copy engine: whole-tree clones and credential-aware filtered copies."""

from __future__ import annotations

import enum
import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from mcc.errors import ProfileIOError

logger = logging.getLogger(__name__)

# Files never copied out of a live config dir (substring, case-insensitive)
CREDENTIAL_PATTERNS = [
    ".credentials.json",
    "credentials.json",
    "auth.json",
    ".auth",
]

SKIP_DIRS = [".git"]

# The only files a brand new profile inherits from the default profile
SETTINGS_FILES = [
    "settings.json",
    "settings.local.json",
]


class CopyPolicy(enum.Enum):
    """What a filtered copy does when a single file fails."""

    ABORT = "abort"
    BEST_EFFORT = "best-effort"


@dataclass
class CopyReport:
    """Outcome of a filtered copy."""

    copied: int = 0
    skipped: int = 0
    failed: list[str] = field(default_factory=list)

    def __iter__(self) -> Iterator[int]:
        yield self.copied
        yield self.skipped


def copy_tree(src: Path, dst: Path) -> None:
    """Recursively copy src into dst, keeping relative paths and mode bits.

    Merges into an existing dst. Nothing is rolled back on failure.
    """
    logger.debug("copying tree %s -> %s", src, dst)
    try:
        shutil.copytree(src, dst, dirs_exist_ok=True)
    except (OSError, shutil.Error) as exc:
        raise ProfileIOError(f"Failed to copy {src} to {dst}: {exc}") from exc


def copy_filtered(
    src: Path,
    dst: Path,
    allow: list[str],
    policy: CopyPolicy = CopyPolicy.BEST_EFFORT,
) -> CopyReport:
    """Copy only the top-level files of src named in allow into dst.

    dst is created if absent. Names that are missing from src are ignored.
    """
    report = CopyReport()
    try:
        dst.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ProfileIOError(f"Failed to create {dst}: {exc}") from exc

    for name in allow:
        item = src / name
        if not item.is_file():
            continue
        try:
            _copy_file(item, dst / name)
        except OSError as exc:
            _record_failure(report, name, exc, policy)
            continue
        report.copied += 1

    return report


def sync_filtered(
    src: Path,
    dst: Path,
    deny_patterns: list[str] | None = None,
    deny_dirs: list[str] | None = None,
    policy: CopyPolicy = CopyPolicy.ABORT,
) -> CopyReport:
    """Walk src and copy everything into dst except credential material.

    Directories named in deny_dirs, or whose name matches a deny pattern, are
    skipped with their whole subtree. Files whose name contains a deny
    pattern are skipped and counted. Existing files in dst are overwritten;
    nothing in dst is deleted.
    """
    if deny_patterns is None:
        deny_patterns = CREDENTIAL_PATTERNS
    if deny_dirs is None:
        deny_dirs = SKIP_DIRS

    patterns = [p.lower() for p in deny_patterns]
    skip_dirs = set(deny_dirs)
    report = CopyReport()

    def is_excluded(name: str) -> bool:
        lowered = name.lower()
        return any(p in lowered for p in patterns)

    def on_walk_error(exc: OSError) -> None:
        raise ProfileIOError(f"Failed to walk {src}: {exc}") from exc

    for root, dirs, files in os.walk(src, onerror=on_walk_error):
        root_path = Path(root)
        rel_root = root_path.relative_to(src)

        # Prune in place so os.walk never descends into skipped dirs
        dirs[:] = sorted(d for d in dirs if d not in skip_dirs and not is_excluded(d))

        target_dir = dst / rel_root
        try:
            if not target_dir.is_dir():
                target_dir.mkdir(parents=True)
                shutil.copymode(root_path, target_dir)
        except OSError as exc:
            _record_failure(report, str(rel_root), exc, policy)
            dirs[:] = []
            continue

        for name in sorted(files):
            rel = rel_root / name
            if is_excluded(name):
                logger.debug("skipping credential file %s", rel)
                report.skipped += 1
                continue
            try:
                _copy_file(root_path / name, dst / rel)
            except OSError as exc:
                _record_failure(report, str(rel), exc, policy)
                continue
            report.copied += 1

    return report


def _copy_file(src: Path, dst: Path) -> None:
    shutil.copyfile(src, dst)
    shutil.copymode(src, dst)


def _record_failure(
    report: CopyReport,
    rel: str,
    exc: OSError,
    policy: CopyPolicy,
) -> None:
    if policy is CopyPolicy.ABORT:
        raise ProfileIOError(f"Failed to copy {rel}: {exc}") from exc
    logger.warning("could not copy %s: %s", rel, exc)
    report.failed.append(rel)
