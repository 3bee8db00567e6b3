"""The ``current`` symlink that CLAUDE_CONFIG_DIR points at."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from mcc.errors import ProfileIOError

logger = logging.getLogger(__name__)


class ActivePointer:
    """A symlink at a fixed path targeting one profile directory.

    Repointing builds a new link beside the old one and renames it into
    place, so readers see either the old target or the new one.
    """

    def __init__(self, link_path: Path):
        self.link_path = link_path

    def exists(self) -> bool:
        return os.path.lexists(self.link_path)

    def target(self) -> Path | None:
        """Where the link points, or None if there is no link."""
        try:
            return Path(os.readlink(self.link_path))
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise ProfileIOError(
                f"Failed to read {self.link_path}: {exc}"
            ) from exc

    def resolves_to(self, profile_dir: Path) -> bool:
        """True if the link points at profile_dir and that dir exists."""
        target = self.target()
        if target is None or not target.is_dir():
            return False
        return target.resolve() == profile_dir.resolve()

    def point_at(self, profile_dir: Path) -> None:
        """Atomically retarget the link to the resolved profile_dir."""
        resolved = profile_dir.resolve()
        tmp = self.link_path.with_name(
            f".{self.link_path.name}.{os.getpid()}.tmp"
        )
        try:
            if os.path.lexists(tmp):
                os.unlink(tmp)
            os.symlink(resolved, tmp, target_is_directory=True)
            self._replace(tmp)
        except OSError as exc:
            if os.path.lexists(tmp):
                os.unlink(tmp)
            raise ProfileIOError(
                f"Failed to point {self.link_path} at {resolved}: {exc}"
            ) from exc
        logger.debug("pointed %s at %s", self.link_path, resolved)

    def _replace(self, tmp: Path) -> None:
        try:
            os.replace(tmp, self.link_path)
        except PermissionError:
            # Windows refuses to rename over a directory symlink
            if os.name != "nt":
                raise
            os.rmdir(self.link_path)
            os.replace(tmp, self.link_path)
