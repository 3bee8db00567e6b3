"""Launcher that replaces the current process (POSIX)."""

from __future__ import annotations

import os
from pathlib import Path

from mcc.errors import LaunchError
from mcc.launchers.base import Launcher


class ReplaceLauncher(Launcher):
    """exec()s claude so it owns the terminal directly."""

    def launch(self, profile_path: Path, extra_env: list[str]) -> int:
        path = self.find_executable()
        env = self.build_env(profile_path, extra_env)
        try:
            os.execve(path, [self.executable], env)
        except OSError as exc:
            raise LaunchError(f"Failed to start {path}: {exc}") from exc
        return 0  # only reached when execve is stubbed out
