"""Launcher that runs claude as a child process and waits for it."""

from __future__ import annotations

import subprocess
from pathlib import Path

from mcc.errors import LaunchError
from mcc.launchers.base import Launcher


class SpawnLauncher(Launcher):
    """Runs claude with inherited stdio and returns its exit code."""

    def launch(self, profile_path: Path, extra_env: list[str]) -> int:
        path = self.find_executable()
        env = self.build_env(profile_path, extra_env)
        try:
            result = subprocess.run([path], env=env)
        except OSError as exc:
            raise LaunchError(f"Failed to start {path}: {exc}") from exc
        return result.returncode
