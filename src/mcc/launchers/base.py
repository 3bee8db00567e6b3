"""Abstract base class for launchers."""

from __future__ import annotations

import os
import shutil
from abc import ABC, abstractmethod
from pathlib import Path

from mcc.config import CONFIG_DIR_ENV
from mcc.errors import LaunchError

EXECUTABLE = "claude"


class Launcher(ABC):
    """Starts the claude CLI on a profile directory."""

    def __init__(self, executable: str = EXECUTABLE):
        self.executable = executable

    def find_executable(self) -> str:
        path = shutil.which(self.executable)
        if path is None:
            raise LaunchError(f"{self.executable} not found in PATH")
        return path

    def build_env(self, profile_path: Path, extra_env: list[str]) -> dict[str, str]:
        """Inherited environment plus CLAUDE_CONFIG_DIR and KEY=VALUE overrides."""
        env = dict(os.environ)
        env[CONFIG_DIR_ENV] = str(profile_path)
        for entry in extra_env:
            key, _, value = entry.partition("=")
            env[key] = value
        return env

    @abstractmethod
    def launch(self, profile_path: Path, extra_env: list[str]) -> int:
        """Run claude. Returns its exit status, or never returns."""
