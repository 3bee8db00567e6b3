"""Launchers that hand the terminal over to the claude CLI."""

from __future__ import annotations

import os

from mcc.launchers.base import Launcher
from mcc.launchers.replace import ReplaceLauncher
from mcc.launchers.spawn import SpawnLauncher


def create_launcher(kind: str | None = None) -> Launcher:
    """Factory: exec-style on POSIX, spawn-and-wait on Windows."""
    if kind is None:
        kind = "spawn" if os.name == "nt" else "replace"
    if kind == "replace":
        return ReplaceLauncher()
    elif kind == "spawn":
        return SpawnLauncher()
    else:
        raise ValueError(f"Unknown launcher type: {kind}")
