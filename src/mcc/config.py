"""Paths and the persisted registry of the current profile."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mcc.errors import ProfileIOError

MCC_HOME = Path.home() / ".mcc"
CLAUDE_DIR = Path.home() / ".claude"
PROFILES_DIR_NAME = "profiles"
CURRENT_LINK_NAME = "current"
CONFIG_FILE_NAME = "config.json"
DEFAULT_PROFILE = "default"

CONFIG_DIR_ENV = "CLAUDE_CONFIG_DIR"
HOME_ENV = "MCC_HOME"
CLAUDE_DIR_ENV = "MCC_CLAUDE_DIR"


@dataclass(frozen=True)
class Paths:
    """Filesystem locations used by one mcc installation."""

    home: Path
    claude_dir: Path

    @classmethod
    def from_env(
        cls,
        home: str | None = None,
        claude_dir: str | None = None,
    ) -> Paths:
        home = home or os.environ.get(HOME_ENV)
        claude_dir = claude_dir or os.environ.get(CLAUDE_DIR_ENV)
        return cls(
            home=Path(home).expanduser() if home else MCC_HOME,
            claude_dir=Path(claude_dir).expanduser() if claude_dir else CLAUDE_DIR,
        )

    @property
    def profiles_dir(self) -> Path:
        return self.home / PROFILES_DIR_NAME

    @property
    def current_link(self) -> Path:
        return self.home / CURRENT_LINK_NAME

    @property
    def config_file(self) -> Path:
        return self.home / CONFIG_FILE_NAME


@dataclass
class Registry:
    """Which profile is current. This is the authoritative value; the
    ``current`` symlink is derived from it."""

    current_profile: str = DEFAULT_PROFILE


def load_registry(path: Path) -> Registry:
    """Load the registry. Returns the default registry if the file doesn't exist."""
    if not path.exists():
        return Registry()

    try:
        data = json.loads(path.read_text())
    except OSError as exc:
        raise ProfileIOError(f"Failed to read {path}: {exc}") from exc
    except ValueError as exc:
        raise ProfileIOError(f"{path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ProfileIOError(f"{path} must contain a JSON object")

    current = data.get("current_profile") or DEFAULT_PROFILE
    if not isinstance(current, str):
        raise ProfileIOError(f"{path}: current_profile must be a string")

    return Registry(current_profile=current)


def save_registry(registry: Registry, path: Path) -> None:
    """Save the registry to disk."""
    data: dict[str, Any] = {"current_profile": registry.current_profile}
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n")
    except OSError as exc:
        raise ProfileIOError(f"Failed to save {path}: {exc}") from exc


def check_config_env(paths: Paths) -> str:
    """Compare CLAUDE_CONFIG_DIR with the pointer path.

    Returns "ok", "unset" or "mismatch". Advisory only.
    """
    value = os.environ.get(CONFIG_DIR_ENV, "")
    if not value:
        return "unset"
    if value == str(paths.current_link):
        return "ok"
    return "mismatch"
