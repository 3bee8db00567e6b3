"""Built-in API providers and the per-profile provider record."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from mcc.errors import ProfileIOError

logger = logging.getLogger(__name__)

META_FILE = ".mcc-profile.json"
NATIVE_PROVIDER = "claude"

PROVIDERS = {
    "claude": {
        "description": "Standard Claude Code with Anthropic account",
        "base_url": None,
    },
    "kimi": {
        "description": "Kimi Coding (uses claude CLI with Kimi API)",
        "base_url": "https://api.kimi.com/coding/",
    },
}


@dataclass
class ProviderMeta:
    """Which upstream API a profile talks to."""

    provider: str = NATIVE_PROVIDER
    api_key: str = ""

    @property
    def is_native(self) -> bool:
        return is_native(self.provider)


def is_native(provider: str | None) -> bool:
    return not provider or provider == NATIVE_PROVIDER


def get_provider(name: str) -> dict | None:
    """Get a built-in provider by name, or None if not found."""
    return PROVIDERS.get(name)


def load_meta(profile_path: Path) -> ProviderMeta:
    """Read the provider record of a profile.

    Never raises: a missing file means the native provider, and unreadable
    or malformed content falls back to it with a warning.
    """
    path = profile_path / META_FILE
    if not path.exists():
        return ProviderMeta()

    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable provider metadata %s: %s", path, exc)
        return ProviderMeta()

    if not isinstance(data, dict):
        logger.warning("ignoring malformed provider metadata %s", path)
        return ProviderMeta()

    provider = data.get("provider") or NATIVE_PROVIDER
    api_key = data.get("api_key") or ""
    if not isinstance(provider, str) or not isinstance(api_key, str):
        logger.warning("ignoring malformed provider metadata %s", path)
        return ProviderMeta()

    return ProviderMeta(provider=provider, api_key=api_key)


def save_meta(profile_path: Path, meta: ProviderMeta) -> None:
    """Overwrite the provider record of a profile."""
    path = profile_path / META_FILE
    data = {"provider": meta.provider, "api_key": meta.api_key}
    try:
        path.write_text(json.dumps(data, indent=2) + "\n")
    except OSError as exc:
        raise ProfileIOError(f"Failed to save profile metadata: {exc}") from exc


def environment_for(meta: ProviderMeta) -> list[str]:
    """Extra KEY=VALUE entries the claude CLI needs for this provider.

    Unknown providers get no overrides, same as the native one.
    """
    if meta.is_native:
        return []

    provider = get_provider(meta.provider)
    if provider is None:
        logger.warning(
            "unknown provider '%s', launching with the native configuration",
            meta.provider,
        )
        return []

    return [
        f"ANTHROPIC_BASE_URL={provider['base_url']}",
        f"ANTHROPIC_API_KEY={meta.api_key}",
    ]
