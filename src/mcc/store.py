"""Profile store: the profiles directory, the registry and the pointer."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from mcc.config import (
    DEFAULT_PROFILE,
    Paths,
    Registry,
    load_registry,
    save_registry,
)
from mcc.errors import (
    AlreadyExistsError,
    ForbiddenError,
    InUseError,
    InvalidNameError,
    NotFoundError,
    NotSupportedError,
    ProfileIOError,
    SourceMissingError,
)
from mcc.launchers import Launcher, create_launcher
from mcc.pointer import ActivePointer
from mcc.providers import (
    ProviderMeta,
    environment_for,
    get_provider,
    is_native,
    load_meta,
    save_meta,
)
from mcc.sync import (
    CREDENTIAL_PATTERNS,
    SETTINGS_FILES,
    SKIP_DIRS,
    CopyReport,
    copy_filtered,
    copy_tree,
    sync_filtered,
)

logger = logging.getLogger(__name__)

FORBIDDEN_NAME_CHARS = '/\\:*?"<>|'


@dataclass
class LaunchPlan:
    """Everything needed to start claude on a profile."""

    name: str
    profile_path: Path
    meta: ProviderMeta
    env: list[str] = field(default_factory=list)


@dataclass
class BootstrapReport:
    """What bootstrap() had to create."""

    default_source: str | None = None  # "cloned" or "empty"
    created_registry: bool = False
    repaired_pointer: bool = False

    @property
    def changed(self) -> bool:
        return bool(
            self.default_source or self.created_registry or self.repaired_pointer
        )


def is_valid_name(name: str) -> bool:
    try:
        validate_name(name)
    except InvalidNameError:
        return False
    return True


def validate_name(name: str) -> None:
    if not name or name in (".", ".."):
        raise InvalidNameError(f"invalid profile name: '{name}'")
    if any(c in FORBIDDEN_NAME_CHARS for c in name):
        raise InvalidNameError(
            f"invalid profile name '{name}': contains forbidden characters"
        )


class ProfileStore:
    """Named profile directories under ``<home>/profiles``.

    The registry (config.json) holds the current profile name; the
    ``current`` symlink is re-derived from it whenever it changes.
    """

    def __init__(self, paths: Paths):
        self.paths = paths
        self.pointer = ActivePointer(paths.current_link)

    def profile_path(self, name: str) -> Path:
        return self.paths.profiles_dir / name

    def exists(self, name: str) -> bool:
        # Reserved names like "." or ".." would resolve outside a profile
        if not is_valid_name(name):
            return False
        return self.profile_path(name).is_dir()

    def list(self) -> list[str]:
        """Sorted profile names. Empty if the profiles dir doesn't exist yet."""
        root = self.paths.profiles_dir
        if not root.is_dir():
            return []
        try:
            return sorted(p.name for p in root.iterdir() if p.is_dir())
        except OSError as exc:
            raise ProfileIOError(f"Failed to list {root}: {exc}") from exc

    def current(self) -> str:
        return load_registry(self.paths.config_file).current_profile

    def meta(self, name: str) -> ProviderMeta:
        return load_meta(self.profile_path(name))

    def create(self, name: str, provider: str = "", api_key: str = "") -> Path:
        """Create a profile seeded with the default profile's settings files."""
        validate_name(name)
        if self.exists(name):
            raise AlreadyExistsError(f"profile '{name}' already exists")

        if not is_native(provider):
            if get_provider(provider) is None:
                raise NotSupportedError(f"unknown provider '{provider}'")
            if not api_key:
                raise NotSupportedError(
                    f"API key required for provider '{provider}'"
                )

        profile_path = self.profile_path(name)
        default_path = self.profile_path(DEFAULT_PROFILE)
        try:
            copy_filtered(default_path, profile_path, SETTINGS_FILES)
        except ProfileIOError as exc:
            logger.warning("could not seed '%s' from default: %s", name, exc)
            try:
                profile_path.mkdir(parents=True, exist_ok=True)
            except OSError as mkdir_exc:
                raise ProfileIOError(
                    f"Failed to create profile directory: {mkdir_exc}"
                ) from mkdir_exc

        if not is_native(provider):
            save_meta(profile_path, ProviderMeta(provider=provider, api_key=api_key))

        logger.debug("created profile %s at %s", name, profile_path)
        return profile_path

    def delete(self, name: str) -> None:
        if name == DEFAULT_PROFILE:
            raise ForbiddenError("cannot delete the default profile")
        if not self.exists(name):
            raise NotFoundError(f"profile '{name}' does not exist")
        if self.current() == name:
            raise InUseError(
                "cannot delete the currently active profile. "
                "Switch to another profile first"
            )

        try:
            shutil.rmtree(self.profile_path(name))
        except OSError as exc:
            raise ProfileIOError(f"Failed to delete profile: {exc}") from exc

    def bootstrap(self) -> BootstrapReport:
        """Create whatever is missing of the on-disk layout. Idempotent."""
        report = BootstrapReport()
        try:
            self.paths.profiles_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ProfileIOError(
                f"Failed to create profiles directory: {exc}"
            ) from exc

        default_path = self.profile_path(DEFAULT_PROFILE)
        if not default_path.exists():
            if self.paths.claude_dir.is_dir():
                copy_tree(self.paths.claude_dir, default_path)
                report.default_source = "cloned"
            else:
                try:
                    default_path.mkdir()
                except OSError as exc:
                    raise ProfileIOError(
                        f"Failed to create default profile: {exc}"
                    ) from exc
                report.default_source = "empty"

        config_file = self.paths.config_file
        if not config_file.exists():
            save_registry(Registry(), config_file)
            report.created_registry = True

        current = self.current()
        if not self.exists(current):
            # Registry names a profile that is gone; fall back to default
            logger.warning("current profile '%s' is missing, using default", current)
            current = DEFAULT_PROFILE
            save_registry(Registry(current_profile=current), config_file)

        if not self.pointer.resolves_to(self.profile_path(current)):
            self.pointer.point_at(self.profile_path(current))
            report.repaired_pointer = True

        return report

    def pointer_in_sync(self) -> bool:
        """True if the ``current`` symlink matches the registry."""
        return self.pointer.resolves_to(self.profile_path(self.current()))

    def switch(
        self,
        name: str,
        then_launch: bool = False,
        launcher: Launcher | None = None,
        before_launch: Callable[[LaunchPlan], None] | None = None,
    ) -> LaunchPlan | int:
        """Make name the current profile.

        Returns the launch plan, or the launcher's exit status when
        then_launch is set. before_launch sees the plan once the switch
        has happened and just before control goes to the launcher.
        """
        if not self.exists(name):
            raise NotFoundError(
                f"profile '{name}' does not exist. Use 'mcc new {name}' to create it"
            )

        profile_path = self.profile_path(name).resolve()
        save_registry(Registry(current_profile=name), self.paths.config_file)
        self.pointer.point_at(profile_path)

        meta = load_meta(profile_path)
        plan = LaunchPlan(
            name=name,
            profile_path=profile_path,
            meta=meta,
            env=environment_for(meta),
        )
        if not then_launch:
            return plan

        if before_launch is not None:
            before_launch(plan)
        launcher = launcher or create_launcher()
        # The resolved path, not the shared symlink, so concurrent sessions
        # on different profiles stay apart
        return launcher.launch(plan.profile_path, plan.env)

    def set_api_key(self, name: str, api_key: str) -> None:
        if not self.exists(name):
            raise NotFoundError(f"profile '{name}' does not exist")

        profile_path = self.profile_path(name)
        meta = load_meta(profile_path)
        if meta.is_native:
            raise NotSupportedError(
                f"profile '{name}' uses the claude provider "
                "and does not need an API key"
            )

        meta.api_key = api_key
        save_meta(profile_path, meta)

    def sync(self, name: str | None = None) -> CopyReport:
        """Copy non-credential settings from the live config dir into a profile."""
        name = name or self.current()
        if not self.exists(name):
            raise NotFoundError(
                f"profile '{name}' does not exist. "
                f"Use 'mcc new {name}' to create it first"
            )

        source = self.paths.claude_dir
        if not source.exists():
            raise SourceMissingError(f"{source} does not exist. Nothing to sync")
        if not source.is_dir():
            raise SourceMissingError(f"{source} is not a directory")
        try:
            empty = not any(source.iterdir())
        except OSError as exc:
            raise ProfileIOError(f"Failed to read {source}: {exc}") from exc
        if empty:
            raise SourceMissingError(f"{source} is empty. Nothing to sync")

        return sync_filtered(
            source,
            self.profile_path(name),
            CREDENTIAL_PATTERNS,
            SKIP_DIRS,
        )
