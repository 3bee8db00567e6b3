"""CLI interface for mcc."""

from __future__ import annotations

import functools
import logging
import os
import sys

import click

from mcc import __version__
from mcc.config import CONFIG_DIR_ENV, DEFAULT_PROFILE, Paths, check_config_env
from mcc.errors import MccError
from mcc.providers import PROVIDERS
from mcc.store import LaunchPlan, ProfileStore

ALIASES = {
    "create": "new",
    "add": "new",
    "rm": "delete",
    "remove": "delete",
    "st": "status",
    "ls": "list",
}


def styled(text: str, **kwargs) -> str:
    return click.style(text, **kwargs)


def info(msg: str) -> None:
    click.echo(f"  {msg}")


def success(msg: str) -> None:
    click.echo(f"  {styled(msg, fg='green')}")


def warn(msg: str) -> None:
    click.echo(f"  {styled(msg, fg='yellow')}")


def error(msg: str) -> None:
    click.echo(f"  {styled(msg, fg='red')}", err=True)


def heading(msg: str) -> None:
    click.echo(f"\n  {styled(msg, bold=True)}")


class AliasedGroup(click.Group):
    """Group that also accepts the short command names in ALIASES."""

    def get_command(self, ctx: click.Context, cmd_name: str):
        return super().get_command(ctx, ALIASES.get(cmd_name, cmd_name))

    def resolve_command(self, ctx: click.Context, args):
        _, cmd, args = super().resolve_command(ctx, args)
        return cmd.name if cmd else None, cmd, args


def reports_errors(f):
    """Turn MccError into a red message on stderr and exit status 1."""

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except MccError as e:
            error(f"Error: {e}")
            sys.exit(1)

    return wrapper


def get_store(ctx: click.Context) -> ProfileStore:
    return ctx.obj["store"]


@click.group(
    cls=AliasedGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name="mcc")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option(
    "--home",
    envvar="MCC_HOME",
    default=None,
    help="mcc data directory (default: ~/.mcc).",
)
@click.option(
    "--claude-dir",
    envvar="MCC_CLAUDE_DIR",
    default=None,
    help="Live claude config directory (default: ~/.claude).",
)
@click.pass_context
@reports_errors
def cli(
    ctx: click.Context,
    verbose: bool,
    home: str | None,
    claude_dir: str | None,
) -> None:
    """Manage multiple Claude Code profiles and launch claude with one."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    store = ProfileStore(Paths.from_env(home, claude_dir))
    ctx.obj["store"] = store

    report = store.bootstrap()
    if report.default_source == "cloned":
        info(f"Initialized default profile from existing {store.paths.claude_dir}")
    elif report.default_source == "empty":
        info("Created empty default profile")

    # status and help explain the setup themselves
    if ctx.invoked_subcommand not in ("status", "help"):
        if check_config_env(store.paths) != "ok":
            _setup_hint(store)

    if ctx.invoked_subcommand is None:
        _launch(ctx, store, DEFAULT_PROFILE)


def _setup_hint(store: ProfileStore) -> None:
    click.echo()
    warn("To complete setup, add this to your ~/.zshrc or ~/.bashrc:")
    info(f'  export {CONFIG_DIR_ENV}="{store.paths.current_link}"')
    info("  Then run: source ~/.zshrc (or restart your terminal)")
    click.echo()


def _launch(ctx: click.Context, store: ProfileStore, name: str) -> None:
    status = store.switch(
        name,
        then_launch=True,
        launcher=ctx.obj.get("launcher"),
        before_launch=_announce_launch,
    )
    ctx.exit(status)


def _announce_launch(plan: LaunchPlan) -> None:
    success(f"Switched to profile: {plan.name}")
    if plan.meta.is_native:
        info("Launching claude...")
    else:
        info(f"Launching claude (provider: {plan.meta.provider})...")


@cli.command()
@click.argument("name", default=DEFAULT_PROFILE)
@click.pass_context
@reports_errors
def run(ctx: click.Context, name: str) -> None:
    """Switch to a profile and launch claude."""
    _launch(ctx, get_store(ctx), name)


@cli.command()
@click.argument("name")
@click.argument("provider", required=False, default="")
@click.argument("api_key", required=False, default="")
@click.pass_context
@reports_errors
def new(ctx: click.Context, name: str, provider: str, api_key: str) -> None:
    """Create a profile, optionally backed by another API provider."""
    store = get_store(ctx)
    store.create(name, provider, api_key)

    success(f"Created profile: {name}")
    if provider and provider != "claude":
        info(f"Provider: {provider}")
    click.echo()
    info("To use this profile:")
    info(f"  mcc run {name}")


@cli.command()
@click.argument("name")
@click.pass_context
@reports_errors
def delete(ctx: click.Context, name: str) -> None:
    """Delete a profile."""
    get_store(ctx).delete(name)
    success(f"Deleted profile: {name}")


@cli.command()
@click.argument("name", required=False)
@click.pass_context
@reports_errors
def sync(ctx: click.Context, name: str | None) -> None:
    """Copy settings from the live claude dir into a profile (default: current)."""
    store = get_store(ctx)
    name = name or store.current()
    report = store.sync(name)
    source = store.paths.claude_dir

    if report.copied == 0:
        warn(f"No settings files found in {source} to sync")
        if report.skipped:
            info(f"  ({report.skipped} credential file(s) were skipped)")
        return

    success(f"Synced {report.copied} file(s) from {source} to profile: {name}")
    if report.skipped:
        info(f"({report.skipped} credential file(s) were skipped for security)")


@cli.command()
@click.pass_context
@reports_errors
def status(ctx: click.Context) -> None:
    """Show the current profile, all profiles and the shell setup."""
    store = get_store(ctx)
    current = store.current()

    heading("Claude Code Account Manager (mcc)")
    click.echo()
    info(f"Current profile: {styled(current, bold=True)}")

    heading("Available profiles")
    for name in store.list():
        tag = _provider_tag(store, name)
        if name == current:
            info(f"* {styled(name, fg='green')} (active){tag}")
        else:
            info(f"  {name}{tag}")

    click.echo()
    if not store.pointer_in_sync():
        warn(f"{store.paths.current_link} does not point at '{current}'")
        info(f"  Run: mcc run {current}")

    expected = store.paths.current_link
    state = check_config_env(store.paths)
    if state == "ok":
        success(f"{CONFIG_DIR_ENV} is correctly configured")
    elif state == "unset":
        warn(f"{CONFIG_DIR_ENV} is not set")
        info(f'  Add to your shell config: export {CONFIG_DIR_ENV}="{expected}"')
    else:
        warn(f"{CONFIG_DIR_ENV} points to a different location")
        info(f"  Current: {os.environ.get(CONFIG_DIR_ENV, '')}")
        info(f"  Expected: {expected}")
    click.echo()


@cli.command("list")
@click.pass_context
@reports_errors
def list_cmd(ctx: click.Context) -> None:
    """List all profiles."""
    store = get_store(ctx)
    current = store.current()
    for name in store.list():
        marker = "*" if name == current else " "
        click.echo(f"{marker} {name}{_provider_tag(store, name)}")


@cli.command("set-key")
@click.argument("name")
@click.argument("api_key")
@click.pass_context
@reports_errors
def set_key(ctx: click.Context, name: str, api_key: str) -> None:
    """Update the API key of a provider-backed profile."""
    get_store(ctx).set_api_key(name, api_key)
    success(f"Updated API key for profile: {name}")


@cli.command("help")
@click.pass_context
def help_cmd(ctx: click.Context) -> None:
    """Show usage, providers and setup instructions."""
    click.echo(ctx.parent.get_help())

    heading("Providers")
    for name, provider in PROVIDERS.items():
        label = f"{name} (default)" if name == "claude" else name
        info(f"{label:<18}{provider['description']}")

    heading("Setup")
    info("Add this to your ~/.zshrc or ~/.bashrc:")
    info(f'  export {CONFIG_DIR_ENV}="{get_store(ctx).paths.current_link}"')

    heading("Examples")
    info("mcc                              # Launch with default profile")
    info("mcc run work                     # Launch with 'work' profile")
    info("mcc new work                     # Create a claude profile")
    info("mcc new kimi-work kimi sk-xxx    # Create a Kimi profile")
    info("mcc set-key kimi-work sk-new     # Update API key")
    info("mcc status                       # Show all profiles")
    click.echo()


def _provider_tag(store: ProfileStore, name: str) -> str:
    meta = store.meta(name)
    if meta.is_native:
        return ""
    return f" [{meta.provider}]"
