"""Shared test fixtures."""

import pytest

from mcc.config import Paths
from mcc.store import ProfileStore


@pytest.fixture
def paths(tmp_path):
    """Paths rooted in a temp dir, with no live claude dir yet."""
    return Paths(home=tmp_path / "mcc", claude_dir=tmp_path / "dot-claude")


@pytest.fixture
def mock_claude_dir(paths):
    """Create a fake ~/.claude with settings, credentials and a git dir."""
    source = paths.claude_dir
    source.mkdir()

    # Settings that profiles inherit
    (source / "settings.json").write_text('{"theme": "dark"}\n')
    (source / "settings.local.json").write_text('{"local": true}\n')
    (source / "CLAUDE.md").write_text("# My Config\n")

    # Credentials that must never leave the live dir
    (source / ".credentials.json").write_text('{"token": "secret"}\n')

    commands = source / "commands"
    commands.mkdir()
    (commands / "commit.md").write_text("commit instructions\n")

    git = source / ".git"
    git.mkdir()
    (git / "config").write_text("[core]\n")

    return source


@pytest.fixture
def store(paths):
    """A bootstrapped store with an empty default profile."""
    s = ProfileStore(paths)
    s.bootstrap()
    return s


@pytest.fixture
def seeded_store(paths, mock_claude_dir):
    """A bootstrapped store whose default profile was cloned from ~/.claude."""
    s = ProfileStore(paths)
    s.bootstrap()
    return s
