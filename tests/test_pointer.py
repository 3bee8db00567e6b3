"""Tests for the active-profile symlink."""

import os
from unittest.mock import patch

import pytest

from mcc.errors import ProfileIOError
from mcc.pointer import ActivePointer


@pytest.fixture
def profiles(tmp_path):
    work = tmp_path / "profiles" / "work"
    home = tmp_path / "profiles" / "home"
    work.mkdir(parents=True)
    home.mkdir(parents=True)
    return work, home


class TestActivePointer:
    def test_absent_pointer(self, tmp_path):
        pointer = ActivePointer(tmp_path / "current")
        assert not pointer.exists()
        assert pointer.target() is None

    def test_point_at_creates_link(self, tmp_path, profiles):
        work, _ = profiles
        pointer = ActivePointer(tmp_path / "current")
        pointer.point_at(work)
        assert (tmp_path / "current").is_symlink()
        assert pointer.target() == work.resolve()
        assert pointer.resolves_to(work)

    def test_repoint_replaces_link(self, tmp_path, profiles):
        work, home = profiles
        pointer = ActivePointer(tmp_path / "current")
        pointer.point_at(work)
        pointer.point_at(home)
        assert pointer.resolves_to(home)
        assert not pointer.resolves_to(work)

    def test_target_is_resolved_path(self, tmp_path, profiles):
        work, _ = profiles
        alias = tmp_path / "alias"
        alias.symlink_to(work)

        pointer = ActivePointer(tmp_path / "current")
        pointer.point_at(alias)
        assert pointer.target() == work.resolve()

    def test_leaves_no_temp_links(self, tmp_path, profiles):
        work, home = profiles
        pointer = ActivePointer(tmp_path / "current")
        pointer.point_at(work)
        pointer.point_at(home)
        assert sorted(os.listdir(tmp_path)) == ["current", "profiles"]

    def test_dangling_link_does_not_resolve(self, tmp_path):
        link = tmp_path / "current"
        link.symlink_to(tmp_path / "gone")
        pointer = ActivePointer(link)
        assert pointer.exists()
        assert not pointer.resolves_to(tmp_path / "gone")

    def test_failed_replace_keeps_old_link(self, tmp_path, profiles):
        work, home = profiles
        pointer = ActivePointer(tmp_path / "current")
        pointer.point_at(work)

        with patch("mcc.pointer.os.replace", side_effect=OSError("busy")):
            with pytest.raises(ProfileIOError, match="busy"):
                pointer.point_at(home)

        assert pointer.resolves_to(work)
        assert sorted(os.listdir(tmp_path)) == ["current", "profiles"]

    def test_refuses_to_replace_real_directory(self, tmp_path, profiles):
        work, _ = profiles
        real = tmp_path / "current"
        real.mkdir()
        (real / "file").write_text("x")

        with pytest.raises(ProfileIOError):
            ActivePointer(real).point_at(work)
        assert (real / "file").exists()
