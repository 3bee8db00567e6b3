"""Tests for provider metadata and launch environment."""

import json
import logging

import pytest

from mcc.providers import (
    META_FILE,
    ProviderMeta,
    environment_for,
    get_provider,
    load_meta,
    save_meta,
)


class TestLoadSave:
    def test_missing_record_is_native(self, tmp_path):
        meta = load_meta(tmp_path)
        assert meta.provider == "claude"
        assert meta.api_key == ""
        assert meta.is_native

    def test_roundtrip(self, tmp_path):
        save_meta(tmp_path, ProviderMeta(provider="kimi", api_key="sk-1"))
        meta = load_meta(tmp_path)
        assert meta.provider == "kimi"
        assert meta.api_key == "sk-1"

    def test_file_format(self, tmp_path):
        save_meta(tmp_path, ProviderMeta(provider="kimi", api_key="sk-1"))
        data = json.loads((tmp_path / META_FILE).read_text())
        assert data == {"provider": "kimi", "api_key": "sk-1"}

    def test_malformed_record_falls_back_with_warning(self, tmp_path, caplog):
        (tmp_path / META_FILE).write_text("{broken")
        with caplog.at_level(logging.WARNING, logger="mcc.providers"):
            meta = load_meta(tmp_path)
        assert meta.provider == "claude"
        assert "provider metadata" in caplog.text

    def test_non_object_record_falls_back(self, tmp_path):
        (tmp_path / META_FILE).write_text('["kimi"]')
        assert load_meta(tmp_path).provider == "claude"

    @pytest.mark.parametrize(
        "record",
        [
            '{"provider": ["kimi"], "api_key": "k"}',
            '{"provider": "kimi", "api_key": 42}',
        ],
    )
    def test_non_string_fields_fall_back(self, tmp_path, caplog, record):
        (tmp_path / META_FILE).write_text(record)
        with caplog.at_level(logging.WARNING, logger="mcc.providers"):
            meta = load_meta(tmp_path)
        assert meta.is_native
        assert meta.api_key == ""
        assert environment_for(meta) == []
        assert "malformed provider metadata" in caplog.text

    def test_empty_provider_is_native(self, tmp_path):
        (tmp_path / META_FILE).write_text('{"provider": "", "api_key": "x"}')
        assert load_meta(tmp_path).is_native


class TestEnvironmentFor:
    def test_native_has_no_overrides(self):
        assert environment_for(ProviderMeta(provider="claude")) == []
        assert environment_for(ProviderMeta(provider="")) == []

    def test_kimi_sets_base_url_and_key(self):
        env = environment_for(ProviderMeta(provider="kimi", api_key="k"))
        assert len(env) == 2
        assert "ANTHROPIC_API_KEY=k" in env
        assert "ANTHROPIC_BASE_URL=https://api.kimi.com/coding/" in env

    def test_unknown_provider_falls_back_to_native(self, caplog):
        with caplog.at_level(logging.WARNING, logger="mcc.providers"):
            env = environment_for(ProviderMeta(provider="acme", api_key="k"))
        assert env == []
        assert "unknown provider 'acme'" in caplog.text


class TestGetProvider:
    def test_known_and_unknown(self):
        assert get_provider("kimi") is not None
        assert get_provider("acme") is None
