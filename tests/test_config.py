# tests/test_config.py

import pytest

from contact_dedup.config import CONFIG_ENV_VAR, get_config, load_config, reset_config
from contact_dedup.core.exceptions import ConfigError
from contact_dedup.resolution.options import GENERIC_EMAIL_PREFIXES, MatchOptions


@pytest.fixture
def restore_config():
    yield
    reset_config()


def test_missing_file_yields_defaults(tmp_path):
    cfg = load_config(tmp_path / "nope.yml")
    assert cfg.matching == {}
    assert cfg.debug is False
    assert MatchOptions.from_config(cfg) == MatchOptions()


def test_env_override(tmp_path, monkeypatch, restore_config):
    path = tmp_path / "dedup.yml"
    path.write_text(
        "matching:\n"
        "  similarity_threshold: 0.9\n"
        "  generic_email_prefixes: [Desk, frontdesk]\n"
        "merge:\n"
        "  note_separator: ' | '\n",
        encoding="utf-8",
    )
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    reset_config()

    cfg = get_config()
    assert cfg.merge["note_separator"] == " | "

    options = MatchOptions.from_config(cfg)
    assert options.similarity_threshold == 0.9
    assert options.generic_email_prefixes == frozenset({"desk", "frontdesk"})
    assert options.min_phone_digits == 6


def test_get_config_is_cached(restore_config):
    reset_config()
    assert get_config() is get_config()


def test_invalid_yaml_raises(tmp_path):
    path = tmp_path / "bad.yml"
    path.write_text("matching: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_non_mapping_raises(tmp_path):
    path = tmp_path / "list.yml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_default_generic_prefixes():
    assert "info" in GENERIC_EMAIL_PREFIXES
    assert "office" in MatchOptions().generic_email_prefixes
