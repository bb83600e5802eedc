"""
Тест конфигурации: feature flags, переменные окружения, тексты.
"""

import pytest

import config.settings as settings
from config import ConfigError, parse_user_ids, validate_env
from config.features import FeatureFlags
from locales import t


@pytest.fixture
def features_file(tmp_path):
    path = tmp_path / "features.yaml"
    path.write_text(
        "pipeline:\n"
        "  render_attempts: 2\n"
        "  hosting_attempts: zero\n"
        "  parallel_recipients: false\n"
        "hosting:\n"
        "  release_tag_prefix: gmat\n",
        encoding="utf-8",
    )
    return path


def test_flags_from_file(features_file):
    flags = FeatureFlags(str(features_file))
    assert flags.get("pipeline.render_attempts") == 2
    assert flags.get("hosting.release_tag_prefix") == "gmat"
    assert flags.get("hosting.release_id", "none") == "none"
    assert not flags.is_enabled("pipeline.parallel_recipients")


def test_env_overrides_file(features_file, monkeypatch):
    monkeypatch.setenv("PIPELINE_PARALLEL_RECIPIENTS", "yes")
    monkeypatch.setenv("PIPELINE_RENDER_ATTEMPTS", "4")
    flags = FeatureFlags(str(features_file))
    assert flags.is_enabled("pipeline.parallel_recipients")
    assert flags.get_int("pipeline.render_attempts", 1) == 4


def test_get_int_falls_back_and_clamps(features_file, monkeypatch):
    flags = FeatureFlags(str(features_file))
    assert flags.get_int("pipeline.hosting_attempts", 1) == 1
    monkeypatch.setenv("PIPELINE_RENDER_ATTEMPTS", "0")
    assert flags.get_int("pipeline.render_attempts", 1) == 1


def test_missing_file_is_empty_config(tmp_path):
    flags = FeatureFlags(str(tmp_path / "nope.yaml"))
    assert flags.get("pipeline.render_attempts", 1) == 1


def test_bundled_defaults_disable_retries():
    flags = FeatureFlags()
    assert flags.get_int("pipeline.render_attempts", 1) == 1
    assert flags.get_int("pipeline.hosting_attempts", 1) == 1


def test_parse_user_ids():
    assert parse_user_ids("a, b,,c ,a") == ["a", "b", "c"]
    assert parse_user_ids("") == []
    assert parse_user_ids(None) == []


def test_validate_env_lists_missing(monkeypatch):
    monkeypatch.setattr(settings, "BOT_TOKEN", None)
    monkeypatch.setattr(settings, "GITHUB_TOKEN", None)
    monkeypatch.setattr(settings, "GITHUB_REPOSITORY", "owner/repo")
    with pytest.raises(ConfigError) as exc_info:
        validate_env()
    assert "ZALO_BOT_TOKEN" in str(exc_info.value)
    assert "GITHUB_TOKEN" in str(exc_info.value)
    assert "GITHUB_REPOSITORY" not in str(exc_info.value)


def test_validate_env_cli_token(monkeypatch):
    monkeypatch.setattr(settings, "BOT_TOKEN", None)
    validate_env(bot_token="from-cli", require_hosting=False)


def test_texts():
    assert t("errors.not_found", question_id="5") == "🔍 Question 5 was not found."
    assert t("errors.unknown_key") == "errors.unknown_key"
    assert "{categories}" not in t("help", categories="PS", total=1)
