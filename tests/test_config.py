from pathlib import Path

import pytest

from consigliere.config import DEFAULT_SEASON, get_thresholds, iter_thresholds, load_settings


def test_get_thresholds_accepts_long_season_form():
    assert get_thresholds("2023-2024") is get_thresholds("2023-24")
    assert get_thresholds().season == DEFAULT_SEASON


def test_get_thresholds_unknown_season():
    with pytest.raises(KeyError):
        get_thresholds("1999-00")


def test_thresholds_are_ordered():
    for rules in iter_thresholds():
        assert rules.salary_cap < rules.luxury_tax < rules.first_apron < rules.second_apron
        assert rules.minimum_salary < rules.maximum_salary


def test_load_settings_reads_environment(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CONSIGLIERE_DB_PATH", str(tmp_path / "db.sqlite"))
    monkeypatch.setenv("CONSIGLIERE_RATE_LIMIT", "0")
    monkeypatch.setenv("CONSIGLIERE_STORE_TIMEOUT", "2.5")
    monkeypatch.setenv("CONSIGLIERE_MODEL", "gpt-4o")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    settings = load_settings()

    assert Path(settings.db_path) == tmp_path / "db.sqlite"
    assert settings.rate_limit == 0
    assert settings.store_timeout == 2.5
    assert settings.model == "gpt-4o"
    assert settings.openai_api_key == "sk-test"


def test_load_settings_falls_back_on_bad_values(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("CONSIGLIERE_DB_PATH", "CONSIGLIERE_MODEL", "CONSIGLIERE_SEASON", "OPENAI_API_KEY", "OPEN_AI_KEY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CONSIGLIERE_RATE_LIMIT", "lots")
    monkeypatch.setenv("CONSIGLIERE_RATE_WINDOW", "-5")

    settings = load_settings()

    assert settings.rate_limit == 5
    assert settings.rate_window == 1.0
    assert settings.season == DEFAULT_SEASON
    assert settings.model == "gpt-4o-mini"
    assert settings.openai_api_key is None
