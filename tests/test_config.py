import json

import pytest

from quizdetect.config import RuntimeConfig, Settings, load_settings

ENV_KEYS = (
    "PM2A_ANKI_ENDPOINT",
    "PM2A_QUIET_MS",
    "PM2A_POLL_MS",
    "PM2A_NOTICE_MS",
    "PM2A_DEBUG",
    "PM2A_SETTINGS_FILE",
    "PM2A_ENV_FILE",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # setenv first so that undo also removes keys loaded from a .env file
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


def test_settings_defaults():
    s = Settings()
    assert s.to_dict() == {"deckName": "Passmedicine", "noteType": "Basic", "tags": "passmedicine,passmed2anki"}
    assert s.tag_list() == ["passmedicine", "passmed2anki"]


def test_blank_or_invalid_values_fall_back():
    s = Settings.from_mapping({"deckName": "  ", "noteType": None, "tags": 5})
    assert s == Settings()
    s = Settings.from_mapping({"deckName": " Cardio ", "noteType": "Cloze"})
    assert (s.deck_name, s.note_type, s.tags) == ("Cardio", "Cloze", "passmedicine,passmed2anki")


def test_load_settings(tmp_path, capsys):
    assert load_settings(None) == Settings()
    assert load_settings(str(tmp_path / "missing.json")) == Settings()
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    assert load_settings(str(bad)) == Settings()
    assert "[config] settings file ignored" in capsys.readouterr().out
    listed = tmp_path / "list.json"
    listed.write_text(json.dumps(["deckName", "Renal"]), encoding="utf-8")
    assert load_settings(str(listed)) == Settings()
    good = tmp_path / "settings.json"
    good.write_text(json.dumps({"deckName": "Renal", "tags": "renal, nephro"}), encoding="utf-8")
    s = load_settings(str(good))
    assert s.deck_name == "Renal"
    assert s.tag_list() == ["renal", "nephro"]


def test_runtime_defaults(clean_env):
    cfg = RuntimeConfig.from_env()
    assert cfg.endpoint == "http://127.0.0.1:8765"
    assert (cfg.quiet_ms, cfg.poll_ms, cfg.notice_ms) == (250, 50, 3000)
    assert cfg.debug is False
    assert cfg.settings_path is None
    assert cfg.settings == Settings()


def test_runtime_from_env(clean_env, tmp_path):
    settings = tmp_path / "s.json"
    settings.write_text(json.dumps({"deckName": "Neuro"}), encoding="utf-8")
    clean_env.setenv("PM2A_ANKI_ENDPOINT", "http://localhost:9999")
    clean_env.setenv("PM2A_QUIET_MS", "abc")
    clean_env.setenv("PM2A_POLL_MS", "0")
    clean_env.setenv("PM2A_DEBUG", "yes")
    clean_env.setenv("PM2A_SETTINGS_FILE", str(settings))
    cfg = RuntimeConfig.from_env()
    assert cfg.endpoint == "http://localhost:9999"
    assert cfg.quiet_ms == 250
    assert cfg.poll_ms == 1
    assert cfg.debug is True
    assert cfg.settings.deck_name == "Neuro"


def test_env_file_does_not_override_environment(clean_env, tmp_path):
    env_file = tmp_path / "custom.env"
    env_file.write_text("# comment\nPM2A_QUIET_MS=400\nPM2A_NOTICE_MS='1500'\n", encoding="utf-8")
    clean_env.setenv("PM2A_ENV_FILE", str(env_file))
    clean_env.setenv("PM2A_NOTICE_MS", "2000")
    cfg = RuntimeConfig.from_env()
    assert cfg.quiet_ms == 400
    assert cfg.notice_ms == 2000
