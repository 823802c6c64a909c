import json

import pytest

import app_state as app_state_module
from app_state import API_KEY_FILE, AppState, LAST_DIR_FILE, SETTINGS_FILE, SelectionState


@pytest.fixture(autouse=True)
def _no_env_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setattr(app_state_module, "find_converter", lambda: "/usr/bin/magick")


def test_defaults(logger, tmp_path) -> None:
    state = AppState(logger, config_dir=tmp_path)
    s = state.settings
    assert s['model_name'] == "gpt-4o"
    assert s['max_tokens'] == 500
    assert s['request_timeout'] == 120
    assert s['image_detail'] == "low"
    assert s['converter_path'] == "/usr/bin/magick"
    assert "Moody Film" in s['style_presets']
    assert state.api_key == ""
    assert state.max_image_bytes == 20 * 1024 * 1024


def test_settings_round_trip(logger, tmp_path) -> None:
    state = AppState(logger, config_dir=tmp_path)
    state.settings['model_name'] = "gpt-4o-mini"
    state.settings['max_image_mb'] = 0
    state.save_settings()

    reloaded = AppState(logger, config_dir=tmp_path)
    assert reloaded.settings['model_name'] == "gpt-4o-mini"
    assert reloaded.max_image_bytes is None


def test_unknown_and_corrupt_settings_are_ignored(logger, tmp_path) -> None:
    (tmp_path / SETTINGS_FILE).write_text(json.dumps({"model_name": "x", "bogus": 1}), "utf-8")
    state = AppState(logger, config_dir=tmp_path)
    assert state.settings['model_name'] == "x"
    assert "bogus" not in state.settings

    (tmp_path / SETTINGS_FILE).write_text("{not json", "utf-8")
    assert AppState(logger, config_dir=tmp_path).settings['model_name'] == "gpt-4o"


def test_env_key_takes_precedence_over_saved_key(logger, tmp_path, monkeypatch) -> None:
    (tmp_path / API_KEY_FILE).write_text("sk-file\n", "utf-8")
    assert AppState(logger, config_dir=tmp_path).api_key == "sk-file"

    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    state = AppState(logger, config_dir=tmp_path)
    assert state.api_key == "sk-env"
    assert state.api_key_from_env


def test_save_api_key(logger, tmp_path) -> None:
    state = AppState(logger, config_dir=tmp_path)
    state.save_api_key("  sk-new  ")
    assert (tmp_path / API_KEY_FILE).read_text("utf-8") == "sk-new"
    assert AppState(logger, config_dir=tmp_path).api_key == "sk-new"


def test_remember_directory(logger, tmp_path) -> None:
    photos = tmp_path / "photos"
    photos.mkdir()
    state = AppState(logger, config_dir=tmp_path / "cfg")
    state.remember_directory(str(photos / "a.CR2"))
    assert (tmp_path / "cfg" / LAST_DIR_FILE).read_text("utf-8") == str(photos)
    assert AppState(logger, config_dir=tmp_path / "cfg").last_directory == str(photos)


def test_selection_state_treats_cancel_as_unset() -> None:
    selection = SelectionState()
    selection.set_target("/a.CR2")
    selection.set_reference("/b.jpg")
    assert (selection.target_path, selection.reference_path) == ("/a.CR2", "/b.jpg")
    selection.set_target("")
    selection.set_reference(None)
    assert (selection.target_path, selection.reference_path) == (None, None)
