# tests/entwine/app/test_app_settings.py
from __future__ import annotations
from entwine.app.app_settings import AppSettings, AppSettingsStore, LaunchMethod


def test_defaults_when_missing(tmp_path):
    assert AppSettingsStore(tmp_path / "settings.json").load().launchMethod is LaunchMethod.STEAM


def test_round_trip(tmp_path):
    store = AppSettingsStore(tmp_path / "settings.json")
    store.save(AppSettings(launchMethod=LaunchMethod.EXECUTABLE))

    assert (tmp_path / "settings.json").read_text().strip() == '{\n  "launchMethod": "executable"\n}'
    assert AppSettingsStore(tmp_path / "settings.json").load().launchMethod is LaunchMethod.EXECUTABLE


def test_invalid_file_falls_back_to_defaults(tmp_path):
    (tmp_path / "settings.json").write_text('{"launchMethod": "teleport"}')
    assert AppSettingsStore(tmp_path / "settings.json").load() == AppSettings()


def test_default_location_is_user_dir(entwineHome):
    assert AppSettingsStore().path == entwineHome / "settings.json"
