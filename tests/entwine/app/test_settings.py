# tests/entwine/app/test_settings.py
from __future__ import annotations

from entwine.app.settings import deepMerge, reloadSettings, settings


# -------- deepMerge --------

def test_deep_merge_nested_dicts():
    left = {"a": 1, "b": {"x": 1, "y": 2}}
    right = {"b": {"y": 5, "z": 9}, "c": 7}
    assert deepMerge(left, right) == {"a": 1, "b": {"x": 1, "y": 5, "z": 9}, "c": 7}
    # inputs untouched
    assert left == {"a": 1, "b": {"x": 1, "y": 2}}


def test_deep_merge_non_dict_replaces():
    assert deepMerge({"a": [1, 2]}, {"a": [3]}) == {"a": [3]}
    assert deepMerge({"a": {"b": 1}}, {"a": None}) == {"a": None}


# -------- user overrides --------

def test_defaults_without_user_file():
    assert settings("catalog.modsApiPath") == "/api/mods"
    assert settings("does.not.exist", 42) == 42


def test_user_json5_overrides_defaults(entwineHome):
    (entwineHome / "entwine.json5").write_text(
        "{\n  // comments allowed\n  catalog: { baseUrl: 'http://localhost:9000' },\n  http: { timeoutMs: 500, },\n}\n",
        encoding="utf-8",
    )
    reloadSettings()

    assert settings("catalog.baseUrl") == "http://localhost:9000"
    assert settings("catalog.modsApiPath") == "/api/mods"
    assert settings("http.timeoutMs") == 500


def test_unparsable_user_file_falls_back_to_defaults(entwineHome):
    (entwineHome / "entwine.json5").write_text("{ not json5", encoding="utf-8")
    reloadSettings()
    assert settings("http.timeoutMs") == 30_000
