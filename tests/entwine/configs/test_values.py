# tests/entwine/configs/test_values.py
from __future__ import annotations
import math

import pytest

from entwine.configs.values import ConfigValueKind, kindOf, validateConfigValue, validateModConfig


@pytest.mark.parametrize(
    "value, kind",
    [
        (True, ConfigValueKind.BOOLEAN),
        (0, ConfigValueKind.NUMBER),
        (1.5, ConfigValueKind.NUMBER),
        ("s", ConfigValueKind.STRING),
        ([1, 2], ConfigValueKind.SEQUENCE),
        ({"a": 1}, ConfigValueKind.MAPPING),
    ],
)
def test_kindOf(value, kind):
    assert kindOf(value) is kind


def test_validate_normalises_tuples_to_lists():
    assert validateConfigValue({"a": (1, "x", {"b": (True,)})}) == {"a": [1, "x", {"b": [True]}]}


@pytest.mark.parametrize("bad", [None, math.nan, math.inf, {1: "int key"}, {"s": {1, 2}}, b"bytes"])
def test_validate_rejects_values_outside_the_variant(bad):
    with pytest.raises(ValueError):
        validateConfigValue(bad)


def test_validate_rejects_cycles_but_allows_shared_subtrees():
    shared = {"x": 1}
    assert validateConfigValue({"a": shared, "b": shared}) == {"a": {"x": 1}, "b": {"x": 1}}

    cyclic: dict = {}
    cyclic["self"] = cyclic
    with pytest.raises(ValueError, match="cyclic"):
        validateConfigValue(cyclic)


def test_error_names_the_offending_path():
    with pytest.raises(ValueError, match=r"\$\.graphics\.modes\[1\]"):
        validateConfigValue({"graphics": {"modes": [1, None]}})


def test_document_must_be_a_mapping():
    with pytest.raises(ValueError):
        validateModConfig([1, 2, 3])
    assert validateModConfig({}) == {}


def test_document_is_validated_into_a_fresh_mapping():
    doc = {"graphics": {"modes": [1, 2]}, "name": "x"}
    validated = validateModConfig(doc)
    assert validated == doc
    assert isinstance(validated, dict)
    assert validated is not doc
