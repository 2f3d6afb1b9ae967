# tests/entwine/configs/test_values_property.py
from __future__ import annotations
from typing import Any

import pytest

hypothesis = pytest.importorskip("hypothesis")
from hypothesis import given, strategies as st  # type: ignore[no-redef]

from entwine.configs.values import validateConfigValue, validateModConfig


# Every variant of a config value, nested a few levels deep
scalar_strat = st.one_of(
    st.booleans(),
    st.integers(),
    st.floats(allow_nan=False, allow_infinity=False),
    st.text(max_size=12),
)
value_strat = st.recursive(
    scalar_strat,
    lambda children: st.one_of(
        st.lists(children, max_size=4),
        st.dictionaries(st.text(max_size=8), children, max_size=4),
    ),
    max_leaves=20,
)


@given(value_strat)
def test_valid_values_survive_unchanged(value: Any) -> None:
    assert validateConfigValue(value) == value


@given(st.dictionaries(st.text(max_size=8), value_strat, max_size=5))
def test_validated_document_is_a_fresh_copy(doc: dict[str, Any]) -> None:
    validated = validateModConfig(doc)
    assert validated == doc
    validated["__extra_key"] = 1
    assert "__extra_key" not in doc


@given(st.lists(value_strat, max_size=3), st.integers(min_value=0, max_value=3))
def test_null_anywhere_is_rejected(items: list[Any], position: int) -> None:
    items.insert(min(position, len(items)), None)
    with pytest.raises(ValueError):
        validateConfigValue({"items": items})
