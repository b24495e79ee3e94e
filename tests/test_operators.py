"""Tests for the operator and field-type tables."""

from __future__ import annotations

import pytest

from resource_query.exceptions import (
    ConfigurationError,
    InvalidOperatorError,
    MalformedInputError,
    ResourceQueryError,
)
from resource_query.operators import (
    OPERATORS,
    TYPES,
    FieldType,
    FilterOperator,
    is_known_operator,
    resolve_operators,
)


def test_operator_table_is_closed() -> None:
    assert set(OPERATORS) == {op.value for op in FilterOperator}
    assert OPERATORS["has"] == "like"
    assert OPERATORS["btw"] == "between"


@pytest.mark.parametrize(
    ("field_type", "expected"),
    [
        ("string", ["eq", "ne", "has"]),
        ("numeric", ["eq", "ne", "lt", "lte", "gt", "gte", "in", "btw"]),
        ("boolean", ["eq", "ne"]),
        ("date", ["eq", "ne", "lt", "lte", "gt", "gte", "btw"]),
    ],
)
def test_type_tags_expand_to_documented_operators(field_type, expected) -> None:
    assert resolve_operators(field_type) == expected


def test_every_type_operator_is_known() -> None:
    assert set(TYPES) == {t.value for t in FieldType}
    for operators in TYPES.values():
        assert all(is_known_operator(op) for op in operators)


def test_explicit_list_is_returned_as_is() -> None:
    assert resolve_operators(["gte", "eq"]) == ["gte", "eq"]


def test_resolved_list_is_a_copy() -> None:
    resolve_operators("string").append("gt")
    assert TYPES["string"] == ["eq", "ne", "has"]


@pytest.mark.parametrize("tag", ["money", "STRING", ""])
def test_unknown_type_tag(tag: str) -> None:
    with pytest.raises(ConfigurationError):
        resolve_operators(tag)


class TestExceptions:
    def test_configuration_error_is_server_error(self) -> None:
        err = ConfigurationError('Invalid "money" field type')
        assert isinstance(err, ResourceQueryError)
        assert err.status_code == 500
        assert err.to_dict() == {
            "error": "ConfigurationError",
            "message": 'Invalid "money" field type',
        }

    def test_invalid_operator_is_client_error(self) -> None:
        err = InvalidOperatorError("like", "name")
        assert isinstance(err, MalformedInputError)
        assert err.status_code == 400
        assert err.to_dict() == {
            "error": "InvalidOperatorError",
            "message": 'Invalid "like" operator',
            "errors": {"name": ['Invalid "like" operator']},
        }

    def test_malformed_input_without_parameter(self) -> None:
        assert MalformedInputError("bad").errors == {"__root__": ["bad"]}
