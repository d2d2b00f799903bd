"""Ensure malformed merge input fails fast with InvalidInputError."""

import pytest

from preserveorder import merge
from preserveorder.core.exceptions import InvalidInputError, PreserveOrderError
from preserveorder.ordering.relation import build_relation
from preserveorder.ordering.validation import validate_relation, validate_sequences


class TestValidateSequences:
    """Shape checks on the raw input."""

    def test_returns_tuples(self):
        assert validate_sequences([["a", "b"], ("c",)]) == [("a", "b"), ("c",)]

    def test_empty_outer_list(self):
        with pytest.raises(InvalidInputError, match="At least one sequence"):
            validate_sequences([])

    def test_outer_value_must_be_a_list(self):
        with pytest.raises(InvalidInputError):
            validate_sequences("ab")

    def test_empty_inner_sequence(self):
        with pytest.raises(InvalidInputError) as exc_info:
            validate_sequences([["a"], []])

        assert exc_info.value.details == {"index": 1}

    def test_inner_value_must_be_a_list(self):
        """A bare string is not split into characters."""
        with pytest.raises(InvalidInputError):
            validate_sequences([["a"], "bc"])

    def test_duplicate_labels(self):
        with pytest.raises(InvalidInputError) as exc_info:
            validate_sequences([["a", "b", "a"]])

        assert exc_info.value.details["duplicates"] == ["a"]

    def test_unhashable_label(self):
        with pytest.raises(InvalidInputError, match="unhashable"):
            validate_sequences([[["nested"]]])


def test_validate_relation_accepts_acyclic():
    validate_relation(build_relation([["a", "b"], ["b", "c"]]))


def test_validate_relation_names_cycle_members():
    relation = build_relation([["a", "b"], ["b", "c"], ["c", "a"], ["d"]])

    with pytest.raises(InvalidInputError) as exc_info:
        validate_relation(relation)

    assert set(exc_info.value.details["labels"]) == {"a", "b", "c"}


def test_merge_orders_mixed_label_types():
    assert merge([[1, "a"]]) == [1, "a"]
    assert merge([["a", 1]]) == ["a", 1]


def test_merge_rejects_incomparable_labels():
    with pytest.raises(InvalidInputError, match="comparable"):
        merge([[1j], [2j]])


def test_errors_share_base_class():
    with pytest.raises(PreserveOrderError):
        merge([])
