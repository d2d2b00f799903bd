"""
Precondition checks for merge input.

Input must be a non-empty list of non-empty sequences, each free of duplicate
labels, and the orderings they imply must not contradict each other.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, List, Tuple

from preserveorder.core.exceptions import InvalidInputError
from preserveorder.ordering.relation import Label, PrecedesRelation


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def validate_sequences(sequences: Any) -> List[Tuple[Label, ...]]:
    """
    Check the shape of merge input and return it as a list of tuples.

    Raises:
        InvalidInputError: If the outer list or any sequence is empty, a
            sequence is not a list/tuple, a label is unhashable, or a
            sequence repeats a label
    """
    if not _is_sequence(sequences):
        raise InvalidInputError(
            "Input must be a list of sequences",
            details={"type": type(sequences).__name__},
        )
    if not sequences:
        raise InvalidInputError("At least one sequence is required")

    checked = []
    for index, sequence in enumerate(sequences):
        if not _is_sequence(sequence):
            raise InvalidInputError(
                f"Sequence {index} must be a list, got {type(sequence).__name__}",
                details={"index": index},
            )
        if not sequence:
            raise InvalidInputError(f"Sequence {index} is empty", details={"index": index})

        try:
            counts = Counter(sequence)
        except TypeError as e:
            raise InvalidInputError(
                f"Sequence {index} contains an unhashable label: {e}",
                details={"index": index},
            ) from e

        duplicates = [label for label, count in counts.items() if count > 1]
        if duplicates:
            raise InvalidInputError(
                f"Sequence {index} repeats labels: {duplicates}",
                details={"index": index, "duplicates": duplicates},
            )
        checked.append(tuple(sequence))

    return checked


def validate_relation(relation: PrecedesRelation) -> None:
    """
    Reject relations where some label must precede itself.

    A contradiction (``a`` before ``b`` in one sequence, ``b`` before ``a``
    in another) closes into the same shape as a longer cycle.
    """
    cyclic = relation.labels_in_cycles()
    if cyclic:
        raise InvalidInputError(
            f"Sequences imply contradictory orderings for: {cyclic}",
            details={"labels": cyclic},
        )
