"""
Total ordering of a label set under a precedence relation.
"""

from __future__ import annotations

from itertools import combinations
from typing import Iterable, List

import structlog

from preserveorder.core.exceptions import InvalidInputError
from preserveorder.ordering.relation import Label, PrecedesRelation

logger = structlog.get_logger(__name__)


def _sort_key(label: Label):
    return (type(label).__name__, label)


def enumeration_order(labels: Iterable[Label]) -> List[Label]:
    """
    Natural sort order of ``labels``; the order ties fall back to.

    Labels of different types group by type name, so only labels of one type
    that cannot be ordered among themselves are rejected.
    """
    try:
        return sorted(labels, key=_sort_key)
    except TypeError as e:
        raise InvalidInputError(f"Labels are not mutually comparable: {e}") from e


class OrderMerger:
    """
    Sorts labels with a three-way comparator over a closed relation.

    Labels with no recorded relation compare equal and keep their
    enumeration order.
    """

    def __init__(self, relation: PrecedesRelation):
        self.relation = relation

    def compare(self, a: Label, b: Label) -> int:
        if self.relation.precedes(a, b):
            return -1
        if self.relation.precedes(b, a):
            return 1
        return 0

    def sort(self, labels: Iterable[Label]) -> List[Label]:
        """
        Stable selection sort driven by :meth:`compare`.

        "Equal" is not transitive here (``a`` and ``c`` may both tie with
        ``b`` while ``a`` precedes ``c``), which breaks the assumptions of a
        comparison sort. Each step instead takes the earliest remaining label
        that no remaining label sorts before, tracked as a count of remaining
        predecessors per label.
        """
        remaining = list(labels)
        blockers = [
            sum(1 for other in remaining if self.compare(other, candidate) < 0)
            for candidate in remaining
        ]
        ordered = []

        while remaining:
            try:
                index = blockers.index(0)
            except ValueError:
                raise InvalidInputError(
                    "No label can be placed first; the relation has a cycle",
                    details={"remaining": remaining},
                ) from None
            placed = remaining.pop(index)
            blockers.pop(index)
            ordered.append(placed)
            for position, other in enumerate(remaining):
                if self.compare(placed, other) < 0:
                    blockers[position] -= 1

        return ordered

    def unordered_pairs(self, labels: Iterable[Label]) -> int:
        """Count label pairs whose relative order came from the tie-break."""
        return sum(1 for a, b in combinations(labels, 2) if self.compare(a, b) == 0)

    def merge(self, labels: Iterable[Label]) -> List[Label]:
        """Order ``labels`` starting from their natural sort order."""
        ordered = self.sort(enumeration_order(labels))
        logger.debug("Labels ordered", label_count=len(ordered))
        return ordered
