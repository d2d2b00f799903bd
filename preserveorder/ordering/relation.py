"""
Precedence relation derived from ordered label sequences.

Every sequence contributes one rule per pair of positions (i < j), so a
four-label sequence yields six rules. Rules from different sequences are then
stitched together by transitive closure: ``a`` before ``b`` in one sequence and
``b`` before ``c`` in another records ``a`` before ``c``.
"""

from __future__ import annotations

from collections.abc import Mapping
from itertools import combinations
from typing import Dict, FrozenSet, Hashable, Iterable, Iterator, List, Sequence, Set, Tuple

import structlog

logger = structlog.get_logger(__name__)

Label = Hashable
Rule = Tuple[Label, Label]


def direct_rules(sequence: Sequence[Label]) -> Iterator[Rule]:
    """Yield ``(before, after)`` for every pair of positions in ``sequence``."""
    return combinations(sequence, 2)


class PrecedesRelation(Mapping):
    """
    Immutable, transitively closed "comes before" relation.

    Maps a label to the frozenset of labels it must appear before. Labels
    that precede nothing are absent from the mapping.
    """

    def __init__(self, rules: Dict[Label, FrozenSet[Label]]):
        self._rules = dict(rules)

    def __getitem__(self, label: Label) -> FrozenSet[Label]:
        return self._rules[label]

    def __iter__(self) -> Iterator[Label]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"PrecedesRelation({self.as_dict()!r})"

    def successors(self, label: Label) -> FrozenSet[Label]:
        """Labels that ``label`` must appear before."""
        return self._rules.get(label, frozenset())

    def precedes(self, before: Label, after: Label) -> bool:
        return after in self.successors(before)

    @property
    def rule_count(self) -> int:
        """Number of recorded (before, after) pairs."""
        return sum(len(after) for after in self._rules.values())

    def labels_in_cycles(self) -> List[Label]:
        """Labels that end up preceding themselves."""
        return [label for label, after in self._rules.items() if label in after]

    def as_dict(self) -> Dict[Label, Set[Label]]:
        return {label: set(after) for label, after in self._rules.items()}


def close_rules(rules: Dict[Label, Iterable[Label]]) -> Dict[Label, FrozenSet[Label]]:
    """
    Compute the transitive closure of ``rules``.

    Each pass reads a snapshot and builds fresh sets, extending every label's
    successors with its successors' successors. Passes repeat until nothing
    grows, so chains recorded only between neighbours close as well.
    """
    closed = {label: frozenset(after) for label, after in rules.items()}
    passes = 0

    while True:
        passes += 1
        grown = {}
        changed = False
        for label, after in closed.items():
            reach = after.union(*(closed.get(successor, frozenset()) for successor in after))
            if len(reach) != len(after):
                changed = True
            grown[label] = reach
        closed = grown
        if not changed:
            break

    logger.debug("Relation closed", labels=len(closed), passes=passes)
    return closed


class RelationBuilder:
    """Collects direct rules from sequences and produces the closed relation."""

    def __init__(self):
        self._direct: Dict[Label, Set[Label]] = {}
        self._labels: Dict[Label, None] = {}
        self.sequence_count = 0

    def add_sequence(self, sequence: Sequence[Label]) -> None:
        """Record every pairwise rule of ``sequence``.

        A single-label sequence adds no rules but still registers its label.
        """
        self._labels.update(dict.fromkeys(sequence))
        for before, after in direct_rules(sequence):
            self._direct.setdefault(before, set()).add(after)
        self.sequence_count += 1

    def add_sequences(self, sequences: Iterable[Sequence[Label]]) -> "RelationBuilder":
        for sequence in sequences:
            self.add_sequence(sequence)
        return self

    @property
    def labels(self) -> FrozenSet[Label]:
        """Every distinct label seen so far."""
        return frozenset(self._labels)

    def direct_relation(self) -> PrecedesRelation:
        """Rules exactly as recorded, without closure."""
        return PrecedesRelation({label: frozenset(after) for label, after in self._direct.items()})

    def build(self) -> PrecedesRelation:
        relation = PrecedesRelation(close_rules(self._direct))
        logger.debug(
            "Relation built",
            sequences=self.sequence_count,
            labels=len(self._labels),
            rules=relation.rule_count,
        )
        return relation


def build_relation(sequences: Iterable[Sequence[Label]]) -> PrecedesRelation:
    """Build the closed precedence relation for ``sequences``."""
    return RelationBuilder().add_sequences(sequences).build()
