"""
Entry points for merging ordered label sequences.
"""

from __future__ import annotations

from typing import Any, List, Sequence

import structlog

from preserveorder.core.models import MergeReport
from preserveorder.ordering.merger import OrderMerger
from preserveorder.ordering.relation import Label, RelationBuilder
from preserveorder.ordering.validation import validate_relation, validate_sequences

logger = structlog.get_logger(__name__)


def merge_with_report(sequences: Sequence[Sequence[Label]]) -> MergeReport:
    """
    Merge ``sequences`` and describe the result.

    Args:
        sequences: Non-empty list of non-empty label sequences

    Returns:
        MergeReport whose ``labels`` holds every distinct label once

    Raises:
        InvalidInputError: If the input is malformed or its orderings contradict
    """
    checked = validate_sequences(sequences)

    builder = RelationBuilder().add_sequences(checked)
    relation = builder.build()
    validate_relation(relation)

    merger = OrderMerger(relation)
    labels = merger.merge(builder.labels)

    report = MergeReport(
        labels=labels,
        source_count=len(checked),
        rule_count=relation.rule_count,
        unordered_pairs=merger.unordered_pairs(labels),
    )
    logger.debug(
        "Merge completed",
        sources=report.source_count,
        label_count=report.label_count,
        rules=report.rule_count,
        unordered_pairs=report.unordered_pairs,
    )
    return report


def merge(sequences: Sequence[Sequence[Any]]) -> List[Any]:
    """Merge ordered sequences into one duplicate-free sequence honouring every ordering."""
    return list(merge_with_report(sequences).labels)
