"""Precedence relation building and ordering."""

from preserveorder.ordering.api import merge, merge_with_report
from preserveorder.ordering.merger import OrderMerger
from preserveorder.ordering.relation import PrecedesRelation, RelationBuilder, build_relation

__all__ = [
    "OrderMerger",
    "PrecedesRelation",
    "RelationBuilder",
    "build_relation",
    "merge",
    "merge_with_report",
]
