"""Merge ordered label sequences into one ordering that honours all of them."""

from preserveorder.core.exceptions import InvalidInputError, PreserveOrderError
from preserveorder.core.models import MergeReport
from preserveorder.ordering.api import merge, merge_with_report

__version__ = "0.1.0"

__all__ = [
    "InvalidInputError",
    "MergeReport",
    "PreserveOrderError",
    "merge",
    "merge_with_report",
]
