"""
Data models for preserveorder results.

Provides validated, serializable structures for merge reports and CSV headers.
"""

from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MergeReport(BaseModel):
    """Outcome of merging a set of ordered sequences."""

    labels: List[Any] = Field(default_factory=list)
    source_count: int = Field(..., ge=0)
    label_count: int = Field(default=0, ge=0)
    rule_count: int = Field(default=0, ge=0)
    unordered_pairs: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def fill_label_count(cls, data):
        if isinstance(data, dict) and "label_count" not in data:
            data = {**data, "label_count": len(data.get("labels") or [])}
        return data

    @property
    def fully_ordered(self) -> bool:
        """True when the relation alone fixed every position."""
        return self.unordered_pairs == 0


class HeaderSource(BaseModel):
    """Header row read from one CSV file."""

    path: str = Field(..., min_length=1)
    columns: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)
