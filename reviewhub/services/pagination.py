"""Offset pagination helpers shared by explore and landing endpoints."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def coerce_positive_int(raw: str | int | None, default: int) -> int:
    """Coerce a query value to an int >= 1.

    Missing or blank values use `default`. A leading integer prefix is honoured
    ("3abc" -> 3); anything non-numeric collapses to 1, as do values below 1.
    """
    if raw is None:
        return max(1, default)
    if isinstance(raw, int):
        return max(1, raw)
    if not raw.strip():
        return max(1, default)

    match = _LEADING_INT.match(raw)
    if not match:
        return 1
    return max(1, int(match.group(1)))


@dataclass(frozen=True)
class PageWindow:
    """A 1-based page of `limit` items over `total` items."""

    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total > 0 else 0

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def slice(self, items: Sequence[T]) -> list[T]:
        return list(items[self.offset : self.offset + self.limit])
