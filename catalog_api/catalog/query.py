"""
Translation of raw query-string filters into a ``Predicate`` and a
``SortDirective``.

Query parameters arrive as optional strings. Empty strings count as
absent. Numbers are read the way browsers' ``parseFloat`` reads them:
the longest numeric prefix wins, so ``"12.5abc"`` is ``12.5``. A value
with no numeric prefix, or one too large to represent, is rejected
with ``InvalidArgument``.
"""

from __future__ import annotations

import math
import re
from typing import List, Optional

from ..errors import InvalidArgument
from .schemas import FilterCriteria, Predicate, Range, SortDirective


_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

SORT_FIELD = "price"
ASCENDING = 1
DESCENDING = -1


def _present(value: Optional[str]) -> bool:
    return value is not None and value != ""


def parse_float(value: str, param: str) -> float:
    """Parse the leading number of ``value`` or raise ``InvalidArgument``."""
    m = _FLOAT_PREFIX.match(value)
    if not m:
        raise InvalidArgument(f"Query parameter '{param}' must be a number")
    number = float(m.group(1))
    if not math.isfinite(number):
        raise InvalidArgument(f"Query parameter '{param}' is out of range")
    return number


def split_values(value: str) -> List[str]:
    """Split a comma-separated parameter, trimming each element.

    Blank elements (``"a,,b"`` or a trailing comma) are dropped.
    """
    return [v.strip() for v in value.split(",") if v.strip()]


class QueryBuilder:
    """Builds a ``Predicate`` from ``FilterCriteria``.

    Each criterion is written to its own field of the predicate, and the
    numeric bounds are separate attributes of a ``Range``, so applying
    ``maxPrice`` never disturbs a ``minPrice`` that is already set (and
    the other way round).
    """

    def build(self, criteria: FilterCriteria) -> Predicate:
        predicate = Predicate()

        if _present(criteria.name):
            name = criteria.name.strip()
            if name:
                predicate.title_contains = re.escape(name)

        predicate.rating = self._range(
            predicate.rating, criteria.min_rating, criteria.max_rating, "minRating", "maxRating"
        )
        predicate.price = self._range(
            predicate.price, criteria.min_price, criteria.max_price, "minPrice", "maxPrice"
        )

        if _present(criteria.genre):
            predicate.genres = split_values(criteria.genre)
        if _present(criteria.language):
            predicate.languages = split_values(criteria.language)

        return predicate

    @staticmethod
    def _range(
        current: Range,
        low: Optional[str],
        high: Optional[str],
        low_param: str,
        high_param: str,
    ) -> Range:
        bounds = current.model_copy()
        if _present(low):
            bounds.gte = parse_float(low, low_param)
        if _present(high):
            bounds.lte = parse_float(high, high_param)
        return bounds


class SortSpec:
    """Ordering for category queries. Only ``price`` is sortable."""

    def build(self, sort_price: Optional[str] = None) -> SortDirective:
        if not _present(sort_price):
            return SortDirective()
        direction = ASCENDING if sort_price == "asc" else DESCENDING
        return SortDirective(field=SORT_FIELD, direction=direction)
