"""
Pydantic schema definitions for the catalog module.

``FilterCriteria`` holds the raw, string-typed query parameters exactly
as a client sent them. ``QueryBuilder`` turns them into a ``Predicate``,
a structured record where every numeric attribute carries its own
``Range`` with independent lower and upper bounds. Only the predicate
knows how to render itself into a MongoDB filter document, so the
storage query shape lives in a single place.
"""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Literal


class FilterCriteria(BaseModel):
    """Optional filters as received on ``GET /category/{category}``."""

    name: Optional[str] = None
    min_rating: Optional[str] = Field(default=None, alias="minRating")
    max_rating: Optional[str] = Field(default=None, alias="maxRating")
    min_price: Optional[str] = Field(default=None, alias="minPrice")
    max_price: Optional[str] = Field(default=None, alias="maxPrice")
    genre: Optional[str] = None
    language: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class Range(BaseModel):
    """Inclusive numeric bounds; either side may be missing."""

    gte: Optional[float] = None
    lte: Optional[float] = None

    def is_empty(self) -> bool:
        return self.gte is None and self.lte is None

    def to_mongo(self) -> Dict[str, float]:
        bounds: Dict[str, float] = {}
        if self.gte is not None:
            bounds["$gte"] = self.gte
        if self.lte is not None:
            bounds["$lte"] = self.lte
        return bounds


class Predicate(BaseModel):
    """Filter criteria after parsing, ready for the storage layer."""

    title_contains: Optional[str] = None
    rating: Range = Field(default_factory=Range)
    price: Range = Field(default_factory=Range)
    genres: Optional[List[str]] = None
    languages: Optional[List[str]] = None

    def to_mongo(self) -> Dict[str, Any]:
        """Render the predicate as a MongoDB filter document.

        Keys appear only for the constraints that were supplied, so an
        empty predicate renders as ``{}`` and matches every record.
        """
        query: Dict[str, Any] = {}
        if self.title_contains is not None:
            query["title"] = {"$regex": self.title_contains, "$options": "i"}
        if not self.rating.is_empty():
            query["rating"] = self.rating.to_mongo()
        if not self.price.is_empty():
            query["price"] = self.price.to_mongo()
        if self.genres is not None:
            query["genres"] = {"$in": list(self.genres)}
        if self.languages is not None:
            query["language"] = {"$in": list(self.languages)}
        return query


SortDirection = Literal[1, -1]


class SortDirective(BaseModel):
    """Ordering for a category query. ``field=None`` keeps natural order."""

    field: Optional[str] = None
    direction: Optional[SortDirection] = None

    def is_empty(self) -> bool:
        return self.field is None

    def to_mongo(self) -> List[Tuple[str, int]]:
        if self.field is None or self.direction is None:
            return []
        return [(self.field, self.direction)]
