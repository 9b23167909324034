"""
MongoDB-backed data access for the catalogue API.

Every category of items lives in its own collection, named after the
category. Which names count as categories is decided by
``CategoryCatalog``: either the ``KNOWN_CATEGORIES`` setting or the
collections that already exist in the database, minus ``Category``
itself and the ``system.*`` namespace. A client-supplied identifier
outside that registry is never turned into a collection handle.

The services here receive the database handle explicitly; none of them
opens a connection of its own.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.database import Database

from .. import config
from ..errors import InvalidArgument, NotFound
from .query import QueryBuilder, SortSpec
from .schemas import FilterCriteria


logger = logging.getLogger(__name__)


def serialize_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Return a JSON-friendly copy of a MongoDB document.

    ``ObjectId`` values (normally just ``_id``) are rendered as strings;
    everything else is passed through unchanged.
    """
    return {
        key: str(value) if isinstance(value, ObjectId) else value
        for key, value in doc.items()
    }


class CategoryCatalog:
    """Lists categories and maps a category identifier to its collection."""

    def __init__(self, db: Database, known: Optional[Iterable[str]] = None):
        self.db = db
        self._known = frozenset(known) if known else None

    def list_categories(self) -> List[Dict[str, Any]]:
        docs = list(self.db[config.CATEGORY_COLLECTION].find({}))
        if not docs:
            raise NotFound("No categories found")
        return [serialize_document(d) for d in docs]

    def known_categories(self) -> frozenset:
        """The registry of category names that may be queried."""
        if self._known is not None:
            return self._known
        return frozenset(
            name
            for name in self.db.list_collection_names()
            if name != config.CATEGORY_COLLECTION and not name.startswith("system.")
        )

    def resolve(self, category_id: Optional[str]) -> Collection:
        category = (category_id or "").strip()
        if not category:
            raise InvalidArgument("Category query parameter is required")
        if category not in self.known_categories():
            raise NotFound(f"Unknown category {category}")
        return self.db[category]


class CatalogQueryService:
    """Runs a filtered, optionally sorted query against one category."""

    def __init__(
        self,
        catalog: CategoryCatalog,
        query_builder: Optional[QueryBuilder] = None,
        sort_spec: Optional[SortSpec] = None,
    ):
        self.catalog = catalog
        self.query_builder = query_builder or QueryBuilder()
        self.sort_spec = sort_spec or SortSpec()

    def query(
        self,
        category_id: Optional[str],
        criteria: Optional[FilterCriteria] = None,
        sort_price: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        collection = self.catalog.resolve(category_id)
        category = collection.name
        predicate = self.query_builder.build(criteria or FilterCriteria())
        directive = self.sort_spec.build(sort_price)

        mongo_query = predicate.to_mongo()
        logger.debug("Generated query for %s: %s sort=%s", category, mongo_query, directive.to_mongo())

        cursor = collection.find(mongo_query)
        if not directive.is_empty():
            cursor = cursor.sort(directive.to_mongo())
        items = [serialize_document(d) for d in cursor]

        if not items:
            logger.warning("No products found in %s for query: %s", category, mongo_query)
            raise NotFound(
                f"No products found in category {category} with the given criteria",
                query=mongo_query,
            )
        return items


class RecommendationService:
    """Top-N items of the ``Books`` collection sharing a genre with the request."""

    def __init__(
        self,
        db: Database,
        collection: str = config.RECOMMENDATION_COLLECTION,
        limit: int = config.RECOMMENDATION_LIMIT,
    ):
        self.db = db
        self.collection = collection
        self.limit = limit

    def recommend(self, genres: Any) -> List[Dict[str, Any]]:
        wanted = self._validate(genres)
        cursor = self.db[self.collection].find({"genres": {"$in": wanted}}).limit(self.limit)
        return [serialize_document(d) for d in cursor]

    @staticmethod
    def _validate(genres: Any) -> List[str]:
        if not isinstance(genres, Sequence) or isinstance(genres, (str, bytes)):
            raise InvalidArgument("Genres must be a non-empty array")
        if not genres or not all(isinstance(g, str) for g in genres):
            raise InvalidArgument("Genres must be a non-empty array")
        return list(genres)
