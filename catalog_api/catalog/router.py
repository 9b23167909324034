"""
Route definitions for the catalogue API.

Endpoints:
- GET  /                      : list every category
- GET  /category/{category}   : items of one category, filtered and sorted
- POST /recommendations       : up to four books sharing a genre
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request
from pymongo.database import Database

from .. import config
from ..models import RecommendationRequest
from .schemas import FilterCriteria
from .store import CatalogQueryService, CategoryCatalog, RecommendationService


router = APIRouter(tags=["catalog"])


def get_database(request: Request) -> Database:
    """The database handle opened at startup."""
    return request.app.state.db


def get_catalog(db: Database = Depends(get_database)) -> CategoryCatalog:
    return CategoryCatalog(db, known=config.KNOWN_CATEGORIES or None)


def get_query_service(catalog: CategoryCatalog = Depends(get_catalog)) -> CatalogQueryService:
    return CatalogQueryService(catalog)


def get_recommendation_service(db: Database = Depends(get_database)) -> RecommendationService:
    return RecommendationService(db)


@router.get("/")
def list_categories(catalog: CategoryCatalog = Depends(get_catalog)) -> List[Dict[str, Any]]:
    return catalog.list_categories()


@router.get("/category/{category}")
def category_products(
    category: str,
    name: Optional[str] = Query(default=None, description="Substring of the title (case-insensitive)"),
    min_rating: Optional[str] = Query(default=None, alias="minRating"),
    max_rating: Optional[str] = Query(default=None, alias="maxRating"),
    min_price: Optional[str] = Query(default=None, alias="minPrice"),
    max_price: Optional[str] = Query(default=None, alias="maxPrice"),
    genre: Optional[str] = Query(default=None, description="Comma-separated genres, any may match"),
    language: Optional[str] = Query(default=None, description="Comma-separated languages, any may match"),
    sort_price: Optional[str] = Query(default=None, alias="sortPrice", description="'asc' or anything else for descending"),
    service: CatalogQueryService = Depends(get_query_service),
) -> List[Dict[str, Any]]:
    criteria = FilterCriteria(
        name=name,
        min_rating=min_rating,
        max_rating=max_rating,
        min_price=min_price,
        max_price=max_price,
        genre=genre,
        language=language,
    )
    return service.query(category, criteria, sort_price)


@router.post("/recommendations")
def recommendations(
    req: RecommendationRequest,
    service: RecommendationService = Depends(get_recommendation_service),
) -> List[Dict[str, Any]]:
    return service.recommend(req.genres)
