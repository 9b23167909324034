"""
Catalog package for the catalogue query API.

Routes, schemas and MongoDB access for browsing item categories: the
category registry, the translation of query-string filters into a
MongoDB query, and the genre-based recommendation lookup.
"""

from .router import router as catalog_router  # noqa: F401
