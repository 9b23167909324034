"""Catalogue query service: category listings, filters, recommendations and chat routing."""

__version__ = "1.0.0"
