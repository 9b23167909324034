# catalog_api/chat.py
"""
Routing of chat input.

An image goes to OCR; a message mentioning "category" becomes a
category lookup; anything else gets a canned reply. The OCR engine and
the category lookup are collaborators handed to ``ChatIntentRouter``,
and whatever goes wrong inside them is turned into a fixed reply rather
than an HTTP error.
"""

import logging
import urllib.parse
from typing import Any, Dict, List, Optional

from pymongo.errors import PyMongoError
from typing_extensions import Protocol

from . import config
from .catalog.store import CatalogQueryService
from .errors import CatalogError, InvalidArgument, UpstreamFailure
from .http_client import get_json
from .models import ChatResponse


logger = logging.getLogger(__name__)

OCR_FAILED = "Sorry, I couldn't read any text from that image."
CATEGORY_FAILED = "Sorry, I couldn't find any products in that category."
NOT_IMPLEMENTED = "Sorry, I can only help with category searches and images for now."


class OcrEngine(Protocol):
    def recognize(self, payload: Any) -> str:
        ...


class CategoryLookup(Protocol):
    def lookup(self, category: str) -> List[Dict[str, Any]]:
        ...


class HttpCategoryLookup:
    """Looks a category up through the public ``/category/{name}`` endpoint."""

    def __init__(self, base_url: str, timeout: float = config.HTTP_TIMEOUT_SECONDS):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def lookup(self, category: str) -> List[Dict[str, Any]]:
        url = f"{self.base_url}/category/{urllib.parse.quote(category, safe='')}"
        data = get_json(url, timeout=self.timeout)
        if not isinstance(data, list):
            return []
        return [d for d in data if isinstance(d, dict)]


class LocalCategoryLookup:
    """Looks a category up by calling ``CatalogQueryService`` in-process."""

    def __init__(self, service: CatalogQueryService):
        self.service = service

    def lookup(self, category: str) -> List[Dict[str, Any]]:
        try:
            return self.service.query(category)
        except PyMongoError as exc:
            raise UpstreamFailure(f"Storage error: {exc}") from exc


def category_from_message(message: str) -> str:
    """Everything after the first word of the message."""
    return " ".join(message.split()[1:])


class ChatIntentRouter:
    def __init__(self, ocr: OcrEngine, lookup: CategoryLookup):
        self.ocr = ocr
        self.lookup = lookup

    def route(self, message: Optional[str] = None, image: Any = None) -> ChatResponse:
        if image:
            return self._read_image(image)
        if message:
            if "category" in message.lower():
                return self._lookup_category(category_from_message(message))
            return ChatResponse(text=NOT_IMPLEMENTED)
        raise InvalidArgument("Either a message or an image is required")

    def _read_image(self, image: Any) -> ChatResponse:
        try:
            text = self.ocr.recognize(image)
        except CatalogError as exc:
            logger.error("Image recognition failed: %s", exc.message)
            return ChatResponse(text=OCR_FAILED)
        return ChatResponse(text=f"Here is the text I found in your image: {text}")

    def _lookup_category(self, category: str) -> ChatResponse:
        if not category:
            return ChatResponse(text=CATEGORY_FAILED)
        try:
            items = self.lookup.lookup(category)
        except CatalogError as exc:
            logger.error("Category lookup for %r failed: %s", category, exc.message)
            return ChatResponse(text=CATEGORY_FAILED)
        titles = [str(item.get("title", "")) for item in items if item.get("title")]
        if not titles:
            return ChatResponse(text=CATEGORY_FAILED)
        return ChatResponse(text=f"Here are the products in {category}: {', '.join(titles)}")
