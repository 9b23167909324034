# catalog_api/models.py
from typing import Any, Optional

from pydantic import BaseModel, Field
from typing_extensions import Literal


class RecommendationRequest(BaseModel):
    # Checked by RecommendationService so a missing or malformed list
    # is answered with a 400, like any other invalid argument.
    genres: Any = None


class ChatRequest(BaseModel):
    message: Optional[str] = None
    image: Optional[Any] = Field(
        default=None,
        description="Image to read, as a base64 string or a data: URL.",
    )


class ChatResponse(BaseModel):
    type: Literal["text"] = "text"
    text: str
