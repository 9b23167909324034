# catalog_api/ocr.py
import base64
import binascii
import io
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Any, Optional

from PIL import Image, UnidentifiedImageError
from transformers import pipeline

from . import config
from .errors import InvalidArgument, UpstreamFailure


logger = logging.getLogger(__name__)


def decode_image(payload: Any) -> Image.Image:
    """Decode a chat image payload into a PIL image.

    Accepts raw bytes, a base64 string or a ``data:image/...;base64,``
    URL as sent by browsers.
    """
    if isinstance(payload, (bytes, bytearray)):
        raw = bytes(payload)
    elif isinstance(payload, str):
        data = payload.split(",", 1)[1] if payload.startswith("data:") else payload
        try:
            raw = base64.b64decode(data, validate=False)
        except (binascii.Error, ValueError) as exc:
            raise InvalidArgument("Image is not valid base64") from exc
    else:
        raise InvalidArgument("Unsupported image payload")

    try:
        image = Image.open(io.BytesIO(raw))
        return image.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise InvalidArgument("Image could not be decoded") from exc


class TrOcrEngine:
    """Text recognition backed by a ``transformers`` image-to-text pipeline.

    The model is loaded on first use and shared afterwards. Inference
    runs on a worker thread so callers can give up after ``timeout``
    seconds.
    """

    def __init__(
        self,
        model_name: str = config.OCR_MODEL,
        timeout: float = config.OCR_TIMEOUT_SECONDS,
        workers: int = config.OCR_WORKERS,
    ):
        self.model_name = model_name
        self.timeout = timeout
        self._pipeline: Optional[Any] = None
        self._lock = threading.Lock()
        # Shared by all requests; a timed-out inference holds its worker
        # until the model returns.
        self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ocr")

    def _get_pipeline(self):
        with self._lock:
            if self._pipeline is None:
                logger.info("Loading OCR model %s", self.model_name)
                self._pipeline = pipeline("image-to-text", model=self.model_name)
            return self._pipeline

    def _run(self, image: Image.Image) -> str:
        result = self._get_pipeline()(image)
        return " ".join(r.get("generated_text", "") for r in result).strip()

    def recognize(self, payload: Any) -> str:
        image = decode_image(payload)
        future = self._executor.submit(self._run, image)
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeout as exc:
            future.cancel()
            logger.error("OCR timed out after %.1fs", self.timeout)
            raise UpstreamFailure("OCR timed out") from exc
        except Exception as exc:
            logger.error("OCR failed: %s", exc)
            raise UpstreamFailure("OCR failed") from exc
