# catalog_api/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.database import Database
from pymongo.errors import PyMongoError

from . import config, storage
from .catalog import catalog_router
from .catalog.router import get_query_service
from .catalog.store import CatalogQueryService
from .chat import ChatIntentRouter, HttpCategoryLookup, LocalCategoryLookup, OcrEngine
from .errors import CatalogError, NotFound
from .models import ChatRequest, ChatResponse
from .ocr import TrOcrEngine


logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def get_chat_router(
    request: Request,
    service: CatalogQueryService = Depends(get_query_service),
) -> ChatIntentRouter:
    if config.CATALOG_BASE_URL:
        lookup = HttpCategoryLookup(config.CATALOG_BASE_URL)
    else:
        lookup = LocalCategoryLookup(service)
    return ChatIntentRouter(ocr=request.app.state.ocr, lookup=lookup)


def open_database() -> Database:
    """Connect to MongoDB or stop the process."""
    try:
        return storage.connect()
    except PyMongoError as exc:
        logger.critical("Failed to connect to MongoDB: %s", exc)
        raise SystemExit(1) from exc


def create_app(db: Optional[Database] = None, ocr: Optional[OcrEngine] = None) -> FastAPI:
    """Build the application.

    With ``db`` left out the MongoDB connection is opened on startup and
    a failure to connect stops the process.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_connection = getattr(app.state, "db", None) is None
        if owns_connection:
            app.state.db = open_database()
        yield
        if owns_connection:
            storage.close(app.state.db)

    app = FastAPI(
        title="Catalog Query Service",
        description=(
            "Read-only catalogue API: categories, filtered category listings, "
            "genre recommendations and a small chat router."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.db = db
    app.state.ocr = ocr or TrOcrEngine()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        if exc.status_code >= 500:
            logger.error("Error serving %s %s: %s", request.method, request.url.path, exc.message)
            return JSONResponse(status_code=500, content={"error": "Internal Server Error"})
        content = {"error": exc.message}
        if isinstance(exc, NotFound) and exc.query is not None:
            content["query"] = exc.query
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(PyMongoError)
    async def storage_error_handler(request: Request, exc: PyMongoError):
        logger.error("Storage error serving %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Invalid request"})

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    @app.post("/api/chat", response_model=ChatResponse)
    def chat(req: ChatRequest, router: ChatIntentRouter = Depends(get_chat_router)):
        return router.route(message=req.message, image=req.image)

    app.include_router(catalog_router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("catalog_api.main:app", host=config.HOST, port=config.PORT)
