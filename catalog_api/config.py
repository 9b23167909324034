# catalog_api/config.py
import os

from dotenv import load_dotenv

load_dotenv()

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# MongoDB
MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "Products")
MONGO_TIMEOUT_MS = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))

# Collections with a fixed role
CATEGORY_COLLECTION = "Category"
RECOMMENDATION_COLLECTION = "Books"
RECOMMENDATION_LIMIT = 4

# Closed list of categories; when empty every existing collection except
# Category counts as one.
KNOWN_CATEGORIES = [
    c.strip() for c in os.getenv("KNOWN_CATEGORIES", "").split(",") if c.strip()
]

# Chat collaborators
CATALOG_BASE_URL = os.getenv("CATALOG_BASE_URL", "").rstrip("/")
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
OCR_MODEL = os.getenv("OCR_MODEL", "microsoft/trocr-base-printed")
OCR_TIMEOUT_SECONDS = float(os.getenv("OCR_TIMEOUT_SECONDS", "30"))
OCR_WORKERS = int(os.getenv("OCR_WORKERS", "4"))
