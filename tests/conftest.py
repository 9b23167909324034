import base64
import io

import mongomock
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from catalog_api.errors import UpstreamFailure
from catalog_api.main import create_app


BOOKS = [
    {"title": "Harry Potter and the Philosopher's Stone", "rating": 4.8, "price": 12.5,
     "genres": ["Fantasy", "Adventure"], "language": "English", "author": "J. K. Rowling"},
    {"title": "The Hobbit", "rating": 4.7, "price": 10.0,
     "genres": ["Fantasy"], "language": "English", "author": "J. R. R. Tolkien"},
    {"title": "Gone Girl", "rating": 4.1, "price": 15.0,
     "genres": ["Mystery", "Thriller"], "language": "English", "author": "Gillian Flynn"},
    {"title": "L'Étranger", "rating": 4.0, "price": 8.0,
     "genres": ["Drama", "Philosophy"], "language": "French", "author": "Albert Camus"},
    {"title": "Pride and Prejudice", "rating": 4.5, "price": 20.0,
     "genres": ["Romance", "Drama"], "language": "English", "author": "Jane Austen"},
    {"title": "Le Petit Prince", "rating": 4.6, "price": 25.0,
     "genres": ["Fantasy", "Drama"], "language": "French", "author": "Antoine de Saint-Exupéry"},
    {"title": "A Game of Thrones", "rating": 4.4, "price": 18.0,
     "genres": ["Fantasy", "Drama"], "language": "English", "author": "George R. R. Martin"},
    {"title": "The Name of the Wind", "rating": 4.5, "price": 22.0,
     "genres": ["Fantasy"], "language": "English", "author": "Patrick Rothfuss"},
]

MOVIES = [
    {"title": "Inception", "rating": 4.8, "price": 9.99,
     "genres": ["Science Fiction"], "language": "English"},
    {"title": "Amélie", "rating": 4.6, "price": 7.5,
     "genres": ["Romance", "Comedy"], "language": "French"},
]


def png_base64(size=(8, 8)):
    buffer = io.BytesIO()
    Image.new("L", size, color=255).save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue()).decode("ascii")


class FakeOcr:
    def __init__(self, text="HELLO WORLD", fail=False):
        self.text = text
        self.fail = fail
        self.calls = []

    def recognize(self, payload):
        self.calls.append(payload)
        if self.fail:
            raise UpstreamFailure("OCR failed")
        return self.text


class FakeLookup:
    def __init__(self, items=None, error=None):
        self.items = items or []
        self.error = error
        self.calls = []

    def lookup(self, category):
        self.calls.append(category)
        if self.error is not None:
            raise self.error
        return self.items


@pytest.fixture
def db():
    database = mongomock.MongoClient()["Products"]
    database["Category"].insert_many([
        {"name": "Books", "description": "Printed and digital books"},
        {"name": "Movies", "description": "Films on DVD and Blu-ray"},
    ])
    database["Books"].insert_many([dict(b) for b in BOOKS])
    database["Movies"].insert_many([dict(m) for m in MOVIES])
    return database


@pytest.fixture
def empty_db():
    return mongomock.MongoClient()["Products"]


@pytest.fixture
def fake_ocr():
    return FakeOcr()


@pytest.fixture
def client(db, fake_ocr):
    return TestClient(create_app(db=db, ocr=fake_ocr))
