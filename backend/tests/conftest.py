import json
import os
from urllib.parse import unquote

# Settings are read at import time
os.environ.setdefault("SUPABASE_URL", "https://demo.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config import get_settings, settings
from database import Base, get_db
from main import app
import models.category  # noqa: F401
import models.product  # noqa: F401
import models.wishlist  # noqa: F401
import models.review  # noqa: F401
from utils.blob_store import BlobStore, get_blob_store


class FakeStorage:
    """Supabase Storage stand-in; rejects any key containing 'fail'."""

    def __init__(self):
        self.objects = {}
        self.removed = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = unquote(request.url.path)
        prefix = "/storage/v1/object/"
        if request.method == "POST" and path.startswith(prefix):
            bucket, key = path[len(prefix):].split("/", 1)
            if "fail" in key:
                return httpx.Response(400, json={"statusCode": "400", "error": "Bad Request", "message": "upload rejected"})
            self.objects[(bucket, key)] = (request.content, request.headers.get("content-type"))
            return httpx.Response(200, json={"Key": f"{bucket}/{key}"})
        if request.method == "DELETE" and path.startswith(prefix):
            bucket = path[len(prefix):]
            keys = json.loads(request.content)["prefixes"]
            for key in keys:
                self.objects.pop((bucket, key), None)
            self.removed.extend(keys)
            return httpx.Response(200, json=[{"name": k} for k in keys])
        return httpx.Response(404, json={"message": "not found"})


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def blob_store(storage):
    store = BlobStore.from_settings(settings, transport=httpx.MockTransport(storage.handler))
    yield store
    store.close()


@pytest.fixture
def client(session_factory, blob_store):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def override_settings():
    def apply(**changes):
        app.dependency_overrides[get_settings] = lambda: settings.model_copy(update=changes)
    return apply


@pytest.fixture
def make_category(client):
    def create(title="Electronics", filename="cover.png"):
        res = client.post("/api/category/add", data={"title": title}, files={"picture": (filename, b"\x89PNG-bytes", "image/png")})
        assert res.status_code == 201, res.text
        return res.json()["data"][0]
    return create


@pytest.fixture
def make_product(client):
    def create(category_id, title="Phone", **fields):
        data = {
            "title": title,
            "description": "A thing",
            "price": "199.99",
            "quantity": "3",
            "category_id": str(category_id),
        }
        data.update(fields)
        res = client.post("/api/product/add", data=data, files={"picture": ("main.png", b"\x89PNG-bytes", "image/png")})
        assert res.status_code == 201, res.text
        return res.json()["data"][0]
    return create
