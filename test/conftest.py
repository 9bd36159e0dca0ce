# test/conftest.py
import asyncio
from typing import Optional

import pytest
import pytest_asyncio
from fastapi import FastAPI, HTTPException, Request, Response
from httpx import ASGITransport, AsyncClient

from blog_admin_console.admin_apis.api_client import AdminApiClient
from blog_admin_console.admin_apis.storage_client import CoverImageStorage

TOKEN = "test-token"
API_BASE_URL = "http://test/api"
STORAGE_BASE_URL = "http://storage.test"
BUCKET = "cover_image"


def category_row(id: str, name: str) -> dict:
    return {
        "id": id,
        "name": name,
        "createdAt": "2025-01-01T00:00:00.000Z",
        "updatedAt": "2025-01-01T00:00:00.000Z",
    }


class FakeBlogBackend:
    """
    In-memory stand-in for the blog REST API and the storage service.

    `requests` records (method, path) for every call that reached the app.
    `failures` maps an HTTP method to a status code returned once for the
    next request with that method. When `gate` is set, writes wait on it.
    """

    def __init__(self):
        self.categories: dict[str, dict] = {
            "a": category_row("a", "Python"),
            "b": category_row("b", "Rust"),
            "c": category_row("c", "Go"),
        }
        self.posts: dict[str, dict] = {
            "1": {
                "id": "1",
                "title": "First",
                "content": "Hello",
                "coverImageURL": "https://img.test/1.png",
                "createdAt": "2025-01-02T00:00:00.000Z",
                "category_ids": ["a"],
            },
            "2": {
                "id": "2",
                "title": "Second",
                "content": "World",
                "coverImageURL": "https://img.test/2.png",
                "createdAt": "2025-01-03T00:00:00.000Z",
                "category_ids": ["a", "b"],
            },
        }
        self.requests: list[tuple[str, str]] = []
        self.failures: dict[str, int] = {}
        self.bodies: list[dict] = []
        self.uploads: dict[str, bytes] = {}
        self.gate: Optional[asyncio.Event] = None
        self._next_id = 100

    def render_post(self, row: dict) -> dict:
        data = {k: v for k, v in row.items() if k != "category_ids"}
        data["categories"] = [
            {"category": {"id": cid, "name": self.categories[cid]["name"]}}
            for cid in row["category_ids"]
            if cid in self.categories
        ]
        return data

    def new_id(self) -> str:
        self._next_id += 1
        return str(self._next_id)

    def count(self, method: str) -> int:
        return sum(1 for m, _ in self.requests if m == method)


def build_app(backend: FakeBlogBackend) -> FastAPI:
    app = FastAPI()

    @app.middleware("http")
    async def record_and_inject(request: Request, call_next):
        backend.requests.append((request.method, request.url.path))
        status = backend.failures.pop(request.method, None)
        if status is not None:
            return Response(status_code=status)
        return await call_next(request)

    def require_token(request: Request) -> None:
        if request.headers.get("Authorization") != TOKEN:
            raise HTTPException(401, "Unauthorized")

    async def wait_for_gate() -> None:
        if backend.gate is not None:
            await backend.gate.wait()

    @app.get("/api/categories")
    async def list_categories():
        return list(backend.categories.values())

    @app.get("/api/posts")
    async def list_posts():
        return [backend.render_post(row) for row in backend.posts.values()]

    @app.get("/api/posts/{post_id}")
    async def get_post(post_id: str):
        if post_id not in backend.posts:
            raise HTTPException(404, "Not found")
        return backend.render_post(backend.posts[post_id])

    @app.post("/api/admin/posts", status_code=201)
    async def create_post(request: Request):
        require_token(request)
        await wait_for_gate()
        body = await request.json()
        backend.bodies.append(body)
        post_id = backend.new_id()
        backend.posts[post_id] = {
            "id": post_id,
            "title": body["title"],
            "content": body["content"],
            "coverImageURL": body.get("coverImageURL", ""),
            "createdAt": "2025-02-01T00:00:00.000Z",
            "category_ids": body.get("categoryIds", []),
        }
        return backend.render_post(backend.posts[post_id])

    @app.put("/api/admin/posts/{post_id}")
    async def update_post(post_id: str, request: Request):
        require_token(request)
        await wait_for_gate()
        if post_id not in backend.posts:
            raise HTTPException(404, "Not found")
        body = await request.json()
        backend.bodies.append(body)
        row = backend.posts[post_id]
        row.update(
            title=body["title"],
            content=body["content"],
            coverImageURL=body.get("coverImageURL", ""),
            category_ids=body.get("categoryIds", []),
        )
        return backend.render_post(row)

    @app.delete("/api/admin/posts/{post_id}")
    async def delete_post(post_id: str, request: Request):
        require_token(request)
        await wait_for_gate()
        if backend.posts.pop(post_id, None) is None:
            raise HTTPException(404, "Not found")
        return Response(status_code=204)

    @app.delete("/api/admin/categories/{category_id}")
    async def delete_category(category_id: str, request: Request):
        require_token(request)
        if backend.categories.pop(category_id, None) is None:
            raise HTTPException(404, "Not found")
        for row in backend.posts.values():
            row["category_ids"] = [c for c in row["category_ids"] if c != category_id]
        return Response(status_code=204)

    @app.post("/storage/v1/object/{bucket}/{path:path}")
    async def upload_object(bucket: str, path: str, request: Request):
        backend.uploads[f"{bucket}/{path}"] = await request.body()
        return {"Key": f"{bucket}/{path}"}

    return app


@pytest.fixture
def backend():
    return FakeBlogBackend()


@pytest.fixture
def fake_app(backend):
    return build_app(backend)


@pytest_asyncio.fixture(scope="function")
async def api(fake_app):
    """API client talking to the in-memory backend through ASGITransport."""
    transport = ASGITransport(app=fake_app)
    async with AsyncClient(transport=transport, base_url=API_BASE_URL) as http:
        yield AdminApiClient(http)


@pytest_asyncio.fixture(scope="function")
async def storage(fake_app):
    transport = ASGITransport(app=fake_app)
    async with AsyncClient(transport=transport, base_url=STORAGE_BASE_URL) as http:
        yield CoverImageStorage(http, BUCKET)


class Recorder:
    """Collects the argument of every call, for navigate/notify callbacks."""

    def __init__(self):
        self.calls: list = []

    def __call__(self, *args):
        self.calls.append(args[0] if len(args) == 1 else args)


class AsyncRecorder(Recorder):
    async def __call__(self, *args):
        super().__call__(*args)


@pytest.fixture
def navigate():
    return Recorder()


@pytest.fixture
def notify():
    return Recorder()


@pytest.fixture
def refetch():
    return AsyncRecorder()


@pytest.fixture
def token():
    return TOKEN
