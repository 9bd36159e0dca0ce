# blog_admin_console/admin_apis/api_client.py
"""
Async client for the blog REST API.

Every call is timed and logged. Reads (GET) raise FetchError, writes
(POST/PUT/DELETE) raise RequestFailed; both are raised for non-2xx answers,
transport failures and unparseable bodies alike.
"""
import logging
import time
from typing import Any, Optional

import httpx

from blog_admin_console.config import load_config_from_env
from blog_admin_console.errors import FetchError, RequestFailed
from blog_admin_console.models import Category, Post, PostPayload

logger = logging.getLogger(__name__)


class AdminApiClient:
    """Wrapper around an httpx.AsyncClient bound to the API base URL"""

    def __init__(self, http: httpx.AsyncClient, auth_scheme: str = ""):
        self.http: httpx.AsyncClient = http
        self.auth_scheme: str = auth_scheme
        self.logger: logging.Logger = logging.getLogger(__name__)

    async def __aenter__(self) -> "AdminApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    def _auth_headers(self, token: str) -> dict[str, str]:
        value = f"{self.auth_scheme} {token}" if self.auth_scheme else token
        return {"Authorization": value}

    async def _timed_request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Execute an API call with timing"""
        start: float = time.perf_counter()
        self.logger.info(f"Blog API call: {method} {path}")

        try:
            response = await self.http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            elapsed: float = time.perf_counter() - start
            self.logger.error(
                f"Blog API failed: {method} {path} after {elapsed:.3f}s - {str(e)}"
            )
            raise

        elapsed = time.perf_counter() - start
        self.logger.info(
            f"Blog API completed: {method} {path} "
            f"Status: {response.status_code} in {elapsed:.3f}s"
        )
        return response

    async def _read(self, path: str) -> Any:
        try:
            response = await self._timed_request("GET", path)
        except httpx.HTTPError as e:
            raise FetchError(message=str(e)) from e

        if not response.is_success:
            raise FetchError(response.status_code, response.reason_phrase)

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(
                response.status_code, response.reason_phrase, f"Invalid JSON: {e}"
            ) from e

    async def _write(
        self,
        method: str,
        path: str,
        token: str,
        payload: Optional[PostPayload] = None,
    ) -> httpx.Response:
        kwargs: dict[str, Any] = {"headers": self._auth_headers(token)}
        if payload is not None:
            kwargs["json"] = payload.to_json()

        try:
            response = await self._timed_request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise RequestFailed(message=str(e)) from e

        if not response.is_success:
            raise RequestFailed(response.status_code, response.reason_phrase)
        return response

    # --- Reads ---

    async def get_categories(self) -> list[Category]:
        body = await self._read("/categories")
        try:
            return [Category.model_validate(item) for item in body]
        except (TypeError, ValueError) as e:
            raise FetchError(message=f"Unexpected category list: {e}") from e

    async def get_posts(self) -> list[Post]:
        body = await self._read("/posts")
        try:
            return [Post.model_validate(item) for item in body]
        except (TypeError, ValueError) as e:
            raise FetchError(message=f"Unexpected post list: {e}") from e

    async def get_post(self, post_id: str) -> Post:
        body = await self._read(f"/posts/{post_id}")
        try:
            return Post.model_validate(body)
        except ValueError as e:
            raise FetchError(message=f"Unexpected post: {e}") from e

    # --- Writes ---

    async def create_post(self, payload: PostPayload, token: str) -> str:
        """Creates a post and returns the id the server assigned to it."""
        response = await self._write("POST", "/admin/posts", token, payload)
        try:
            return str(response.json()["id"])
        except (ValueError, KeyError, TypeError) as e:
            raise RequestFailed(
                response.status_code,
                response.reason_phrase,
                f"Created post has no id: {e}",
            ) from e

    async def update_post(self, post_id: str, payload: PostPayload, token: str) -> None:
        await self._write("PUT", f"/admin/posts/{post_id}", token, payload)

    async def delete_post(self, post_id: str, token: str) -> None:
        await self._write("DELETE", f"/admin/posts/{post_id}", token)

    async def delete_category(self, category_id: str, token: str) -> None:
        await self._write("DELETE", f"/admin/categories/{category_id}", token)


def client(
    base_url: Optional[str] = None,
    auth_scheme: Optional[str] = None,
    timeout: Optional[float] = None,
) -> AdminApiClient:
    """
    Creates an API client.

    Omitted arguments fall back to the environment:
    - BLOG_API_BASE_URL
    - BLOG_API_AUTH_SCHEME
    - BLOG_API_TIMEOUT
    """
    config = load_config_from_env()
    final_base_url = (base_url or config.api_base_url).rstrip("/")
    final_scheme = config.auth_scheme if auth_scheme is None else auth_scheme
    final_timeout = config.timeout if timeout is None else timeout

    http = httpx.AsyncClient(
        base_url=final_base_url,
        timeout=final_timeout,
        headers={"Accept": "application/json"},
    )
    return AdminApiClient(http, auth_scheme=final_scheme)
