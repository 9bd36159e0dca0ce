# blog_admin_console/admin_apis/storage_client.py
"""
Cover image uploads against the Supabase storage REST API.

Files are stored under private/<md5 of the content>, so uploading the same
image twice overwrites one object instead of creating duplicates.
"""
import hashlib
import logging
import time
from typing import NamedTuple, Optional

import httpx

from blog_admin_console.config import load_config_from_env
from blog_admin_console.errors import UploadFailed

logger = logging.getLogger(__name__)


class StoredImage(NamedTuple):
    path: str  # path inside the bucket, sent to the API as coverImageKey
    public_url: str


def content_path(data: bytes) -> str:
    return f"private/{hashlib.md5(data).hexdigest()}"


class CoverImageStorage:
    def __init__(self, http: httpx.AsyncClient, bucket: str):
        self.http: httpx.AsyncClient = http
        self.bucket: str = bucket

    async def aclose(self) -> None:
        await self.http.aclose()

    def public_url(self, path: str) -> str:
        base = str(self.http.base_url).rstrip("/")
        return f"{base}/storage/v1/object/public/{self.bucket}/{path}"

    async def upload(
        self, data: bytes, content_type: str = "application/octet-stream"
    ) -> StoredImage:
        path = content_path(data)
        start: float = time.perf_counter()
        logger.info(f"Storage upload: {self.bucket}/{path} ({len(data)} bytes)")

        try:
            response = await self.http.post(
                f"/storage/v1/object/{self.bucket}/{path}",
                content=data,
                headers={"Content-Type": content_type, "x-upsert": "true"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Storage upload failed: {self.bucket}/{path} - {str(e)}")
            raise UploadFailed(f"Upload failed: {e}") from e

        elapsed: float = time.perf_counter() - start
        if not response.is_success:
            logger.error(
                f"Storage upload failed: {self.bucket}/{path} "
                f"Status: {response.status_code} after {elapsed:.3f}s"
            )
            raise UploadFailed(
                f"Upload failed: {response.status_code}: {response.reason_phrase}"
            )

        logger.info(f"Storage upload completed: {self.bucket}/{path} in {elapsed:.3f}s")
        return StoredImage(path=path, public_url=self.public_url(path))


def storage_client(
    base_url: Optional[str] = None,
    api_key: Optional[str] = None,
    bucket: Optional[str] = None,
) -> CoverImageStorage:
    """
    Creates a storage client, falling back to SUPABASE_URL, SUPABASE_ANON_KEY
    and COVER_IMAGE_BUCKET for omitted arguments.
    """
    config = load_config_from_env()
    final_base_url = base_url or config.storage_url
    final_api_key = api_key or config.storage_api_key

    if not final_base_url or not final_api_key:
        raise ValueError("Missing required storage credentials")

    http = httpx.AsyncClient(
        base_url=final_base_url.rstrip("/"),
        timeout=config.timeout,
        headers={
            "Authorization": f"Bearer {final_api_key}",
            "apikey": final_api_key,
        },
    )
    return CoverImageStorage(http, bucket or config.storage_bucket)
