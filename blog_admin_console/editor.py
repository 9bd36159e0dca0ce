# blog_admin_console/editor.py
"""
The new-post and edit-post screens.

A PostEditor owns one barrier (and through it one draft) plus one submission
controller. Without a post id it creates a post, with one it updates it.
"""
import logging
from typing import Awaitable, Callable, Optional

from blog_admin_console.admin_apis.api_client import AdminApiClient
from blog_admin_console.admin_apis.storage_client import CoverImageStorage, StoredImage
from blog_admin_console.auth import AuthSession
from blog_admin_console.drafts import (
    DraftBarrier,
    LoadState,
    PostDraft,
    attach_cover_image,
    load_draft,
)
from blog_admin_console.submission import (
    SubmissionController,
    SubmissionMode,
    SubmissionOutcome,
)

logger = logging.getLogger(__name__)


class PostEditor:
    def __init__(
        self,
        api: AdminApiClient,
        session: AuthSession,
        post_id: Optional[str] = None,
        storage: Optional[CoverImageStorage] = None,
        navigate: Optional[Callable[[str], None]] = None,
        notify: Optional[Callable[[str], None]] = None,
        refetch: Optional[Callable[[], Awaitable[None]]] = None,
    ):
        self.api = api
        self.session = session
        self.post_id = post_id
        self.storage = storage
        self.notify = notify
        self.barrier = DraftBarrier(expect_post=post_id is not None)
        self.submission = SubmissionController(
            api, navigate=navigate, refetch=refetch, notify=notify
        )

    @property
    def mode(self) -> SubmissionMode:
        return SubmissionMode.CREATE if self.post_id is None else SubmissionMode.UPDATE

    @property
    def state(self) -> LoadState:
        return self.barrier.state

    @property
    def draft(self) -> Optional[PostDraft]:
        return self.barrier.draft

    @property
    def is_submitting(self) -> bool:
        return self.submission.is_submitting

    async def load(self) -> LoadState:
        await load_draft(self.api, self.post_id, barrier=self.barrier)
        return self.barrier.state

    async def upload_cover(
        self, data: bytes, content_type: str = "application/octet-stream"
    ) -> StoredImage:
        if self.storage is None:
            raise RuntimeError("No cover image storage configured")
        if self.draft is None:
            raise RuntimeError("Draft is not loaded yet")
        return await attach_cover_image(
            self.draft, self.storage, data, content_type, notify=self.notify
        )

    async def save(self) -> Optional[SubmissionOutcome]:
        if self.draft is None:
            raise RuntimeError("Draft is not loaded yet")
        return await self.submission.submit(
            self.draft, self.mode, self.session.token, post_id=self.post_id
        )

    def dispose(self) -> None:
        self.barrier.dispose()
        self.submission.dispose()
