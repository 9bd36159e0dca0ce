# blog_admin_console/drafts.py
"""
Editable post drafts and the join barrier that seeds them.

An edit screen needs two independent fetches (the post and the category
directory) before its form can be filled in. DraftBarrier collects both in
whatever order they complete and builds the draft exactly once.
"""
import asyncio
import logging
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, Field, PrivateAttr

from blog_admin_console import selection
from blog_admin_console.admin_apis.api_client import AdminApiClient
from blog_admin_console.admin_apis.storage_client import CoverImageStorage, StoredImage
from blog_admin_console.categories import CategoryDirectory
from blog_admin_console.errors import ConsoleError, FetchError, UploadFailed
from blog_admin_console.models import Category, Post, PostPayload, SelectableCategory

logger = logging.getLogger(__name__)


class PostDraft(BaseModel):
    title: str = ""
    content: str = ""
    cover_image_url: str = ""
    cover_image_key: Optional[str] = None
    categories: list[SelectableCategory] = Field(default_factory=list)

    _locked: bool = PrivateAttr(default=False)
    _discarded: bool = PrivateAttr(default=False)

    @classmethod
    def empty(cls, categories: list[Category]) -> "PostDraft":
        return cls(categories=selection.initialize(categories))

    @classmethod
    def from_post(cls, post: Post, categories: list[Category]) -> "PostDraft":
        return cls(
            title=post.title,
            content=post.content,
            cover_image_url=post.cover_image_url or "",
            categories=selection.apply_selection(
                selection.initialize(categories), post.category_ids
            ),
        )

    # --- Lifecycle ---

    @property
    def is_locked(self) -> bool:
        return self._locked

    @property
    def is_discarded(self) -> bool:
        return self._discarded

    @property
    def is_editable(self) -> bool:
        return not (self._locked or self._discarded)

    def lock(self) -> None:
        self._locked = True

    def unlock(self) -> None:
        self._locked = False

    def discard(self) -> None:
        self._discarded = True
        self._locked = False

    # --- Form input ---
    # Inputs are disabled while a submission is in flight, so edits made
    # then are dropped instead of raising.

    def _accepts_edit(self, what: str) -> bool:
        if self.is_editable:
            return True
        logger.debug(f"Ignoring {what} edit: draft is locked or discarded")
        return False

    def set_title(self, value: str) -> bool:
        if not self._accepts_edit("title"):
            return False
        self.title = value
        return True

    def set_content(self, value: str) -> bool:
        if not self._accepts_edit("content"):
            return False
        self.content = value
        return True

    def set_cover_image_url(self, value: str) -> bool:
        if not self._accepts_edit("cover image"):
            return False
        self.cover_image_url = value
        return True

    def toggle_category(self, category_id: str) -> bool:
        if not self._accepts_edit("category"):
            return False
        self.categories = selection.toggle(self.categories, category_id)
        return True

    def apply_stored_image(self, image: StoredImage) -> bool:
        if not self._accepts_edit("cover image"):
            return False
        self.cover_image_key = image.path
        self.cover_image_url = image.public_url
        return True

    # --- Serialization ---

    def selected_category_ids(self) -> set[str]:
        return selection.selected_ids(self.categories)

    def to_payload(self) -> PostPayload:
        # keep directory order so payloads are stable
        return PostPayload(
            title=self.title,
            content=self.content,
            cover_image_url=self.cover_image_url,
            cover_image_key=self.cover_image_key,
            category_ids=[c.id for c in self.categories if c.is_select],
        )


class LoadState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class DraftBarrier:
    """
    Waits for the category directory (and, in edit mode, the post) before
    building the draft. Initialization happens once per screen: later
    refetches are recorded but never re-seed the draft, so in-progress edits
    survive. A failed fetch is terminal.
    """

    def __init__(self, expect_post: bool = True):
        self.expect_post: bool = expect_post
        self.post: Optional[Post] = None
        self.categories: Optional[list[Category]] = None
        self.draft: Optional[PostDraft] = None
        self.error: Optional[ConsoleError] = None
        self.initialized: bool = False
        self._disposed: bool = False

    @property
    def state(self) -> LoadState:
        if self.error is not None:
            return LoadState.FAILED
        if self.initialized:
            return LoadState.READY
        return LoadState.LOADING

    def _ignoring(self, what: str) -> bool:
        if self._disposed or self.error is not None:
            logger.debug(f"Ignoring late {what} result")
            return True
        return False

    def post_loaded(self, post: Post) -> None:
        if self._ignoring("post"):
            return
        self.post = post
        self._try_initialize()

    def categories_loaded(self, categories: list[Category]) -> None:
        """
        Records the latest directory fetch. After initialization this no longer
        matches the checkbox list; read draft.categories for that.
        """
        if self._ignoring("categories"):
            return
        self.categories = list(categories)
        self._try_initialize()

    def fail(self, error: ConsoleError) -> None:
        if self._ignoring("error"):
            return
        self.error = error

    def dispose(self) -> None:
        self._disposed = True

    def _try_initialize(self) -> None:
        if self.initialized or self.categories is None:
            return
        if self.expect_post:
            if self.post is None:
                return
            self.draft = PostDraft.from_post(self.post, self.categories)
        else:
            self.draft = PostDraft.empty(self.categories)
        self.initialized = True
        logger.info(
            f"Draft initialized with {len(self.categories)} categories"
            + (f" from post {self.post.id}" if self.post is not None else "")
        )


async def load_draft(
    api: AdminApiClient,
    post_id: Optional[str] = None,
    barrier: Optional[DraftBarrier] = None,
) -> DraftBarrier:
    """
    Runs the fetches a post form needs concurrently and feeds each result to
    the barrier as soon as it arrives. Without post_id this loads a blank
    draft for the create screen.
    """
    if barrier is None:
        barrier = DraftBarrier(expect_post=post_id is not None)

    async def fetch_post() -> None:
        try:
            post = await api.get_post(post_id)
        except FetchError as e:
            logger.error(f"Failed to fetch post {post_id}: {e}")
            barrier.fail(e)
            return
        barrier.post_loaded(post)

    async def fetch_categories() -> None:
        try:
            categories = await CategoryDirectory(api).fetch_all()
        except FetchError as e:
            logger.error(f"Failed to fetch categories: {e}")
            barrier.fail(e)
            return
        barrier.categories_loaded(categories)

    fetches = [fetch_categories()]
    if post_id is not None:
        fetches.append(fetch_post())
    await asyncio.gather(*fetches)
    return barrier


async def attach_cover_image(
    draft: PostDraft,
    storage: CoverImageStorage,
    data: bytes,
    content_type: str = "application/octet-stream",
    notify: Optional[Callable[[str], None]] = None,
) -> StoredImage:
    """
    Uploads a cover image and points the draft at it. On failure the draft's
    image fields are left as they were.
    """
    try:
        image = await storage.upload(data, content_type)
    except UploadFailed as e:
        logger.error(f"Cover image upload failed: {e}")
        if notify is not None:
            notify(str(e))
        raise

    draft.apply_stored_image(image)
    return image
