# blog_admin_console/posts_view.py
import logging
from typing import Callable, Iterable, Optional

from blog_admin_console.admin_apis.api_client import AdminApiClient
from blog_admin_console.errors import FetchError
from blog_admin_console.models import Category, Post
from blog_admin_console.submission import (
    SubmissionController,
    SubmissionMode,
    SubmissionOutcome,
)

logger = logging.getLogger(__name__)


# --- Derived state ---


def derive_category_options(posts: Iterable[Post]) -> list[Category]:
    """Every category attached to at least one post, once per id."""
    seen: dict[str, Category] = {}
    for post in posts:
        for category in post.categories:
            seen.setdefault(category.id, category)
    return list(seen.values())


def filter_by_category(posts: list[Post], category_id: Optional[str]) -> list[Post]:
    if not category_id:
        return posts
    return [post for post in posts if category_id in post.category_ids]


# --- Screen ---


class PostCollectionView:
    """
    The post list screen. Filtering is recomputed from the last fetch on every
    access and never hits the network. A failed fetch is terminal.
    """

    def __init__(
        self,
        api: AdminApiClient,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.api = api
        self.posts: Optional[list[Post]] = None
        self.category_options: list[Category] = []
        self.selected_category: Optional[str] = None
        self.error: Optional[FetchError] = None
        self.submission = SubmissionController(api, refetch=self.reload, notify=notify)

    async def load(self) -> None:
        try:
            posts = await self.api.get_posts()
        except FetchError as e:
            logger.error(f"Failed to fetch the post list: {e}")
            self.error = e
            return

        self.posts = posts
        self.category_options = derive_category_options(posts)
        logger.info(
            f"Loaded {len(posts)} posts in {len(self.category_options)} categories"
        )

    async def reload(self) -> None:
        await self.load()

    def select_category(self, category_id: Optional[str]) -> None:
        self.selected_category = category_id or None

    @property
    def visible_posts(self) -> list[Post]:
        if self.posts is None:
            return []
        return filter_by_category(self.posts, self.selected_category)

    @property
    def is_submitting(self) -> bool:
        return self.submission.is_submitting

    async def delete_post(
        self, post_id: str, token: Optional[str]
    ) -> Optional[SubmissionOutcome]:
        return await self.submission.submit(
            None, SubmissionMode.DELETE, token, post_id=post_id
        )

    def dispose(self) -> None:
        self.submission.dispose()
