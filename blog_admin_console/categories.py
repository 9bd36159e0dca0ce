# blog_admin_console/categories.py
import logging
from typing import Awaitable, Callable, Optional, Union

from blog_admin_console.admin_apis.api_client import AdminApiClient
from blog_admin_console.errors import AuthRequired, FetchError, RequestFailed
from blog_admin_console.models import Category

logger = logging.getLogger(__name__)

Confirm = Callable[[str], Union[bool, Awaitable[bool]]]


class CategoryDirectory:
    """Read-through view of every category available for tagging. Nothing is cached."""

    def __init__(self, api: AdminApiClient):
        self.api = api

    async def fetch_all(self) -> list[Category]:
        return await self.api.get_categories()


class CategoryAdminView:
    """
    The category management screen: lists categories and deletes one after the
    user confirms. A failed list fetch is terminal; a failed delete unlocks the
    screen and is reported through notify.
    """

    def __init__(
        self,
        api: AdminApiClient,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.directory = CategoryDirectory(api)
        self.api = api
        self.notify = notify
        self.categories: Optional[list[Category]] = None
        self.error: Optional[FetchError] = None
        self.is_loading: bool = False
        self.is_submitting: bool = False

    async def load(self) -> None:
        self.is_loading = True
        try:
            self.categories = await self.directory.fetch_all()
        except FetchError as e:
            logger.error(f"Failed to fetch the category list: {e}")
            self.categories = None
            self.error = e
        finally:
            self.is_loading = False

    def _notify(self, message: str) -> None:
        if self.notify is not None:
            self.notify(message)

    async def delete(
        self,
        category: Category,
        token: Optional[str],
        confirm: Optional[Confirm] = None,
    ) -> bool:
        """
        Deletes a category and reloads the list. Returns False when the user
        declined or another delete is still running.
        """
        if self.is_submitting:
            logger.warning(f"Delete of category {category.id} ignored: busy")
            return False

        # taken before the confirm prompt, which may await
        self.is_submitting = True
        try:
            if confirm is not None:
                answer = confirm(f"Really delete the category '{category.name}'?")
                if not isinstance(answer, bool):
                    answer = await answer
                if not answer:
                    return False

            if not token:
                error = AuthRequired()
                self._notify(str(error))
                raise error

            await self.api.delete_category(category.id, token)
        except RequestFailed as e:
            logger.error(f"Failed to delete category {category.id}: {e}")
            self._notify(f"Failed to delete the category\n{e}")
            raise
        finally:
            self.is_submitting = False

        logger.info(f"Deleted category {category.id}")
        await self.load()
        return True
