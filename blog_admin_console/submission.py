# blog_admin_console/submission.py
"""
Sends a draft to the API and reconciles the screen with the result.

State machine: IDLE -> SUBMITTING -> IDLE. While SUBMITTING the draft is
locked and further submits are dropped, so a double click never produces two
requests. Failures leave the draft intact for a retry and are shown through
the blocking notify callback; successes discard the draft and signal where
the screen should go next.
"""
import logging
from enum import Enum
from typing import Awaitable, Callable, NamedTuple, Optional

from blog_admin_console.admin_apis.api_client import AdminApiClient
from blog_admin_console.drafts import PostDraft
from blog_admin_console.errors import AuthRequired, RequestFailed

logger = logging.getLogger(__name__)

POST_LIST_ROUTE = "/admin/posts"


def post_route(post_id: str) -> str:
    return f"/posts/{post_id}"


class SubmissionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


class SubmissionMode(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class SubmissionOutcome(NamedTuple):
    mode: SubmissionMode
    post_id: str
    route: Optional[str]  # None when the caller refetches instead of navigating


_FAILURE_MESSAGES = {
    SubmissionMode.CREATE: "Failed to create the post",
    SubmissionMode.UPDATE: "Failed to update the post",
    SubmissionMode.DELETE: "Failed to delete the post",
}


class SubmissionController:
    def __init__(
        self,
        api: AdminApiClient,
        navigate: Optional[Callable[[str], None]] = None,
        refetch: Optional[Callable[[], Awaitable[None]]] = None,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.api = api
        self.navigate = navigate
        self.refetch = refetch
        self.notify = notify
        self.state: SubmissionState = SubmissionState.IDLE
        self._disposed: bool = False

    @property
    def is_submitting(self) -> bool:
        return self.state is SubmissionState.SUBMITTING

    def dispose(self) -> None:
        """The owning screen went away; late responses are ignored."""
        self._disposed = True

    def _notify(self, message: str) -> None:
        if self.notify is not None and not self._disposed:
            self.notify(message)

    async def submit(
        self,
        draft: Optional[PostDraft],
        mode: SubmissionMode,
        token: Optional[str],
        post_id: Optional[str] = None,
    ) -> Optional[SubmissionOutcome]:
        """
        Issues exactly one create/update/delete request.

        Returns the outcome, or None when the submit was dropped (already
        submitting, or the draft was already submitted) or the screen was
        disposed before the answer arrived.
        Raises AuthRequired without touching the network when token is
        missing, and RequestFailed when the request did not succeed.
        """
        # Nothing above the first await may yield: the lock must be taken
        # before another submit can run.
        if self.is_submitting:
            logger.warning(f"Submit ({mode.value}) ignored: a request is in flight")
            return None

        if draft is not None and draft.is_discarded:
            logger.warning(f"Submit ({mode.value}) ignored: draft already submitted")
            return None

        if not token:
            error = AuthRequired()
            self._notify(str(error))
            raise error

        if mode is not SubmissionMode.CREATE and not post_id:
            raise ValueError(f"{mode.value} needs a post id")
        if mode is not SubmissionMode.DELETE and draft is None:
            raise ValueError(f"{mode.value} needs a draft")

        self.state = SubmissionState.SUBMITTING
        if draft is not None:
            draft.lock()

        try:
            target_id = await self._send(draft, mode, token, post_id)
        except RequestFailed as e:
            logger.error(f"{_FAILURE_MESSAGES[mode]}: {e}")
            self._notify(f"{_FAILURE_MESSAGES[mode]}\n{e}")
            raise
        finally:
            self.state = SubmissionState.IDLE
            if draft is not None:
                draft.unlock()

        if draft is not None:
            draft.discard()

        if self._disposed:
            logger.debug(f"Submit ({mode.value}) finished after dispose; ignoring")
            return None

        return await self._signal(mode, target_id)

    async def _send(
        self,
        draft: Optional[PostDraft],
        mode: SubmissionMode,
        token: str,
        post_id: Optional[str],
    ) -> str:
        if mode is SubmissionMode.CREATE:
            return await self.api.create_post(draft.to_payload(), token)
        if mode is SubmissionMode.UPDATE:
            await self.api.update_post(post_id, draft.to_payload(), token)
            return post_id
        await self.api.delete_post(post_id, token)
        return post_id

    async def _signal(self, mode: SubmissionMode, post_id: str) -> SubmissionOutcome:
        if mode is SubmissionMode.DELETE:
            logger.info(f"Deleted post {post_id}")
            if self.refetch is not None:
                await self.refetch()
            return SubmissionOutcome(mode, post_id, None)

        if mode is SubmissionMode.CREATE:
            route = post_route(post_id)
        else:
            route = POST_LIST_ROUTE
        logger.info(f"Post {post_id} saved ({mode.value}), navigating to {route}")
        if self.navigate is not None:
            self.navigate(route)
        return SubmissionOutcome(mode, post_id, route)
