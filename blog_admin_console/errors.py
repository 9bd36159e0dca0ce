# blog_admin_console/errors.py
"""
Error taxonomy for the admin console.

Reads raise FetchError, writes raise RequestFailed. Both keep the HTTP status
and reason phrase when the server answered, or just the underlying message
when the transport or response parsing failed.
"""
from typing import Optional


class ConsoleError(Exception):
    """Base class for every error the console surfaces to a screen."""


class _HttpError(ConsoleError):
    def __init__(
        self,
        status: Optional[int] = None,
        status_text: str = "",
        message: Optional[str] = None,
    ):
        self.status = status
        self.status_text = status_text
        if message is None:
            message = f"{status}: {status_text}"
        super().__init__(message)


class FetchError(_HttpError):
    """A read (GET) failed: non-2xx response, transport error or bad body."""


class RequestFailed(_HttpError):
    """A write (POST/PUT/DELETE) failed: non-2xx, transport error or bad body."""


class AuthRequired(ConsoleError):
    def __init__(self, message: str = "You need to be logged in to do this."):
        super().__init__(message)


class UploadFailed(ConsoleError):
    """The object storage call failed."""
