# blog_admin_console/auth.py
"""
Holds the bearer token handed out by the auth collaborator.

Screens receive an AuthSession explicitly instead of reading a global, so the
submission logic can be exercised with any token (or none).
"""
from typing import Optional

from blog_admin_console.config import load_config_from_env


class AuthSession:
    def __init__(self, token: Optional[str] = None):
        self.token: Optional[str] = token or None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def sign_in(self, token: str) -> None:
        self.token = token or None

    def sign_out(self) -> None:
        self.token = None


def session_from_env() -> AuthSession:
    """Builds a session from BLOG_ADMIN_TOKEN, unauthenticated if unset."""
    return AuthSession(load_config_from_env().access_token)
