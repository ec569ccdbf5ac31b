"""In-process identity provider.

Implements IdentityPort for a single interactive session: the CLI signs a
user in and out, and every command runs as that user.
"""

import logging

from storefront.core.ports import IdentityPort

logger = logging.getLogger(__name__)


class StaticIdentityProvider(IdentityPort):
    """Holds the signed-in username for the lifetime of a session."""

    def __init__(self, username: str | None = None):
        self._username = username or None

    def current_principal_name(self) -> str | None:
        return self._username

    def sign_in(self, username: str) -> None:
        if not username or not username.strip():
            raise ValueError("username must be a non-empty string")
        self._username = username
        logger.info(f"Signed in as {username}", extra={"username": username})

    def sign_out(self) -> None:
        if self._username is not None:
            logger.info(
                f"Signed out {self._username}", extra={"username": self._username}
            )
        self._username = None
