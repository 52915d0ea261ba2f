"""Session provider: who is logged in and with which token.

Credential issuance happens elsewhere; this module only holds the result so
the exchange controller and the REST client can be handed a token accessor
instead of reading global state.
"""

import logging
from typing import Protocol

from vectormind.models.schemas import User

logger = logging.getLogger(__name__)


class SessionProvider(Protocol):
    """Capabilities the client needs from the login session."""

    def get_token(self) -> str | None:
        ...

    def is_admin(self) -> bool:
        ...

    def can_upload(self) -> bool:
        ...

    def clear(self) -> None:
        ...


class Session:
    """In-memory login session.

    Args:
        token: Bearer token issued by the identity provider.
        user: Profile of the logged-in user, if known.
    """

    def __init__(self, token: str | None = None, user: User | None = None) -> None:
        self.token = token
        self.user = user

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def get_token(self) -> str | None:
        return self.token

    def is_admin(self) -> bool:
        return self.user is not None and self.user.role == "admin"

    def can_upload(self) -> bool:
        """Admins always manage files; other users need an explicit grant."""
        return self.user is not None and (self.user.role == "admin" or self.user.can_upload)

    def clear(self) -> None:
        """Forget the token and the user, e.g. after the backend answered 401."""
        if self.user is not None:
            logger.info(f"Clearing session for {self.user.email}")
        self.token = None
        self.user = None
