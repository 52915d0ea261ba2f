"""Backend collaborators of the chat client.

Responsibilities:
    - Session: bearer token and role of the logged-in user
    - BackendClient: non-streaming chat fallback and admin REST endpoints
"""

from vectormind.api.client import BackendClient
from vectormind.api.session import Session, SessionProvider

__all__ = ["BackendClient", "Session", "SessionProvider"]
