"""Unit tests for the session provider."""

import pytest_check as check

from vectormind.api.session import Session
from vectormind.models.schemas import User


def make_user(role: str, can_upload: bool = False) -> User:
    return User(uid="u", email=f"{role}@example.com", role=role, can_upload=can_upload)


class TestSession:
    """Tests for role checks and clearing."""

    def test_anonymous_session(self) -> None:
        session = Session()

        check.is_none(session.get_token())
        check.is_false(session.is_authenticated)
        check.is_false(session.is_admin())
        check.is_false(session.can_upload())

    def test_admin_capabilities(self) -> None:
        session = Session(token="t", user=make_user("admin"))

        check.is_true(session.is_admin())
        check.is_true(session.can_upload())

    def test_upload_grant_without_admin(self) -> None:
        granted = Session(token="t", user=make_user("user", can_upload=True))
        editor = Session(token="t", user=make_user("editor"))

        check.is_false(granted.is_admin())
        check.is_true(granted.can_upload())
        check.is_false(editor.can_upload())

    def test_clear(self) -> None:
        session = Session(token="t", user=make_user("admin"))

        session.clear()

        check.is_none(session.get_token())
        check.is_none(session.user)
