# tests/test_session_guard.py

"""Tests for SessionGuard session bootstrap."""

import unittest
from unittest.mock import AsyncMock, MagicMock

from src.auth.session_guard import SessionGuard
from src.auth.supabase_provider import AuthProviderError, AuthSession
from src.models.session import Session, SessionStore
from src.services.errors import Unauthenticated


def _provider(result: object = None, error: Exception | None = None) -> MagicMock:
    provider = MagicMock()
    provider.get_session = AsyncMock(return_value=result, side_effect=error)
    return provider


class TestResolveSession(unittest.IsolatedAsyncioTestCase):
    """One-shot resolution at startup."""

    async def test_success_persists_to_store(self) -> None:
        store = SessionStore()
        guard = SessionGuard(
            _provider(AuthSession(access_token="tok", user_id="u1")), store
        )

        session = await guard.resolve_session()

        self.assertEqual(session, Session(user_id="u1", token="tok"))
        self.assertEqual(store.current, session)
        self.assertTrue(guard.is_authenticated)

    async def test_no_session_returns_none(self) -> None:
        store = SessionStore()
        guard = SessionGuard(_provider(None), store)
        self.assertIsNone(await guard.resolve_session())
        self.assertIsNone(store.current)

    async def test_provider_error_returns_none(self) -> None:
        guard = SessionGuard(
            _provider(error=AuthProviderError("unreachable")), SessionStore()
        )
        with self.assertLogs("campuskart.session", level="ERROR"):
            self.assertIsNone(await guard.resolve_session())

    async def test_provider_queried_once(self) -> None:
        """A failed resolution is not retried automatically."""
        provider = _provider(None)
        guard = SessionGuard(provider, SessionStore())
        await guard.resolve_session()
        await guard.resolve_session()
        provider.get_session.assert_awaited_once()

    async def test_accept_after_failed_resolution(self) -> None:
        store = SessionStore()
        guard = SessionGuard(_provider(None), store)
        await guard.resolve_session()

        session = guard.accept(AuthSession(access_token="new", user_id="u2"))

        self.assertEqual(store.current, session)
        self.assertEqual(guard.require().user_id, "u2")


class TestRequireAndLogout(unittest.TestCase):
    """Precondition checks for mutation entry points."""

    def test_require_without_session_raises(self) -> None:
        guard = SessionGuard(MagicMock(), SessionStore())
        with self.assertRaises(Unauthenticated):
            guard.require()

    def test_logout_clears_store(self) -> None:
        store = SessionStore()
        store.set(Session(user_id="u1", token="t"))
        guard = SessionGuard(MagicMock(), store)
        self.assertTrue(guard.is_authenticated)
        guard.logout()
        self.assertIsNone(store.current)
        self.assertFalse(guard.is_authenticated)
        with self.assertRaises(Unauthenticated):
            guard.require()


if __name__ == "__main__":
    unittest.main()
