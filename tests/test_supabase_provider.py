# tests/test_supabase_provider.py

"""Tests for the Supabase auth adapter."""

import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from src.auth.supabase_provider import (
    AuthProviderError,
    AuthSession,
    SupabaseAuthProvider,
)


def _resp(status_code: int, body: dict | None = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = body or {}
    return resp


@patch("src.auth.supabase_provider.curl_requests.AsyncSession")
class TestGetSession(unittest.IsolatedAsyncioTestCase):
    """Validating a stored access token."""

    async def test_no_token_means_no_session(
        self, mock_session_cls: MagicMock,
    ) -> None:
        provider = SupabaseAuthProvider(access_token="")
        self.assertIsNone(await provider.get_session())
        mock_session_cls.return_value.get.assert_not_called()

    async def test_valid_token(self, mock_session_cls: MagicMock) -> None:
        session = MagicMock()
        session.get = AsyncMock(return_value=_resp(200, {"id": "u1"}))
        mock_session_cls.return_value = session
        provider = SupabaseAuthProvider(
            supabase_url="https://sb.example", anon_key="anon",
            access_token="tok",
        )

        result = await provider.get_session()

        self.assertEqual(result, AuthSession(access_token="tok", user_id="u1"))
        url = session.get.call_args.args[0]
        headers = session.get.call_args.kwargs["headers"]
        self.assertEqual(url, "https://sb.example/auth/v1/user")
        self.assertEqual(headers["apikey"], "anon")
        self.assertEqual(headers["Authorization"], "Bearer tok")

    async def test_rejected_token_means_no_session(
        self, mock_session_cls: MagicMock,
    ) -> None:
        session = MagicMock()
        session.get = AsyncMock(return_value=_resp(401))
        mock_session_cls.return_value = session
        provider = SupabaseAuthProvider(access_token="expired")
        self.assertIsNone(await provider.get_session())

    async def test_transport_error_raises(
        self, mock_session_cls: MagicMock,
    ) -> None:
        session = MagicMock()
        session.get = AsyncMock(side_effect=TimeoutError("slow"))
        mock_session_cls.return_value = session
        provider = SupabaseAuthProvider(access_token="tok")
        with self.assertRaises(AuthProviderError):
            await provider.get_session()

    async def test_server_error_raises(
        self, mock_session_cls: MagicMock,
    ) -> None:
        session = MagicMock()
        session.get = AsyncMock(return_value=_resp(500))
        mock_session_cls.return_value = session
        provider = SupabaseAuthProvider(access_token="tok")
        with self.assertRaises(AuthProviderError):
            await provider.get_session()


@patch("src.auth.supabase_provider.curl_requests.AsyncSession")
class TestSignIn(unittest.IsolatedAsyncioTestCase):
    """Password grant sign-in."""

    async def test_sign_in_returns_session(
        self, mock_session_cls: MagicMock,
    ) -> None:
        session = MagicMock()
        session.post = AsyncMock(
            return_value=_resp(
                200, {"access_token": "fresh", "user": {"id": "u9"}}
            )
        )
        mock_session_cls.return_value = session
        provider = SupabaseAuthProvider(access_token="")

        result = await provider.sign_in("a@campus.edu", "pw")

        self.assertEqual(result, AuthSession(access_token="fresh", user_id="u9"))
        self.assertEqual(
            session.post.call_args.kwargs["json"],
            {"email": "a@campus.edu", "password": "pw"},
        )

    async def test_bad_credentials_raise(
        self, mock_session_cls: MagicMock,
    ) -> None:
        session = MagicMock()
        session.post = AsyncMock(return_value=_resp(400))
        mock_session_cls.return_value = session
        provider = SupabaseAuthProvider(access_token="")
        with self.assertRaises(AuthProviderError):
            await provider.sign_in("a@campus.edu", "wrong")


if __name__ == "__main__":
    unittest.main()
