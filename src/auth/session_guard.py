# src/auth/session_guard.py

"""Resolves the signed-in user once per app session."""

import logging
from typing import Protocol

from src.auth.supabase_provider import AuthSession
from src.models.session import Session, SessionStore
from src.services.errors import Unauthenticated

logger = logging.getLogger("campuskart.session")


class AuthProvider(Protocol):
    async def get_session(self) -> AuthSession | None: ...


class SessionGuard:
    """Gatekeeper for everything that needs a signed-in user.

    The provider is consulted at most once. A failed resolution stays
    failed until the user signs in again through the explicit sign-in
    flow (:meth:`accept`); there is no automatic retry.
    """

    def __init__(
        self, provider: AuthProvider, store: SessionStore,
    ) -> None:
        self.provider = provider
        self.store = store
        self._resolved = False

    async def resolve_session(self) -> Session | None:
        """Query the auth provider and persist the result in the store."""
        if self._resolved:
            return self.store.current
        self._resolved = True

        try:
            auth = await self.provider.get_session()
        except Exception as exc:
            logger.error(
                "Session resolution failed: %s", exc, exc_info=True
            )
            return None

        if auth is None:
            logger.info("No active session; sign-in required")
            return None

        session = Session(user_id=auth.user_id, token=auth.access_token)
        self.store.set(session)
        logger.info("Session resolved for user %s", session.user_id)
        return session

    def accept(self, auth: AuthSession) -> Session:
        """Install a session obtained from the sign-in flow."""
        session = Session(user_id=auth.user_id, token=auth.access_token)
        self._resolved = True
        self.store.set(session)
        logger.info("Session accepted for user %s", session.user_id)
        return session

    @property
    def is_authenticated(self) -> bool:
        return self.store.current is not None

    def require(self) -> Session:
        """Return the current session or raise ``Unauthenticated``."""
        session = self.store.current
        if session is None:
            raise Unauthenticated()
        return session

    def logout(self) -> None:
        user = self.store.current
        self.store.clear()
        logger.info(
            "Logged out user %s", user.user_id if user else "<none>"
        )
