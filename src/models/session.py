# src/models/session.py

"""Authenticated session model and its process-wide store."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Session:
    """The signed-in user's identity and bearer token."""

    user_id: str
    token: str


class SessionStore:
    """Holds the current session for the lifetime of the app session.

    Written once at startup (or after an explicit sign-in) and cleared
    on logout. Nothing is persisted to disk.
    """

    def __init__(self) -> None:
        self._session: Session | None = None

    @property
    def current(self) -> Session | None:
        return self._session

    def set(self, session: Session) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None
