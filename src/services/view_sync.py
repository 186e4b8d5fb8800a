# src/services/view_sync.py

"""Owner of the shared view state: focus, active view and refresh token.

Views never write this state directly. They call the controller, which
applies the change and publishes a :class:`StateChange` to every
subscriber. Listing views compare the token they last rendered with
against :attr:`AppState.refresh_token`; any difference means their
cached rows are stale.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum

from src.models.product import Product

logger = logging.getLogger("campuskart.view_sync")


class ActiveView(str, Enum):
    """Top-level surfaces of the client."""

    PRODUCTS = "products"
    MESSAGES = "messages"
    PROFILE = "profile"
    UPLOAD = "upload"


@dataclass(frozen=True)
class AppState:
    """Snapshot of the shared view state."""

    selected_product: Product | None = None
    active_view: ActiveView = ActiveView.PRODUCTS
    refresh_token: int = 0
    user_verified: bool = False


@dataclass(frozen=True)
class StateChange:
    """Published after every controller write."""

    kind: str
    state: AppState


Listener = Callable[[StateChange], None]


class ViewSyncController:
    """Single writer of :class:`AppState`."""

    def __init__(self, state: AppState | None = None) -> None:
        self._state = state or AppState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def refresh_token(self) -> int:
        return self._state.refresh_token

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, kind: str, state: AppState) -> None:
        self._state = state
        change = StateChange(kind=kind, state=state)
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.error(
                    "View listener failed on '%s'", kind, exc_info=True
                )

    # ── Focus ────────────────────────────────────────────

    def select_product(self, product: Product) -> None:
        """Open *product* in the detail view, replacing any prior focus."""
        self._commit("select", replace(self._state, selected_product=product))

    def clear_selection(self) -> None:
        self._commit("clear", replace(self._state, selected_product=None))

    # ── Invalidation ─────────────────────────────────────

    def apply_updated_product(self, updated: Product) -> None:
        """Patch the focused copy of *updated* and invalidate listings.

        Focus is only replaced when it holds the same product id. The
        refresh token is bumped regardless, so a completion that lands
        after the detail view closed still triggers a refetch.
        """
        focus = self._state.selected_product
        if focus is not None and focus.id == updated.id:
            focus = updated
        self._commit(
            "product_updated",
            replace(
                self._state,
                selected_product=focus,
                refresh_token=self._state.refresh_token + 1,
            ),
        )
        logger.info(
            "Applied update for product %s; refresh token now %d",
            updated.id,
            self._state.refresh_token,
        )

    def bump_refresh(self) -> None:
        self._commit(
            "refresh",
            replace(
                self._state, refresh_token=self._state.refresh_token + 1
            ),
        )
        logger.debug("Refresh token now %d", self._state.refresh_token)

    def is_stale(self, token: int | None) -> bool:
        """True when data rendered with *token* must be refetched."""
        return token != self._state.refresh_token

    # ── Navigation ───────────────────────────────────────

    def set_view(self, view: ActiveView) -> None:
        if view is self._state.active_view:
            return
        self._commit("view", replace(self._state, active_view=view))

    def set_user_verified(self, verified: bool) -> None:
        self._commit(
            "verified", replace(self._state, user_verified=verified)
        )

    def reset(self) -> None:
        """Return to the listing view with nothing focused.

        The refresh token is kept; it never moves backwards.
        """
        self._commit(
            "reset",
            AppState(refresh_token=self._state.refresh_token),
        )
