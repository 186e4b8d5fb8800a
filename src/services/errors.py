# src/services/errors.py

"""Failure taxonomy for the product and messaging paths.

``Unauthorized``, ``AlreadyTerminal`` and ``TransitionPending`` are
raised locally before any request is issued. ``RemoteError`` wraps a
network or server fault and carries its detail for the user-facing
notification.
"""


class MarketplaceError(Exception):
    """Base class for every failure surfaced to a view."""

    user_message: str = "Something went wrong. Please try again."

    def __str__(self) -> str:
        detail = super().__str__()
        return detail or self.user_message


class Unauthenticated(MarketplaceError):
    """No active session; all product and message mutations are disabled."""

    user_message = "You must be logged in to do that."


class Unauthorized(MarketplaceError):
    """The acting user is not the listing's seller."""

    user_message = "Only the seller can update this listing."


class AlreadyTerminal(MarketplaceError):
    """The listing is already sold."""

    user_message = "This item has already been sold."


class TransitionPending(MarketplaceError):
    """A status change for the same listing is still in flight."""

    user_message = "An update for this item is already in progress."


class VerificationRequired(MarketplaceError):
    """Listing an item needs a verified profile."""

    user_message = "Verify your profile before listing an item."


class RemoteError(MarketplaceError):
    """Network or server failure while talking to the remote API."""

    user_message = "Failed to reach the marketplace. Please try again."

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail)
        self.detail = detail


class InvalidPayload(MarketplaceError):
    """The remote API returned a body that is not a valid entity."""

    user_message = "The marketplace returned an unexpected response."


class InvalidListing(MarketplaceError):
    """A new listing failed local validation before upload."""

    user_message = "Please fill in the title, price and condition."
