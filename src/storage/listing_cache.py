# src/storage/listing_cache.py

"""Listing cache keyed by the view refresh token."""

import logging
from dataclasses import dataclass

from src.models.product import Product

logger = logging.getLogger("campuskart.cache")


@dataclass
class CacheEntry:
    """Rows fetched while the refresh token had a given value."""

    refresh_token: int
    products: list[Product]


class ListingCache:
    """Holds the last fetched listing for exactly one refresh token.

    Any lookup with a different token discards the entry, so every
    bump of the token forces the next render to refetch.
    """

    def __init__(self) -> None:
        self._entry: CacheEntry | None = None

    def get(self, refresh_token: int) -> list[Product] | None:
        """Return cached rows for *refresh_token*, or ``None`` on miss."""
        entry = self._entry
        if entry is None:
            return None
        if entry.refresh_token != refresh_token:
            logger.debug(
                "Listing cache stale (cached=%d, current=%d); discarding",
                entry.refresh_token,
                refresh_token,
            )
            self._entry = None
            return None
        return list(entry.products)

    def store(self, refresh_token: int, products: list[Product]) -> None:
        self._entry = CacheEntry(
            refresh_token=refresh_token, products=list(products)
        )
        logger.debug(
            "Cached %d listings for refresh token %d",
            len(products),
            refresh_token,
        )

    def clear(self) -> None:
        self._entry = None
