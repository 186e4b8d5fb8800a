# src/models/product.py

"""Product entity shared by the listing, detail and contact views."""

from dataclasses import asdict, dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from src.services.errors import InvalidPayload


class ProductStatus(str, Enum):
    """Availability of a listing. ``SOLD`` is terminal."""

    AVAILABLE = "available"
    SOLD = "sold"

    @property
    def is_terminal(self) -> bool:
        """Terminal states cannot be transitioned out of."""
        return self is ProductStatus.SOLD


_REQUIRED_FIELDS: tuple[str, ...] = (
    "id",
    "title",
    "price",
    "condition",
    "sellerId",
    "sellerName",
    "sellerEmail",
    "createdAt",
)


def _optional_text(value: Any) -> str | None:
    """Coerce an optional text field; empty or missing becomes ``None``."""
    if value is None or value == "":
        return None
    return str(value)


@dataclass(frozen=True)
class Product:
    """A single marketplace listing.

    Instances are never edited locally; a newer copy only ever comes
    from the remote API (a fresh fetch or a status-mutation response).
    """

    id: str
    title: str
    price: Decimal
    condition: str
    seller_id: str
    seller_name: str
    seller_email: str
    created_at: datetime
    status: ProductStatus = ProductStatus.AVAILABLE
    description: str | None = None
    image_url: str | None = None

    @property
    def is_available(self) -> bool:
        return self.status is ProductStatus.AVAILABLE

    def is_seller(self, user_id: str | None) -> bool:
        """Return True when *user_id* owns this listing."""
        return user_id is not None and user_id == self.seller_id

    @classmethod
    def from_payload(cls, payload: Any) -> "Product":
        """Hydrate a product from the API's camelCase JSON object.

        Raises:
            InvalidPayload: on missing fields, a negative or unparsable
                price, an unknown status or a bad timestamp.
        """
        if not isinstance(payload, dict):
            raise InvalidPayload(
                f"expected a product object, got {type(payload).__name__}"
            )
        missing = [k for k in _REQUIRED_FIELDS if payload.get(k) is None]
        if missing:
            raise InvalidPayload(
                f"product payload missing {', '.join(missing)}"
            )

        try:
            price = Decimal(str(payload["price"]))
        except InvalidOperation as exc:
            raise InvalidPayload(
                f"bad price {payload['price']!r}"
            ) from exc
        if not price.is_finite() or price < 0:
            raise InvalidPayload(f"bad price {payload['price']!r}")

        try:
            status = ProductStatus(payload.get("status") or "available")
        except ValueError as exc:
            raise InvalidPayload(
                f"unknown status {payload.get('status')!r}"
            ) from exc

        try:
            created_at = datetime.fromisoformat(str(payload["createdAt"]))
        except ValueError as exc:
            raise InvalidPayload(
                f"bad createdAt {payload['createdAt']!r}"
            ) from exc

        return cls(
            id=str(payload["id"]),
            title=str(payload["title"]),
            price=price,
            condition=str(payload["condition"]),
            seller_id=str(payload["sellerId"]),
            seller_name=str(payload["sellerName"]),
            seller_email=str(payload["sellerEmail"]),
            created_at=created_at,
            status=status,
            description=_optional_text(payload.get("description")),
            image_url=_optional_text(payload.get("imageUrl")),
        )

    def to_dict(self) -> dict[str, object]:
        """Serialise to plain JSON-friendly values (snake_case keys)."""
        data = asdict(self)
        data["price"] = str(self.price)
        data["created_at"] = self.created_at.isoformat()
        data["status"] = self.status.value
        return data
