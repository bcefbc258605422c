from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

PRICE_STATUS_FREE = "Free"
PRICE_STATUS_OFF_SALE = "Off-Sale"

_OFF_SALE_SPELLINGS = {"off-sale", "off sale", "offsale"}


@dataclass(slots=True, frozen=True)
class BundleItem:
    id: int
    name: str | None = None
    description: str | None = None
    price_status: str | None = None
    price: float | int | None = None
    updated_at: datetime | None = None
    creator_name: str | None = None
    creator_profile_link: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(slots=True)
class Notification:
    title: str
    url: str
    description: str
    price: str
    creator: str
    thumbnail_url: str | None
    timestamp: datetime
    footer_text: str
    footer_icon_url: str | None = None
    color: int = 0x0099FF


def normalize_price_status(value: Any) -> str | None:
    """Map upstream price status spellings onto the two statuses we care about.

    Anything other than free or off-sale (including ``None``) means the bundle
    is sold at its listed price.
    """
    if value is None:
        return None
    normalized = str(value).strip()
    if normalized.lower() == "free":
        return PRICE_STATUS_FREE
    if normalized.lower() in _OFF_SALE_SPELLINGS:
        return PRICE_STATUS_OFF_SALE
    return None
