from __future__ import annotations

from datetime import datetime

from bundle_notifier.config import NotificationSettings
from bundle_notifier.models import (
    PRICE_STATUS_FREE,
    PRICE_STATUS_OFF_SALE,
    BundleItem,
    Notification,
)
from bundle_notifier.utils.datetime_utils import format_datetime, to_utc, utc_now
from bundle_notifier.utils.slug import slugify

UNKNOWN_TITLE = "Unknown Bundle"
NO_DESCRIPTION = "No description available."
NOT_AVAILABLE = "N/A"


def build_notification(
    item: BundleItem,
    thumbnail_url: str | None,
    *,
    settings: NotificationSettings,
    now: datetime | None = None,
) -> Notification:
    """Turn a catalog record into the notification posted to Discord.

    Records from the details endpoint carry ``updated_at`` and keep it as the
    timestamp; list records fall back to ``now`` (the current time by default).
    """
    if item.updated_at is not None:
        timestamp = to_utc(item.updated_at)
    else:
        timestamp = to_utc(now) if now is not None else utc_now()

    return Notification(
        title=item.name or UNKNOWN_TITLE,
        url=bundle_link(item, settings.bundle_base_url),
        description=item.description or NO_DESCRIPTION,
        price=format_price(item, currency=settings.currency),
        creator=format_creator(item),
        thumbnail_url=thumbnail_url or None,
        timestamp=timestamp,
        footer_text=settings.footer_text,
        footer_icon_url=settings.footer_icon_url,
        color=settings.color,
    )


def bundle_link(item: BundleItem, base_url: str) -> str:
    return f"{base_url.rstrip('/')}/{item.id}/{slugify(item.name) or '-'}"


def format_price(item: BundleItem, *, currency: str = "Robux") -> str:
    if item.price_status == PRICE_STATUS_FREE:
        return "Free"
    if item.price_status == PRICE_STATUS_OFF_SALE:
        return "Off-Sale"
    if item.price is not None:
        return f"{item.price} {currency}"
    return NOT_AVAILABLE


def format_creator(item: BundleItem) -> str:
    if item.creator_name and item.creator_profile_link:
        return f"[{item.creator_name}]({item.creator_profile_link})"
    return item.creator_name or NOT_AVAILABLE


def render_notification_text(notification: Notification) -> str:
    lines = [
        f"{notification.title} ({notification.url})",
        f"Price: {notification.price}",
        f"Creator: {notification.creator}",
        f"Updated: {format_datetime(notification.timestamp)}",
    ]
    if notification.thumbnail_url:
        lines.append(f"Thumbnail: {notification.thumbnail_url}")
    lines.append(notification.description)
    return "\n".join(lines)
