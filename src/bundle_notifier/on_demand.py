from __future__ import annotations

import asyncio
import logging

from bundle_notifier.catalog import CatalogGateway, NotFound, UpstreamError
from bundle_notifier.config import NotificationSettings
from bundle_notifier.models import Notification
from bundle_notifier.notification import build_notification

logger = logging.getLogger(__name__)


class HandlerError(Exception):
    """User-facing failure of an on-demand lookup; ``str(exc)`` is the reply."""

    def __init__(self, message: str, bundle_id: str) -> None:
        super().__init__(message)
        self.bundle_id = bundle_id


class BundleNotFoundError(HandlerError):
    pass


class OnDemandHandler:
    def __init__(
        self,
        *,
        gateway: CatalogGateway,
        settings: NotificationSettings,
        default_bundle_id: str,
    ) -> None:
        self.gateway = gateway
        self.settings = settings
        self.default_bundle_id = default_bundle_id

    def resolve_id(self, raw_id: str | None) -> str:
        value = (raw_id or "").strip()
        return value or self.default_bundle_id

    async def handle(self, raw_id: str | None) -> Notification:
        bundle_id = self.resolve_id(raw_id)

        try:
            item = await asyncio.to_thread(self.gateway.get_detail, bundle_id)
        except NotFound:
            logger.info("On-demand lookup found no bundle %s", bundle_id)
            raise BundleNotFoundError(
                f"Could not find a bundle with ID `{bundle_id}`. "
                "It might be invalid or off-sale.",
                bundle_id,
            ) from None
        except UpstreamError as exc:
            logger.error("On-demand lookup for bundle %s failed: %s", bundle_id, exc)
            raise HandlerError(
                f"🚨 An error occurred while fetching bundle `{bundle_id}`: {exc.summary()}",
                bundle_id,
            ) from exc

        try:
            thumbnails = await asyncio.to_thread(self.gateway.get_thumbnails, [item.id])
        except UpstreamError as exc:
            logger.warning("Thumbnail lookup for bundle %s failed: %s", item.id, exc)
            thumbnails = {}

        return build_notification(item, thumbnails.get(item.id), settings=self.settings)
