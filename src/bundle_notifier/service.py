from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from bundle_notifier.catalog import CatalogGateway, UpstreamError
from bundle_notifier.config import NotificationSettings
from bundle_notifier.models import BundleItem
from bundle_notifier.notification import build_notification
from bundle_notifier.notifiers import Notifier
from bundle_notifier.store import SeenStore
from bundle_notifier.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RunStats:
    fetched: int = 0
    new: int = 0
    posted: int = 0
    bootstrapped: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class BundleWatchService:
    """Detects newly listed bundles and broadcasts one notification per bundle.

    The first non-empty listing only seeds the seen store. After that, every
    listed id missing from the store is marked seen before it is resolved and
    posted, so a crash mid-tick never re-posts a bundle.
    """

    def __init__(
        self,
        *,
        gateway: CatalogGateway,
        store: SeenStore,
        notifier: Notifier,
        settings: NotificationSettings,
        fetch_details: bool = True,
        alert_on_failure: bool = True,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.gateway = gateway
        self.store = store
        self.notifier = notifier
        self.settings = settings
        self.fetch_details = fetch_details
        self.alert_on_failure = alert_on_failure
        self.clock = clock

    @property
    def bootstrapped(self) -> bool:
        return not self.store.is_empty()

    async def run_once(self) -> RunStats:
        stats = RunStats()
        logger.info("Checking for new Roblox bundles...")

        try:
            bundles = await asyncio.to_thread(self.gateway.list_recent)
        except UpstreamError as exc:
            message = f"catalog listing failed: {exc}"
            logger.error(message)
            stats.errors.append(message)
            if self.bootstrapped and self.alert_on_failure:
                await self._send_alert(f"🚨 Error checking for new bundles: {exc}")
            return stats

        stats.fetched = len(bundles)

        if not self.bootstrapped:
            if bundles:
                self.store.mark_seen(bundle.id for bundle in bundles)
                stats.bootstrapped = True
                logger.info(
                    "Initial scan complete. Found %d bundles. Monitoring for new ones.",
                    len(self.store),
                )
            else:
                logger.info("Initial scan returned no bundles; baseline not set yet")
            return stats

        delta = self._new_bundles(bundles)
        stats.new = len(delta)
        if not delta:
            logger.info("No new bundles found.")
            return stats

        logger.info("Found %d new bundle(s)!", len(delta))
        self.store.mark_seen(bundle.id for bundle in delta)

        thumbnails = await self._resolve_thumbnails(delta)

        for bundle in delta:
            try:
                item = await self._resolve_item(bundle)
            except UpstreamError as exc:
                message = f"failed to resolve bundle {bundle.id}: {exc}"
                logger.error(message)
                stats.errors.append(message)
                continue

            notification = build_notification(
                item,
                thumbnails.get(bundle.id),
                settings=self.settings,
                now=self.clock(),
            )

            try:
                await self.notifier.post(notification)
            except Exception as exc:  # noqa: BLE001
                message = f"failed to post bundle {bundle.id}: {exc}"
                logger.exception(message)
                stats.errors.append(message)
                continue

            stats.posted += 1

        return stats

    def _new_bundles(self, bundles: list[BundleItem]) -> list[BundleItem]:
        delta: list[BundleItem] = []
        queued: set[int] = set()
        for bundle in bundles:
            if bundle.id in queued or self.store.has_seen(bundle.id):
                continue
            queued.add(bundle.id)
            delta.append(bundle)
        return delta

    async def _resolve_thumbnails(self, delta: list[BundleItem]) -> dict[int, str]:
        try:
            return await asyncio.to_thread(
                self.gateway.get_thumbnails, [bundle.id for bundle in delta]
            )
        except UpstreamError as exc:
            logger.warning("Thumbnail lookup failed; posting without images: %s", exc)
            return {}

    async def _resolve_item(self, bundle: BundleItem) -> BundleItem:
        if not self.fetch_details:
            return bundle
        return await asyncio.to_thread(self.gateway.get_detail, bundle.id)

    async def _send_alert(self, message: str) -> None:
        try:
            await self.notifier.post_text(message)
        except Exception as exc:  # noqa: BLE001
            logger.exception("failed to send failure alert: %s", exc)
