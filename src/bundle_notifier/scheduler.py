from __future__ import annotations

import asyncio
import logging

from bundle_notifier.service import BundleWatchService

logger = logging.getLogger(__name__)


async def run_polling(
    service: BundleWatchService,
    interval_seconds: float,
    *,
    stop_event: asyncio.Event | None = None,
) -> None:
    """Run ticks back to back with ``interval_seconds`` of idle time between them.

    The first tick runs immediately. The delay is re-armed only after a tick
    finishes, so two ticks never overlap however slow the catalog is.
    """
    stop = stop_event or asyncio.Event()
    logger.info("Scheduled to check for new bundles every %s second(s).", interval_seconds)

    while not stop.is_set():
        try:
            stats = await service.run_once()
        except Exception as exc:  # noqa: BLE001
            logger.exception("bundle check crashed: %s", exc)
        else:
            logger.info(
                "Check complete | fetched=%d new=%d posted=%d bootstrapped=%s errors=%d",
                stats.fetched,
                stats.new,
                stats.posted,
                stats.bootstrapped,
                len(stats.errors),
            )

        try:
            await asyncio.wait_for(stop.wait(), timeout=interval_seconds)
        except asyncio.TimeoutError:
            continue
