from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from bundle_notifier.catalog import RobloxCatalogClient, UpstreamError
from bundle_notifier.config import AppConfig, ConfigError, load_config, load_credentials
from bundle_notifier.logging_config import setup_logging
from bundle_notifier.models import Notification
from bundle_notifier.notification import build_notification, render_notification_text
from bundle_notifier.on_demand import HandlerError, OnDemandHandler

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bundle-bot",
        description="Watch the Roblox catalog and post new bundles to Discord.",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to config YAML file (default: built-in settings)",
    )
    parser.add_argument(
        "--log-level",
        help="Override config log level (e.g. INFO, DEBUG)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("run", help="Start the Discord bot and poll for new bundles")
    subparsers.add_parser(
        "dry-run",
        help="Fetch the recent bundle list once and print the notifications",
    )

    lookup = subparsers.add_parser("lookup", help="Print the notification for one bundle")
    lookup.add_argument("id", nargs="?", default=None, help="Bundle ID (default from config)")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app_config = load_config(args.config)
    except ConfigError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return 2

    log_level = args.log_level or app_config.log_level
    setup_logging(log_level)

    gateway = RobloxCatalogClient(app_config.catalog)

    if args.command == "dry-run":
        return _run_dry_run(app_config, gateway)

    if args.command == "lookup":
        return _run_lookup(app_config, gateway, args.id)

    return _run_bot(app_config, gateway)


def _run_bot(app_config: AppConfig, gateway: RobloxCatalogClient) -> int:
    try:
        credentials = load_credentials(app_config.discord)
    except ConfigError as exc:
        logger.critical("FATAL: %s", exc)
        return 2

    # Imported here so dry-run and lookup work without a Discord connection.
    from bundle_notifier.bot import BundleBot

    bot = BundleBot(config=app_config, credentials=credentials, gateway=gateway)
    bot.run(credentials.token, log_handler=None)
    return 0


def _run_dry_run(app_config: AppConfig, gateway: RobloxCatalogClient) -> int:
    try:
        bundles = gateway.list_recent()
    except UpstreamError as exc:
        logger.error("catalog listing failed: %s", exc)
        return 1

    logger.info("Catalog returned %d bundles", len(bundles))
    for bundle in bundles:
        notification = build_notification(bundle, None, settings=app_config.notification)
        _print_preview(notification)
    return 0


def _run_lookup(app_config: AppConfig, gateway: RobloxCatalogClient, raw_id: str | None) -> int:
    handler = OnDemandHandler(
        gateway=gateway,
        settings=app_config.notification,
        default_bundle_id=app_config.discord.default_bundle_id,
    )
    try:
        notification = asyncio.run(handler.handle(raw_id))
    except HandlerError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    _print_preview(notification)
    return 0


def _print_preview(notification: Notification) -> None:
    print("[DRY RUN] WOULD POST TEXT:")
    print(render_notification_text(notification))
    print("")


if __name__ == "__main__":
    raise SystemExit(main())
