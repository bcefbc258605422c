from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml


class ConfigError(ValueError):
    """Raised when configuration is invalid."""


@dataclass(slots=True)
class CatalogSettings:
    search_url: str = "https://catalog.roblox.com/v1/search/items"
    details_url: str = "https://catalog.roblox.com/v1/items/details"
    thumbnails_url: str = "https://thumbnails.roblox.com/v1/bundles/thumbnails"
    category: str = "Characters"
    subcategory: str = "Bundles"
    sort_type: int = 3
    sort_order: str = "Desc"
    limit: int = 10
    thumbnail_size: str = "420x420"
    thumbnail_format: str = "Png"
    timeout_seconds: int = 15


@dataclass(slots=True)
class NotificationSettings:
    bundle_base_url: str = "https://www.roblox.com/bundles"
    currency: str = "Robux"
    footer_text: str = "Bundle Notifier"
    footer_icon_url: str | None = "https://i.imgur.com/s4p4b9c.png"
    color: int = 0x0099FF


@dataclass(slots=True)
class PollingSettings:
    interval_seconds: int = 60
    fetch_details: bool = True
    alert_on_failure: bool = True


@dataclass(slots=True)
class DiscordSettings:
    token_env_var: str = "DISCORD_BOT_TOKEN"
    channel_id_env_var: str = "DISCORD_CHANNEL_ID"
    client_id_env_var: str = "DISCORD_CLIENT_ID"
    command_name: str = "debugsend"
    default_bundle_id: str = "126"


@dataclass(slots=True)
class AppConfig:
    catalog: CatalogSettings = field(default_factory=CatalogSettings)
    notification: NotificationSettings = field(default_factory=NotificationSettings)
    polling: PollingSettings = field(default_factory=PollingSettings)
    discord: DiscordSettings = field(default_factory=DiscordSettings)
    log_level: str = "INFO"


@dataclass(slots=True, frozen=True)
class DiscordCredentials:
    token: str
    channel_id: int
    client_id: int


def _as_bool(value: Any, *, field_name: str) -> bool:
    if isinstance(value, bool):
        return value

    if isinstance(value, int) and value in {0, 1}:
        return bool(value)

    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"true", "1", "yes", "on"}:
            return True
        if normalized in {"false", "0", "no", "off"}:
            return False

    raise ConfigError(f"{field_name} must be a boolean")


def _as_int(value: Any, *, field_name: str, minimum: int | None = None) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{field_name} must be an integer")

    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        if not isinstance(value, str):
            raise ConfigError(f"{field_name} must be an integer") from exc
        try:
            # Accepts prefixed literals such as colors written as 0x0099FF.
            parsed = int(value.strip(), 0)
        except ValueError as prefixed_exc:
            raise ConfigError(f"{field_name} must be an integer") from prefixed_exc

    if minimum is not None and parsed < minimum:
        raise ConfigError(f"{field_name} must be >= {minimum}")
    return parsed


def _as_str(value: Any, default: str) -> str:
    if value is None:
        return default
    return str(value).strip() or default


def _section(parsed: dict[str, Any], name: str) -> dict[str, Any]:
    raw = parsed.get(name, {}) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{name} must be a mapping")
    return raw


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load the YAML config at ``path``; ``None`` means built-in defaults."""
    if path is None:
        return AppConfig()

    config_path = Path(path).expanduser().resolve()
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        try:
            parsed = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Config file is not valid YAML: {exc}") from exc

    if not isinstance(parsed, dict):
        raise ConfigError("Config root must be a mapping")

    defaults = AppConfig()

    raw_catalog = _section(parsed, "catalog")
    catalog_defaults = defaults.catalog
    catalog_settings = CatalogSettings(
        search_url=_as_str(raw_catalog.get("search_url"), catalog_defaults.search_url),
        details_url=_as_str(raw_catalog.get("details_url"), catalog_defaults.details_url),
        thumbnails_url=_as_str(
            raw_catalog.get("thumbnails_url"), catalog_defaults.thumbnails_url
        ),
        category=_as_str(raw_catalog.get("category"), catalog_defaults.category),
        subcategory=_as_str(raw_catalog.get("subcategory"), catalog_defaults.subcategory),
        sort_type=_as_int(
            raw_catalog.get("sort_type", catalog_defaults.sort_type),
            field_name="catalog.sort_type",
            minimum=0,
        ),
        sort_order=_as_str(raw_catalog.get("sort_order"), catalog_defaults.sort_order),
        limit=_as_int(
            raw_catalog.get("limit", catalog_defaults.limit),
            field_name="catalog.limit",
            minimum=1,
        ),
        thumbnail_size=_as_str(
            raw_catalog.get("thumbnail_size"), catalog_defaults.thumbnail_size
        ),
        thumbnail_format=_as_str(
            raw_catalog.get("thumbnail_format"), catalog_defaults.thumbnail_format
        ),
        timeout_seconds=_as_int(
            raw_catalog.get("timeout_seconds", catalog_defaults.timeout_seconds),
            field_name="catalog.timeout_seconds",
            minimum=1,
        ),
    )

    raw_notification = _section(parsed, "notification")
    notification_defaults = defaults.notification
    footer_icon_raw = raw_notification.get("footer_icon_url", notification_defaults.footer_icon_url)
    footer_icon_url = str(footer_icon_raw).strip() if footer_icon_raw else ""
    notification_settings = NotificationSettings(
        bundle_base_url=_as_str(
            raw_notification.get("bundle_base_url"), notification_defaults.bundle_base_url
        ).rstrip("/"),
        currency=_as_str(raw_notification.get("currency"), notification_defaults.currency),
        footer_text=_as_str(
            raw_notification.get("footer_text"), notification_defaults.footer_text
        ),
        footer_icon_url=footer_icon_url or None,
        color=_as_int(
            raw_notification.get("color", notification_defaults.color),
            field_name="notification.color",
            minimum=0,
        ),
    )

    raw_polling = _section(parsed, "polling")
    polling_defaults = defaults.polling
    polling_settings = PollingSettings(
        interval_seconds=_as_int(
            raw_polling.get("interval_seconds", polling_defaults.interval_seconds),
            field_name="polling.interval_seconds",
            minimum=1,
        ),
        fetch_details=_as_bool(
            raw_polling.get("fetch_details", polling_defaults.fetch_details),
            field_name="polling.fetch_details",
        ),
        alert_on_failure=_as_bool(
            raw_polling.get("alert_on_failure", polling_defaults.alert_on_failure),
            field_name="polling.alert_on_failure",
        ),
    )

    raw_discord = _section(parsed, "discord")
    discord_defaults = defaults.discord
    discord_settings = DiscordSettings(
        token_env_var=_as_str(raw_discord.get("token_env_var"), discord_defaults.token_env_var),
        channel_id_env_var=_as_str(
            raw_discord.get("channel_id_env_var"), discord_defaults.channel_id_env_var
        ),
        client_id_env_var=_as_str(
            raw_discord.get("client_id_env_var"), discord_defaults.client_id_env_var
        ),
        command_name=_as_str(raw_discord.get("command_name"), discord_defaults.command_name),
        default_bundle_id=_as_str(
            raw_discord.get("default_bundle_id"), discord_defaults.default_bundle_id
        ),
    )

    return AppConfig(
        catalog=catalog_settings,
        notification=notification_settings,
        polling=polling_settings,
        discord=discord_settings,
        log_level=str(parsed.get("log_level", "INFO")).upper(),
    )


def load_credentials(
    settings: DiscordSettings,
    environ: Mapping[str, str] | None = None,
) -> DiscordCredentials:
    env = os.environ if environ is None else environ

    token = env.get(settings.token_env_var, "").strip()
    if not token:
        raise ConfigError(f"Missing Discord bot token in environment variable {settings.token_env_var}")

    channel_id = _required_snowflake(env, settings.channel_id_env_var, "channel id")
    client_id = _required_snowflake(env, settings.client_id_env_var, "client id")

    return DiscordCredentials(token=token, channel_id=channel_id, client_id=client_id)


def _required_snowflake(env: Mapping[str, str], var_name: str, label: str) -> int:
    raw = env.get(var_name, "").strip()
    if not raw:
        raise ConfigError(f"Missing Discord {label} in environment variable {var_name}")
    if not raw.isdigit():
        raise ConfigError(f"Discord {label} in {var_name} must be numeric")
    return int(raw)
