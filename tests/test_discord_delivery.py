from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any

import discord
import pytest

from bundle_notifier.models import Notification
from bundle_notifier.notifiers.base import DeliveryError
from bundle_notifier.notifiers.discord_channel import DiscordChannelNotifier, build_discord_embed

TIMESTAMP = datetime(2026, 10, 16, 12, 0, tzinfo=timezone.utc)


def _notification(**overrides: object) -> Notification:
    base = Notification(
        title="Knights of Redcliff: Paladin",
        url="https://www.roblox.com/bundles/192/knights-of-redcliff-paladin",
        description="Honor above all.",
        price="250 Robux",
        creator="[Roblox](https://www.roblox.com/users/1/profile)",
        thumbnail_url="https://tr.rbxcdn.com/192.png",
        timestamp=TIMESTAMP,
        footer_text="Bundle Notifier",
        footer_icon_url="https://i.imgur.com/s4p4b9c.png",
    )
    for key, value in overrides.items():
        setattr(base, key, value)
    return base


class FakeChannel(discord.abc.Messageable):
    def __init__(self, error: Exception | None = None) -> None:
        self.sent: list[dict[str, Any]] = []
        self.error = error

    async def send(self, **kwargs: Any) -> None:  # type: ignore[override]
        if self.error is not None:
            raise self.error
        self.sent.append(kwargs)


class FakeClient:
    def __init__(self, channel: object | None) -> None:
        self.channel = channel
        self.fetched: list[int] = []

    def get_channel(self, channel_id: int) -> object | None:
        return None

    async def fetch_channel(self, channel_id: int) -> object:
        self.fetched.append(channel_id)
        if self.channel is None:
            raise discord.DiscordException("unknown channel")
        return self.channel


def test_embed_carries_all_notification_fields() -> None:
    embed = build_discord_embed(_notification())

    assert embed.title == "Knights of Redcliff: Paladin"
    assert embed.url == "https://www.roblox.com/bundles/192/knights-of-redcliff-paladin"
    assert embed.description == "Honor above all."
    assert embed.color is not None and embed.color.value == 0x0099FF
    assert embed.timestamp == TIMESTAMP
    assert embed.thumbnail.url == "https://tr.rbxcdn.com/192.png"
    assert [(field.name, field.value, field.inline) for field in embed.fields] == [
        ("Price", "250 Robux", True),
        ("Creator", "[Roblox](https://www.roblox.com/users/1/profile)", True),
    ]
    assert embed.footer.text == "Bundle Notifier"
    assert embed.footer.icon_url == "https://i.imgur.com/s4p4b9c.png"


def test_embed_without_thumbnail_and_long_description() -> None:
    embed = build_discord_embed(_notification(thumbnail_url=None, description="x" * 5000))

    assert embed.thumbnail.url is None
    assert embed.description is not None
    assert len(embed.description) == 4096
    assert embed.description.endswith("...")


def test_notifier_sends_embed_and_text_to_broadcast_channel() -> None:
    channel = FakeChannel()
    client = FakeClient(channel)
    notifier = DiscordChannelNotifier(client, 42)  # type: ignore[arg-type]

    asyncio.run(notifier.post(_notification()))
    asyncio.run(notifier.post_text("🚨 alert"))

    assert client.fetched == [42, 42]
    assert channel.sent[0]["embed"].title == "Knights of Redcliff: Paladin"
    assert channel.sent[1] == {"content": "🚨 alert"}


def test_notifier_wraps_send_failures() -> None:
    channel = FakeChannel(error=discord.DiscordException("missing permissions"))
    notifier = DiscordChannelNotifier(FakeClient(channel), 42)  # type: ignore[arg-type]

    with pytest.raises(DeliveryError, match="missing permissions"):
        asyncio.run(notifier.post(_notification()))


def test_notifier_reports_unknown_channel() -> None:
    notifier = DiscordChannelNotifier(FakeClient(None), 42)  # type: ignore[arg-type]

    with pytest.raises(DeliveryError, match="Cannot fetch channel 42"):
        asyncio.run(notifier.post_text("hello"))
