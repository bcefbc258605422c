from __future__ import annotations

import discord

from bundle_notifier.models import Notification

from .base import DeliveryError, Notifier

# Discord rejects embeds whose description exceeds this many characters.
_MAX_DESCRIPTION = 4096


class DiscordChannelNotifier(Notifier):
    def __init__(self, client: discord.Client, channel_id: int) -> None:
        self.client = client
        self.channel_id = channel_id

    async def post(self, notification: Notification) -> None:
        channel = await self._resolve_channel()
        try:
            await channel.send(embed=build_discord_embed(notification))
        except discord.DiscordException as exc:
            raise DeliveryError(
                f"Failed to send embed to channel {self.channel_id}: {exc}"
            ) from exc

    async def post_text(self, message: str) -> None:
        channel = await self._resolve_channel()
        try:
            await channel.send(content=message)
        except discord.DiscordException as exc:
            raise DeliveryError(
                f"Failed to send message to channel {self.channel_id}: {exc}"
            ) from exc

    async def _resolve_channel(self) -> discord.abc.Messageable:
        channel = self.client.get_channel(self.channel_id)
        if channel is None:
            try:
                channel = await self.client.fetch_channel(self.channel_id)
            except discord.DiscordException as exc:
                raise DeliveryError(f"Cannot fetch channel {self.channel_id}: {exc}") from exc

        if not isinstance(channel, discord.abc.Messageable):
            raise DeliveryError(f"Channel {self.channel_id} does not accept messages")
        return channel


def build_discord_embed(notification: Notification) -> discord.Embed:
    description = notification.description
    if len(description) > _MAX_DESCRIPTION:
        description = f"{description[: _MAX_DESCRIPTION - 3]}..."

    embed = discord.Embed(
        title=notification.title,
        url=notification.url,
        description=description,
        color=discord.Color(notification.color),
        timestamp=notification.timestamp,
    )
    if notification.thumbnail_url:
        embed.set_thumbnail(url=notification.thumbnail_url)
    embed.add_field(name="Price", value=notification.price, inline=True)
    embed.add_field(name="Creator", value=notification.creator, inline=True)
    embed.set_footer(text=notification.footer_text, icon_url=notification.footer_icon_url)
    return embed
