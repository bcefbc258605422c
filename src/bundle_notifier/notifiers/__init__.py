"""Notifier implementations."""

from .base import DeliveryError, Notifier
from .discord_channel import DiscordChannelNotifier, build_discord_embed

__all__ = ["DeliveryError", "DiscordChannelNotifier", "Notifier", "build_discord_embed"]
