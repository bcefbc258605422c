from __future__ import annotations

import asyncio
import logging

import discord
from discord import app_commands

from bundle_notifier.catalog import CatalogGateway
from bundle_notifier.config import AppConfig, DiscordCredentials
from bundle_notifier.notifiers import DiscordChannelNotifier, build_discord_embed
from bundle_notifier.on_demand import HandlerError, OnDemandHandler
from bundle_notifier.scheduler import run_polling
from bundle_notifier.service import BundleWatchService
from bundle_notifier.store import MemorySeenStore

logger = logging.getLogger(__name__)


class BundleBot(discord.Client):
    """Discord client that runs the bundle poll loop and serves the lookup command."""

    def __init__(
        self,
        *,
        config: AppConfig,
        credentials: DiscordCredentials,
        gateway: CatalogGateway,
    ) -> None:
        super().__init__(
            intents=discord.Intents.default(),
            application_id=credentials.client_id,
        )
        self.config = config
        self.tree = app_commands.CommandTree(self)
        self.notifier = DiscordChannelNotifier(self, credentials.channel_id)
        self.service = BundleWatchService(
            gateway=gateway,
            store=MemorySeenStore(),
            notifier=self.notifier,
            settings=config.notification,
            fetch_details=config.polling.fetch_details,
            alert_on_failure=config.polling.alert_on_failure,
        )
        self.handler = OnDemandHandler(
            gateway=gateway,
            settings=config.notification,
            default_bundle_id=config.discord.default_bundle_id,
        )
        self._stop_polling = asyncio.Event()
        self._poll_task: asyncio.Task[None] | None = None
        self._register_commands()

    def _register_commands(self) -> None:
        @app_commands.command(
            name=self.config.discord.command_name,
            description="Fetches and posts a bundle embed by its ID.",
        )
        @app_commands.rename(bundle_id="id")
        @app_commands.describe(bundle_id="The Roblox bundle ID to post.")
        async def lookup_command(
            interaction: discord.Interaction,
            bundle_id: str | None = None,
        ) -> None:
            await self.respond_on_demand(interaction, bundle_id)

        self.tree.add_command(lookup_command)

    async def setup_hook(self) -> None:
        logger.info("Started refreshing application (/) commands.")
        try:
            await self.tree.sync()
        except discord.DiscordException as exc:
            logger.error("Failed to register commands: %s", exc)
        else:
            logger.info("Successfully reloaded application (/) commands.")

        self._poll_task = asyncio.create_task(self._poll_when_ready())

    async def on_ready(self) -> None:
        logger.info("Logged in as %s!", self.user)

    async def close(self) -> None:
        self._stop_polling.set()
        if self._poll_task is not None:
            self._poll_task.cancel()
            try:
                await self._poll_task
            except asyncio.CancelledError:
                pass
        await super().close()

    async def _poll_when_ready(self) -> None:
        await self.wait_until_ready()
        await run_polling(
            self.service,
            self.config.polling.interval_seconds,
            stop_event=self._stop_polling,
        )

    async def respond_on_demand(
        self,
        interaction: discord.Interaction,
        raw_id: str | None,
    ) -> None:
        await interaction.response.defer(thinking=True)

        try:
            notification = await self.handler.handle(raw_id)
        except HandlerError as exc:
            await self._reply(interaction, content=str(exc), ephemeral=True)
            return

        await self._reply(interaction, embed=build_discord_embed(notification))

    async def _reply(self, interaction: discord.Interaction, **kwargs) -> None:
        try:
            await interaction.followup.send(**kwargs)
        except discord.DiscordException as exc:
            logger.exception("failed to reply to interaction %s: %s", interaction.id, exc)
