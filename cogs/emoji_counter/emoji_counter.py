"""
Emoji Counter - Main Cog

Counts tracked emojis in server messages per member and per month, and
answers `!emoji ...` text commands as well as the `/emoji` slash commands.
"""

import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands, tasks

from cogs.base import CogTemplate, ImprovedCog
from utilities import helpers
from utilities.embeds import error_embed, level_embed

from .command_parser import CommandParser, CommandRequest, Verb
from .dispatcher import CommandDispatcher
from .mapper import build_inbound
from .models import InboundMessage
from .renderer import Renderer, RenderSettings, Reply


class EmojiCounter(ImprovedCog):
    """
    Emoji Counter - count tracked emojis per member and month.

    Features:
    - Track any set of emojis (or any text token)
    - Per-server counts bucketed by month
    - Totals, leaderboards and personal counts
    - Optional periodic snapshots to the database
    """

    template = CogTemplate(
        name="emoji_counter",
        description="Count tracked emojis per member and month.",
        category="Analytics",
        version="1.0.0",
        authors=["emoji-counter"],
        emoji="📊"
    )

    emoji_group = app_commands.Group(
        name="emoji",
        description="Emoji counting commands",
        guild_only=True
    )

    def __init__(self, bot: commands.Bot, logger: logging.Logger):
        super().__init__(bot, logger)
        counter_config = bot.configuration.counter

        self.parser = CommandParser(counter_config.command_prefix or "!emoji")
        self.renderer = Renderer(RenderSettings(
            max_entries=counter_config.max_ranking_entries or 0,
            compact_mode=bool(counter_config.compact_mode)
        ))
        self.dispatcher = CommandDispatcher(self.engine, self.parser, self.renderer)

    async def cog_load(self):
        """Called when the cog is loaded."""
        persistence = self.bot.configuration.persistence
        if persistence.enabled:
            self.autosave.change_interval(seconds=persistence.autosave_seconds)
            self.autosave.start()
            self.logger.info(f"Autosaving counts every {persistence.autosave_seconds}s.")
        self.logger.info("Emoji Counter cog loaded successfully.")

    async def cog_unload(self):
        # Let a running save finish
        if self.autosave.is_running():
            self.autosave.stop()

    # ==================== Helper Methods ====================

    def _embed(self, reply: Reply) -> discord.Embed:
        return level_embed(reply.level, reply.title, reply.body, self.bot.configuration)

    def _remember_user(self, interaction: discord.Interaction):
        """Refresh the directory entry of a slash command user."""
        self.engine.observe(
            InboundMessage(
                group_id=str(interaction.guild_id),
                user_id=str(interaction.user.id),
                display_name=interaction.user.display_name,
                is_group_chat=True,
                text="",
                timestamp=interaction.created_at.astimezone()
            ),
            count=False
        )

    async def _respond(self, interaction: discord.Interaction, request: CommandRequest):
        """Dispatch a slash command request and send the reply."""
        self._remember_user(interaction)
        reply = self.dispatcher.dispatch(request, str(interaction.guild_id), str(interaction.user.id))
        await helpers.send(interaction, embed=self._embed(reply), ephemeral=reply.level == "warning")

    # ==================== Autosave ====================

    @tasks.loop(seconds=300)
    async def autosave(self):
        try:
            await self.bot.save_snapshot()
        except Exception as e:
            self.logger.error(f"Autosave failed: {e}", exc_info=True)

    @autosave.before_loop
    async def before_autosave(self):
        await self.bot.wait_until_ready()

    # ==================== Event Listeners ====================

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        """Count tracked emojis in new messages and answer text commands."""
        if message.author.bot:
            return

        try:
            inbound = build_inbound(message)
            is_command = self.parser.is_command(inbound.text)
            self.engine.observe(inbound, count=not is_command)

            if not is_command or not inbound.is_group_chat:
                return

            reply = self.dispatcher.dispatch_text(inbound.text, inbound.group_id, inbound.user_id)
        except Exception as e:
            self.logger.error(f"Error while handling message {message.id}: {e}", exc_info=True)
            if message.guild and self.parser.is_command(message.content):
                await helpers.reply_to(
                    message, error_embed("Internal Error", "Please try again in a few seconds.")
                )
            return

        await helpers.reply_to(message, self._embed(reply))

    # ==================== Slash Commands ====================

    @emoji_group.command(name="add", description="Start counting an emoji.")
    @app_commands.describe(emoji="The emoji to count")
    async def add(self, interaction: discord.Interaction, emoji: str):
        await self._respond(interaction, CommandRequest(verb=Verb.ADD, symbol=emoji))

    @emoji_group.command(name="remove", description="Stop counting an emoji. Existing counts are kept.")
    @app_commands.describe(emoji="The emoji to stop counting")
    async def remove(self, interaction: discord.Interaction, emoji: str):
        await self._respond(interaction, CommandRequest(verb=Verb.REMOVE, symbol=emoji))

    @emoji_group.command(name="list", description="List the emojis being counted.")
    async def list_tracked(self, interaction: discord.Interaction):
        await self._respond(interaction, CommandRequest(verb=Verb.LIST))

    @emoji_group.command(name="count", description="Total and per-member count of an emoji.")
    @app_commands.describe(
        emoji="The emoji to look up",
        month="Month (1-12), defaults to the current month",
        year="Year, defaults to the current year"
    )
    async def count(
        self,
        interaction: discord.Interaction,
        emoji: str,
        month: Optional[app_commands.Range[int, 1, 12]] = None,
        year: Optional[app_commands.Range[int, 1, 9999]] = None
    ):
        await self._respond(interaction, CommandRequest(verb=Verb.COUNT, symbol=emoji, month=month, year=year))

    @emoji_group.command(name="ranking", description="Leaderboard for an emoji.")
    @app_commands.describe(
        emoji="The emoji to rank",
        month="Month (1-12), defaults to the current month",
        year="Year, defaults to the current year"
    )
    async def ranking(
        self,
        interaction: discord.Interaction,
        emoji: str,
        month: Optional[app_commands.Range[int, 1, 12]] = None,
        year: Optional[app_commands.Range[int, 1, 9999]] = None
    ):
        await self._respond(interaction, CommandRequest(verb=Verb.RANKING, symbol=emoji, month=month, year=year))

    @emoji_group.command(name="user", description="Your own count of an emoji.")
    @app_commands.describe(
        emoji="The emoji to look up",
        month="Month (1-12), defaults to the current month",
        year="Year, defaults to the current year"
    )
    async def user(
        self,
        interaction: discord.Interaction,
        emoji: str,
        month: Optional[app_commands.Range[int, 1, 12]] = None,
        year: Optional[app_commands.Range[int, 1, 9999]] = None
    ):
        await self._respond(interaction, CommandRequest(verb=Verb.USER, symbol=emoji, month=month, year=year))

    @emoji_group.command(name="status", description="Show tracked emojis and how many servers have counts.")
    async def status(self, interaction: discord.Interaction):
        await self._respond(interaction, CommandRequest(verb=Verb.STATUS))

    @emoji_group.command(name="help", description="Show the emoji counter commands.")
    async def help_command(self, interaction: discord.Interaction):
        await self._respond(interaction, CommandRequest(verb=Verb.HELP))
