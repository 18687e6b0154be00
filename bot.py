import asyncio
import datetime
import importlib
import logging
import sys
import traceback
from pathlib import Path

import discord
from box import Box
from discord import ClientException, app_commands
from discord.ext import commands
from discord.ext.commands import CommandError

from cogs.base import ImprovedCog
from cogs.emoji_counter.engine import EmojiCounterEngine
from cogs.emoji_counter.storage import SnapshotStore
from utilities import helpers
from utilities.config import get_config
from utilities.embeds import error_embed
from utilities.exception_manager import create_detailed_error_log
from utilities.formatter import ConsoleFormatter, FileFormatter

STORAGE_MODULES = ["cogs.emoji_counter.storage"]


def setup_logging(config: Box):
    """
    Configures the logging for the bot.
    """
    logging_level_conversion = {
        "critical": logging.CRITICAL,
        "error": logging.ERROR,
        "warning": logging.WARNING,
        "info": logging.INFO,
        "debug": logging.DEBUG,
    }

    console_level_str = config.logging.console_level.lower() if config.logging else None
    output_level_str = config.logging.output_level.lower() if config.logging else None

    console_logging_level = logging_level_conversion.get(console_level_str, logging.INFO)
    output_logging_level = logging_level_conversion.get(output_level_str, logging.INFO)

    initialization_runtime = datetime.datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    # discord.py is too chatty below INFO
    logging.getLogger("discord").setLevel(max(console_logging_level, logging.INFO))

    root_logger = logging.getLogger()
    root_logger.setLevel(min(console_logging_level, output_logging_level))

    ch = logging.StreamHandler(stream=sys.stdout)
    ch.setLevel(console_logging_level)
    ch.setFormatter(ConsoleFormatter())
    root_logger.handlers = [ch]  # Make sure to not double print

    if config.logging and config.logging.output_folder:
        log_file_path = f"{config.logging.output_folder}/run_{initialization_runtime}.log"
        root_logger.info(f"Logging session will be saved to {log_file_path!r}")
        log_file = Path(log_file_path)

        # Create the parent directories if they don't exist
        log_file.parent.mkdir(parents=True, exist_ok=True)

        fh = logging.FileHandler(log_file_path, encoding="utf-8")
        fh.setLevel(output_logging_level)
        fh.setFormatter(FileFormatter())
        root_logger.handlers.append(fh)


class EmojiCounterBot(commands.Bot):
    """
    Discord bot that owns the emoji counting engine.

    The engine is created empty here and shared with every cog through
    `bot.engine`. When persistence is enabled, a snapshot is restored before
    cogs load and saved again on shutdown.
    """

    def __init__(self, config: Box):
        intents = discord.Intents.default()
        intents.message_content = True  # Needed to count emojis in message text

        self.configuration: Box = config
        self._logger = logging.getLogger(f"{config.bot.short_name or 'emojicounter'}.bot")
        self._has_logged_in = False

        self.engine = EmojiCounterEngine(placeholder_name=config.counter.placeholder_name or "User")
        self.snapshot_store = SnapshotStore() if config.persistence.enabled else None
        self._save_lock = asyncio.Lock()  # A save replaces every row, so saves never overlap

        super().__init__(
            command_prefix=config.bot.prefix,
            intents=intents,
            owner_ids={owner for owner in config.bot.owner_ids if owner},
            help_command=None  # Don't want hidden commands showing up
        )

    async def setup_hook(self):
        """
        This hook is called when the bot is first setting up.
        It's where the snapshot is restored and cogs are loaded.
        """
        self.tree.on_error = self.on_app_command_error
        if self.snapshot_store:
            await self._initialize_database()
        await self._load_cogs()
        await self._sync_commands()

    async def _initialize_database(self):
        """Initializes the database and restores the last snapshot."""
        import utilities.database as database
        await database.init_database(self.configuration.persistence.url, STORAGE_MODULES)
        snapshot = await self.snapshot_store.load()
        if not snapshot.is_empty():
            self.engine.restore(snapshot)

    async def save_snapshot(self):
        """Writes the current engine state to the database, if persistence is enabled."""
        if not self.snapshot_store:
            return
        async with self._save_lock:
            await self.snapshot_store.save(self.engine.snapshot())

    async def _load_cogs(self):
        """Loads all cogs from the configuration."""
        self._logger.info("Now loading cogs")
        for cog_info in self.configuration.cogs:
            await self._load_cog(dict(cog_info))

    async def _load_cog(self, cog_info: dict):
        """Loads a single cog."""
        cog_module = list(cog_info.keys())[0]
        cog_data = dict(cog_info[cog_module])
        cog_classname = cog_data["class"]

        if not cog_data.get("enabled", True):
            self._logger.warning(f"Skipping cog '{cog_module}.{cog_classname}' because it is disabled in config.")
            return

        try:
            module = importlib.import_module(cog_module)
            cog_class = getattr(module, cog_classname)
            if not issubclass(cog_class, ImprovedCog):
                self._logger.warning(f"Cog '{cog_module}.{cog_classname}' is not a subclass of ImprovedCog and cannot be loaded.")
                return

            cog_logger = self._logger.getChild(f"cogs[{cog_module}]")
            await self.add_cog(cog_class(self, cog_logger))
        except (ImportError, AttributeError, CommandError, ClientException) as e:
            self._logger.warning(f"Failed to load cog '{cog_module}.{cog_classname}': {e}", exc_info=True)

    async def _sync_commands(self):
        """Syncs slash commands, to the testing guild only when one is configured."""
        testing_guild = self.configuration.bot.testing_guild
        try:
            if testing_guild:
                guild = discord.Object(id=testing_guild)
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
            else:
                synced = await self.tree.sync()
            self._logger.info(f"Synced {len(synced)} application command(s).")
        except discord.HTTPException as e:
            self._logger.error(f"Failed to sync application commands: {e}")

    async def close(self):
        """
        Called when the bot is shutting down.
        """
        # Unloading stops the autosave loop before the final save
        for cog_name in list(self.cogs):
            await self.remove_cog(cog_name)

        if self.snapshot_store:
            import utilities.database as database
            try:
                await self.save_snapshot()
            except Exception as e:
                self._logger.error(f"Could not save snapshot on shutdown: {e}", exc_info=True)
            await database.close_database()
        await super().close()

    async def on_ready(self):
        """Event that fires when the bot is fully logged in and ready."""
        self._logger.info(f"Logged in as {self.user!r}")
        if self._has_logged_in:
            self._logger.warning("Bot is relogging.")
            return
        self._has_logged_in = True

        status = self.engine.snapshot_status()
        self._logger.info(
            f"Bot is ready and online! Tracking {len(status.tracked_symbols)} emoji(s) "
            f"across {status.total_groups} server(s)."
        )

    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        """Global error handler for App Commands (Slash Commands)."""

        if isinstance(error, app_commands.CommandInvokeError):
            error = error.original

        if isinstance(error, (app_commands.MissingPermissions, app_commands.CheckFailure)):
            await helpers.send(
                interaction,
                embed=error_embed(
                    "Permission Denied",
                    "You do not have the required permissions to run this command."
                )
            )
        else:
            command_name = interaction.command.name if interaction.command else 'Unknown'
            await helpers.send(interaction, embed=self._report_unexpected_error(command_name, error))

    async def on_command_error(self, ctx: commands.Context, error: commands.CommandError):
        """Global error handler for message commands."""

        if isinstance(error, commands.CommandNotFound):
            self._logger.debug(f"User '{ctx.author}' ({ctx.author.id}) requested an unknown command: {error}")
        elif isinstance(error, commands.CheckFailure):
            self._logger.warning(f"User '{ctx.author}' ({ctx.author.id}) failed permissions check for command '{ctx.command}'.")
            await helpers.send(
                ctx,
                embed=error_embed(
                    "Permission Denied",
                    "You do not have the required permissions to run this command."
                ),
                delete_after=10
            )
        elif isinstance(error, commands.CommandInvokeError):
            command_name = ctx.command.name if ctx.command else 'Unknown'
            await helpers.send(ctx, embed=self._report_unexpected_error(command_name, error.original))
        else:
            self._logger.error(f"An unhandled error occurred in command '{ctx.command}': {error}")
            await helpers.send(
                ctx,
                embed=error_embed("Unhandled Error", "An unknown error occurred. Please contact the bot owner.")
            )

    def _report_unexpected_error(self, command_name: str, error: Exception) -> discord.Embed:
        """Logs an unexpected command error and builds the embed shown to the user."""
        self._logger.error(f"Command Error: {error} in command '{command_name}'")

        exc_type = type(error)
        tb = error.__traceback__

        if self.configuration.logging.output_folder:
            error_saved_to = create_detailed_error_log(
                self.configuration.logging.output_folder, command_name, exc_type, error, tb
            )
            self._logger.info(f"Traceback saved to {error_saved_to!r}")
            msg_content = (f"An unexpected error occurred: `{exc_type.__name__}`.\n"
                           f"The details have been logged.")
        else:
            self._logger.warning("Logging to file disabled. Printing traceback to console.")
            traceback.print_exception(exc_type, error, tb)
            msg_content = f"An unexpected error occurred: `{exc_type.__name__}`.\nPlease contact the bot owner."

        return error_embed("Command Error", msg_content)


async def main():
    configuration = get_config()
    setup_logging(configuration)
    startup_logger = logging.getLogger(f"{configuration.bot.short_name or 'emojicounter'}.startup")

    if not configuration.auth:
        startup_logger.critical("Authentication token not found in configuration. Exiting...")
        return

    startup_logger.info(f"Starting {configuration.bot.full_name}...")
    bot = EmojiCounterBot(configuration)
    async with bot:
        await bot.start(configuration.auth)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logging.getLogger("emojicounter.startup").critical("Bot shutdown requested. Exiting...")
