import dataclasses
import logging
from typing import List

from discord.ext import commands


@dataclasses.dataclass
class CogTemplate:
    """A standardized template for Cog metadata."""
    name: str  # The display name of the cog
    description: str = "No description provided."
    category: str = "Miscellaneous"  # Category for help commands
    version: str = "1.0.0"
    authors: List[str] = dataclasses.field(default_factory=list)
    emoji: str = "⚙️"  # An emoji to represent the cog


class ImprovedCog(commands.Cog):
    """
    A Cog that requires a 'template' attribute and receives its own logger.

    The template must be an instance of the CogTemplate dataclass, providing
    standardized metadata for each cog. Cogs reach the shared counting engine
    through `self.engine`, which the bot owns.
    """
    template: CogTemplate = None

    def __init__(self, bot: 'EmojiCounterBot', logger: logging.Logger = None):
        self.bot = bot
        self.logger = logger or logging.getLogger(f"emoji_counter.cogs.{self.__class__.__name__.lower()}")

        if not self.template or not isinstance(self.template, CogTemplate):
            raise NotImplementedError(
                f"The cog '{self.__class__.__name__}' must have a 'template' class attribute "
                f"that is an instance of CogTemplate."
            )

    @property
    def engine(self):
        return self.bot.engine
