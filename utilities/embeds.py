from datetime import datetime, timezone
from typing import Optional, Union

import discord

from utilities.config import get_config

FALLBACK_COLORS = {
    'default': 0x5865F2,
    'success': 0x57F287,
    'error': 0xED4245,
    'warning': 0xFEE75C,
    'info': 0x539bf5
}

FALLBACK_EMOJIS = {
    'success': '✅',
    'error': '❌',
    'warning': '⚠️',
    'info': 'ℹ️'
}


class BaseEmbedTemplate:
    """Base class for all embed templates with common configuration handling."""

    def __init__(self, config=None):
        self.config = config
        self._embed = discord.Embed()

    def _style(self):
        if self.config is None:
            try:
                self.config = get_config()
            except (OSError, ValueError):
                # No usable config file: fall back to built-in colours and emojis
                self.config = False
        return self.config.style if self.config else None

    def _get_color(self, color_type: str) -> int:
        """Get a color from the configuration or return a default."""
        style = self._style()
        if style and style.embed_colors.get(color_type) is not None:
            return style.embed_colors[color_type]
        return FALLBACK_COLORS.get(color_type, FALLBACK_COLORS['default'])

    def _get_emoji(self, emoji_name: str) -> str:
        """Get an emoji from the configuration or return a default."""
        style = self._style()
        if style and style.emojis.get(emoji_name):
            return style.emojis[emoji_name]
        return FALLBACK_EMOJIS.get(emoji_name, "")

    def set_color(self, color: Union[str, int, discord.Color]) -> 'BaseEmbedTemplate':
        """Set the embed color. Can be a color type string, hex int, or discord.Color."""
        if isinstance(color, str):
            self._embed.color = self._get_color(color)
        elif isinstance(color, discord.Color):
            self._embed.color = color.value
        else:
            self._embed.color = color
        return self

    def set_title(self, title: str) -> 'BaseEmbedTemplate':
        self._embed.title = title
        return self

    def set_description(self, description: str) -> 'BaseEmbedTemplate':
        self._embed.description = description
        return self

    def set_footer(self, text: str) -> 'BaseEmbedTemplate':
        self._embed.set_footer(text=text)
        return self

    def set_timestamp(self, timestamp: Optional[datetime] = None) -> 'BaseEmbedTemplate':
        """Set the embed timestamp. Defaults to current time if None."""
        self._embed.timestamp = timestamp or datetime.now(timezone.utc)
        return self

    def build(self) -> discord.Embed:
        """Build and return the final embed."""
        return self._embed


class LevelEmbed(BaseEmbedTemplate):
    """
    Embed styled by a reply level (success, info, warning, error).

    The level picks both the colour and the emoji prefixed to the title.
    """

    def __init__(self, level: str, title: str, description: Optional[str] = None, config=None):
        super().__init__(config)
        emoji = self._get_emoji(level)
        self.set_color(level if level in FALLBACK_COLORS else 'default')
        # Titles that already start with their own emoji are left alone
        self.set_title(f"{emoji} {title}" if emoji and title[:1].isalnum() else title)
        self.set_timestamp()

        if description:
            # Discord rejects descriptions longer than 4096 characters
            self.set_description(description[:4096])


# Convenience functions for quick access
def level_embed(level: str, title: str, description: str = None, config=None) -> discord.Embed:
    return LevelEmbed(level, title, description, config).build()


def error_embed(title: str = "Error", description: str = None, config=None) -> discord.Embed:
    return level_embed('error', title, description, config)
