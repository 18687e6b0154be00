"""
Maps discord.py messages to transport-agnostic InboundMessage objects.
"""

import logging
from datetime import datetime
from typing import Optional

import discord

from .models import InboundMessage

logger = logging.getLogger("emoji_counter.mapper")


def resolve_display_name(message: discord.Message) -> Optional[str]:
    """
    Best-effort display name of a message author.

    Returns None when the name cannot be read; the directory then stores its
    placeholder so counting still goes ahead.
    """
    try:
        author = message.author
        return author.display_name or author.name
    except (AttributeError, discord.DiscordException) as e:
        logger.warning(f"Could not read author name, using placeholder: {e}")
        return None


def build_inbound(message: discord.Message) -> InboundMessage:
    """
    Build an InboundMessage from a discord.Message.

    Guild messages count as group chats; DMs do not. The timestamp is the
    message creation time converted to local time, which decides its month.
    """
    guild = message.guild
    created_at: datetime = message.created_at or discord.utils.utcnow()

    return InboundMessage(
        group_id=str(guild.id) if guild else str(message.channel.id),
        user_id=str(message.author.id),
        display_name=resolve_display_name(message),
        is_group_chat=guild is not None,
        text=message.content or "",
        timestamp=created_at.astimezone()
    )
