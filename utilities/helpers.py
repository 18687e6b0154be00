import logging
from typing import Any, Optional, Union

import discord
from discord.ext import commands

logger = logging.getLogger("emoji_counter.helpers")


def _prepare_kwargs(
        content: str = None,
        embed: discord.Embed = None,
        delete_after: float | None = None,
        **other_kwargs
) -> dict[str, Any]:
    """Prepare a dictionary of keyword arguments for a Discord message."""
    kwargs: dict[str, Any] = {
        'content': content,
        'embed': embed,
        'delete_after': delete_after,
    }
    kwargs.update(other_kwargs)

    # Remove None values
    return {k: v for k, v in kwargs.items() if v is not None}


async def send(
        interaction_or_ctx: Union[discord.Interaction, commands.Context],
        content: str = None,
        *,
        embed: discord.Embed = None,
        ephemeral: bool = True,
        delete_after: float | None = None,
        reply: bool = False,
) -> Optional[discord.Message]:
    """
    Respond to an interaction or context.
    Automatically handles whether to use respond() or followup() for interactions.

    Args:
        interaction_or_ctx: Discord interaction or commands context
        content: Message content
        embed: Discord embed
        ephemeral: Whether the message should be ephemeral (interactions only)
        delete_after: how long to delete the message after sending it (default None)
        reply: Whether to reply to the original message (only for Context, ignored for Interactions)

    Returns:
        The sent message if possible, None otherwise
    """
    kwargs = _prepare_kwargs(content=content, embed=embed, delete_after=delete_after)

    try:
        if isinstance(interaction_or_ctx, discord.Interaction):
            kwargs['ephemeral'] = ephemeral
            if interaction_or_ctx.response.is_done():
                return await interaction_or_ctx.followup.send(**kwargs)
            await interaction_or_ctx.response.send_message(**kwargs)
            return await interaction_or_ctx.original_response()

        if reply:
            return await interaction_or_ctx.reply(**kwargs)
        return await interaction_or_ctx.send(**kwargs)

    except discord.HTTPException as e:
        logger.error(f"Failed to send response: {e}")
        return None


async def reply_to(message: discord.Message, embed: discord.Embed) -> Optional[discord.Message]:
    """Reply to a plain message without pinging its author."""
    try:
        return await message.reply(embed=embed, mention_author=False)
    except discord.HTTPException as e:
        logger.error(f"Failed to reply to message {message.id}: {e}")
        return None
