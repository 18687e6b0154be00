"""
Emoji Counter - Cog Package

Counts tracked emojis per server, member and month.
"""

from .emoji_counter import EmojiCounter

__all__ = ['EmojiCounter']
