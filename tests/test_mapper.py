from __future__ import annotations

from datetime import datetime, timezone

from cogs.emoji_counter.mapper import build_inbound


class DummyGuild:
    def __init__(self, guild_id: int) -> None:
        self.id = guild_id


class DummyChannel:
    def __init__(self, channel_id: int) -> None:
        self.id = channel_id


class DummyAuthor:
    def __init__(self, user_id: int, display_name: str, name: str = "handle") -> None:
        self.id = user_id
        self.display_name = display_name
        self.name = name
        self.bot = False


class BrokenAuthor:
    """An author whose profile cannot be read."""

    id = 77
    bot = False

    @property
    def display_name(self) -> str:
        raise AttributeError("member not cached")


class DummyMessage:
    def __init__(self, *, author, guild: "DummyGuild | None", content: str = "😀") -> None:
        self.id = 1
        self.author = author
        self.guild = guild
        self.channel = DummyChannel(555)
        self.content = content
        self.created_at = datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc)


def test_guild_message_is_group_chat() -> None:
    message = DummyMessage(author=DummyAuthor(42, "Ana"), guild=DummyGuild(10))

    inbound = build_inbound(message)

    assert inbound.group_id == "10"
    assert inbound.user_id == "42"
    assert inbound.display_name == "Ana"
    assert inbound.is_group_chat
    assert inbound.text == "😀"
    assert inbound.timestamp.month == 3


def test_direct_message_is_not_group_chat() -> None:
    message = DummyMessage(author=DummyAuthor(42, "Ana"), guild=None)

    inbound = build_inbound(message)

    assert not inbound.is_group_chat
    assert inbound.group_id == "555"


def test_unreadable_author_name_degrades_to_none() -> None:
    message = DummyMessage(author=BrokenAuthor(), guild=DummyGuild(10))

    inbound = build_inbound(message)

    assert inbound.display_name is None
    assert inbound.user_id == "77"


def test_missing_content_maps_to_empty_text() -> None:
    message = DummyMessage(author=DummyAuthor(42, "Ana"), guild=DummyGuild(10), content=None)

    assert build_inbound(message).text == ""
