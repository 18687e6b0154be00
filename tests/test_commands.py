from __future__ import annotations

from datetime import datetime

from cogs.emoji_counter.command_parser import CommandParser, Verb
from cogs.emoji_counter.dispatcher import CommandDispatcher
from cogs.emoji_counter.engine import EmojiCounterEngine
from cogs.emoji_counter.models import InboundMessage
from cogs.emoji_counter.renderer import Renderer, RenderSettings, rank_label


def _dispatcher(settings: "RenderSettings | None" = None) -> CommandDispatcher:
    engine = EmojiCounterEngine(clock=lambda: datetime(2025, 3, 20))
    return CommandDispatcher(engine, CommandParser("!emoji"), Renderer(settings))


def _say(dispatcher: CommandDispatcher, user_id: str, name: str, text: str) -> None:
    dispatcher.engine.observe(
        InboundMessage(
            group_id="G1",
            user_id=user_id,
            display_name=name,
            is_group_chat=True,
            text=text,
            timestamp=datetime(2025, 3, 5),
        )
    )


def test_parse_query_with_period() -> None:
    request = CommandParser().parse("!emoji ranking 😂 12 2024")

    assert request.verb is Verb.RANKING
    assert request.symbol == "😂"
    assert (request.month, request.year) == (12, 2024)
    assert request.valid


def test_parse_without_period_leaves_defaults_to_engine() -> None:
    request = CommandParser().parse("!emoji count 👍")

    assert request.month is None
    assert request.year is None


def test_parse_rejects_non_numeric_period() -> None:
    request = CommandParser().parse("!emoji count 👍 march 2024")

    assert request.errors == ["Invalid month: march"]
    assert not request.valid


def test_parse_unknown_and_missing_verbs() -> None:
    parser = CommandParser()

    unknown = parser.parse("!emoji dance")
    assert unknown.verb is None
    assert unknown.raw_verb == "dance"

    assert parser.parse("!emoji").verb is None


def test_is_command_uses_prefix() -> None:
    parser = CommandParser("!emoji")

    assert parser.is_command("!emoji list")
    assert not parser.is_command("hello !emoji list")
    assert not parser.is_command("")


def test_rank_labels() -> None:
    assert [rank_label(i) for i in range(1, 6)] == ["🥇 1º", "🥈 2º", "🥉 3º", "4º", "5º"]


def test_add_then_list() -> None:
    dispatcher = _dispatcher()

    added = dispatcher.dispatch_text("!emoji add 🎉", "G1", "U1")
    listed = dispatcher.dispatch_text("!emoji list", "G1", "U1")

    assert added.level == "success"
    assert "🎉" in added.body
    assert listed.body == "Tracking: 🎉"


def test_empty_list_is_rendered_specially() -> None:
    reply = _dispatcher().dispatch_text("!emoji list", "G1", "U1")

    assert "No emojis are being tracked" in reply.body
    assert "!emoji add" in reply.body


def test_add_without_emoji_returns_usage() -> None:
    reply = _dispatcher().dispatch_text("!emoji add", "G1", "U1")

    assert reply.level == "warning"
    assert "!emoji add 😀" in reply.body


def test_count_reply_has_total_and_breakdown() -> None:
    dispatcher = _dispatcher()
    dispatcher.dispatch_text("!emoji add 🎉", "G1", "U1")
    _say(dispatcher, "U1", "Ana", "🎉🎉")
    _say(dispatcher, "U2", "Bia", "🎉")

    reply = dispatcher.dispatch_text("!emoji count 🎉 3 2025", "G1", "U1")

    assert reply.title == "📊 🎉 in 3/2025"
    assert "Total: **3**" in reply.body
    assert reply.body.index("🥇 1º Ana - 2") < reply.body.index("🥈 2º Bia - 1")


def test_ranking_uses_current_month_by_default() -> None:
    dispatcher = _dispatcher()
    dispatcher.dispatch_text("!emoji add 🎉", "G1", "U1")
    _say(dispatcher, "U1", "Ana", "🎉")

    reply = dispatcher.dispatch_text("!emoji ranking 🎉", "G1", "U1")

    assert reply.title == "🏆 Ranking 🎉 - 3/2025"
    assert "🥇 1º Ana - 1 🎉" in reply.body


def test_not_found_reply_names_period() -> None:
    reply = _dispatcher().dispatch_text("!emoji count 🎉 2 2025", "G1", "U1")

    assert reply.title == "No Data"
    assert "2/2025" in reply.body


def test_user_reply_is_for_requesting_user() -> None:
    dispatcher = _dispatcher()
    dispatcher.dispatch_text("!emoji add 🎉", "G1", "U1")
    _say(dispatcher, "U1", "Ana", "🎉🎉🎉")
    _say(dispatcher, "U2", "Bia", "hello")

    mine = dispatcher.dispatch_text("!emoji user 🎉", "G1", "U1")
    theirs = dispatcher.dispatch_text("!emoji user 🎉", "G1", "U2")

    assert mine.body == "Ana: 3x 🎉 in 3/2025"
    assert theirs.title == "No Data"
    assert theirs.body.startswith("Bia,")


def test_max_entries_truncates_leaderboard() -> None:
    dispatcher = _dispatcher(RenderSettings(max_entries=2))
    dispatcher.dispatch_text("!emoji add 😀", "G1", "U1")
    for i in range(4):
        _say(dispatcher, f"U{i}", f"Name{i}", "😀" * (i + 1))

    reply = dispatcher.dispatch_text("!emoji ranking 😀", "G1", "U1")

    assert "3º" not in reply.body
    assert "...and 2 more" in reply.body


def test_status_and_help_and_unknown() -> None:
    dispatcher = _dispatcher()
    dispatcher.dispatch_text("!emoji add 😀", "G1", "U1")

    assert "😀" in dispatcher.dispatch_text("!emoji status", "G1", "U1").body
    assert "!emoji ranking" in dispatcher.dispatch_text("!emoji help", "G1", "U1").body
    assert dispatcher.dispatch_text("!emoji dance", "G1", "U1").title == "Unknown Command"
