from __future__ import annotations

from datetime import datetime

from cogs.emoji_counter.engine import EmojiCounterEngine
from cogs.emoji_counter.models import InboundMessage, Outcome


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _message(
    text: str,
    *,
    user_id: str = "U1",
    group_id: str = "G1",
    name: "str | None" = "U1-name",
    when: datetime = datetime(2025, 3, 10, 12, 0),
    is_group_chat: bool = True,
) -> InboundMessage:
    return InboundMessage(
        group_id=group_id,
        user_id=user_id,
        display_name=name,
        is_group_chat=is_group_chat,
        text=text,
        timestamp=when,
    )


def _engine(now: datetime = datetime(2025, 3, 20)) -> EmojiCounterEngine:
    return EmojiCounterEngine(placeholder_name="User", clock=FakeClock(now))


def test_end_to_end_count_and_other_user_not_found() -> None:
    engine = _engine()
    assert engine.add_tracked("🎉").ok

    engine.observe(_message("🎉🎉"))
    result = engine.query_count("G1", "🎉", 3, 2025)

    assert result.found
    assert result.total == 2
    assert [(e.name, e.count) for e in result.entries] == [("U1-name", 2)]
    assert engine.query_user_count("G1", "🎉", "U2", 3, 2025).outcome is Outcome.NOT_FOUND


def test_removal_is_not_retroactive() -> None:
    engine = _engine()
    engine.add_tracked("🎉")
    engine.observe(_message("🎉🎉"))

    engine.remove_tracked("🎉")
    engine.observe(_message("🎉"))

    assert engine.query_count("G1", "🎉", 3, 2025).total == 2
    assert engine.list_tracked() == []


def test_empty_tracking_set_records_nothing() -> None:
    engine = _engine()

    recorded = engine.observe(_message("🎉😀"))

    assert recorded == {}
    assert engine.snapshot_status().total_groups == 0
    assert engine.snapshot().counts == []


def test_counts_only_increase() -> None:
    engine = _engine()
    engine.add_tracked("😀")

    seen = []
    for text in ("😀", "no emoji", "😀😀", ""):
        engine.observe(_message(text))
        seen.append(engine.query_user_count("G1", "😀", "U1", 3, 2025).count)

    assert seen == sorted(seen)
    assert seen[-1] == 3


def test_not_found_then_found_after_record() -> None:
    engine = _engine()
    engine.add_tracked("😀")

    assert not engine.query_ranking("G1", "😀", 3, 2025).found
    engine.observe(_message("😀"))
    assert engine.query_ranking("G1", "😀", 3, 2025).found


def test_ranking_order() -> None:
    engine = _engine()
    engine.add_tracked("😀")
    for user, amount in (("A", 5), ("B", 9), ("C", 2)):
        engine.observe(_message("😀" * amount, user_id=user, name=user))

    result = engine.query_ranking("G1", "😀", 3, 2025)

    assert [(e.position, e.name) for e in result.entries] == [(1, "B"), (2, "A"), (3, "C")]


def test_default_period_is_the_current_month_at_query_time() -> None:
    clock = FakeClock(datetime(2025, 2, 15))
    engine = EmojiCounterEngine(clock=clock)
    engine.add_tracked("😀")
    engine.observe(_message("😀", when=datetime(2025, 2, 14)))

    assert engine.query_count("G1", "😀").found

    clock.now = datetime(2025, 3, 1)
    assert engine.query_count("G1", "😀").outcome is Outcome.NOT_FOUND
    assert engine.query_count("G1", "😀", 2, 2025).found


def test_missing_year_defaults_to_current_year() -> None:
    engine = _engine(datetime(2025, 6, 1))
    engine.add_tracked("😀")
    engine.observe(_message("😀", when=datetime(2025, 3, 2)))

    assert engine.query_count("G1", "😀", month=3).found


def test_period_comes_from_message_timestamp() -> None:
    engine = _engine()
    engine.add_tracked("😀")
    engine.observe(_message("😀", when=datetime(2024, 12, 31, 23, 59)))

    assert engine.query_count("G1", "😀", 12, 2024).found
    assert not engine.query_count("G1", "😀", 3, 2025).found


def test_non_group_messages_are_ignored_entirely() -> None:
    engine = _engine()
    engine.add_tracked("😀")

    engine.observe(_message("😀", user_id="DM", name="Direct", is_group_chat=False))

    assert engine.snapshot_status().total_groups == 0
    assert not engine.directory.known("DM")


def test_directory_updates_even_when_not_counting() -> None:
    engine = _engine()
    engine.add_tracked("😀")

    recorded = engine.observe(_message("!emoji count 😀", name="Named"), count=False)

    assert recorded == {}
    assert engine.directory.lookup("U1") == "Named"
    assert not engine.query_count("G1", "😀", 3, 2025).found


def test_missing_name_still_counts_with_placeholder() -> None:
    engine = _engine()
    engine.add_tracked("😀")

    engine.observe(_message("😀", name=None))
    result = engine.query_count("G1", "😀", 3, 2025)

    assert result.entries[0].name == "User"
    assert result.total == 1


def test_tracking_without_symbol_is_invalid_argument() -> None:
    engine = _engine()

    assert engine.add_tracked(None).outcome is Outcome.INVALID_ARGUMENT
    assert engine.remove_tracked("  ").outcome is Outcome.INVALID_ARGUMENT
    assert engine.list_tracked() == []


def test_invalid_month_is_invalid_argument() -> None:
    engine = _engine()

    assert engine.query_count("G1", "😀", 13, 2025).outcome is Outcome.INVALID_ARGUMENT
    assert engine.query_ranking("G1", None).outcome is Outcome.INVALID_ARGUMENT
    assert engine.query_user_count("G1", "😀", "U1", 0).outcome is Outcome.INVALID_ARGUMENT


def test_status_snapshot() -> None:
    engine = _engine()
    engine.add_tracked("😀")
    engine.add_tracked("🎉")
    engine.observe(_message("😀", group_id="G1"))
    engine.observe(_message("🎉", group_id="G2"))

    status = engine.snapshot_status()

    assert status.tracked_symbols == ["😀", "🎉"]
    assert status.total_groups == 2


def test_snapshot_restore_into_fresh_engine() -> None:
    engine = _engine()
    engine.add_tracked("😀")
    engine.observe(_message("😀😀", name="Ana"))

    restored = _engine()
    restored.restore(engine.snapshot())

    assert restored.list_tracked() == ["😀"]
    result = restored.query_count("G1", "😀", 3, 2025)
    assert result.total == 2
    assert result.entries[0].name == "Ana"
