from __future__ import annotations

import asyncio
from pathlib import Path

from bot import EmojiCounterBot
from utilities.config import get_config

EXAMPLE_CONFIG = Path(__file__).resolve().parent.parent / "configuration" / "config.example.yaml"


class SlowStore:
    """Records how many saves run at the same time."""

    def __init__(self) -> None:
        self.active = 0
        self.peak = 0
        self.saved = 0

    async def save(self, snapshot) -> None:
        self.active += 1
        self.peak = max(self.peak, self.active)
        await asyncio.sleep(0.01)
        self.active -= 1
        self.saved += 1


def test_intents_only_request_message_content() -> None:
    async def build() -> EmojiCounterBot:
        return EmojiCounterBot(get_config(str(EXAMPLE_CONFIG)))

    bot = asyncio.run(build())

    assert bot.intents.message_content
    assert not bot.intents.members


def test_concurrent_saves_run_one_at_a_time() -> None:
    store = SlowStore()

    async def run() -> None:
        bot = EmojiCounterBot(get_config(str(EXAMPLE_CONFIG)))
        bot.snapshot_store = store
        await asyncio.gather(bot.save_snapshot(), bot.save_snapshot(), bot.save_snapshot())

    asyncio.run(run())

    assert store.saved == 3
    assert store.peak == 1
