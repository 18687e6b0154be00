"""
Snapshot storage for the Emoji Counter.

The engine itself is in-memory only. This module defines Tortoise ORM models
and a store that saves and loads full engine snapshots, so counts can
survive a restart when persistence is enabled.
"""

import logging

from tortoise import fields
from tortoise.models import Model
from tortoise.transactions import in_transaction

from .models import EngineSnapshot

logger = logging.getLogger("emoji_counter.storage")


class TrackedEmoji(Model):
    """An emoji symbol being counted, in tracking order."""
    id = fields.IntField(pk=True)
    symbol = fields.CharField(max_length=100, unique=True)
    position = fields.IntField(default=0)

    class Meta:
        table = "emoji_counter_tracked"


class EmojiCount(Model):
    """One leaf of the aggregation index."""
    id = fields.IntField(pk=True)
    group_id = fields.CharField(max_length=64, index=True)
    symbol = fields.CharField(max_length=100)
    period = fields.CharField(max_length=16)  # "<month>-<year>"
    user_id = fields.CharField(max_length=64)
    count = fields.IntField()

    class Meta:
        table = "emoji_counter_count"
        unique_together = (("group_id", "symbol", "period", "user_id"),)


class DisplayName(Model):
    """Last seen display name of a user."""
    user_id = fields.CharField(max_length=64, pk=True)
    name = fields.CharField(max_length=255)

    class Meta:
        table = "emoji_counter_display_name"


class SnapshotStore:
    """Saves and loads EngineSnapshot objects through Tortoise ORM."""

    async def save(self, snapshot: EngineSnapshot) -> None:
        """Replace the stored state with the given snapshot in one transaction."""
        async with in_transaction() as connection:
            await TrackedEmoji.all().using_db(connection).delete()
            await EmojiCount.all().using_db(connection).delete()
            await DisplayName.all().using_db(connection).delete()

            if snapshot.tracked:
                await TrackedEmoji.bulk_create(
                    [TrackedEmoji(symbol=symbol, position=i) for i, symbol in enumerate(snapshot.tracked)],
                    using_db=connection
                )
            if snapshot.counts:
                await EmojiCount.bulk_create(
                    [
                        EmojiCount(group_id=group_id, symbol=symbol, period=period, user_id=user_id, count=count)
                        for group_id, symbol, period, user_id, count in snapshot.counts
                    ],
                    using_db=connection
                )
            if snapshot.names:
                await DisplayName.bulk_create(
                    [DisplayName(user_id=user_id, name=name) for user_id, name in snapshot.names.items()],
                    using_db=connection
                )

        logger.debug(
            f"Saved snapshot: {len(snapshot.tracked)} tracked, {len(snapshot.counts)} counts, "
            f"{len(snapshot.names)} names"
        )

    async def load(self) -> EngineSnapshot:
        tracked = await TrackedEmoji.all().order_by("position", "id").values_list("symbol", flat=True)
        counts = await EmojiCount.all().order_by("id").values_list(
            "group_id", "symbol", "period", "user_id", "count"
        )
        names = await DisplayName.all().values_list("user_id", "name")

        return EngineSnapshot(
            tracked=list(tracked),
            counts=[tuple(row) for row in counts],
            names={user_id: name for user_id, name in names}
        )
