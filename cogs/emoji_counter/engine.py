"""
Emoji Counter engine.

Ties together the tracking set, the occurrence counter, the aggregation
index, the display-name directory and the query engine behind one object.
The engine is created empty, handed to the transport and the command
dispatcher, and can be snapshotted and restored by an external store.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from .directory import DEFAULT_PLACEHOLDER, DisplayNameDirectory
from .extractor import count_occurrences
from .index import AggregationIndex, PeriodKey
from .models import (
    CountResult, EngineSnapshot, InboundMessage, Outcome, RankingResult,
    StatusSnapshot, TrackingAction, TrackingResult, UserCountResult
)
from .query import QueryEngine
from .tracking import TrackingSet

logger = logging.getLogger("emoji_counter.engine")


class EmojiCounterEngine:
    """
    In-memory emoji counting engine.

    All operations are synchronous and total: user input problems come back
    as `Outcome.INVALID_ARGUMENT`, missing data as `Outcome.NOT_FOUND`.
    A single re-entrant lock serialises every operation, so a query always
    sees all increments of messages observed before it.
    """

    def __init__(
        self,
        placeholder_name: str = DEFAULT_PLACEHOLDER,
        clock: Callable[[], datetime] = datetime.now
    ):
        """
        Initialize an empty engine.

        Args:
            placeholder_name: Label used for users without a known display name
            clock: Returns the current local time; used for default periods
        """
        self.tracking = TrackingSet()
        self.index = AggregationIndex()
        self.directory = DisplayNameDirectory(placeholder_name)
        self.queries = QueryEngine(self.index, self.directory)
        self._clock = clock
        self._lock = threading.RLock()

    # ==================== Inbound Messages ====================

    def observe(self, message: InboundMessage, count: bool = True) -> dict[str, int]:
        """
        Process one inbound message.

        Non-group messages are ignored entirely. For group messages the
        author's display name is always refreshed; occurrences are counted
        only when `count` is true (command messages are not counted).

        Args:
            message: The inbound message
            count: Whether to count tracked symbols in the message text

        Returns:
            symbol -> count recorded for this message
        """
        if not message.is_group_chat:
            return {}

        with self._lock:
            self.directory.update(message.user_id, message.display_name)
            if not count:
                return {}
            return self.record_text(
                message.group_id, message.user_id, message.text, message.timestamp
            )

    def record_text(self, group_id: str, user_id: str, text: str, timestamp: datetime) -> dict[str, int]:
        """Count tracked symbols in a text and add them to the index."""
        with self._lock:
            if self.tracking.is_empty():
                return {}

            occurrences = count_occurrences(text, self.tracking)
            if not occurrences:
                return {}

            recorded = self.index.record(group_id, PeriodKey.from_datetime(timestamp), user_id, occurrences)

        for symbol, amount in recorded.items():
            logger.debug(f"{self.directory.lookup(user_id)}: +{amount} {symbol}")
        return recorded

    # ==================== Tracking ====================

    @staticmethod
    def _clean_symbol(symbol: Optional[str]) -> Optional[str]:
        if symbol is None:
            return None
        symbol = symbol.strip()
        return symbol or None

    def add_tracked(self, symbol: Optional[str]) -> TrackingResult:
        cleaned = self._clean_symbol(symbol)
        if cleaned is None:
            return TrackingResult(TrackingAction.ADD, Outcome.INVALID_ARGUMENT)

        with self._lock:
            self.tracking.add(cleaned)
        logger.info(f"Emoji {cleaned} added to tracking")
        return TrackingResult(TrackingAction.ADD, Outcome.OK, cleaned)

    def remove_tracked(self, symbol: Optional[str]) -> TrackingResult:
        """Stop counting a symbol. Counts already recorded are kept."""
        cleaned = self._clean_symbol(symbol)
        if cleaned is None:
            return TrackingResult(TrackingAction.REMOVE, Outcome.INVALID_ARGUMENT)

        with self._lock:
            self.tracking.remove(cleaned)
        logger.info(f"Emoji {cleaned} removed from tracking")
        return TrackingResult(TrackingAction.REMOVE, Outcome.OK, cleaned)

    def list_tracked(self) -> list[str]:
        with self._lock:
            return self.tracking.list()

    # ==================== Queries ====================

    def _resolve_period(self, month: Optional[int], year: Optional[int]) -> Optional[PeriodKey]:
        """Fill missing month/year from the current date; None if the result is invalid."""
        now = self._clock()
        month = now.month if month is None else month
        year = now.year if year is None else year
        try:
            return PeriodKey.of(int(month), int(year))
        except (TypeError, ValueError):
            return None

    def query_count(
        self,
        group_id: str,
        symbol: Optional[str],
        month: Optional[int] = None,
        year: Optional[int] = None
    ) -> CountResult:
        """Total and per-user breakdown for a symbol in a period."""
        cleaned = self._clean_symbol(symbol)
        period = self._resolve_period(month, year)
        if cleaned is None or period is None:
            return CountResult(Outcome.INVALID_ARGUMENT, cleaned, month, year)

        with self._lock:
            return self.queries.count(group_id, cleaned, period)

    def query_ranking(
        self,
        group_id: str,
        symbol: Optional[str],
        month: Optional[int] = None,
        year: Optional[int] = None
    ) -> RankingResult:
        """Leaderboard for a symbol in a period."""
        cleaned = self._clean_symbol(symbol)
        period = self._resolve_period(month, year)
        if cleaned is None or period is None:
            return RankingResult(Outcome.INVALID_ARGUMENT, cleaned, month, year)

        with self._lock:
            return self.queries.ranking(group_id, cleaned, period)

    def query_user_count(
        self,
        group_id: str,
        symbol: Optional[str],
        user_id: str,
        month: Optional[int] = None,
        year: Optional[int] = None
    ) -> UserCountResult:
        """The requesting user's own count for a symbol in a period."""
        cleaned = self._clean_symbol(symbol)
        period = self._resolve_period(month, year)
        if cleaned is None or period is None:
            return UserCountResult(
                Outcome.INVALID_ARGUMENT, cleaned, user_id, self.directory.lookup(user_id), month, year
            )

        with self._lock:
            return self.queries.user_count(group_id, cleaned, user_id, period)

    # ==================== Status & Snapshots ====================

    def snapshot_status(self) -> StatusSnapshot:
        with self._lock:
            return StatusSnapshot(
                tracked_symbols=self.tracking.list(),
                total_groups=self.index.group_count()
            )

    def snapshot(self) -> EngineSnapshot:
        """Copy the full engine state for an external store."""
        with self._lock:
            return EngineSnapshot(
                tracked=self.tracking.list(),
                counts=list(self.index.entries()),
                names=self.directory.as_dict()
            )

    def restore(self, snapshot: EngineSnapshot) -> None:
        """
        Load a snapshot into this engine.

        Meant to run once at startup on an empty engine: counts are added to
        whatever the index already holds, never subtracted.
        """
        with self._lock:
            for symbol in snapshot.tracked:
                cleaned = self._clean_symbol(symbol)
                if cleaned is not None:
                    self.tracking.add(cleaned)
            for user_id, name in snapshot.names.items():
                self.directory.update(user_id, name)
            loaded = self.index.load_entries(snapshot.counts)

        logger.info(
            f"Restored {len(snapshot.tracked)} tracked emoji(s), {loaded} count(s) "
            f"and {len(snapshot.names)} display name(s)"
        )
