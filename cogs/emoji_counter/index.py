"""
Hierarchical counter store for the Emoji Counter.

Counts are kept as group -> symbol -> period -> user -> count and only ever
grow. There is no decrement or delete operation.
"""

import logging
import re
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Iterator, Mapping, Optional

logger = logging.getLogger("emoji_counter.index")


@dataclass(frozen=True, order=True)
class PeriodKey:
    """A calendar month bucket, rendered as "<month>-<year>" without padding."""
    year: int
    month: int

    PATTERN = re.compile(r'^(\d{1,2})-(\d{1,4})$')

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {self.month}")
        if self.year < 1:
            raise ValueError(f"Year must be positive, got {self.year}")

    @classmethod
    def of(cls, month: int, year: int) -> 'PeriodKey':
        return cls(year=year, month=month)

    @classmethod
    def from_datetime(cls, moment: datetime) -> 'PeriodKey':
        return cls(year=moment.year, month=moment.month)

    @classmethod
    def parse(cls, text: str) -> 'PeriodKey':
        """Parse the canonical "<month>-<year>" form."""
        match = cls.PATTERN.match(text.strip())
        if not match:
            raise ValueError(f"Invalid period key: {text!r}")
        return cls(year=int(match.group(2)), month=int(match.group(1)))

    def __str__(self) -> str:
        return f"{self.month}-{self.year}"


class AggregationIndex:
    """
    Four-level counter: group -> symbol -> period -> user -> count.

    Invariant: a leaf exists only if at least one occurrence was recorded for
    it, so counts are always positive. Each `record` call creates the whole
    path and increments the leaf while holding the lock; readers never see a
    path without its count.
    """

    def __init__(self):
        self._data: dict[str, dict[str, dict[str, dict[str, int]]]] = {}
        self._lock = threading.RLock()

    def record(
        self,
        group_id: str,
        period: PeriodKey,
        user_id: str,
        occurrences: Mapping[str, int]
    ) -> dict[str, int]:
        """
        Add a message's occurrences to the index.

        Args:
            group_id: Group the message was posted in
            period: Month bucket of the message's arrival time
            user_id: Author of the message
            occurrences: symbol -> count for this message

        Returns:
            The (symbol, count) pairs actually recorded
        """
        recorded: dict[str, int] = {}
        period_key = str(period)

        with self._lock:
            for symbol, count in occurrences.items():
                if count <= 0:
                    continue
                users = self._data.setdefault(group_id, {}) \
                    .setdefault(symbol, {}) \
                    .setdefault(period_key, {})
                users[user_id] = users.get(user_id, 0) + count
                recorded[symbol] = count

        if recorded:
            logger.debug(f"Recorded {recorded} for user {user_id} in group {group_id} ({period_key})")
        return recorded

    def get(self, group_id: str, symbol: str, period: PeriodKey) -> Optional[dict[str, int]]:
        """
        Get the per-user breakdown for a group, symbol and period.

        Returns:
            A copy of user_id -> count in insertion order, or None when
            nothing was ever recorded for this combination.
        """
        with self._lock:
            users = self._data.get(group_id, {}).get(symbol, {}).get(str(period))
            if users is None:
                return None
            return dict(users)

    def group_count(self) -> int:
        with self._lock:
            return len(self._data)

    def groups(self) -> list[str]:
        with self._lock:
            return list(self._data)

    def entries(self) -> Iterator[tuple[str, str, str, str, int]]:
        """Yield every leaf as (group_id, symbol, period, user_id, count)."""
        with self._lock:
            rows = [
                (group_id, symbol, period_key, user_id, count)
                for group_id, symbols in self._data.items()
                for symbol, periods in symbols.items()
                for period_key, users in periods.items()
                for user_id, count in users.items()
            ]
        return iter(rows)

    def load_entries(self, rows: Iterable[tuple[str, str, str, str, int]]) -> int:
        """
        Accumulate previously snapshotted leaves into the index.

        Rows with a non-positive count or an unparsable period are skipped.

        Returns:
            Number of rows loaded
        """
        loaded = 0
        for group_id, symbol, period_text, user_id, count in rows:
            try:
                period = PeriodKey.parse(period_text)
            except ValueError:
                logger.warning(f"Skipping snapshot row with invalid period {period_text!r}")
                continue
            if self.record(group_id, period, user_id, {symbol: count}):
                loaded += 1
        return loaded

    def __len__(self) -> int:
        return self.group_count()
