"""
Ranking and summary queries over the aggregation index.
"""

from typing import Optional

from .directory import DisplayNameDirectory
from .index import AggregationIndex, PeriodKey
from .models import CountResult, Outcome, RankedEntry, RankingResult, UserCountResult


class QueryEngine:
    """
    Answers count, ranking and per-user queries for a (group, symbol, period).

    Ordering: count descending. Users with equal counts keep the order in
    which they first scored in that period (Python's sort is stable and the
    breakdown preserves insertion order).
    """

    def __init__(self, index: AggregationIndex, directory: DisplayNameDirectory):
        self.index = index
        self.directory = directory

    def breakdown(self, group_id: str, symbol: str, period: PeriodKey) -> Optional[list[RankedEntry]]:
        """
        Build the sorted per-user breakdown.

        Returns:
            Ranked entries starting at position 1, or None if no data exists
        """
        users = self.index.get(group_id, symbol, period)
        if users is None:
            return None

        ordered = sorted(users.items(), key=lambda item: item[1], reverse=True)
        return [
            RankedEntry(
                position=position,
                user_id=user_id,
                name=self.directory.lookup(user_id),
                count=count
            )
            for position, (user_id, count) in enumerate(ordered, 1)
        ]

    def count(self, group_id: str, symbol: str, period: PeriodKey) -> CountResult:
        entries = self.breakdown(group_id, symbol, period)
        if entries is None:
            return CountResult(Outcome.NOT_FOUND, symbol, period.month, period.year)

        return CountResult(
            Outcome.OK,
            symbol,
            period.month,
            period.year,
            total=sum(entry.count for entry in entries),
            entries=entries
        )

    def ranking(self, group_id: str, symbol: str, period: PeriodKey) -> RankingResult:
        entries = self.breakdown(group_id, symbol, period)
        if entries is None:
            return RankingResult(Outcome.NOT_FOUND, symbol, period.month, period.year)
        return RankingResult(Outcome.OK, symbol, period.month, period.year, entries=entries)

    def user_count(self, group_id: str, symbol: str, user_id: str, period: PeriodKey) -> UserCountResult:
        """Look up one user's own count; not found if that user has no entry."""
        name = self.directory.lookup(user_id)
        users = self.index.get(group_id, symbol, period)

        if not users or user_id not in users:
            return UserCountResult(Outcome.NOT_FOUND, symbol, user_id, name, period.month, period.year)

        return UserCountResult(
            Outcome.OK, symbol, user_id, name, period.month, period.year, count=users[user_id]
        )
