"""
Data models for the Emoji Counter.

Plain dataclasses shared by the engine, the query layer, the renderer and the
transport, so none of them depend on discord.py types.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class Outcome(str, Enum):
    """Result state of an engine operation."""
    OK = "ok"
    NOT_FOUND = "not_found"
    INVALID_ARGUMENT = "invalid_argument"


class TrackingAction(str, Enum):
    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True)
class InboundMessage:
    """A single chat message as delivered by the transport."""
    group_id: str
    user_id: str
    display_name: Optional[str]
    is_group_chat: bool
    text: str
    timestamp: datetime


@dataclass(frozen=True)
class TrackingResult:
    """Result of adding or removing a tracked symbol."""
    action: TrackingAction
    outcome: Outcome
    symbol: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK


@dataclass(frozen=True)
class RankedEntry:
    """One line of a breakdown: a user, their position and count."""
    position: int
    user_id: str
    name: str
    count: int


@dataclass(frozen=True)
class CountResult:
    outcome: Outcome
    symbol: Optional[str]
    month: Optional[int] = None
    year: Optional[int] = None
    total: int = 0
    entries: list[RankedEntry] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.outcome is Outcome.OK


@dataclass(frozen=True)
class RankingResult:
    outcome: Outcome
    symbol: Optional[str]
    month: Optional[int] = None
    year: Optional[int] = None
    entries: list[RankedEntry] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.outcome is Outcome.OK


@dataclass(frozen=True)
class UserCountResult:
    outcome: Outcome
    symbol: Optional[str]
    user_id: str
    name: str
    month: Optional[int] = None
    year: Optional[int] = None
    count: int = 0

    @property
    def found(self) -> bool:
        return self.outcome is Outcome.OK


@dataclass(frozen=True)
class StatusSnapshot:
    """Point-in-time view for operational status reporting."""
    tracked_symbols: list[str]
    total_groups: int


@dataclass
class EngineSnapshot:
    """
    Serializable copy of the whole engine state.

    Attributes:
        tracked: Tracked symbols in insertion order
        counts: Rows of (group_id, symbol, period, user_id, count)
        names: user_id -> last seen display name
    """
    tracked: list[str] = field(default_factory=list)
    counts: list[tuple[str, str, str, str, int]] = field(default_factory=list)
    names: dict[str, str] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not (self.tracked or self.counts or self.names)
