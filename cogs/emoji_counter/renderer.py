"""
Visual rendering utilities for the Emoji Counter.

Turns engine results into reply titles and text bodies. The Discord cog wraps
these in embeds; nothing here depends on discord.py.
"""

from dataclasses import dataclass
from typing import Optional

from .models import (
    CountResult, Outcome, RankedEntry, RankingResult, StatusSnapshot,
    TrackingAction, TrackingResult, UserCountResult
)

MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}


@dataclass(frozen=True)
class Reply:
    """A rendered reply. `level` selects the embed style."""
    title: str
    body: str = ""
    level: str = "info"  # success, info, warning, error


@dataclass
class RenderSettings:
    """Settings for rendering output."""
    max_entries: int = 0  # 0 = no limit
    compact_mode: bool = False


def rank_label(position: int) -> str:
    """Badge for a leaderboard position: medals for the top three, then "4º", "5º"..."""
    medal = MEDALS.get(position)
    if medal:
        return f"{medal} {position}º"
    return f"{position}º"


def format_period(month: Optional[int], year: Optional[int]) -> str:
    return f"{month}/{year}"


class Renderer:
    """Renders engine results as replies."""

    def __init__(self, settings: Optional[RenderSettings] = None):
        self.settings = settings or RenderSettings()

    def _visible(self, entries: list[RankedEntry]) -> tuple[list[RankedEntry], int]:
        """Apply max_entries; returns (shown entries, number hidden)."""
        limit = self.settings.max_entries
        if limit and len(entries) > limit:
            return entries[:limit], len(entries) - limit
        return entries, 0

    def render_entries(self, entries: list[RankedEntry], symbol: str = "") -> str:
        shown, hidden = self._visible(entries)
        suffix = f" {symbol}" if symbol else ""
        lines = [
            f"{rank_label(entry.position)} {entry.name} - {entry.count:,}{suffix}"
            for entry in shown
        ]
        if hidden:
            lines.append(f"*...and {hidden} more*")

        if self.settings.compact_mode:
            return " | ".join(lines)
        return "\n".join(lines)

    # ==================== Tracking ====================

    def render_tracking(self, result: TrackingResult, usage: str) -> Reply:
        if result.outcome is Outcome.INVALID_ARGUMENT:
            return Reply("Missing Emoji", f"Usage: `{usage}`", "warning")

        if result.action is TrackingAction.ADD:
            return Reply("Emoji Added", f"Now counting {result.symbol}", "success")
        return Reply("Emoji Removed", f"Stopped counting {result.symbol}", "success")

    def render_tracked_list(self, symbols: list[str], add_usage: str) -> Reply:
        if not symbols:
            return Reply("Tracked Emojis", f"No emojis are being tracked.\nUse: `{add_usage}`", "info")
        return Reply("Tracked Emojis", f"Tracking: {' '.join(symbols)}", "info")

    # ==================== Queries ====================

    def render_invalid_query(self, usage: str) -> Reply:
        return Reply("Invalid Command", f"Usage: `{usage}`", "warning")

    def render_count(self, result: CountResult, usage: str) -> Reply:
        if result.outcome is Outcome.INVALID_ARGUMENT:
            return self.render_invalid_query(usage)

        period = format_period(result.month, result.year)
        if not result.found:
            return Reply("No Data", f"No {result.symbol} found in {period}", "info")

        body = f"📈 Total: **{result.total:,}**\n\n{self.render_entries(result.entries)}"
        return Reply(f"📊 {result.symbol} in {period}", body, "info")

    def render_ranking(self, result: RankingResult, usage: str) -> Reply:
        if result.outcome is Outcome.INVALID_ARGUMENT:
            return self.render_invalid_query(usage)

        period = format_period(result.month, result.year)
        if not result.found:
            return Reply("No Data", f"No ranking for {result.symbol} in {period}", "info")

        return Reply(
            f"🏆 Ranking {result.symbol} - {period}",
            self.render_entries(result.entries, result.symbol),
            "info"
        )

    def render_user_count(self, result: UserCountResult, usage: str) -> Reply:
        if result.outcome is Outcome.INVALID_ARGUMENT:
            return self.render_invalid_query(usage)

        period = format_period(result.month, result.year)
        if not result.found:
            return Reply("No Data", f"{result.name}, you have not sent {result.symbol} in {period}", "info")

        return Reply("📊 Your Count", f"{result.name}: {result.count:,}x {result.symbol} in {period}", "info")

    # ==================== Misc ====================

    def render_status(self, status: StatusSnapshot) -> Reply:
        tracked = " ".join(status.tracked_symbols) if status.tracked_symbols else "*none*"
        return Reply("Status", f"**Tracked:** {tracked}\n**Groups:** {status.total_groups:,}", "info")

    def render_unknown(self, raw_verb: Optional[str], help_usage: str) -> Reply:
        shown = f" `{raw_verb}`" if raw_verb else ""
        return Reply("Unknown Command", f"Command{shown} not recognized. Use `{help_usage}` for help.", "warning")
