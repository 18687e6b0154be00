"""
Command parser for the Emoji Counter.

Parses text commands of the form `!emoji <verb> [emoji] [month] [year]`.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

DEFAULT_PREFIX = "!emoji"


class Verb(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    LIST = "list"
    COUNT = "count"
    RANKING = "ranking"
    USER = "user"
    STATUS = "status"
    HELP = "help"


# Verbs whose second argument is an emoji followed by an optional period
QUERY_VERBS = {Verb.COUNT, Verb.RANKING, Verb.USER}


@dataclass
class CommandRequest:
    """Result of parsing a command line."""
    verb: Optional[Verb] = None
    symbol: Optional[str] = None
    month: Optional[int] = None
    year: Optional[int] = None

    # The verb as typed, kept for "unknown command" replies
    raw_verb: Optional[str] = None
    raw_command: str = ""

    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return self.verb is not None and not self.errors


class CommandParser:
    """
    Parses the text command syntax.

    Supported syntax:
        !emoji add 😀               - Start counting an emoji
        !emoji remove 😀            - Stop counting an emoji
        !emoji list                 - List tracked emojis
        !emoji count 😀 [M] [YYYY]  - Total and per-user breakdown
        !emoji ranking 😀 [M] [YYYY] - Leaderboard
        !emoji user 😀 [M] [YYYY]   - Your own count
        !emoji status               - Tracked emojis and group count
        !emoji help                 - Show help
    """

    def __init__(self, prefix: str = DEFAULT_PREFIX):
        self.prefix = prefix

    def is_command(self, text: Optional[str]) -> bool:
        return bool(text) and text.startswith(self.prefix)

    def parse(self, text: str) -> CommandRequest:
        """
        Parse a command line into a structured request.

        Args:
            text: The raw message text, including the prefix

        Returns:
            CommandRequest; `verb` is None for unknown or missing verbs
        """
        result = CommandRequest(raw_command=text)
        args = text.split()

        if len(args) < 2:
            return result

        result.raw_verb = args[1]
        try:
            result.verb = Verb(args[1].lower())
        except ValueError:
            return result

        if len(args) > 2:
            result.symbol = args[2]

        if result.verb in QUERY_VERBS:
            result.month = self._parse_int(args, 3, "month", result)
            result.year = self._parse_int(args, 4, "year", result)

            if result.month is not None and not 1 <= result.month <= 12:
                result.errors.append(f"Invalid month: {result.month}")

        return result

    @staticmethod
    def _parse_int(args: list[str], position: int, label: str, result: CommandRequest) -> Optional[int]:
        if len(args) <= position:
            return None
        try:
            return int(args[position])
        except ValueError:
            result.errors.append(f"Invalid {label}: {args[position]}")
            return None

    def usage(self, verb: Verb) -> str:
        """Return the usage line for a verb."""
        if verb in QUERY_VERBS:
            return f"{self.prefix} {verb.value} 😀 [month] [year]"
        if verb in (Verb.ADD, Verb.REMOVE):
            return f"{self.prefix} {verb.value} 😀"
        return f"{self.prefix} {verb.value}"

    def get_help_text(self) -> str:
        """Return help text explaining the command syntax."""
        p = self.prefix
        return f"""
**Setup:**
• `{p} add 😀` - Track an emoji
• `{p} remove 😀` - Stop tracking an emoji
• `{p} list` - Show tracked emojis

**Counts:**
• `{p} count 😀` - Detailed count for this month
• `{p} ranking 😀` - Leaderboard for this month
• `{p} user 😀` - Your own count

**Examples:**
`{p} add 👍`
`{p} count 👍`
`{p} ranking 😂 12 2024`
"""
