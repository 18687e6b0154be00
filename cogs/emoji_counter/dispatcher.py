"""
Routes parsed commands to the engine and renders the replies.
"""

import logging
from typing import Optional

from .command_parser import CommandParser, CommandRequest, Verb
from .engine import EmojiCounterEngine
from .renderer import Renderer, Reply

logger = logging.getLogger("emoji_counter.dispatcher")


class CommandDispatcher:
    """Executes a CommandRequest against the engine for one group and user."""

    def __init__(
        self,
        engine: EmojiCounterEngine,
        parser: Optional[CommandParser] = None,
        renderer: Optional[Renderer] = None
    ):
        self.engine = engine
        self.parser = parser or CommandParser()
        self.renderer = renderer or Renderer()

    def dispatch_text(self, text: str, group_id: str, user_id: str) -> Reply:
        return self.dispatch(self.parser.parse(text), group_id, user_id)

    def dispatch(self, request: CommandRequest, group_id: str, user_id: str) -> Reply:
        """
        Run one command.

        Args:
            request: The parsed command
            group_id: Group the command was issued in
            user_id: User who issued the command

        Returns:
            The rendered reply
        """
        verb = request.verb
        if verb is None:
            return self.renderer.render_unknown(request.raw_verb, self.parser.usage(Verb.HELP))

        usage = self.parser.usage(verb)
        if request.errors:
            logger.debug(f"Rejected command {request.raw_command!r}: {request.errors}")
            return self.renderer.render_invalid_query(usage)

        if verb is Verb.ADD:
            return self.renderer.render_tracking(self.engine.add_tracked(request.symbol), usage)

        if verb is Verb.REMOVE:
            return self.renderer.render_tracking(self.engine.remove_tracked(request.symbol), usage)

        if verb is Verb.LIST:
            return self.renderer.render_tracked_list(self.engine.list_tracked(), self.parser.usage(Verb.ADD))

        if verb is Verb.COUNT:
            result = self.engine.query_count(group_id, request.symbol, request.month, request.year)
            return self.renderer.render_count(result, usage)

        if verb is Verb.RANKING:
            result = self.engine.query_ranking(group_id, request.symbol, request.month, request.year)
            return self.renderer.render_ranking(result, usage)

        if verb is Verb.USER:
            result = self.engine.query_user_count(group_id, request.symbol, user_id, request.month, request.year)
            return self.renderer.render_user_count(result, usage)

        if verb is Verb.STATUS:
            return self.renderer.render_status(self.engine.snapshot_status())

        return Reply("🤖 Emoji Counter", self.parser.get_help_text(), "info")
