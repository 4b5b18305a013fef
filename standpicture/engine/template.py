import re
import logging
from bisect import bisect_right
from typing import List, Optional

from ..models import ActorState, GameContext
from .._utils import parse_hp_thresholds

logger = logging.getLogger(__name__)

# {hp:40,60,80} {stateId} {switch:N} {variable:N} {note} {action} {damage}
_PLACEHOLDER = re.compile(r"\{(hp|stateId|switch|variable|note|action|damage)(?::([^{}]*))?\}", re.IGNORECASE)
_ID_ARG = re.compile(r"\d+")


def hp_bucket_index(hp_percent: float, thresholds: List[float]) -> int:
    """
    Buckets are half-open [prev, next): bucket 0 is below the first threshold,
    the last bucket is [last threshold, 100].
    """
    return bisect_right(thresholds, hp_percent)


def _format_variable(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class DynamicFileNameTemplate:
    """
    Expands a dynamic file name template against live actor state.
    Placeholders are matched case-insensitively in a single pass, so values
    substituted in (e.g. a note containing '{damage}') are never expanded again.
    """
    def __init__(self, pattern: str):
        self.pattern = pattern

    def expand(self, actor: ActorState, context: Optional[GameContext] = None) -> str:
        context = context if context is not None else GameContext()

        def substitute(match: re.Match) -> str:
            name = match.group(1).lower()
            arg = match.group(2)
            value = self._resolve(name, arg, actor, context)
            return match.group(0) if value is None else value

        file_name = _PLACEHOLDER.sub(substitute, self.pattern)
        logger.debug(f"[Template] actor={actor.actor_id} '{self.pattern}' -> '{file_name}'")
        return file_name

    def _resolve(self, name: str, arg: Optional[str], actor: ActorState, context: GameContext) -> Optional[str]:
        # None leaves the placeholder untouched (malformed argument)
        if name == "hp":
            if arg is None:
                return None
            return str(hp_bucket_index(actor.hp_percent(), parse_hp_thresholds(arg)))

        if name in ("switch", "variable"):
            if arg is None or not _ID_ARG.fullmatch(arg):
                return None
            if name == "switch":
                return "1" if context.switch(int(arg)) else "0"
            return _format_variable(context.variable(int(arg)))

        if arg is not None:
            return None
        if name == "stateid":
            states = actor.visible_states()
            return str(states[0].id if states else 0)
        if name == "note":
            return actor.find_note()
        if name == "action":
            return "1" if actor.is_acting() else "0"
        # damage
        return "1" if actor.is_damaged(context.frame_count) else "0"


def expand_dynamic_file_name(pattern: str, actor: ActorState, context: Optional[GameContext] = None) -> str:
    return DynamicFileNameTemplate(pattern).expand(actor, context)
