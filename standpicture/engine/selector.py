import logging
from typing import Optional

from ..models import ActorState, GameContext, PictureFileConfig, PictureSliceConfig
from .conditions import RuleEvaluator
from .template import DynamicFileNameTemplate

logger = logging.getLogger(__name__)


class SliceSelector:
    """
    Selects the file a single picture slice displays this refresh.
    Later rules override earlier ones: the rule list is walked in reverse and
    the first rule whose conditions all pass wins.
    """
    def __init__(self, evaluator: RuleEvaluator):
        self.evaluator = evaluator

    def find_rule(self,
                  picture: PictureSliceConfig,
                  actor: ActorState,
                  context: GameContext) -> Optional[PictureFileConfig]:
        for rule in reversed(picture.file_list):
            if self.evaluator.evaluate(rule, actor, context):
                return rule
        return None

    def select_file(self,
                    picture: PictureSliceConfig,
                    actor: ActorState,
                    context: GameContext) -> Optional[str]:
        """
        Returns the matched rule's file name, else the expanded dynamic file
        name, else None. A matched rule with a blank file name also falls back
        to the dynamic file name.
        """
        rule = self.find_rule(picture, actor, context)
        if rule is not None and rule.file_name:
            return rule.file_name

        if picture.dynamic_file_name:
            return DynamicFileNameTemplate(picture.dynamic_file_name).expand(actor, context)

        logger.debug(f"[Selector] actor={actor.actor_id} slice='{picture.name}' has no active file")
        return None
