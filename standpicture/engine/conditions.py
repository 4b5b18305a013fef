"""
Rule Evaluator
判定单条立绘规则 (PictureFileConfig) 的所有显示条件
"""

from typing import Callable, Optional

from ..models import ActorState, GameContext, PictureFileConfig
from .predicates import PredicateRegistry

# 条件检查函数签名: (规则, 角色, 上下文, 注册表) -> bool
ConditionCheck = Callable[[PictureFileConfig, ActorState, GameContext, PredicateRegistry], bool]


def _check_hp_upper(rule: PictureFileConfig, actor: ActorState, context: GameContext, predicates: PredicateRegistry) -> bool:
    """HP 上限: HP% <= 上限"""
    return not rule.hp_upper_limit or actor.hp_percent() <= rule.hp_upper_limit


def _check_hp_lower(rule: PictureFileConfig, actor: ActorState, context: GameContext, predicates: PredicateRegistry) -> bool:
    """HP 下限: HP% >= 下限"""
    return not rule.hp_lower_limit or actor.hp_percent() >= rule.hp_lower_limit


def _check_damage(rule: PictureFileConfig, actor: ActorState, context: GameContext, predicates: PredicateRegistry) -> bool:
    return not rule.damage or actor.is_damaged(context.frame_count)


def _check_action(rule: PictureFileConfig, actor: ActorState, context: GameContext, predicates: PredicateRegistry) -> bool:
    return not rule.action or actor.is_acting()


def _check_state(rule: PictureFileConfig, actor: ActorState, context: GameContext, predicates: PredicateRegistry) -> bool:
    return not rule.state or actor.is_state_affected(rule.state)


def _check_weapon(rule: PictureFileConfig, actor: ActorState, context: GameContext, predicates: PredicateRegistry) -> bool:
    return not rule.weapon or actor.has_weapon(rule.weapon)


def _check_armor(rule: PictureFileConfig, actor: ActorState, context: GameContext, predicates: PredicateRegistry) -> bool:
    return not rule.armor or actor.has_armor(rule.armor)


def _check_note(rule: PictureFileConfig, actor: ActorState, context: GameContext, predicates: PredicateRegistry) -> bool:
    """备注标签: 区分大小写的完全一致"""
    return not rule.note or actor.find_note() == rule.note


def _check_switch(rule: PictureFileConfig, actor: ActorState, context: GameContext, predicates: PredicateRegistry) -> bool:
    return not rule.switch or context.switch(rule.switch)


def _check_script(rule: PictureFileConfig, actor: ActorState, context: GameContext, predicates: PredicateRegistry) -> bool:
    """脚本条件: 调用已注册的判定函数，异常直接向上传播"""
    if not rule.script:
        return True
    return bool(predicates.get(rule.script)(actor, context))


# 按原插件的顺序排列；各条件互相独立，顺序不影响结果
_CONDITION_CHECKERS: tuple[ConditionCheck, ...] = (
    _check_hp_upper,
    _check_hp_lower,
    _check_damage,
    _check_action,
    _check_state,
    _check_weapon,
    _check_armor,
    _check_note,
    _check_switch,
    _check_script,
)


class RuleEvaluator:
    """规则判定器"""

    def __init__(self, predicates: Optional[PredicateRegistry] = None):
        self.predicates = predicates if predicates is not None else PredicateRegistry()

    def evaluate(self, rule: PictureFileConfig, actor: ActorState, context: Optional[GameContext] = None) -> bool:
        """规则的所有条件均满足时返回 True。

        Args:
            rule: 立绘规则
            actor: 角色快照
            context: 开关/变量/帧计数，省略时使用空上下文

        Raises:
            KeyError: 脚本条件引用了未注册的判定函数
        """
        context = context if context is not None else GameContext()
        return all(
            check(rule, actor, context, self.predicates)
            for check in _CONDITION_CHECKERS
        )
