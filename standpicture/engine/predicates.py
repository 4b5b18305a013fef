"""
脚本条件注册表
以已注册的判定函数取代任意脚本求值：配置中的 script 字段只是函数名。
"""

from typing import Callable, Dict, List, TypeAlias

from ..models import ActorState, GameContext

# 判定函数签名: (角色快照, 全局上下文) -> 是否满足
Predicate: TypeAlias = Callable[[ActorState, GameContext], bool]


class PredicateRegistry:
    """脚本条件注册表 (实例级)

    每个 RuleEvaluator 持有自己的注册表实例，测试之间互不干扰。
    """

    def __init__(self) -> None:
        self._predicates: Dict[str, Predicate] = {}

    def register(self, name: str) -> Callable[[Predicate], Predicate]:
        """装饰器: 以指定名称注册判定函数"""
        def decorator(func: Predicate) -> Predicate:
            self.add(name, func)
            return func
        return decorator

    def add(self, name: str, func: Predicate) -> None:
        if not name:
            raise ValueError("判定函数名不能为空")
        self._predicates[name] = func

    def remove(self, name: str) -> None:
        self._predicates.pop(name, None)

    def get(self, name: str) -> Predicate:
        if name not in self._predicates:
            raise KeyError(f"脚本条件未注册: {name}")
        return self._predicates[name]

    def names(self) -> List[str]:
        return list(self._predicates)

    def __contains__(self, name: str) -> bool:
        return name in self._predicates
