"""
立绘事件管理器 - 轻量级事件发布/订阅系统

宿主 (场景/战斗系统) 发布生命周期与角色事件，立绘管理器订阅后做出响应，
取代直接改写宿主类的做法。
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .models import ActorState, GameContext

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """事件类型"""
    SCENE_START = "SCENE_START"           # 场景创建完毕 (payload: scene_name)
    SCENE_UPDATE = "SCENE_UPDATE"         # 每帧刷新 (payload: members, context)
    SCENE_TERMINATE = "SCENE_TERMINATE"   # 场景结束
    ACTOR_DAMAGE = "ACTOR_DAMAGE"         # 角色受到伤害 (actor, payload: frame_count)
    ACTION_START = "ACTION_START"         # 角色开始行动 (actor)
    ACTION_END = "ACTION_END"             # 角色行动结束 (actor)


@dataclass
class PictureEvent:
    """一条事件"""
    event_type: EventType
    actor: Optional[ActorState] = None
    payload: Dict[str, Any] = field(default_factory=dict)


EventCallback = Callable[[PictureEvent], None]


def apply_actor_event(event: PictureEvent) -> bool:
    """把角色事件转发到角色快照自身的入口 (游戏状态一侧)。

    Returns:
        事件是角色事件并已处理时返回 True
    """
    actor = event.actor
    if actor is None:
        return False
    if event.event_type == EventType.ACTOR_DAMAGE:
        actor.perform_damage(event.payload.get("frame_count", 0))
    elif event.event_type == EventType.ACTION_START:
        actor.perform_action()
    elif event.event_type == EventType.ACTION_END:
        actor.perform_action_end()
    else:
        return False
    return True


class EventManager:
    """事件管理器（实例级）"""

    def __init__(self) -> None:
        self._callbacks: List[EventCallback] = []

    def register_callback(self, callback: EventCallback) -> None:
        """注册事件回调"""
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def unregister_callback(self, callback: EventCallback) -> None:
        """取消注册回调"""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def emit(self, event: PictureEvent) -> None:
        """按注册顺序同步分发事件，回调中的异常直接向上传播"""
        logger.debug(f"[Event] {event.event_type.value} -> {len(self._callbacks)} callbacks")
        for callback in list(self._callbacks):
            callback(event)

    # ------------------------------------------------------------------ #
    #  便捷发布方法                                                        #
    # ------------------------------------------------------------------ #

    def scene_start(self, scene_name: str) -> None:
        self.emit(PictureEvent(EventType.SCENE_START, payload={"scene_name": scene_name}))

    def scene_update(self, members: List[ActorState], context: Optional[GameContext] = None) -> None:
        self.emit(PictureEvent(EventType.SCENE_UPDATE, payload={"members": members, "context": context}))

    def scene_terminate(self) -> None:
        self.emit(PictureEvent(EventType.SCENE_TERMINATE))

    def actor_damage(self, actor: ActorState, frame_count: int) -> None:
        self.emit(PictureEvent(EventType.ACTOR_DAMAGE, actor=actor, payload={"frame_count": frame_count}))

    def action_start(self, actor: ActorState) -> None:
        self.emit(PictureEvent(EventType.ACTION_START, actor=actor))

    def action_end(self, actor: ActorState) -> None:
        self.emit(PictureEvent(EventType.ACTION_END, actor=actor))
