"""
立绘管理器
宿主场景的每帧刷新入口：管理当前显示的角色，并为每名角色解析立绘图层
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from .events import EventManager, EventType, PictureEvent, apply_actor_event
from .loader import PictureConfigLoader
from .models import ActorState, GameContext, PictureSettings, ResolvedSlice, SceneConfig, ScenePriority
from .engine import PictureRegistry, PortraitResolver, PredicateRegistry

logger = logging.getLogger(__name__)


class StandPictureManager:
    """立绘管理器

    生命周期：
      start_scene -> update (每帧一次) -> terminate_scene

    角色第一次成功解析时记录其队伍位置，之后一直使用该位置的基准坐标，
    直到角色离开队伍；显示文件每帧重新选择。
    """

    def __init__(self, settings: PictureSettings, predicates: Optional[PredicateRegistry] = None):
        self.registry = PictureRegistry(settings)
        self.resolver = PortraitResolver(self.registry, predicates=predicates)
        self._scene: Optional[SceneConfig] = None
        self._slots: Dict[int, int] = {}   # actor_id -> 队伍位置
        self._last_frame: Dict[int, List[ResolvedSlice]] = {}

    @classmethod
    def from_file(cls, config_path: Union[str, Path], predicates: Optional[PredicateRegistry] = None) -> "StandPictureManager":
        return cls(PictureConfigLoader.load_from_file(config_path), predicates=predicates)

    # ------------------------------------------------------------------ #
    #  属性                                                               #
    # ------------------------------------------------------------------ #

    @property
    def predicates(self) -> PredicateRegistry:
        return self.resolver.predicates

    @property
    def scene(self) -> Optional[SceneConfig]:
        return self._scene

    @property
    def priority(self) -> Optional[ScenePriority]:
        """当前场景的立绘容器层级，场景不显示立绘时为 None"""
        return self._scene.priority if self._scene else None

    @property
    def displayed_actor_ids(self) -> List[int]:
        return list(self._slots)

    @property
    def last_frame(self) -> Dict[int, List[ResolvedSlice]]:
        return self._last_frame

    # ------------------------------------------------------------------ #
    #  场景生命周期                                                        #
    # ------------------------------------------------------------------ #

    def start_scene(self, scene_name: str) -> bool:
        """进入场景。返回该场景是否显示立绘。"""
        self._scene = self.registry.get_scene(scene_name)
        self._slots.clear()
        self._last_frame = {}
        if self._scene is None:
            logger.debug(f"[Manager] 场景 {scene_name} 不显示立绘")
            return False
        logger.info(f"[Manager] 场景 {scene_name} 开始显示立绘 (priority={self._scene.priority.name})")
        return True

    def update(self, members: List[ActorState], context: Optional[GameContext] = None) -> Dict[int, List[ResolvedSlice]]:
        """每帧刷新。

        Args:
            members: 当前场景的显示对象 (通常是队伍成员，按队伍顺序)
            context: 开关/变量/帧计数

        Returns:
            actor_id -> 该角色的图层列表 (仅包含正在显示的角色)
        """
        if self._scene is None:
            return {}
        context = context if context is not None else GameContext()

        frame: Dict[int, List[ResolvedSlice]] = {}
        for index, member in enumerate(members):
            slot = self._slots.get(member.actor_id, index)
            slices = self.resolver.resolve_slices(member, self._scene, slot, context)
            if slices is None:
                continue
            if member.actor_id not in self._slots:
                logger.debug(f"[Manager] 添加角色 {member.actor_id} 的立绘 (位置 {slot})")
                self._slots[member.actor_id] = slot
            frame[member.actor_id] = slices

        member_ids = {member.actor_id for member in members}
        for actor_id in list(self._slots):
            if actor_id not in member_ids:
                logger.debug(f"[Manager] 移除角色 {actor_id} 的立绘")
                del self._slots[actor_id]

        self._last_frame = frame
        return frame

    def terminate_scene(self) -> None:
        self._scene = None
        self._slots.clear()
        self._last_frame = {}

    # ------------------------------------------------------------------ #
    #  事件订阅                                                            #
    # ------------------------------------------------------------------ #

    def attach(self, event_manager: EventManager) -> None:
        event_manager.register_callback(self.handle_event)

    def detach(self, event_manager: EventManager) -> None:
        event_manager.unregister_callback(self.handle_event)

    def handle_event(self, event: PictureEvent) -> None:
        if apply_actor_event(event):
            return
        if event.event_type == EventType.SCENE_START:
            self.start_scene(event.payload["scene_name"])
        elif event.event_type == EventType.SCENE_UPDATE:
            self.update(event.payload.get("members", []), event.payload.get("context"))
        elif event.event_type == EventType.SCENE_TERMINATE:
            self.terminate_scene()
