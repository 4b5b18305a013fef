"""
Selection Engine
每次刷新时为一名角色解析所有立绘图层，输出交给渲染层的显示描述
"""

import logging
from typing import List, Optional, Tuple

from ..config import Config
from ..models import (
    ActorState, GameContext, MemberPosition, PictureSliceConfig,
    ResolvedSlice, SceneConfig,
)
from .conditions import RuleEvaluator
from .predicates import PredicateRegistry
from .registry import PictureRegistry
from .selector import SliceSelector

logger = logging.getLogger(__name__)


def compute_scale(picture: PictureSliceConfig, scene: SceneConfig) -> Tuple[float, float]:
    """最终缩放 = 图层缩放 x 场景缩放 (反转时 X 取负)

    缩放率为 0 的图层按 100% 处理，场景缩放率为 0 时不参与计算。
    """
    scale_x = (picture.scale_x / Config.SCALE_BASE) or 1.0
    scale_y = (picture.scale_y / Config.SCALE_BASE) or 1.0
    if scene.scale_x:
        scale_x *= scene.scale_x / Config.SCALE_BASE
    if scene.scale_y:
        scale_y *= scene.scale_y / Config.SCALE_BASE
    if scene.mirror:
        scale_x *= -1
    return scale_x, scale_y


class PortraitResolver:
    """立绘解析器

    负责：
    - 按声明顺序遍历角色的图层，逐个选出显示文件
    - 计算显示坐标、缩放、可见性
    - 不修改任何配置对象，每次调用返回新的结果列表
    """

    def __init__(self,
                 registry: PictureRegistry,
                 evaluator: Optional[RuleEvaluator] = None,
                 predicates: Optional[PredicateRegistry] = None):
        self.registry = registry
        self.evaluator = evaluator if evaluator is not None else RuleEvaluator(predicates)
        self.selector = SliceSelector(self.evaluator)

    @property
    def predicates(self) -> PredicateRegistry:
        return self.evaluator.predicates

    def resolve_slices(self,
                       actor: ActorState,
                       scene: SceneConfig,
                       slot_index: int,
                       context: Optional[GameContext] = None) -> Optional[List[ResolvedSlice]]:
        """解析一名角色在当前场景的所有图层。

        Args:
            actor: 角色快照
            scene: 当前场景的绑定配置
            slot_index: 角色在队伍中的位置 (从 0 开始)
            context: 开关/变量/帧计数

        Returns:
            按声明顺序排列的 ResolvedSlice 列表；
            角色没有配置图层、或场景没有该位置的基准坐标时返回 None
        """
        context = context if context is not None else GameContext()

        base = scene.get_base_position(slot_index)
        if base is None:
            logger.debug(f"[Resolver] 场景 {scene.scene_name} 没有位置 {slot_index} 的基准坐标")
            return None

        pictures = self.registry.get_slices(actor.actor_id)
        if not pictures:
            logger.debug(f"[Resolver] 角色 {actor.actor_id} 没有配置立绘")
            return None

        visible = not scene.show_picture_switch or context.switch(scene.show_picture_switch)
        return [
            self._resolve_slice(picture, actor, scene, base, visible, context)
            for picture in pictures
        ]

    def _resolve_slice(self,
                       picture: PictureSliceConfig,
                       actor: ActorState,
                       scene: SceneConfig,
                       base: MemberPosition,
                       visible: bool,
                       context: GameContext) -> ResolvedSlice:
        file_name = self.selector.select_file(picture, actor, context)
        scale_x, scale_y = compute_scale(picture, scene)
        return ResolvedSlice(
            actor_id=actor.actor_id,
            name=picture.name,
            file_name=file_name,
            x=base.x + picture.x,
            y=base.y + picture.y,
            base_x=base.x,
            base_y=base.y,
            offset_x=picture.x,
            offset_y=picture.y,
            scale_x=scale_x,
            scale_y=scale_y,
            opacity=picture.opacity,
            visible=visible,
            anchor=self.registry.origin.anchor,
            priority=scene.priority,
            sprite_sheet=picture.sprite_sheet,
        )
