"""
standpicture 包初始化文件
按游戏状态选择并描述多图层角色立绘
"""

from .config import Config
from .models import (
    Origin, ScenePriority, EquipKind,
    PictureFileConfig, SpriteSheetConfig, PictureSliceConfig, MemberPosition, SceneConfig, PictureSettings,
    StateInfo, EquipItem, ActorState, GameContext, CropRect, ResolvedSlice,
)
from .loader import PictureConfigLoader, PictureConfigError
from .engine import RuleEvaluator, PredicateRegistry, PictureRegistry, PortraitResolver
from .events import EventManager, EventType, PictureEvent
from .manager import StandPictureManager

__all__ = [
    'Config',
    'PictureSettings',
    'ActorState',
    'GameContext',
    'ResolvedSlice',
    'PictureConfigLoader',
    'PictureConfigError',
    'RuleEvaluator',
    'PredicateRegistry',
    'PortraitResolver',
    'EventManager',
    'StandPictureManager',
]
