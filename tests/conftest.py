"""
pytest 共享配置和 Fixtures
这个文件会被 pytest 自动加载，所有测试都可以使用这里定义的 fixtures
"""

import sys
from pathlib import Path
import pytest

# 确保 standpicture 模块能被导入
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ============================================================================
# 导入项目模块
# ============================================================================
from standpicture.models import (
    ActorState, GameContext, StateInfo, EquipItem, EquipKind,
    PictureFileConfig, PictureSliceConfig, SceneConfig, MemberPosition, PictureSettings,
)
from standpicture.engine import RuleEvaluator, PredicateRegistry, PictureRegistry, PortraitResolver

# ============================================================================
# 角色快照
# ============================================================================

@pytest.fixture
def healthy_actor():
    """满血角色，无状态无装备"""
    return ActorState(actor_id=1, hp=100, max_hp=100)


@pytest.fixture
def wounded_actor():
    """HP 30% 的角色"""
    return ActorState(actor_id=1, hp=30, max_hp=100)


@pytest.fixture
def equipped_actor():
    """带武器、防具、状态与备注的角色"""
    return ActorState(
        actor_id=1, hp=75, max_hp=100,
        states=[
            StateInfo(id=4, priority=50, note="<StandPicture:poison>"),
            StateInfo(id=9, priority=90, note="<NoStandPicture>"),
        ],
        equips=[
            EquipItem(EquipKind.WEAPON, 3),
            EquipItem(EquipKind.ARMOR, 7, note="<StandPicture:armored>"),
        ],
        class_note="",
    )


@pytest.fixture
def empty_context():
    return GameContext()

# ============================================================================
# 判定器与配置
# ============================================================================

@pytest.fixture
def predicates():
    return PredicateRegistry()


@pytest.fixture
def evaluator(predicates):
    return RuleEvaluator(predicates)


@pytest.fixture
def battle_scene():
    """两个队伍位置的战斗场景"""
    return SceneConfig(
        scene_name="Scene_Battle",
        member_position=[MemberPosition(x=0, y=10), MemberPosition(x=200, y=20)],
    )


@pytest.fixture
def basic_settings(battle_scene):
    """角色 1 有两层立绘：身体 + 表情"""
    return PictureSettings(
        picture_list=[
            PictureSliceConfig(
                actor_id=1, name="body", x=5, y=6,
                file_list=[PictureFileConfig(file_name="body")],
            ),
            PictureSliceConfig(
                actor_id=1, name="face", x=7, y=8, opacity=128,
                file_list=[
                    PictureFileConfig(file_name="face_normal"),
                    PictureFileConfig(file_name="face_damage", damage=True),
                ],
            ),
        ],
        scene_list=[battle_scene],
    )


@pytest.fixture
def resolver(basic_settings, predicates):
    return PortraitResolver(PictureRegistry(basic_settings), predicates=predicates)
