"""
数据模型定义
包含所有枚举类型、配置模型 (Pydantic)、运行时快照与解析结果
"""

from enum import Enum
from typing import List, Dict, Optional, Any, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from dataclasses import dataclass, field
from .config import Config
from ._utils import check_hp_placeholders, find_meta_value, has_meta

# ============================================================================
# 枚举类型 (Enums)
# ============================================================================

class Origin(int, Enum):
    """立绘图像原点 (全图像共通)"""
    TOP_LEFT = 0        # 左上
    CENTER = 1          # 中央
    BOTTOM_CENTER = 2   # 中央下

    @property
    def anchor(self) -> Tuple[float, float]:
        """对应的锚点坐标 (x, y)"""
        if self is Origin.CENTER:
            return (0.5, 0.5)
        if self is Origin.BOTTOM_CENTER:
            return (0.5, 1.0)
        return (0.0, 0.0)

class ScenePriority(int, Enum):
    """立绘容器的显示层级"""
    FRONT = 0               # 最前面
    BELOW_WINDOW = 1        # 窗口之下
    BELOW_ANIMATION = 2     # 动画之下 (仅战斗、地图画面有效)

class EquipKind(str, Enum):
    """装备种类"""
    WEAPON = "WEAPON"
    ARMOR = "ARMOR"

# ============================================================================
# 配置模型 (Configuration) - Pydantic
# 同时接受原插件参数的 PascalCase 键名与 snake_case 字段名
# ============================================================================

def _blank_to_zero(value: Any) -> Any:
    """插件参数中未填写的数值项是空字符串，统一视为 0 (未设置)"""
    if value is None or value == "":
        return 0
    return value


def _enum_number(value: Any) -> Any:
    """选择型参数以字符串保存 ("1")，转换为整数后再交给枚举校验"""
    value = _blank_to_zero(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    return value


class PictureFileConfig(BaseModel):
    """立绘文件及其显示条件 (Rule)

    所有条件为 0 / False / 空字符串 时视为未设置，自动满足。
    """
    file_name: str = Field(default="", alias="FileName")
    hp_upper_limit: int = Field(default=0, ge=0, le=100, alias="HpUpperLimit")
    hp_lower_limit: int = Field(default=0, ge=0, le=100, alias="HpLowerLimit")
    action: bool = Field(default=False, alias="Action")
    damage: bool = Field(default=False, alias="Damage")
    state: int = Field(default=0, ge=0, alias="State")
    weapon: int = Field(default=0, ge=0, alias="Weapon")
    armor: int = Field(default=0, ge=0, alias="Armor")
    note: str = Field(default="", alias="Note")
    switch: int = Field(default=0, ge=0, alias="Switch")
    script: str = Field(default="", alias="Script")  # 已注册的判定函数名

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("hp_upper_limit", "hp_lower_limit", "state", "weapon", "armor", "switch", mode="before")
    @classmethod
    def blank_numbers(cls, value: Any) -> Any:
        return _blank_to_zero(value)

    @field_validator("action", "damage", mode="before")
    @classmethod
    def blank_flags(cls, value: Any) -> Any:
        return False if value is None or value == "" else value

    @field_validator("file_name", "note", "script", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


@dataclass(frozen=True)
class CropRect:
    """精灵表裁剪矩形"""
    x: float
    y: float
    width: float
    height: float

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)


class SpriteSheetConfig(BaseModel):
    """精灵表设置 (列号/行号从 1 开始)"""
    max_column: int = Field(default=1, ge=1, alias="MaxColumn")
    max_row: int = Field(default=1, ge=1, alias="MaxRow")
    column_number: int = Field(default=1, ge=1, alias="ColumnNumber")
    row_number: int = Field(default=1, ge=1, alias="RowNumber")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("max_column", "max_row", "column_number", "row_number", mode="before")
    @classmethod
    def blank_numbers(cls, value: Any) -> Any:
        return 1 if value is None or value == "" else value

    @model_validator(mode="after")
    def check_cell_in_sheet(self) -> "SpriteSheetConfig":
        if self.column_number > self.max_column:
            raise ValueError(f"column_number {self.column_number} 超出列数 {self.max_column}")
        if self.row_number > self.max_row:
            raise ValueError(f"row_number {self.row_number} 超出行数 {self.max_row}")
        return self

    def crop_rect(self, bitmap_width: float, bitmap_height: float) -> CropRect:
        """根据载入后的图像尺寸计算裁剪矩形

        Args:
            bitmap_width: 整张精灵表的宽度 (像素)
            bitmap_height: 整张精灵表的高度 (像素)
        """
        width = bitmap_width / self.max_column
        height = bitmap_height / self.max_row
        return CropRect(
            x=(self.column_number - 1) * width,
            y=(self.row_number - 1) * height,
            width=width,
            height=height,
        )


class PictureSliceConfig(BaseModel):
    """单个立绘图层 (Slice) 配置"""
    actor_id: int = Field(default=1, ge=1, alias="ActorId")
    name: str = Field(default="", alias="Name")  # 仅用于区分，不参与逻辑
    opacity: int = Field(default=Config.OPACITY_MAX, ge=0, le=Config.OPACITY_MAX, alias="Opacity")

    # 固有坐标 (叠加在场景基准坐标上)
    x: int = Field(default=0, ge=-9999, le=9999, alias="X")
    y: int = Field(default=0, ge=-9999, le=9999, alias="Y")

    # 缩放率 (百分比)
    scale_x: int = Field(default=Config.SCALE_BASE, ge=0, le=1000, alias="ScaleX")
    scale_y: int = Field(default=Config.SCALE_BASE, ge=0, le=1000, alias="ScaleY")

    sprite_sheet: Optional[SpriteSheetConfig] = Field(default=None, alias="SpriteSheet")
    file_list: List[PictureFileConfig] = Field(default_factory=list, alias="FileList")
    dynamic_file_name: str = Field(default="", alias="DynamicFileName")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("x", "y", "scale_x", "scale_y", mode="before")
    @classmethod
    def blank_numbers(cls, value: Any) -> Any:
        return _blank_to_zero(value)

    @field_validator("opacity", mode="before")
    @classmethod
    def blank_opacity(cls, value: Any) -> Any:
        return Config.OPACITY_MAX if value is None or value == "" else value

    @field_validator("sprite_sheet", mode="before")
    @classmethod
    def blank_sheet(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator("file_list", mode="before")
    @classmethod
    def blank_list(cls, value: Any) -> Any:
        return [] if value is None or value == "" else value

    @field_validator("dynamic_file_name", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("dynamic_file_name")
    @classmethod
    def check_template(cls, value: str) -> str:
        # 非数值的 HP 阈值在加载时即报错
        check_hp_placeholders(value)
        return value


class MemberPosition(BaseModel):
    """队伍成员的基准坐标"""
    x: int = Field(default=0, ge=-9999, le=9999, alias="X")
    y: int = Field(default=0, ge=-9999, le=9999, alias="Y")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("x", "y", mode="before")
    @classmethod
    def blank_numbers(cls, value: Any) -> Any:
        return _blank_to_zero(value)


def _default_member_positions() -> List[MemberPosition]:
    return [MemberPosition(x=x, y=0) for x in (0, 150, 300, 450)]


class SceneConfig(BaseModel):
    """显示对象场景 (Scene Binding)"""
    scene_name: str = Field(default="Scene_Battle", alias="SceneName")
    member_position: List[MemberPosition] = Field(default_factory=_default_member_positions, alias="MemberPosition")
    scale_x: int = Field(default=Config.SCALE_BASE, ge=0, le=1000, alias="ScaleX")
    scale_y: int = Field(default=Config.SCALE_BASE, ge=0, le=1000, alias="ScaleY")
    show_picture_switch: int = Field(default=0, ge=0, alias="ShowPictureSwitch")
    mirror: bool = Field(default=False, alias="Mirror")
    priority: ScenePriority = Field(default=ScenePriority.FRONT, alias="Priority")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("scale_x", "scale_y", "show_picture_switch", mode="before")
    @classmethod
    def blank_numbers(cls, value: Any) -> Any:
        return _blank_to_zero(value)

    @field_validator("priority", mode="before")
    @classmethod
    def parse_priority(cls, value: Any) -> Any:
        return _enum_number(value)

    @field_validator("member_position", mode="before")
    @classmethod
    def blank_list(cls, value: Any) -> Any:
        return [] if value is None or value == "" else value

    def get_base_position(self, slot_index: int) -> Optional[MemberPosition]:
        """获取指定队伍位置的基准坐标，未配置时返回 None"""
        if 0 <= slot_index < len(self.member_position):
            return self.member_position[slot_index]
        return None


class PictureSettings(BaseModel):
    """立绘系统整体配置 (启动时构建一次，之后只读)"""
    picture_list: List[PictureSliceConfig] = Field(alias="PictureList")
    scene_list: List[SceneConfig] = Field(alias="SceneList")
    origin: Origin = Field(default=Origin.TOP_LEFT, alias="Origin")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("origin", mode="before")
    @classmethod
    def parse_origin(cls, value: Any) -> Any:
        return _enum_number(value)

# ============================================================================
# 运行时快照 (Runtime Snapshots) - 由游戏状态子系统持有
# ============================================================================

@dataclass
class StateInfo:
    """角色身上的一个有效状态"""
    id: int
    priority: int = 0
    note: str = ""                  # 数据库备注栏原文
    no_stand_picture: bool = False  # 不参与 {stateId} 的判定

    @property
    def hidden(self) -> bool:
        return self.no_stand_picture or has_meta(self.note, Config.NO_PICTURE_TAG)


@dataclass
class EquipItem:
    """角色的一件装备"""
    kind: EquipKind
    id: int
    note: str = ""


@dataclass
class ActorState:
    """角色运行时快照

    除受击标记的过期清除外，立绘引擎只读取该对象。
    perform_* 方法是游戏状态一侧的事件入口。
    """
    actor_id: int
    hp: int = 1
    max_hp: int = 1
    states: List[StateInfo] = field(default_factory=list)
    equips: List[EquipItem] = field(default_factory=list)
    actor_note: str = ""
    class_note: str = ""

    acting: bool = False
    damage_frame: Optional[int] = None

    def hp_rate(self) -> float:
        if self.max_hp <= 0:
            return 0.0
        return self.hp / self.max_hp

    def hp_percent(self) -> float:
        # hp * 100 / max_hp，避免 0.4 * 100 这类浮点误差落在阈值外
        if self.max_hp <= 0:
            return 0.0
        return self.hp * Config.HP_RATE_BASE / self.max_hp

    # ------------------------------------------------------------------ #
    #  状态与装备                                                          #
    # ------------------------------------------------------------------ #

    def sorted_states(self) -> List[StateInfo]:
        """按优先度从高到低排列 (同优先度按 ID 升序)"""
        return sorted(self.states, key=lambda s: (-s.priority, s.id))

    def visible_states(self) -> List[StateInfo]:
        return [s for s in self.sorted_states() if not s.hidden]

    def is_state_affected(self, state_id: int) -> bool:
        return any(s.id == state_id for s in self.states)

    def has_weapon(self, weapon_id: int) -> bool:
        return any(e.kind == EquipKind.WEAPON and e.id == weapon_id for e in self.equips)

    def has_armor(self, armor_id: int) -> bool:
        return any(e.kind == EquipKind.ARMOR and e.id == armor_id for e in self.equips)

    def trait_notes(self) -> List[str]:
        """特征来源的备注文本：角色 -> 职业 -> 装备 -> 状态"""
        notes = [self.actor_note, self.class_note]
        notes.extend(e.note for e in self.equips)
        notes.extend(s.note for s in self.sorted_states())
        return notes

    def find_note(self) -> str:
        """第一个非空的 <StandPicture:xxx> 值，找不到时为空字符串"""
        for note in self.trait_notes():
            value = find_meta_value(note, Config.NOTE_TAG)
            if value:
                return value
        return ""

    # ------------------------------------------------------------------ #
    #  行动与受击                                                          #
    # ------------------------------------------------------------------ #

    def is_damaged(self, frame_count: int) -> bool:
        """受击后 DAMAGE_WINDOW_FRAMES 帧内为 True，过期时清除受击标记"""
        if self.damage_frame is not None and self.damage_frame + Config.DAMAGE_WINDOW_FRAMES > frame_count:
            return True
        self.damage_frame = None
        return False

    def is_acting(self) -> bool:
        return self.acting

    def perform_damage(self, frame_count: int) -> None:
        self.damage_frame = frame_count

    def perform_action(self) -> None:
        self.acting = True

    def perform_action_end(self) -> None:
        self.acting = False


@dataclass(frozen=True)
class GameContext:
    """每次解析时注入的全局只读数据 (开关、变量、帧计数)"""
    switches: Dict[int, bool] = field(default_factory=dict)
    variables: Dict[int, Any] = field(default_factory=dict)
    frame_count: int = 0

    def switch(self, switch_id: int) -> bool:
        return bool(self.switches.get(switch_id, False))

    def variable(self, variable_id: int) -> Any:
        return self.variables.get(variable_id, 0)

# ============================================================================
# 解析结果 (Resolved Output) - 交给渲染层
# ============================================================================

@dataclass(frozen=True)
class ResolvedSlice:
    """单个图层在本帧的显示描述

    Attributes:
        actor_id: 角色ID
        name: 图层名称
        file_name: 本帧显示的文件名，无可用文件时为 None
        x / y: 最终显示坐标 (基准坐标 + 固有坐标)
        base_x / base_y: 场景给出的基准坐标
        offset_x / offset_y: 图层固有坐标
        scale_x / scale_y: 最终缩放 (反转时 scale_x 为负)
        opacity: 不透明度 0-255
        visible: 是否可见 (受场景显示开关控制)
        anchor: 锚点 (由全局 Origin 决定)
        priority: 场景显示层级
        sprite_sheet: 精灵表设置，渲染层载入图像后调用 crop_rect 计算裁剪
    """
    actor_id: int
    name: str
    file_name: Optional[str]
    x: int
    y: int
    base_x: int
    base_y: int
    offset_x: int
    offset_y: int
    scale_x: float
    scale_y: float
    opacity: int
    visible: bool
    anchor: Tuple[float, float] = (0.0, 0.0)
    priority: ScenePriority = ScenePriority.FRONT
    sprite_sheet: Optional[SpriteSheetConfig] = None

    def crop_rect(self, bitmap_width: float, bitmap_height: float) -> Optional[CropRect]:
        if self.sprite_sheet is None:
            return None
        return self.sprite_sheet.crop_rect(bitmap_width, bitmap_height)
