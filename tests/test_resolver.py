"""
单元测试: 立绘解析器 (Selection Engine)
覆盖坐标、缩放、可见性、精灵表与"不适用"的情况
"""

import pytest
from standpicture.models import (
    ActorState, GameContext, MemberPosition, Origin, PictureFileConfig, PictureSettings,
    PictureSliceConfig, SceneConfig, ScenePriority, SpriteSheetConfig,
)
from standpicture.engine import PictureRegistry, PortraitResolver, compute_scale


def make_resolver(pictures, scenes=None, origin=Origin.TOP_LEFT):
    settings = PictureSettings(
        picture_list=pictures,
        scene_list=scenes or [SceneConfig()],
        origin=origin,
    )
    return PortraitResolver(PictureRegistry(settings))


# ============================================================================
# 不适用的情况
# ============================================================================

class TestNotApplicable:
    """返回 None 而不是抛出异常"""

    def test_unregistered_actor(self, resolver, battle_scene):
        assert resolver.resolve_slices(ActorState(actor_id=99), battle_scene, 0) is None

    def test_missing_slot(self, resolver, battle_scene, healthy_actor):
        assert resolver.resolve_slices(healthy_actor, battle_scene, 2) is None

    def test_negative_slot(self, resolver, battle_scene, healthy_actor):
        assert resolver.resolve_slices(healthy_actor, battle_scene, -1) is None


# ============================================================================
# 基本解析
# ============================================================================

class TestResolveSlices:
    """按声明顺序解析每个图层"""

    def test_slices_in_declaration_order(self, resolver, battle_scene, healthy_actor):
        slices = resolver.resolve_slices(healthy_actor, battle_scene, 0)
        assert [s.name for s in slices] == ["body", "face"]
        assert [s.file_name for s in slices] == ["body", "face_normal"]

    def test_damage_switches_face_only(self, resolver, battle_scene, healthy_actor):
        healthy_actor.perform_damage(0)
        slices = resolver.resolve_slices(healthy_actor, battle_scene, 0, GameContext(frame_count=5))
        assert [s.file_name for s in slices] == ["body", "face_damage"]

    def test_position_is_base_plus_offset(self, resolver, battle_scene, healthy_actor):
        body, face = resolver.resolve_slices(healthy_actor, battle_scene, 1)
        assert (body.base_x, body.base_y) == (200, 20)
        assert (body.x, body.y) == (205, 26)
        assert (face.offset_x, face.offset_y) == (7, 8)
        assert (face.x, face.y) == (207, 28)

    def test_opacity_and_defaults(self, resolver, battle_scene, healthy_actor):
        body, face = resolver.resolve_slices(healthy_actor, battle_scene, 0)
        assert body.opacity == 255
        assert face.opacity == 128
        assert body.visible is True
        assert body.priority == ScenePriority.FRONT
        assert body.anchor == (0.0, 0.0)
        assert body.sprite_sheet is None
        assert body.crop_rect(100, 100) is None

    def test_idempotent(self, resolver, battle_scene, equipped_actor):
        ctx = GameContext(switches={1: True})
        first = resolver.resolve_slices(equipped_actor, battle_scene, 0, ctx)
        second = resolver.resolve_slices(equipped_actor, battle_scene, 0, ctx)
        assert first == second

    def test_settings_not_mutated(self, resolver, basic_settings, battle_scene, healthy_actor):
        before = basic_settings.model_dump()
        healthy_actor.perform_damage(0)
        resolver.resolve_slices(healthy_actor, battle_scene, 0, GameContext(frame_count=1))
        assert basic_settings.model_dump() == before

    def test_slice_without_file(self, battle_scene, healthy_actor):
        resolver = make_resolver(
            [PictureSliceConfig(actor_id=1, file_list=[PictureFileConfig(file_name="x", switch=2)])],
            [battle_scene],
        )
        (only,) = resolver.resolve_slices(healthy_actor, battle_scene, 0)
        assert only.file_name is None


# ============================================================================
# 缩放 / 反转 / 可见性 / 原点
# ============================================================================

class TestDisplayAttributes:
    """显示属性的计算"""

    @pytest.mark.parametrize("slice_scale,scene_scale,mirror,expected", [
        ((100, 100), (100, 100), False, (1.0, 1.0)),
        ((50, 200), (100, 100), False, (0.5, 2.0)),
        ((50, 50), (200, 50), False, (1.0, 0.25)),
        ((100, 100), (100, 100), True, (-1.0, 1.0)),
        ((0, 0), (0, 0), False, (1.0, 1.0)),      # 0 视为未设置
        ((80, 80), (50, 50), True, (-0.4, 0.4)),
    ])
    def test_compute_scale(self, slice_scale, scene_scale, mirror, expected):
        picture = PictureSliceConfig(scale_x=slice_scale[0], scale_y=slice_scale[1])
        scene = SceneConfig(scale_x=scene_scale[0], scale_y=scene_scale[1], mirror=mirror)
        scale_x, scale_y = compute_scale(picture, scene)
        assert scale_x == pytest.approx(expected[0])
        assert scale_y == pytest.approx(expected[1])

    def test_visibility_gated_by_scene_switch(self, healthy_actor):
        scene = SceneConfig(show_picture_switch=10)
        resolver = make_resolver([PictureSliceConfig(actor_id=1, file_list=[PictureFileConfig(file_name="a")])], [scene])
        (off,) = resolver.resolve_slices(healthy_actor, scene, 0, GameContext())
        (on,) = resolver.resolve_slices(healthy_actor, scene, 0, GameContext(switches={10: True}))
        assert off.visible is False
        assert on.visible is True
        # 不可见时仍然选择文件
        assert off.file_name == "a"

    @pytest.mark.parametrize("origin,anchor", [
        (Origin.TOP_LEFT, (0.0, 0.0)),
        (Origin.CENTER, (0.5, 0.5)),
        (Origin.BOTTOM_CENTER, (0.5, 1.0)),
    ])
    def test_anchor_from_origin(self, origin, anchor, healthy_actor):
        scene = SceneConfig()
        resolver = make_resolver([PictureSliceConfig(actor_id=1)], [scene], origin=origin)
        (only,) = resolver.resolve_slices(healthy_actor, scene, 0)
        assert only.anchor == anchor

    def test_priority_from_scene(self, healthy_actor):
        scene = SceneConfig(priority=ScenePriority.BELOW_WINDOW)
        resolver = make_resolver([PictureSliceConfig(actor_id=1)], [scene])
        (only,) = resolver.resolve_slices(healthy_actor, scene, 0)
        assert only.priority == ScenePriority.BELOW_WINDOW

    def test_default_member_positions(self, healthy_actor):
        scene = SceneConfig()
        resolver = make_resolver([PictureSliceConfig(actor_id=1)], [scene])
        assert resolver.resolve_slices(healthy_actor, scene, 3)[0].base_x == 450
        assert resolver.resolve_slices(healthy_actor, scene, 4) is None


# ============================================================================
# 精灵表
# ============================================================================

class TestSpriteSheet:
    """精灵表裁剪"""

    def test_crop_rect(self):
        sheet = SpriteSheetConfig(max_column=2, max_row=2, column_number=2, row_number=1)
        assert sheet.crop_rect(100, 100).as_tuple() == (50, 0, 50, 50)

    def test_crop_rect_uneven_sheet(self):
        sheet = SpriteSheetConfig(max_column=4, max_row=3, column_number=3, row_number=3)
        rect = sheet.crop_rect(400, 300)
        assert (rect.x, rect.y, rect.width, rect.height) == (200, 200, 100, 100)

    def test_resolved_slice_carries_sheet(self, healthy_actor):
        sheet = SpriteSheetConfig(max_column=2, max_row=2, column_number=2, row_number=1)
        scene = SceneConfig()
        resolver = make_resolver([PictureSliceConfig(actor_id=1, sprite_sheet=sheet)], [scene])
        (only,) = resolver.resolve_slices(healthy_actor, scene, 0)
        assert only.sprite_sheet == sheet
        assert only.crop_rect(100, 100).as_tuple() == (50, 0, 50, 50)


# ============================================================================
# 注册表
# ============================================================================

class TestRegistry:
    """按角色 / 场景检索配置"""

    def test_lookup(self, basic_settings):
        registry = PictureRegistry(basic_settings)
        assert registry.actor_ids == [1]
        assert [p.name for p in registry.get_slices(1)] == ["body", "face"]
        assert registry.get_slices(2) == []
        assert registry.get_scene("Scene_Battle") is not None
        assert registry.get_scene("Scene_Map") is None

    def test_first_scene_entry_wins(self):
        first = SceneConfig(scene_name="Scene_Map", member_position=[MemberPosition(x=1, y=1)])
        second = SceneConfig(scene_name="Scene_Map", member_position=[MemberPosition(x=2, y=2)])
        registry = PictureRegistry(PictureSettings(picture_list=[], scene_list=[first, second]))
        assert registry.get_scene("Scene_Map") is first
        assert registry.scene_names == ["Scene_Map"]
