import sys
import io
import logging
import argparse

# Windows UTF-8 兼容性处理
if sys.platform.startswith('win'):
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

from pydantic import ValidationError

from standpicture import (
    Config, StandPictureManager, PictureConfigError, EventManager,
    ActorState, GameContext, StateInfo, EquipItem, EquipKind,
)


def build_party() -> list[ActorState]:
    """演示用队伍"""
    return [
        ActorState(actor_id=1, hp=20, max_hp=100,
                   equips=[EquipItem(EquipKind.ARMOR, 5)]),
        ActorState(actor_id=2, hp=75, max_hp=100,
                   states=[StateInfo(id=4, priority=50)]),
        ActorState(actor_id=3, hp=100, max_hp=100),
    ]


def main() -> int:
    """主函数"""
    parser = argparse.ArgumentParser(description="立绘解析演示")
    parser.add_argument("--config", default=Config.DEFAULT_CONFIG_PATH, help="立绘配置文件")
    parser.add_argument("--scene", default="Scene_Battle", help="场景名")
    parser.add_argument("--frames", type=int, default=3, help="模拟的帧数")
    parser.add_argument("--verbose", action="store_true", help="输出调试日志")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    print("=" * 80)
    print("立绘解析演示")
    print("=" * 80)

    try:
        manager = StandPictureManager.from_file(args.config)
    except FileNotFoundError as e:
        print(f"❌ 错误: {e}")
        return 1
    except (PictureConfigError, ValidationError) as e:
        print(f"❌ 配置错误: {e}")
        return 1

    events = EventManager()
    manager.attach(events)

    party = build_party()
    events.scene_start(args.scene)
    if manager.scene is None:
        print(f"场景 {args.scene} 不显示立绘")
        return 0

    for frame_count in range(args.frames):
        if frame_count == 1:
            # 第 1 帧：角色 2 受到伤害
            events.actor_damage(party[1], frame_count)
        context = GameContext(switches={10: True}, frame_count=frame_count)
        events.scene_update(party, context)

        print(f"\n--- 第 {frame_count} 帧 ---")
        for actor_id, slices in manager.last_frame.items():
            for s in slices:
                print(f"角色 {actor_id} [{s.name or '-'}] file={s.file_name} "
                      f"pos=({s.x}, {s.y}) scale=({s.scale_x:.2f}, {s.scale_y:.2f}) visible={s.visible}")
                crop = s.crop_rect(100, 100)
                if crop:
                    print(f"    crop(100x100)={crop.as_tuple()}")

    events.scene_terminate()
    return 0


if __name__ == "__main__":
    exit_code: int = main()
    sys.exit(exit_code)
