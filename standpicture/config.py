"""
立绘系统全局配置常量
存放所有硬编码的数值参数，便于后续调整
"""


class Config:
    """立绘系统配置"""

    # ========== 受击判定 ==========
    DAMAGE_WINDOW_FRAMES = 30       # 受击后保持"受伤"状态的帧数

    # ========== 显示参数 ==========
    OPACITY_MAX = 255               # 不透明度上限
    SCALE_BASE = 100                # 缩放率基准 (百分比)
    HP_RATE_BASE = 100              # HP 比例换算为百分比

    # ========== 备注标签 ==========
    NOTE_TAG = "StandPicture"           # <StandPicture:xxx>
    NO_PICTURE_TAG = "NoStandPicture"   # 状态备注中出现时不参与 {stateId}

    # ========== 配置文件 ==========
    DEFAULT_CONFIG_PATH = "config/stand_pictures.yaml"
