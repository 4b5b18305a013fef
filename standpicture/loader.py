"""
配置加载器 (Loader)
负责从 YAML / JSON 文件读取立绘配置并解析为 Pydantic 模型 (PictureSettings)
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .models import PictureSettings

logger = logging.getLogger(__name__)

# 必需的配置段：(snake_case 键, 原插件参数键)
_REQUIRED_SECTIONS = (
    ("scene_list", "SceneList"),
    ("picture_list", "PictureList"),
)


class PictureConfigError(ValueError):
    """立绘配置缺少必需段落等启动期致命错误"""


class PictureConfigLoader:
    """立绘配置加载器"""

    @staticmethod
    def load_from_file(file_path: Union[str, Path]) -> PictureSettings:
        """从 YAML 或 JSON 文件加载配置。

        Args:
            file_path: 配置文件路径 (.yaml / .yml / .json)

        Returns:
            校验完成的 PictureSettings

        Raises:
            FileNotFoundError: 文件不存在
            PictureConfigError: 缺少 scene_list 或 picture_list
            pydantic.ValidationError: 配置项不合法
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"立绘配置文件不存在: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)

        settings = PictureConfigLoader.load_from_dict(data, source=str(path))
        logger.info(f"[Loader] 已加载立绘配置 {path}: "
                    f"{len(settings.picture_list)} 个图层, {len(settings.scene_list)} 个场景")
        return settings

    @staticmethod
    def load_from_dict(data: Any, source: str = "<dict>") -> PictureSettings:
        """校验已解析的配置字典。缺少必需段落时立即抛出致命错误。"""
        if not isinstance(data, dict):
            raise PictureConfigError(f"立绘配置必须是映射类型: {source}")

        for key, alias in _REQUIRED_SECTIONS:
            if PictureConfigLoader._section(data, key, alias) is None:
                raise PictureConfigError(f"Parameter[{alias}] is not found. ({source})")

        return PictureSettings.model_validate(data)

    @staticmethod
    def _section(data: Dict[str, Any], key: str, alias: str) -> Any:
        if key in data:
            return data[key]
        return data.get(alias)
