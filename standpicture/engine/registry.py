from typing import Dict, List, Optional

from ..models import Origin, PictureSettings, PictureSliceConfig, SceneConfig


class PictureRegistry:
    """
    Read-only lookup of picture slices per actor and scene bindings per scene.
    Built once from the startup configuration.
    """
    def __init__(self, settings: PictureSettings):
        self._settings = settings
        self._slices: Dict[int, List[PictureSliceConfig]] = {}
        for picture in settings.picture_list:
            self._slices.setdefault(picture.actor_id, []).append(picture)

        # First entry wins when a scene is listed twice
        self._scenes: Dict[str, SceneConfig] = {}
        for scene in settings.scene_list:
            self._scenes.setdefault(scene.scene_name, scene)

    @property
    def settings(self) -> PictureSettings:
        return self._settings

    @property
    def origin(self) -> Origin:
        return self._settings.origin

    @property
    def actor_ids(self) -> List[int]:
        return list(self._slices)

    @property
    def scene_names(self) -> List[str]:
        return list(self._scenes)

    def get_slices(self, actor_id: int) -> List[PictureSliceConfig]:
        """Slices of an actor in declaration order (back to front)."""
        return list(self._slices.get(actor_id, []))

    def get_scene(self, scene_name: str) -> Optional[SceneConfig]:
        return self._scenes.get(scene_name)
