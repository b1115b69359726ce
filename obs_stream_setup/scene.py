from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .profile import SingleLineStr


class SourceKind(str, Enum):
    GAME_CAPTURE = "GameCapture"
    AUDIO_OUTPUT_CAPTURE = "AudioOutputCapture"
    AUDIO_INPUT_CAPTURE = "AudioInputCapture"

    @property
    def obs_source_id(self) -> str:
        return _OBS_SOURCE_IDS[self]


_OBS_SOURCE_IDS = {
    SourceKind.GAME_CAPTURE: "game_capture",
    SourceKind.AUDIO_OUTPUT_CAPTURE: "wasapi_output_capture",
    SourceKind.AUDIO_INPUT_CAPTURE: "wasapi_input_capture",
}


class Vec2(BaseModel):
    x: float
    y: float


class Crop(BaseModel):
    left: Annotated[int, Field(ge=0)] = 0
    top: Annotated[int, Field(ge=0)] = 0
    right: Annotated[int, Field(ge=0)] = 0
    bottom: Annotated[int, Field(ge=0)] = 0


class Transform(BaseModel):
    position: Vec2 = Vec2(x=0.0, y=0.0)
    scale: Vec2 = Vec2(x=1.0, y=1.0)
    bounds: Vec2 | None = None
    """
    None のときは bounds_type=0 (OBS_BOUNDS_NONE)、
    指定時は bounds_type=2 (OBS_BOUNDS_SCALE_INNER) で出力する。
    """
    crop: Crop = Crop()


class Source(BaseModel):
    id: Annotated[str, Field(min_length=1)]
    kind: SourceKind
    name: Annotated[str, Field(min_length=1)]
    settings: dict[str, Any] = {}
    muted: bool = False
    volume: Annotated[float, Field(ge=0.0, le=1.0)] = 1.0


class SceneItem(BaseModel):
    source_id: str
    transform: Transform = Transform()
    visible: bool = True
    locked: bool = False


class Scene(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Annotated[str, Field(min_length=1)]
    name: Annotated[str, Field(min_length=1)]
    items: list[SceneItem]


class SceneCollection(BaseModel):
    """
    シーンとソースの参照関係は構築時に検証する。

    直接構築したときの違反は pydantic.ValidationError になる。
    SceneCollectionBuilder / build_scene_collection を通すと errors.ValidationError に変換される。
    どちらも ValueError のサブクラス。
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Annotated[SingleLineStr, Field(min_length=1)]
    scenes: list[Scene]
    sources: list[Source]
    current_scene: str
    transition: str = "Fade"
    transition_duration_ms: Annotated[int, Field(gt=0)] = 300

    @model_validator(mode="after")
    def check_references(self) -> "SceneCollection":
        scene_names: set[str] = set()
        for scene in self.scenes:
            if scene.name in scene_names:
                raise ValueError(f"duplicate scene name: {scene.name}")
            scene_names.add(scene.name)

        if self.current_scene not in scene_names:
            raise ValueError(
                f"current scene {self.current_scene} is not in the collection"
            )

        source_ids: set[str] = set()
        for source in self.sources:
            if source.id in source_ids:
                raise ValueError(f"duplicate source id: {source.id}")
            source_ids.add(source.id)

        for scene in self.scenes:
            if scene.id in source_ids:
                raise ValueError(f"scene id collides with a source id: {scene.id}")

            for item in scene.items:
                if item.source_id not in source_ids:
                    raise ValueError(
                        f"scene {scene.name} references unknown source id: "
                        f"{item.source_id}"
                    )

        return self

    def get_source(self, source_id: str) -> Source:
        for source in self.sources:
            if source.id == source_id:
                return source

        raise KeyError(source_id)
