import uuid
from logging import getLogger
from typing import Any, Callable, Literal

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .profile import (
    EncoderSettings,
    GlobalSettings,
    OutputSettings,
    ProfileConfig,
    StreamService,
    VideoSettings,
)
from .scene import Scene, SceneCollection, SceneItem, Source, SourceKind, Transform

logger = getLogger(__name__)

IdGenerator = Callable[[], str]


def generate_uuid() -> str:
    return str(uuid.uuid4())


class SourceSpec(BaseModel):
    kind: SourceKind
    name: str
    settings: dict[str, Any] = {}
    muted: bool = False
    volume: float = 1.0
    transform: Transform = Transform()
    visible: bool = True
    locked: bool = False


class SetupModel(BaseModel):
    profile: ProfileConfig
    scene_collection: SceneCollection
    global_settings: GlobalSettings


def build_profile_config(
    name: str,
    width: int,
    height: int,
    frame_rate: int,
    bitrate_kbps: int,
    service_name: str,
    stream_key: str,
    output_width: int | None = None,
    output_height: int | None = None,
    server: str = "auto",
    encoder_id: str = "obs_x264",
    rate_control: Literal["CBR", "VBR", "CQP"] = "CBR",
    keyframe_interval_sec: int = 2,
    preset: str = "veryfast",
    profile: str = "high",
    lookahead: bool = False,
    psycho_visual_tuning: bool = True,
    b_frames: int = 2,
    output: OutputSettings | None = None,
) -> ProfileConfig:
    try:
        return ProfileConfig(
            name=name,
            video=VideoSettings(
                base_width=width,
                base_height=height,
                output_width=output_width if output_width is not None else width,
                output_height=output_height if output_height is not None else height,
                frame_rate=frame_rate,
            ),
            output=output if output is not None else OutputSettings(),
            encoder=EncoderSettings(
                encoder_id=encoder_id,
                rate_control=rate_control,
                bitrate_kbps=bitrate_kbps,
                keyframe_interval_sec=keyframe_interval_sec,
                preset=preset,
                profile=profile,
                lookahead=lookahead,
                psycho_visual_tuning=psycho_visual_tuning,
                b_frames=b_frames,
            ),
            service=StreamService(
                service_name=service_name,
                server=server,
                stream_key=stream_key,
            ),
        )
    except PydanticValidationError as error:
        # 入力値そのものはエラーメッセージに含めない (stream key を出さないため)
        raise ValidationError(
            f"invalid profile {name}: {_describe_errors(error)}"
        ) from None


class SceneCollectionBuilder:
    def __init__(
        self,
        name: str,
        id_generator: IdGenerator = generate_uuid,
    ):
        self.name = name
        self.id_generator = id_generator

        self._sources: list[Source] = []
        self._scenes: list[Scene] = []
        self._current_scene: str | None = None

    def add_source(self, source_spec: SourceSpec) -> str:
        id_generator = self.id_generator

        try:
            source = Source(
                id=id_generator(),
                kind=source_spec.kind,
                name=source_spec.name,
                settings=source_spec.settings,
                muted=source_spec.muted,
                volume=source_spec.volume,
            )
        except PydanticValidationError as error:
            raise ValidationError(
                f"invalid source {source_spec.name}: {_describe_errors(error)}"
            ) from None

        self._sources.append(source)
        return source.id

    def add_scene(self, name: str, items: list[SceneItem]) -> str:
        id_generator = self.id_generator

        try:
            scene = Scene(
                id=id_generator(),
                name=name,
                items=items,
            )
        except PydanticValidationError as error:
            raise ValidationError(
                f"invalid scene {name}: {_describe_errors(error)}"
            ) from None

        self._scenes.append(scene)
        if self._current_scene is None:
            self._current_scene = name

        return scene.id

    def set_current_scene(self, name: str) -> None:
        self._current_scene = name

    def build(self) -> SceneCollection:
        if self._current_scene is None:
            raise ValidationError(f"scene collection {self.name} has no scene")

        try:
            return SceneCollection(
                name=self.name,
                scenes=list(self._scenes),
                sources=list(self._sources),
                current_scene=self._current_scene,
            )
        except PydanticValidationError as error:
            raise ValidationError(
                f"invalid scene collection {self.name}: {_describe_errors(error)}"
            ) from None


def build_scene_collection(
    name: str,
    scene_name: str,
    sources: list[SourceSpec],
    id_generator: IdGenerator = generate_uuid,
) -> SceneCollection:
    """
    sources の順に 1 つのシーンへ並べたシーンコレクションを作る。
    """
    builder = SceneCollectionBuilder(name=name, id_generator=id_generator)

    items: list[SceneItem] = []
    for source_spec in sources:
        source_id = builder.add_source(source_spec)
        items.append(
            SceneItem(
                source_id=source_id,
                transform=source_spec.transform,
                visible=source_spec.visible,
                locked=source_spec.locked,
            )
        )

    builder.add_scene(name=scene_name, items=items)

    return builder.build()


def build_setup_model(
    profile: ProfileConfig,
    scene_collection: SceneCollection,
    disable_shutdown_check: bool = True,
) -> SetupModel:
    logger.debug(
        f"build_setup_model: profile={profile.name}, "
        f"scene_collection={scene_collection.name}"
    )

    try:
        return SetupModel(
            profile=profile,
            scene_collection=scene_collection,
            global_settings=GlobalSettings(
                profile_name=profile.name,
                scene_collection_name=scene_collection.name,
                disable_shutdown_check=disable_shutdown_check,
            ),
        )
    except PydanticValidationError as error:
        raise ValidationError(
            f"invalid setup model: {_describe_errors(error)}"
        ) from None


def _describe_errors(error: PydanticValidationError) -> str:
    messages: list[str] = []
    for detail in error.errors(include_input=False):
        location = ".".join(str(part) for part in detail["loc"])
        if len(location) > 0:
            messages.append(f"{location}: {detail['msg']}")
        else:
            messages.append(detail["msg"])

    return "; ".join(messages)
