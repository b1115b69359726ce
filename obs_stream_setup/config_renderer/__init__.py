from logging import getLogger

from ..config_model import SetupModel
from .base import (
    GLOBAL_INI_PATH,
    RenderedFile,
    RenderFormat,
    profile_dir,
    safe_file_name,
    scene_collection_path,
)
from .ini import BASIC_INI_SECTIONS, load_ini, render_basic_ini, render_global_ini
from .structured import (
    render_scene_collection_json,
    render_service_json,
    render_stream_encoder_json,
)

logger = getLogger(__name__)


def render(model: SetupModel) -> list[RenderedFile]:
    profile = model.profile
    scene_collection = model.scene_collection

    _profile_dir = profile_dir(profile.name)

    rendered_files = [
        RenderedFile(
            relative_path=_profile_dir / "basic.ini",
            content=render_basic_ini(profile),
            format="ini",
        ),
        RenderedFile(
            relative_path=_profile_dir / "streamEncoder.json",
            content=render_stream_encoder_json(profile.encoder),
            format="json",
        ),
        RenderedFile(
            relative_path=_profile_dir / "service.json",
            content=render_service_json(profile.service),
            format="json",
        ),
        RenderedFile(
            relative_path=scene_collection_path(scene_collection.name),
            content=render_scene_collection_json(scene_collection),
            format="json",
        ),
        RenderedFile(
            relative_path=GLOBAL_INI_PATH,
            content=render_global_ini(model.global_settings),
            format="ini",
        ),
    ]

    for rendered_file in rendered_files:
        logger.debug(
            f"rendered {rendered_file.relative_path} ({rendered_file.format})"
        )

    return rendered_files


__all__ = [
    "BASIC_INI_SECTIONS",
    "GLOBAL_INI_PATH",
    "RenderFormat",
    "RenderedFile",
    "load_ini",
    "profile_dir",
    "render",
    "safe_file_name",
    "scene_collection_path",
]
