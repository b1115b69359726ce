import re
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Literal

RenderFormat = Literal["ini", "json"]

_UNSAFE_FILE_NAME_CHARACTERS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


@dataclass(frozen=True)
class RenderedFile:
    relative_path: PurePosixPath
    content: str = field(repr=False)
    format: RenderFormat


def safe_file_name(name: str) -> str:
    """
    Windows でもファイル名として使えるように置換する。
    OBS はプロファイル名・シーンコレクション名をそのままディレクトリ名に使う。
    """
    safe_name = _UNSAFE_FILE_NAME_CHARACTERS.sub("_", name).strip().rstrip(".")
    if len(safe_name) == 0:
        return "_"

    return safe_name


def profile_dir(profile_name: str) -> PurePosixPath:
    return PurePosixPath("basic", "profiles", safe_file_name(profile_name))


def scene_collection_path(scene_collection_name: str) -> PurePosixPath:
    return PurePosixPath(
        "basic", "scenes", f"{safe_file_name(scene_collection_name)}.json"
    )


GLOBAL_INI_PATH = PurePosixPath("global.ini")
