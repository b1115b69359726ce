from typing import Literal

from pydantic import BaseModel, Field

from .process_launcher import ProcessDescriptor

CONFIG_STRUCT_VERSION = 1

DEFAULT_OBS_EXECUTABLE_PATHS = [
    "C:\\Program Files\\obs-studio\\bin\\64bit\\obs64.exe",
    "C:\\Program Files (x86)\\obs-studio\\bin\\64bit\\obs64.exe",
    "/usr/bin/obs",
    "/usr/local/bin/obs",
    "/Applications/OBS.app/Contents/MacOS/OBS",
]

# macOS の "OBS" は大文字小文字を無視して "obs" に一致する
DEFAULT_OBS_PROCESS_NAMES = [
    "obs64.exe",
    "obs32.exe",
    "obs",
]


class ObsLaunchConfig(BaseModel):
    process_names: list[str] = Field(default=DEFAULT_OBS_PROCESS_NAMES, min_length=1)
    executable_paths: list[str] = DEFAULT_OBS_EXECUTABLE_PATHS
    settle_delay_seconds: int = Field(default=10, ge=0)
    extra_args: list[str] = ["--disable-shutdown-check"]


class GameLaunchConfig(BaseModel):
    display_name: str
    process_name: str | None = None
    executable_paths: list[str] = []
    launch_args: list[str] = []
    settle_delay_seconds: int = Field(default=0, ge=0)
    fallback_uri: str | None = None
    window: str | None = None
    """
    ゲームキャプチャの対象ウィンドウ (OBS の "window" 設定値、例: "Game:UnityWndClass:Game.exe")。
    """

    def to_descriptor(self) -> ProcessDescriptor:
        return ProcessDescriptor(
            display_name=self.display_name,
            executable_path=self.executable_paths,
            launch_args=self.launch_args,
            settle_delay_seconds=self.settle_delay_seconds,
            process_name=self.process_name,
            fallback_uri=self.fallback_uri,
        )


class SetupDefaults(BaseModel):
    profile_name: str = "Streaming"
    scene_collection_name: str = "Streaming"
    scene_name: str = "Game"
    width: int = 1920
    height: int = 1080
    output_width: int | None = None
    output_height: int | None = None
    frame_rate: int = 60
    bitrate_kbps: int = 6000
    keyframe_interval_sec: int = 2
    encoder_id: str = "obs_x264"
    rate_control: Literal["CBR", "VBR", "CQP"] = "CBR"
    preset: str = "veryfast"
    service_name: str = "Twitch"
    server: str = "auto"


class AppConfig(BaseModel):
    struct_version: int = CONFIG_STRUCT_VERSION
    setup: SetupDefaults = SetupDefaults()
    obs: ObsLaunchConfig = ObsLaunchConfig()
    game: GameLaunchConfig | None = None
    credential_file: str | None = None
