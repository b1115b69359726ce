from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

PositiveInt = Annotated[int, Field(gt=0)]

# INI の値は 1 行で、前後の空白は読み込み時に落ちる
SingleLineStr = Annotated[str, Field(pattern=r"^[^\r\n]*$")]


class VideoSettings(BaseModel):
    base_width: PositiveInt
    base_height: PositiveInt
    output_width: PositiveInt
    output_height: PositiveInt
    frame_rate: PositiveInt
    color_format: Literal["NV12", "I420", "I444", "RGB"] = "NV12"
    color_space: Literal["601", "709", "sRGB", "2100PQ", "2100HLG"] = "709"
    color_range: Literal["Partial", "Full"] = "Partial"
    scale_type: Literal["bilinear", "bicubic", "lanczos", "area"] = "bicubic"


class OutputSettings(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    mode: Literal["Simple", "Advanced"] = "Advanced"
    audio_bitrate_kbps: PositiveInt = 160
    audio_track_index: PositiveInt = 1
    sample_rate: PositiveInt = 48000
    channel_setup: Literal["Mono", "Stereo"] = "Stereo"
    recording_path: SingleLineStr = ""
    recording_format: SingleLineStr = "mkv"


class EncoderSettings(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    encoder_id: Annotated[SingleLineStr, Field(min_length=1)]
    rate_control: Literal["CBR", "VBR", "CQP"]
    bitrate_kbps: PositiveInt
    keyframe_interval_sec: PositiveInt
    preset: SingleLineStr
    profile: SingleLineStr
    lookahead: bool
    psycho_visual_tuning: bool
    b_frames: Annotated[int, Field(ge=0)]


class StreamService(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    service_name: Annotated[SingleLineStr, Field(min_length=1)]
    server: Annotated[SingleLineStr, Field(min_length=1)] = "auto"
    stream_key: SecretStr
    service_type: str = "rtmp_common"

    @field_validator("stream_key")
    @classmethod
    def stream_key_must_not_be_empty(cls, value: SecretStr) -> SecretStr:
        if len(value.get_secret_value()) == 0:
            raise ValueError("stream key must not be empty")
        return value


class ProfileConfig(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Annotated[SingleLineStr, Field(min_length=1)]
    video: VideoSettings
    output: OutputSettings
    encoder: EncoderSettings
    service: StreamService


class GlobalSettings(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    profile_name: Annotated[SingleLineStr, Field(min_length=1)]
    scene_collection_name: Annotated[SingleLineStr, Field(min_length=1)]
    language: SingleLineStr = "en-US"
    disable_shutdown_check: bool = True
