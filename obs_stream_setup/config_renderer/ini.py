import configparser
import io

from ..profile import GlobalSettings, ProfileConfig
from .base import safe_file_name, scene_collection_path

BASIC_INI_SECTIONS = [
    "General",
    "Video",
    "Audio",
    "Output",
    "AdvOut",
    "SimpleOutput",
    "Stream",
    "Hotkeys",
]

_SIMPLE_OUTPUT_ENCODERS = {
    "obs_x264": "x264",
    "jim_nvenc": "nvenc",
    "ffmpeg_nvenc": "nvenc",
    "obs_nvenc_h264_tex": "nvenc",
    "h264_texture_amf": "amd",
    "obs_qsv11": "qsv",
}

IniValue = str | int | bool


def _format_value(value: IniValue) -> str:
    # bool は int のサブクラスなので先に判定する
    if isinstance(value, bool):
        return "true" if value else "false"

    return str(value)


def dump_ini(sections: list[tuple[str, list[tuple[str, IniValue]]]]) -> str:
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # type:ignore[assignment,method-assign]

    for section_name, entries in sections:
        parser.add_section(section_name)
        for key, value in entries:
            parser.set(section_name, key, _format_value(value))

    with io.StringIO() as fp:
        parser.write(fp, space_around_delimiters=False)
        return fp.getvalue()


def load_ini(content: str) -> configparser.ConfigParser:
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # type:ignore[assignment,method-assign]
    parser.read_string(content)

    return parser


def render_basic_ini(profile: ProfileConfig) -> str:
    video = profile.video
    output = profile.output
    encoder = profile.encoder
    service = profile.service

    sections: dict[str, list[tuple[str, IniValue]]] = {
        section_name: [] for section_name in BASIC_INI_SECTIONS
    }

    sections["General"] += [
        ("Name", profile.name),
    ]

    sections["Video"] += [
        ("BaseCX", video.base_width),
        ("BaseCY", video.base_height),
        ("OutputCX", video.output_width),
        ("OutputCY", video.output_height),
        ("FPSType", 0),
        ("FPSCommon", video.frame_rate),
        ("ScaleType", video.scale_type),
        ("ColorFormat", video.color_format),
        ("ColorSpace", video.color_space),
        ("ColorRange", video.color_range),
    ]

    sections["Audio"] += [
        ("SampleRate", output.sample_rate),
        ("ChannelSetup", output.channel_setup),
    ]

    sections["Output"] += [
        ("Mode", output.mode),
    ]

    sections["AdvOut"] += [
        ("Encoder", encoder.encoder_id),
        ("TrackIndex", output.audio_track_index),
        ("ApplyServiceSettings", True),
        (f"Track{output.audio_track_index}Bitrate", output.audio_bitrate_kbps),
        ("RecType", "Standard"),
        ("RecFilePath", output.recording_path),
        ("RecFormat2", output.recording_format),
    ]

    simple_output: list[tuple[str, IniValue]] = [
        ("VBitrate", encoder.bitrate_kbps),
        ("ABitrate", output.audio_bitrate_kbps),
        ("Preset", encoder.preset),
        ("FilePath", output.recording_path),
        ("RecFormat2", output.recording_format),
    ]
    simple_encoder = _SIMPLE_OUTPUT_ENCODERS.get(encoder.encoder_id)
    if simple_encoder is not None:
        simple_output.insert(0, ("StreamEncoder", simple_encoder))
    sections["SimpleOutput"] += simple_output

    # stream key は service.json にのみ書き出す
    sections["Stream"] += [
        ("Service", service.service_name),
        ("Server", service.server),
    ]

    return dump_ini(
        [(section_name, sections[section_name]) for section_name in BASIC_INI_SECTIONS]
    )


def render_global_ini(global_settings: GlobalSettings) -> str:
    return dump_ini(
        [
            (
                "General",
                [
                    ("Language", global_settings.language),
                    ("EnableAutoUpdates", False),
                    ("ConfirmOnExit", True),
                    ("DisableShutdownCheck", global_settings.disable_shutdown_check),
                ],
            ),
            (
                "Basic",
                [
                    ("Profile", global_settings.profile_name),
                    ("ProfileDir", safe_file_name(global_settings.profile_name)),
                    ("SceneCollection", global_settings.scene_collection_name),
                    (
                        "SceneCollectionFile",
                        scene_collection_path(
                            global_settings.scene_collection_name
                        ).stem,
                    ),
                ],
            ),
        ]
    )
