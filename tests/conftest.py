"""
Shared pytest fixtures for tests/.

Provides:
  - deterministic id generation for sources and scenes
  - a fully-populated SetupModel (1920x1080 @ 60 fps, 6000 kbps CBR)
  - a temporary OBS settings root
"""
from __future__ import annotations

from pathlib import Path

import pytest

from _fakes import sequential_ids
from obs_stream_setup.config_model import (
    SetupModel,
    SourceSpec,
    build_profile_config,
    build_scene_collection,
    build_setup_model,
)
from obs_stream_setup.scene import SourceKind

STREAM_KEY = "live_123456789_abcdefghijklmnopqrstuvwxyz"


@pytest.fixture
def source_specs() -> list[SourceSpec]:
    return [
        SourceSpec(
            kind=SourceKind.GAME_CAPTURE,
            name="Game Capture",
            settings={"capture_mode": "any_fullscreen"},
        ),
        SourceSpec(
            kind=SourceKind.AUDIO_OUTPUT_CAPTURE,
            name="Desktop Audio",
            settings={"device_id": "default"},
            volume=1,
        ),
        SourceSpec(
            kind=SourceKind.AUDIO_INPUT_CAPTURE,
            name="Mic/Aux",
            settings={"device_id": "default"},
            muted=True,
            volume=0.5,
        ),
    ]


@pytest.fixture
def setup_model(source_specs: list[SourceSpec]) -> SetupModel:
    profile = build_profile_config(
        name="Streaming",
        width=1920,
        height=1080,
        frame_rate=60,
        bitrate_kbps=6000,
        rate_control="CBR",
        service_name="Twitch",
        stream_key=STREAM_KEY,
    )
    scene_collection = build_scene_collection(
        name="Streaming",
        scene_name="Game",
        sources=source_specs,
        id_generator=sequential_ids(),
    )
    return build_setup_model(profile=profile, scene_collection=scene_collection)


@pytest.fixture
def settings_root(tmp_path: Path) -> Path:
    root = tmp_path / "obs-studio"
    return root
