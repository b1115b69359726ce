"""
Tests for the setup and start flows with fake collaborators.

Covers:
  - setup refuses to run while OBS is running, before any write
  - setup requires a stream key before rendering
  - setup writes the full file set
  - start skips running processes, waits the settle delay, falls back to a
    URI and keeps going after recoverable launch failures
"""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from _fakes import (
    FakeCredentialSource,
    FakeProcessGate,
    FakeProcessLauncher,
    RecordingSleep,
    sequential_ids,
)
from conftest import STREAM_KEY
from obs_stream_setup.config import (
    DEFAULT_OBS_PROCESS_NAMES,
    AppConfig,
    GameLaunchConfig,
    ObsLaunchConfig,
    SetupDefaults,
)
from obs_stream_setup.config_writer import ConfigWriterFile, WritePolicy
from obs_stream_setup.errors import LaunchError, NotFoundError, PreconditionError, ValidationError
from obs_stream_setup.orchestrator import (
    build_obs_descriptor,
    default_source_specs,
    setup_flow,
    start_flow,
)
from obs_stream_setup.scene import SourceKind

OBS_PATH = "C:\\Program Files\\obs-studio\\bin\\64bit\\obs64.exe"
GAME_PATH = "D:\\Games\\Game\\Game.exe"


def _files(root: Path) -> list[Path]:
    if not root.exists():
        return []
    return [path for path in root.rglob("*") if path.is_file()]


class TestSetupFlow:

    @pytest.mark.asyncio
    async def test_writes_all_files(self, settings_root):
        result = await setup_flow(
            setup=SetupDefaults(),
            obs_process_names=DEFAULT_OBS_PROCESS_NAMES,
            process_gate=FakeProcessGate(),
            credential_source=FakeCredentialSource({"stream_key": STREAM_KEY}),
            config_writer=ConfigWriterFile(settings_root=settings_root),
            policy=WritePolicy.FAIL_ON_CONFLICT,
            id_generator=sequential_ids(),
        )

        assert result.ok
        assert len(result.succeeded) == 5
        service = json.loads(
            (settings_root / "basic" / "profiles" / "Streaming" / "service.json").read_text(
                encoding="utf-8"
            )
        )
        assert service["settings"]["key"] == STREAM_KEY

    @pytest.mark.asyncio
    @pytest.mark.parametrize("running_name", ["obs64.exe", "obs", "OBS"])
    async def test_refuses_while_obs_running(self, settings_root, running_name):
        gate = FakeProcessGate(running=[running_name])
        credential_source = FakeCredentialSource({"stream_key": STREAM_KEY})

        with pytest.raises(PreconditionError) as excinfo:
            await setup_flow(
                setup=SetupDefaults(),
                obs_process_names=DEFAULT_OBS_PROCESS_NAMES,
                process_gate=gate,
                credential_source=credential_source,
                config_writer=ConfigWriterFile(settings_root=settings_root),
                policy=WritePolicy.FORCE,
            )

        assert excinfo.value.process_name == running_name
        assert _files(settings_root) == []
        assert credential_source.requested == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("secrets", [{}, {"stream_key": ""}])
    async def test_requires_stream_key(self, settings_root, secrets):
        with pytest.raises(PreconditionError, match="stream key is required"):
            await setup_flow(
                setup=SetupDefaults(),
                obs_process_names=DEFAULT_OBS_PROCESS_NAMES,
                process_gate=FakeProcessGate(),
                credential_source=FakeCredentialSource(secrets),
                config_writer=ConfigWriterFile(settings_root=settings_root),
                policy=WritePolicy.FORCE,
            )

        assert _files(settings_root) == []

    @pytest.mark.asyncio
    async def test_invalid_settings_write_nothing(self, settings_root):
        with pytest.raises(ValidationError):
            await setup_flow(
                setup=SetupDefaults(frame_rate=0),
                obs_process_names=DEFAULT_OBS_PROCESS_NAMES,
                process_gate=FakeProcessGate(),
                credential_source=FakeCredentialSource({"stream_key": STREAM_KEY}),
                config_writer=ConfigWriterFile(settings_root=settings_root),
                policy=WritePolicy.FORCE,
            )

        assert _files(settings_root) == []


class TestDefaultSourceSpecs:

    def test_window_capture_when_window_given(self):
        specs = default_source_specs(game_window="Game:UnityWndClass:Game.exe")
        assert [spec.kind for spec in specs] == [
            SourceKind.GAME_CAPTURE,
            SourceKind.AUDIO_OUTPUT_CAPTURE,
            SourceKind.AUDIO_INPUT_CAPTURE,
        ]
        assert specs[0].settings == {
            "capture_mode": "window",
            "window": "Game:UnityWndClass:Game.exe",
        }

    def test_fullscreen_capture_by_default(self):
        assert default_source_specs(game_window=None)[0].settings == {
            "capture_mode": "any_fullscreen"
        }


def _config(game: GameLaunchConfig | None = None) -> AppConfig:
    return AppConfig(
        obs=ObsLaunchConfig(executable_paths=[OBS_PATH], settle_delay_seconds=10),
        game=game,
    )


def _obs_descriptor(config: AppConfig, start_streaming: bool = False):
    return build_obs_descriptor(
        config=config,
        profile_name="Streaming",
        scene_collection_name="Streaming",
        scene_name="Game",
        start_streaming=start_streaming,
    )


class TestBuildObsDescriptor:

    def test_args(self):
        descriptor = _obs_descriptor(_config(), start_streaming=True)
        assert descriptor.launch_args == [
            "--profile",
            "Streaming",
            "--collection",
            "Streaming",
            "--scene",
            "Game",
            "--disable-shutdown-check",
            "--startstreaming",
        ]
        assert descriptor.process_names == ["obs64.exe", "obs32.exe", "obs"]
        assert descriptor.candidates == [OBS_PATH]

    def test_without_scene(self):
        descriptor = build_obs_descriptor(
            config=_config(),
            profile_name="P",
            scene_collection_name="C",
            scene_name=None,
            start_streaming=False,
        )
        assert "--scene" not in descriptor.launch_args
        assert "--startstreaming" not in descriptor.launch_args


class TestStartFlow:

    @pytest.mark.asyncio
    async def test_launches_obs_and_waits(self):
        launcher = FakeProcessLauncher(existing_paths=[str(Path(OBS_PATH))])
        sleep = RecordingSleep()

        report = await start_flow(
            obs_descriptor=_obs_descriptor(_config()),
            game_descriptor=None,
            process_gate=FakeProcessGate(),
            process_launcher=launcher,
            sleep=sleep,
        )

        assert [step.status for step in report.steps] == ["started"]
        assert report.exit_code == 0
        assert launcher.started[0][0] == OBS_PATH
        assert sleep.calls == [10]

    @pytest.mark.asyncio
    async def test_running_obs_is_not_relaunched(self):
        launcher = FakeProcessLauncher(existing_paths=[str(Path(OBS_PATH))])
        sleep = RecordingSleep()

        report = await start_flow(
            obs_descriptor=_obs_descriptor(_config()),
            game_descriptor=None,
            process_gate=FakeProcessGate(running=["obs64.exe"]),
            process_launcher=launcher,
            sleep=sleep,
        )

        assert report.steps[0].status == "already_running"
        assert report.exit_code == 0
        assert launcher.started == []
        assert sleep.calls == []

    @pytest.mark.asyncio
    async def test_missing_obs_continues_to_game(self):
        game = GameLaunchConfig(
            display_name="Game",
            process_name="Game.exe",
            executable_paths=[GAME_PATH],
        )
        launcher = FakeProcessLauncher(existing_paths=[str(Path(GAME_PATH))])

        report = await start_flow(
            obs_descriptor=_obs_descriptor(_config(game)),
            game_descriptor=game.to_descriptor(),
            process_gate=FakeProcessGate(),
            process_launcher=launcher,
            sleep=RecordingSleep(),
        )

        assert [step.status for step in report.steps] == ["not_found", "started"]
        assert isinstance(report.steps[0].error, NotFoundError)
        assert report.steps[0].error.candidates == [OBS_PATH]
        assert report.exit_code == 1
        assert [started[0] for started in launcher.started] == [GAME_PATH]

    @pytest.mark.asyncio
    async def test_game_uri_fallback(self):
        game = GameLaunchConfig(
            display_name="Game",
            process_name="Game.exe",
            executable_paths=[GAME_PATH],
            fallback_uri="steam://rungameid/570",
            settle_delay_seconds=5,
        )
        launcher = FakeProcessLauncher(existing_paths=[str(Path(OBS_PATH))])
        sleep = RecordingSleep()

        report = await start_flow(
            obs_descriptor=_obs_descriptor(_config(game)),
            game_descriptor=game.to_descriptor(),
            process_gate=FakeProcessGate(),
            process_launcher=launcher,
            sleep=sleep,
        )

        assert [step.status for step in report.steps] == ["started", "uri_launched"]
        assert launcher.opened_uris == ["steam://rungameid/570"]
        assert sleep.calls == [10, 5]
        assert report.exit_code == 0

    @pytest.mark.asyncio
    async def test_game_failure_is_not_fatal(self):
        game = GameLaunchConfig(
            display_name="Game",
            process_name="Game.exe",
            executable_paths=[GAME_PATH],
        )
        launcher = FakeProcessLauncher(
            existing_paths=[str(Path(OBS_PATH)), str(Path(GAME_PATH))],
            failing_paths=[GAME_PATH],
        )

        report = await start_flow(
            obs_descriptor=_obs_descriptor(_config(game)),
            game_descriptor=game.to_descriptor(),
            process_gate=FakeProcessGate(),
            process_launcher=launcher,
            sleep=RecordingSleep(),
        )

        assert [step.status for step in report.steps] == ["started", "launch_failed"]
        assert isinstance(report.steps[1].error, LaunchError)
        assert report.exit_code == 0

    @pytest.mark.asyncio
    async def test_failed_uri_fallback(self):
        game = GameLaunchConfig(
            display_name="Game",
            process_name="Game.exe",
            fallback_uri="steam://rungameid/570",
        )
        launcher = FakeProcessLauncher(
            existing_paths=[str(Path(OBS_PATH))],
            failing_uris=["steam://rungameid/570"],
        )

        report = await start_flow(
            obs_descriptor=_obs_descriptor(_config(game)),
            game_descriptor=game.to_descriptor(),
            process_gate=FakeProcessGate(),
            process_launcher=launcher,
            sleep=RecordingSleep(),
        )

        assert report.steps[1].status == "launch_failed"
        assert report.exit_code == 0

    @pytest.mark.asyncio
    async def test_obs_running_under_linux_name(self):
        launcher = FakeProcessLauncher(existing_paths=[str(Path(OBS_PATH))])

        report = await start_flow(
            obs_descriptor=_obs_descriptor(_config()),
            game_descriptor=None,
            process_gate=FakeProcessGate(running=["obs"]),
            process_launcher=launcher,
            sleep=RecordingSleep(),
        )

        assert report.steps[0].status == "already_running"
        assert launcher.started == []

    @pytest.mark.asyncio
    async def test_running_check_falls_back_to_executable_name(self):
        game = GameLaunchConfig(
            display_name="Game",
            executable_paths=["D:\\Games\\Missing\\Game.exe", GAME_PATH],
        )
        launcher = FakeProcessLauncher(
            existing_paths=[str(Path(OBS_PATH)), str(Path(GAME_PATH))]
        )
        gate = FakeProcessGate(running=["obs64.exe", "Game.exe"])

        report = await start_flow(
            obs_descriptor=_obs_descriptor(_config(game)),
            game_descriptor=game.to_descriptor(),
            process_gate=gate,
            process_launcher=launcher,
            sleep=RecordingSleep(),
        )

        assert [step.status for step in report.steps] == ["already_running", "already_running"]
        assert gate.queries[-1] == ["Game.exe"]
        assert launcher.started == []

    @pytest.mark.asyncio
    async def test_without_process_name_or_executable(self):
        game = GameLaunchConfig(
            display_name="Game",
            fallback_uri="steam://rungameid/570",
        )
        launcher = FakeProcessLauncher(existing_paths=[str(Path(OBS_PATH))])
        gate = FakeProcessGate()

        report = await start_flow(
            obs_descriptor=_obs_descriptor(_config(game)),
            game_descriptor=game.to_descriptor(),
            process_gate=gate,
            process_launcher=launcher,
            sleep=RecordingSleep(),
        )

        assert report.steps[1].status == "uri_launched"
        assert len(gate.queries) == 1
