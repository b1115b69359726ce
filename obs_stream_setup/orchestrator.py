import asyncio
from dataclasses import dataclass
from logging import getLogger
from pathlib import PureWindowsPath
from typing import Awaitable, Callable, Literal

from .config import AppConfig, SetupDefaults
from .config_model import (
    IdGenerator,
    SourceSpec,
    build_profile_config,
    build_scene_collection,
    build_setup_model,
    generate_uuid,
)
from .config_renderer import render
from .config_writer import ConfigWriter, MaterializeResult, WritePolicy
from .credential_source import CredentialSource
from .errors import LaunchError, NotFoundError, PreconditionError
from .process_gate import ProcessGate
from .process_launcher import (
    LaunchResult,
    ProcessDescriptor,
    ProcessLauncher,
    resolve_executable,
    wait_settle,
)
from .scene import SourceKind

logger = getLogger(__name__)

STREAM_KEY_SECRET_NAME = "stream_key"


def default_source_specs(game_window: str | None) -> list[SourceSpec]:
    if game_window is not None:
        game_capture_settings = {
            "capture_mode": "window",
            "window": game_window,
        }
    else:
        game_capture_settings = {
            "capture_mode": "any_fullscreen",
        }

    return [
        SourceSpec(
            kind=SourceKind.GAME_CAPTURE,
            name="Game Capture",
            settings=game_capture_settings,
        ),
        SourceSpec(
            kind=SourceKind.AUDIO_OUTPUT_CAPTURE,
            name="Desktop Audio",
            settings={"device_id": "default"},
        ),
        SourceSpec(
            kind=SourceKind.AUDIO_INPUT_CAPTURE,
            name="Mic/Aux",
            settings={"device_id": "default"},
        ),
    ]


async def setup_flow(
    setup: SetupDefaults,
    obs_process_names: list[str],
    process_gate: ProcessGate,
    credential_source: CredentialSource,
    config_writer: ConfigWriter,
    policy: WritePolicy,
    game_window: str | None = None,
    id_generator: IdGenerator = generate_uuid,
) -> MaterializeResult:
    running_processes = await process_gate.list_running(process_names=obs_process_names)
    if len(running_processes) > 0:
        running_name = running_processes[0].name
        raise PreconditionError(
            f"{running_name} is running. Close it before writing its settings, "
            "otherwise it overwrites them on exit.",
            process_name=running_name,
        )

    stream_key = await credential_source.get_secret(STREAM_KEY_SECRET_NAME)
    if stream_key is None or len(stream_key) == 0:
        raise PreconditionError(
            "stream key is required. Supply it with --stream-key-file, "
            "the OBS_STREAM_SETUP_STREAM_KEY environment variable or the prompt."
        )

    profile = build_profile_config(
        name=setup.profile_name,
        width=setup.width,
        height=setup.height,
        output_width=setup.output_width,
        output_height=setup.output_height,
        frame_rate=setup.frame_rate,
        bitrate_kbps=setup.bitrate_kbps,
        keyframe_interval_sec=setup.keyframe_interval_sec,
        encoder_id=setup.encoder_id,
        rate_control=setup.rate_control,
        preset=setup.preset,
        service_name=setup.service_name,
        server=setup.server,
        stream_key=stream_key,
    )
    scene_collection = build_scene_collection(
        name=setup.scene_collection_name,
        scene_name=setup.scene_name,
        sources=default_source_specs(game_window=game_window),
        id_generator=id_generator,
    )
    model = build_setup_model(profile=profile, scene_collection=scene_collection)

    rendered_files = render(model)
    logger.info(
        f"setup: profile={profile.name}, scene_collection={scene_collection.name}, "
        f"files={len(rendered_files)}"
    )

    return await config_writer.materialize(files=rendered_files, policy=policy)


StepStatus = Literal[
    "started",
    "already_running",
    "uri_launched",
    "not_found",
    "launch_failed",
]


@dataclass
class StepOutcome:
    display_name: str
    status: StepStatus
    required: bool
    launch_result: LaunchResult | None = None
    error: NotFoundError | LaunchError | None = None

    @property
    def failed(self) -> bool:
        return self.status in ("not_found", "launch_failed")


@dataclass
class StartReport:
    steps: list[StepOutcome]

    @property
    def exit_code(self) -> int:
        for step in self.steps:
            if step.required and step.failed:
                return 1

        return 0


def build_obs_descriptor(
    config: AppConfig,
    profile_name: str,
    scene_collection_name: str,
    scene_name: str | None,
    start_streaming: bool,
) -> ProcessDescriptor:
    obs = config.obs

    launch_args = [
        "--profile",
        profile_name,
        "--collection",
        scene_collection_name,
    ]
    if scene_name is not None:
        launch_args += ["--scene", scene_name]
    launch_args += obs.extra_args
    if start_streaming:
        launch_args.append("--startstreaming")

    return ProcessDescriptor(
        display_name="OBS Studio",
        executable_path=obs.executable_paths,
        launch_args=launch_args,
        settle_delay_seconds=obs.settle_delay_seconds,
        process_name=obs.process_names,
    )


def _executable_process_names(
    descriptor: ProcessDescriptor,
    process_launcher: ProcessLauncher,
) -> list[str]:
    try:
        resolved_path = resolve_executable(
            candidates=descriptor.candidates,
            exists=process_launcher.exists,
        )
    except NotFoundError:
        return []

    # PureWindowsPath は / と \ のどちらでも区切れる
    return [PureWindowsPath(resolved_path).name]


async def _run_launch_step(
    descriptor: ProcessDescriptor,
    required: bool,
    process_gate: ProcessGate,
    process_launcher: ProcessLauncher,
    sleep: Callable[[float], Awaitable[None]],
) -> StepOutcome:
    display_name = descriptor.display_name

    process_names = descriptor.process_names
    if len(process_names) == 0:
        process_names = _executable_process_names(descriptor, process_launcher)

    if len(process_names) > 0 and await process_gate.is_running(process_names):
        logger.info(f"{display_name} is already running, skip launch")
        return StepOutcome(
            display_name=display_name,
            status="already_running",
            required=required,
        )

    launch_result = await process_launcher.launch(descriptor)

    if launch_result.started:
        await wait_settle(descriptor=descriptor, result=launch_result, sleep=sleep)
        return StepOutcome(
            display_name=display_name,
            status="started",
            required=required,
            launch_result=launch_result,
        )

    if isinstance(launch_result.error, NotFoundError):
        if descriptor.fallback_uri is not None:
            try:
                await process_launcher.launch_uri(descriptor.fallback_uri)
            except LaunchError as error:
                return StepOutcome(
                    display_name=display_name,
                    status="launch_failed",
                    required=required,
                    launch_result=launch_result,
                    error=error,
                )

            await wait_settle(
                descriptor=descriptor,
                result=LaunchResult(started=True),
                sleep=sleep,
            )
            return StepOutcome(
                display_name=display_name,
                status="uri_launched",
                required=required,
                launch_result=launch_result,
            )

        return StepOutcome(
            display_name=display_name,
            status="not_found",
            required=required,
            launch_result=launch_result,
            error=launch_result.error,
        )

    return StepOutcome(
        display_name=display_name,
        status="launch_failed",
        required=required,
        launch_result=launch_result,
        error=launch_result.error,
    )


async def start_flow(
    obs_descriptor: ProcessDescriptor,
    game_descriptor: ProcessDescriptor | None,
    process_gate: ProcessGate,
    process_launcher: ProcessLauncher,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> StartReport:
    """
    OBS を起動してからゲームを起動する。

    どちらのステップも起動に失敗しても次へ進む。OBS の起動失敗だけを終了コード 1 にする。
    """
    steps: list[StepOutcome] = []

    steps.append(
        await _run_launch_step(
            descriptor=obs_descriptor,
            required=True,
            process_gate=process_gate,
            process_launcher=process_launcher,
            sleep=sleep,
        )
    )

    if game_descriptor is not None:
        steps.append(
            await _run_launch_step(
                descriptor=game_descriptor,
                required=False,
                process_gate=process_gate,
                process_launcher=process_launcher,
                sleep=sleep,
            )
        )

    return StartReport(steps=steps)
