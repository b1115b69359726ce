from argparse import ArgumentParser, Namespace
from logging import getLogger
from pathlib import Path
from typing import Literal

from pydantic import BaseModel

from ..config_store_manager import ConfigStoreManagerFile
from ..config_writer import ConfigWriterFile, WritePolicy
from ..confirmation_prompt import (
    ConfirmationPrompt,
    ConfirmationPromptConsole,
    ConfirmationPromptStatic,
)
from ..console import print_error, print_fatal, print_info
from ..credential_source import (
    CredentialSource,
    CredentialSourceChain,
    CredentialSourceEnv,
    CredentialSourceFile,
    CredentialSourcePrompt,
)
from ..errors import ObsStreamSetupError
from ..orchestrator import setup_flow
from ..process_gate import ProcessGatePsutil
from ..settings_root import default_credential_file_path, default_obs_settings_root

logger = getLogger(__name__)


class SubcommandSetupArguments(BaseModel):
    config_file: Path
    settings_root: Path | None
    profile_name: str | None
    scene_collection_name: str | None
    scene_name: str | None
    width: int | None
    height: int | None
    output_width: int | None
    output_height: int | None
    frame_rate: int | None
    bitrate_kbps: int | None
    keyframe_interval_sec: int | None
    encoder_id: str | None
    rate_control: Literal["CBR", "VBR", "CQP"] | None
    preset: str | None
    service_name: str | None
    server: str | None
    stream_key_file: Path | None
    game_window: str | None
    policy: WritePolicy
    interactive: bool


_SETUP_OVERRIDE_FIELDS = [
    "profile_name",
    "scene_collection_name",
    "scene_name",
    "width",
    "height",
    "output_width",
    "output_height",
    "frame_rate",
    "bitrate_kbps",
    "keyframe_interval_sec",
    "encoder_id",
    "rate_control",
    "preset",
    "service_name",
    "server",
]


async def subcommand_setup(args: SubcommandSetupArguments) -> int:
    config_store_manager = ConfigStoreManagerFile(path=args.config_file)

    try:
        config = await config_store_manager.load_config()
    except ObsStreamSetupError as error:
        print_error(error)
        return 1

    overrides = {
        field_name: getattr(args, field_name)
        for field_name in _SETUP_OVERRIDE_FIELDS
        if getattr(args, field_name) is not None
    }
    setup = config.setup.model_copy(update=overrides)

    settings_root = (
        args.settings_root
        if args.settings_root is not None
        else default_obs_settings_root()
    )

    stream_key_file = args.stream_key_file
    if stream_key_file is None and config.credential_file is not None:
        stream_key_file = Path(config.credential_file)
    if stream_key_file is None:
        stream_key_file = default_credential_file_path()

    credential_sources: list[CredentialSource] = [
        CredentialSourceFile(path=stream_key_file),
        CredentialSourceEnv(),
    ]
    if args.interactive:
        credential_sources.append(CredentialSourcePrompt(label="Stream key"))

    confirmation_prompt: ConfirmationPrompt
    if args.interactive:
        confirmation_prompt = ConfirmationPromptConsole()
    else:
        confirmation_prompt = ConfirmationPromptStatic(answer=False)

    game_window = args.game_window
    if game_window is None and config.game is not None:
        game_window = config.game.window

    logger.info(f"setup: settings_root={settings_root}, policy={args.policy.value}")

    try:
        result = await setup_flow(
            setup=setup,
            obs_process_names=config.obs.process_names,
            process_gate=ProcessGatePsutil(),
            credential_source=CredentialSourceChain(credential_sources),
            config_writer=ConfigWriterFile(
                settings_root=settings_root,
                confirmation_prompt=confirmation_prompt,
            ),
            policy=args.policy,
            game_window=game_window,
        )
    except ObsStreamSetupError as error:
        print_error(error)
        return 1

    for path in result.succeeded:
        print_info(f"wrote {path}")

    if not result.ok:
        for failed_write in result.failed:
            print_fatal(f"failed to write {failed_write.path}: {failed_write.reason}")
        return 1

    print_info(
        f"profile {setup.profile_name} and scene collection "
        f"{setup.scene_collection_name} are ready"
    )
    return 0


async def execute_subcommand_setup(
    args: Namespace,
) -> int:
    if args.force:
        policy = WritePolicy.FORCE
    elif args.fail_on_conflict:
        policy = WritePolicy.FAIL_ON_CONFLICT
    else:
        policy = WritePolicy.PROMPT_ON_CONFLICT

    return await subcommand_setup(
        args=SubcommandSetupArguments(
            config_file=args.config,
            settings_root=args.settings_root,
            profile_name=args.profile,
            scene_collection_name=args.collection,
            scene_name=args.scene,
            width=args.width,
            height=args.height,
            output_width=args.output_width,
            output_height=args.output_height,
            frame_rate=args.fps,
            bitrate_kbps=args.bitrate,
            keyframe_interval_sec=args.keyint,
            encoder_id=args.encoder,
            rate_control=args.rate_control,
            preset=args.preset,
            service_name=args.service,
            server=args.server,
            stream_key_file=args.stream_key_file,
            game_window=args.game_window,
            policy=policy,
            interactive=not args.no_prompt,
        ),
    )


async def add_arguments_subcommand_setup(
    parser: ArgumentParser,
) -> None:
    parser.add_argument("--settings-root", type=Path, help="OBS の設定ディレクトリ")
    parser.add_argument("--profile", type=str)
    parser.add_argument("--collection", type=str)
    parser.add_argument("--scene", type=str)
    parser.add_argument("--width", type=int)
    parser.add_argument("--height", type=int)
    parser.add_argument("--output-width", type=int)
    parser.add_argument("--output-height", type=int)
    parser.add_argument("--fps", type=int)
    parser.add_argument("--bitrate", type=int, help="kbps")
    parser.add_argument("--keyint", type=int, help="キーフレーム間隔 (秒)")
    parser.add_argument("--encoder", type=str, help="例: obs_x264, jim_nvenc")
    parser.add_argument("--rate-control", type=str, choices=["CBR", "VBR", "CQP"])
    parser.add_argument("--preset", type=str)
    parser.add_argument("--service", type=str, help="例: Twitch, YouTube - RTMPS")
    parser.add_argument("--server", type=str)
    parser.add_argument("--stream-key-file", type=Path)
    parser.add_argument("--game-window", type=str)
    parser.add_argument(
        "--no-prompt",
        action="store_true",
        help="確認やストリームキーの入力を求めない",
    )

    conflict_group = parser.add_mutually_exclusive_group()
    conflict_group.add_argument(
        "--force",
        action="store_true",
        help="既存の設定ファイルを確認せずに上書きする",
    )
    conflict_group.add_argument(
        "--fail-on-conflict",
        action="store_true",
        help="既存の設定ファイルがあれば何も書き込まずに終了する",
    )

    parser.set_defaults(handler=execute_subcommand_setup)
