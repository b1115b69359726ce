from argparse import ArgumentParser, Namespace
from logging import getLogger
from pathlib import Path

from pydantic import BaseModel

from ..config_store_manager import ConfigStoreManagerFile
from ..console import print_error, print_info, print_warning
from ..errors import ObsStreamSetupError
from ..orchestrator import build_obs_descriptor, start_flow
from ..process_gate import ProcessGatePsutil
from ..process_launcher import ProcessLauncherSubprocess

logger = getLogger(__name__)


class SubcommandStartArguments(BaseModel):
    config_file: Path
    profile_name: str | None
    scene_collection_name: str | None
    scene_name: str | None
    start_streaming: bool
    skip_game: bool


async def subcommand_start(args: SubcommandStartArguments) -> int:
    config_store_manager = ConfigStoreManagerFile(path=args.config_file)

    try:
        config = await config_store_manager.load_config()
    except ObsStreamSetupError as error:
        print_error(error)
        return 1

    setup = config.setup

    obs_descriptor = build_obs_descriptor(
        config=config,
        profile_name=(
            args.profile_name if args.profile_name is not None else setup.profile_name
        ),
        scene_collection_name=(
            args.scene_collection_name
            if args.scene_collection_name is not None
            else setup.scene_collection_name
        ),
        scene_name=args.scene_name if args.scene_name is not None else setup.scene_name,
        start_streaming=args.start_streaming,
    )

    game_descriptor = None
    if config.game is not None and not args.skip_game:
        game_descriptor = config.game.to_descriptor()

    report = await start_flow(
        obs_descriptor=obs_descriptor,
        game_descriptor=game_descriptor,
        process_gate=ProcessGatePsutil(),
        process_launcher=ProcessLauncherSubprocess(),
    )

    for step in report.steps:
        if step.status == "started":
            print_info(f"{step.display_name} started")
        elif step.status == "already_running":
            print_info(f"{step.display_name} is already running")
        elif step.status == "uri_launched":
            print_info(f"{step.display_name} launched via its URI handler")
        elif step.error is not None:
            print_error(step.error)
        else:
            print_warning(f"{step.display_name}: {step.status}")

    return report.exit_code


async def execute_subcommand_start(
    args: Namespace,
) -> int:
    return await subcommand_start(
        args=SubcommandStartArguments(
            config_file=args.config,
            profile_name=args.profile,
            scene_collection_name=args.collection,
            scene_name=args.scene,
            start_streaming=args.stream,
            skip_game=args.skip_game,
        ),
    )


async def add_arguments_subcommand_start(
    parser: ArgumentParser,
) -> None:
    parser.add_argument("--profile", type=str)
    parser.add_argument("--collection", type=str)
    parser.add_argument("--scene", type=str)
    parser.add_argument(
        "--stream",
        action="store_true",
        help="OBS の起動と同時に配信を開始する (--startstreaming)",
    )
    parser.add_argument(
        "--skip-game",
        action="store_true",
        help="設定ファイルにゲームがあっても起動しない",
    )

    parser.set_defaults(handler=execute_subcommand_start)
