from argparse import ArgumentParser, Namespace
from logging import getLogger
from pathlib import Path

from pydantic import BaseModel

from ..config_store_manager import ConfigStoreManagerFile
from ..console import print_error
from ..errors import ObsStreamSetupError
from ..process_gate import ProcessGatePsutil, normalize_process_name

logger = getLogger(__name__)


class SubcommandListProcessArguments(BaseModel):
    config_file: Path


async def subcommand_list_process(args: SubcommandListProcessArguments) -> int:
    config_store_manager = ConfigStoreManagerFile(path=args.config_file)

    try:
        config = await config_store_manager.load_config()
    except ObsStreamSetupError as error:
        print_error(error)
        return 1

    process_names = list(config.obs.process_names)
    if config.game is not None and config.game.process_name is not None:
        process_names.append(config.game.process_name)

    process_gate = ProcessGatePsutil()
    running_processes = await process_gate.list_running(process_names=process_names)

    print(
        "pid".ljust(8),
        "running".ljust(8),
        "name",
    )
    for process_name in process_names:
        matched = [
            running_process
            for running_process in running_processes
            if normalize_process_name(running_process.name)
            == normalize_process_name(process_name)
        ]
        if len(matched) == 0:
            print(
                "-".ljust(8),
                "no".ljust(8),
                process_name,
            )
            continue

        for running_process in matched:
            print(
                f"{running_process.pid: <8}",
                "yes".ljust(8),
                running_process.name,
            )

    return 0


async def execute_subcommand_list_process(
    args: Namespace,
) -> int:
    return await subcommand_list_process(
        args=SubcommandListProcessArguments(
            config_file=args.config,
        ),
    )


async def add_arguments_subcommand_list_process(
    parser: ArgumentParser,
) -> None:
    parser.set_defaults(handler=execute_subcommand_list_process)
