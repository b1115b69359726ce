from argparse import ArgumentParser, Namespace
from logging import getLogger
from pathlib import Path

from pydantic import BaseModel

from ..config import AppConfig
from ..config_store_manager import ConfigStoreManagerFile
from ..console import print_fatal, print_info

logger = getLogger(__name__)


class SubcommandInitConfigArguments(BaseModel):
    config_file: Path
    force: bool


async def subcommand_init_config(args: SubcommandInitConfigArguments) -> int:
    config_file = args.config_file

    if config_file.exists() and not args.force:
        print_fatal(f"config file already exists: {config_file} (use --force)")
        return 1

    config_store_manager = ConfigStoreManagerFile(path=config_file)
    await config_store_manager.save_config(AppConfig())

    print_info(f"wrote default config to {config_file}")
    return 0


async def execute_subcommand_init_config(
    args: Namespace,
) -> int:
    return await subcommand_init_config(
        args=SubcommandInitConfigArguments(
            config_file=args.config,
            force=args.force,
        ),
    )


async def add_arguments_subcommand_init_config(
    parser: ArgumentParser,
) -> None:
    parser.add_argument("--force", action="store_true")
    parser.set_defaults(handler=execute_subcommand_init_config)
