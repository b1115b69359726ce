import inspect
import logging
from argparse import ArgumentParser
from logging import getLogger
from pathlib import Path

from . import __version__ as APP_VERSION
from .settings_root import default_config_file_path
from .subcommand.init_config import add_arguments_subcommand_init_config
from .subcommand.list_process import add_arguments_subcommand_list_process
from .subcommand.setup import add_arguments_subcommand_setup
from .subcommand.start import add_arguments_subcommand_start

logger = getLogger(__name__)


async def main(argv: list[str] | None = None) -> int:
    parser = ArgumentParser(
        prog="ObsStreamSetup",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=default_config_file_path(),
        help="このツールの設定ファイル (config.json)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
    )

    subparsers = parser.add_subparsers()

    subparser_setup = subparsers.add_parser("setup")
    await add_arguments_subcommand_setup(parser=subparser_setup)

    subparser_start = subparsers.add_parser("start")
    await add_arguments_subcommand_start(parser=subparser_start)

    subparser_list_process = subparsers.add_parser("list_process")
    await add_arguments_subcommand_list_process(parser=subparser_list_process)

    subparser_init_config = subparsers.add_parser("init_config")
    await add_arguments_subcommand_init_config(parser=subparser_init_config)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s : %(message)s",
    )

    if hasattr(args, "handler"):
        handler = args.handler
        assert callable(args.handler)

        if inspect.iscoroutinefunction(handler):
            exit_code = await handler(args)
        else:
            exit_code = handler(args)

        logger.debug(f"exit code: {exit_code}")
        return exit_code
    else:
        parser.print_help()
        return 0
