import subprocess
import sys
import webbrowser
from logging import getLogger
from pathlib import Path

from ..errors import LaunchError
from .base import ProcessLauncher

logger = getLogger(__name__)


class ProcessLauncherSubprocess(ProcessLauncher):
    async def start_process(
        self,
        path: str,
        args: list[str],
        working_directory: str,
    ) -> None:
        popen_kwargs: dict = {}
        if sys.platform == "win32":
            popen_kwargs["creationflags"] = (
                subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP
            )
        else:
            popen_kwargs["start_new_session"] = True

        try:
            process = subprocess.Popen(
                [path, *args],
                cwd=working_directory,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                **popen_kwargs,
            )
        except OSError as error:
            raise LaunchError(
                f"failed to start {path}: {error}",
                path=Path(path),
            ) from error

        logger.info(f"started {path} (pid={process.pid})")

    async def launch_uri(self, uri: str) -> None:
        logger.info(f"opening {uri}")

        if not webbrowser.open(uri):
            raise LaunchError(f"no handler accepted {uri}")
