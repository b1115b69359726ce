import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import Annotated, Awaitable, Callable

from pydantic import BaseModel, Field

from ..errors import LaunchError, NotFoundError

logger = getLogger(__name__)


class ProcessDescriptor(BaseModel):
    display_name: str
    executable_path: str | list[str]
    launch_args: list[str] = []
    settle_delay_seconds: Annotated[int, Field(ge=0)] = 0
    process_name: str | list[str] | None = None
    """
    ProcessGate で起動済みか確認するときのプロセス名 (例: obs64.exe)。
    複数指定したときはどれか一つでも動いていれば起動済みとみなす。
    None のときは解決した実行ファイル名を使う。
    """
    working_directory: str | None = None
    """
    None のときは実行ファイルのあるディレクトリで起動する。
    OBS は作業ディレクトリが bin/64bit でないとロケールファイルを見つけられない。
    """
    fallback_uri: str | None = None
    """
    候補パスがどれも存在しないときに OS に渡す URI (例: steam://rungameid/570)。
    """

    @property
    def candidates(self) -> list[str]:
        if isinstance(self.executable_path, str):
            return [self.executable_path]

        return list(self.executable_path)

    @property
    def process_names(self) -> list[str]:
        if self.process_name is None:
            return []
        if isinstance(self.process_name, str):
            return [self.process_name]

        return list(self.process_name)


@dataclass
class LaunchResult:
    started: bool
    resolved_path: str | None = None
    error: NotFoundError | LaunchError | None = None


def resolve_executable(
    candidates: list[str],
    exists: Callable[[Path], bool] = Path.is_file,
) -> str:
    for candidate in candidates:
        if exists(Path(candidate)):
            return candidate

    raise NotFoundError(
        "executable not found in any candidate path: "
        + (", ".join(candidates) if len(candidates) > 0 else "(no candidates)"),
        candidates=list(candidates),
    )


class ProcessLauncher(ABC):
    def __init__(self, exists: Callable[[Path], bool] = Path.is_file):
        self.exists = exists

    @abstractmethod
    async def start_process(
        self,
        path: str,
        args: list[str],
        working_directory: str,
    ) -> None: ...

    @abstractmethod
    async def launch_uri(self, uri: str) -> None: ...

    async def launch(self, descriptor: ProcessDescriptor) -> LaunchResult:
        try:
            resolved_path = resolve_executable(
                candidates=descriptor.candidates,
                exists=self.exists,
            )
        except NotFoundError as error:
            logger.warning(f"{descriptor.display_name}: {error.message}")
            return LaunchResult(started=False, error=error)

        working_directory = descriptor.working_directory
        if working_directory is None:
            working_directory = str(Path(resolved_path).parent)

        logger.info(
            f"launching {descriptor.display_name}: path={resolved_path}, "
            f"args={descriptor.launch_args}, cwd={working_directory}"
        )

        try:
            await self.start_process(
                path=resolved_path,
                args=descriptor.launch_args,
                working_directory=working_directory,
            )
        except LaunchError as error:
            logger.error(f"{descriptor.display_name}: {error.message}")
            return LaunchResult(started=False, resolved_path=resolved_path, error=error)

        return LaunchResult(started=True, resolved_path=resolved_path)


async def wait_settle(
    descriptor: ProcessDescriptor,
    result: LaunchResult,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> None:
    """
    起動直後に固定時間だけ待つ。プロセスの準備完了は確認しない。
    """
    if not result.started or descriptor.settle_delay_seconds <= 0:
        return

    logger.info(
        f"waiting {descriptor.settle_delay_seconds}s for "
        f"{descriptor.display_name} to settle"
    )
    await sleep(descriptor.settle_delay_seconds)
