from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class RunningProcess:
    pid: int
    name: str


def normalize_process_name(name: str) -> str:
    """
    大文字小文字と末尾の .exe を無視して比較するための正規化。
    "obs64.exe" と "OBS64" は同じプロセス名として扱う。
    """
    normalized_name = name.strip().lower()
    if normalized_name.endswith(".exe"):
        normalized_name = normalized_name[: -len(".exe")]

    return normalized_name


class ProcessGate(ABC):
    @abstractmethod
    async def list_running(self, process_names: list[str]) -> list[RunningProcess]: ...

    async def is_running(self, process_name: str | list[str]) -> bool:
        if isinstance(process_name, str):
            process_names = [process_name]
        else:
            process_names = list(process_name)

        running_processes = await self.list_running(process_names=process_names)
        return len(running_processes) > 0
