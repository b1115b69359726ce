from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..config_renderer import RenderedFile

CONFIG_FILE_ENCODING = "utf-8"


class WritePolicy(str, Enum):
    FORCE = "force"
    PROMPT_ON_CONFLICT = "prompt_on_conflict"
    FAIL_ON_CONFLICT = "fail_on_conflict"


@dataclass
class FailedWrite:
    path: Path
    reason: str


@dataclass
class MaterializeResult:
    succeeded: list[Path] = field(default_factory=list)
    failed: list[FailedWrite] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return len(self.failed) == 0


class ConfigWriter(ABC):
    @abstractmethod
    async def materialize(
        self,
        files: list[RenderedFile],
        policy: WritePolicy,
    ) -> MaterializeResult: ...
