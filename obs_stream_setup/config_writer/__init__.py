from .base import (
    CONFIG_FILE_ENCODING,
    ConfigWriter,
    FailedWrite,
    MaterializeResult,
    WritePolicy,
)
from .file import ConfigWriterFile

__all__ = [
    "CONFIG_FILE_ENCODING",
    "ConfigWriter",
    "ConfigWriterFile",
    "FailedWrite",
    "MaterializeResult",
    "WritePolicy",
]
