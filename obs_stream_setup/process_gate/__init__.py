from ._psutil import ProcessGatePsutil
from .base import ProcessGate, RunningProcess, normalize_process_name

__all__ = [
    "ProcessGate",
    "ProcessGatePsutil",
    "RunningProcess",
    "normalize_process_name",
]
