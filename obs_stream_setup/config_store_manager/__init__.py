from ..config import AppConfig
from .base import ConfigStoreManager
from .file import ConfigStoreManagerFile

__all__ = [
    "AppConfig",
    "ConfigStoreManager",
    "ConfigStoreManagerFile",
]
