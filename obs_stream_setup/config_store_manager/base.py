from abc import ABC, abstractmethod

from ..config import AppConfig


class ConfigStoreManager(ABC):
    @abstractmethod
    async def load_config(self) -> AppConfig: ...

    @abstractmethod
    async def save_config(self, config: AppConfig) -> None: ...
