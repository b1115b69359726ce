from abc import ABC, abstractmethod


class ConfirmationPrompt(ABC):
    @abstractmethod
    async def confirm(self, message: str) -> bool: ...
