from logging import getLogger

from rich.console import Console
from rich.prompt import Confirm

from .base import ConfirmationPrompt

logger = getLogger(__name__)


class ConfirmationPromptConsole(ConfirmationPrompt):
    def __init__(self, console: Console | None = None):
        self.console = console

    async def confirm(self, message: str) -> bool:
        answer = Confirm.ask(message, console=self.console, default=False)
        logger.info(f"confirm: answer={answer}")

        return answer
