from rich.console import Console
from rich.prompt import Prompt

from .base import CredentialSource


class CredentialSourcePrompt(CredentialSource):
    """
    入力を表示せずに端末から読む。
    """

    def __init__(self, label: str | None = None, console: Console | None = None):
        self.label = label
        self.console = console

    async def get_secret(self, key: str) -> str | None:
        label = self.label if self.label is not None else key
        secret = Prompt.ask(
            label,
            console=self.console,
            password=True,
            default="",
            show_default=False,
        )
        if len(secret.strip()) == 0:
            return None

        return secret.strip()
