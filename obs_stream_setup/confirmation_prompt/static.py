from .base import ConfirmationPrompt


class ConfirmationPromptStatic(ConfirmationPrompt):
    """
    対話できない環境 (--no-prompt) 向け。常に同じ回答を返す。
    """

    def __init__(self, answer: bool):
        self.answer = answer
        self.messages: list[str] = []

    async def confirm(self, message: str) -> bool:
        self.messages.append(message)
        return self.answer
