from .base import ConfirmationPrompt
from .console import ConfirmationPromptConsole
from .static import ConfirmationPromptStatic

__all__ = [
    "ConfirmationPrompt",
    "ConfirmationPromptConsole",
    "ConfirmationPromptStatic",
]
