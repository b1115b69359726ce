from .base import CredentialSource
from .chain import CredentialSourceChain
from .env import CredentialSourceEnv
from .file import CredentialSourceFile
from .prompt import CredentialSourcePrompt

__all__ = [
    "CredentialSource",
    "CredentialSourceChain",
    "CredentialSourceEnv",
    "CredentialSourceFile",
    "CredentialSourcePrompt",
]
