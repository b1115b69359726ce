import os

from .base import CredentialSource


class CredentialSourceEnv(CredentialSource):
    def __init__(self, prefix: str = "OBS_STREAM_SETUP_"):
        self.prefix = prefix

    def variable_name(self, key: str) -> str:
        return f"{self.prefix}{key.upper()}"

    async def get_secret(self, key: str) -> str | None:
        secret = os.environ.get(self.variable_name(key))
        if secret is None or len(secret.strip()) == 0:
            return None

        return secret.strip()
