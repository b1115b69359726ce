from logging import getLogger

from .base import CredentialSource

logger = getLogger(__name__)


class CredentialSourceChain(CredentialSource):
    def __init__(self, credential_sources: list[CredentialSource]):
        self.credential_sources = credential_sources

    async def get_secret(self, key: str) -> str | None:
        for credential_source in self.credential_sources:
            secret = await credential_source.get_secret(key)
            if secret is not None and len(secret) > 0:
                logger.info(
                    f"get_secret: {key} supplied by {type(credential_source).__name__}"
                )
                return secret

        logger.info(f"get_secret: {key} not supplied")
        return None
