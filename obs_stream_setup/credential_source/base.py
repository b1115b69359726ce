from abc import ABC, abstractmethod


class CredentialSource(ABC):
    @abstractmethod
    async def get_secret(self, key: str) -> str | None:
        """
        見つからないときは None を返す。空文字列も None として扱う。
        """
        ...
