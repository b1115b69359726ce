import json
from logging import getLogger
from pathlib import Path

from ..errors import PreconditionError, ValidationError
from .base import CredentialSource

logger = getLogger(__name__)


class CredentialSourceFile(CredentialSource):
    """
    {"stream_key": "..."} のような JSON オブジェクトのファイルから読む。
    """

    def __init__(self, path: Path):
        self.path = path

    async def get_secret(self, key: str) -> str | None:
        path = self.path

        if not path.exists():
            logger.info(f"credential file not found: {path}")
            return None

        # エラーメッセージにファイルの中身 (秘密の値) を含めない
        try:
            with path.open(mode="r", encoding="utf-8") as fp:
                secrets = json.load(fp)
        except json.JSONDecodeError as error:
            raise ValidationError(
                f"credential file is not valid JSON: line {error.lineno}, column {error.colno}",
                path=path,
            ) from None
        except UnicodeDecodeError:
            raise ValidationError("credential file is not UTF-8 text", path=path) from None
        except OSError as error:
            raise PreconditionError(
                f"credential file could not be read: {error.strerror}",
                path=path,
            ) from error

        if not isinstance(secrets, dict):
            logger.warning(f"credential file is not a JSON object: {path}")
            return None

        secret = secrets.get(key)
        if not isinstance(secret, str) or len(secret.strip()) == 0:
            return None

        return secret.strip()
