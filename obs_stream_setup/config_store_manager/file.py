import json
import os
import tempfile
from logging import getLogger
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from ..config import AppConfig
from ..errors import PreconditionError, ValidationError
from .base import ConfigStoreManager

logger = getLogger(__name__)


class ConfigStoreManagerFile(ConfigStoreManager):
    def __init__(self, path: Path):
        self.path = path

    async def load_config(self) -> AppConfig:
        path = self.path

        if not path.exists():
            # 初回起動
            logger.info(f"config file not found, using defaults: {path}")
            return AppConfig()

        try:
            with path.open(mode="r", encoding="utf-8") as fp:
                config_dict = json.load(fp)
        except json.JSONDecodeError as error:
            raise ValidationError(
                f"config file is not valid JSON: line {error.lineno}, column {error.colno}",
                path=path,
            ) from error
        except UnicodeDecodeError as error:
            raise ValidationError("config file is not UTF-8 text", path=path) from error
        except OSError as error:
            raise PreconditionError(
                f"config file could not be read: {error.strerror}",
                path=path,
            ) from error

        try:
            return AppConfig.model_validate(config_dict)
        except PydanticValidationError as error:
            raise ValidationError(
                f"invalid config file: {error.error_count()} error(s)",
                path=path,
            ) from error

    async def save_config(self, config: AppConfig) -> None:
        path = self.path

        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            delete=False,
        ) as fp:
            config_dict = config.model_dump(mode="json")
            json.dump(config_dict, fp, indent=2, ensure_ascii=False)

        os.replace(fp.name, path)
