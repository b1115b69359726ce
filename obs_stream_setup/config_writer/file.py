import os
import tempfile
from logging import getLogger
from pathlib import Path

from ..config_renderer import RenderedFile
from ..confirmation_prompt import ConfirmationPrompt
from ..errors import ConflictError
from .base import (
    CONFIG_FILE_ENCODING,
    ConfigWriter,
    FailedWrite,
    MaterializeResult,
    WritePolicy,
)

logger = getLogger(__name__)


class ConfigWriterFile(ConfigWriter):
    """
    settings_root 以下に設定ファイルを書き出す。

    衝突の判定はすべての書き込みより前に行うため、ConflictError のときは 1 ファイルも書き込まない。
    書き込み途中の失敗はロールバックしない (書き込み済みのファイルはそのまま残る)。
    """

    def __init__(
        self,
        settings_root: Path,
        confirmation_prompt: ConfirmationPrompt | None = None,
    ):
        self.settings_root = settings_root
        self.confirmation_prompt = confirmation_prompt

    def resolve_path(self, rendered_file: RenderedFile) -> Path:
        return self.settings_root.joinpath(*rendered_file.relative_path.parts)

    async def materialize(
        self,
        files: list[RenderedFile],
        policy: WritePolicy,
    ) -> MaterializeResult:
        confirmation_prompt = self.confirmation_prompt

        conflicting_paths = [
            self.resolve_path(rendered_file)
            for rendered_file in files
            if self.resolve_path(rendered_file).exists()
        ]

        if len(conflicting_paths) > 0:
            logger.info(
                f"materialize: {len(conflicting_paths)} existing file(s), "
                f"policy={policy.value}"
            )

            if policy == WritePolicy.FAIL_ON_CONFLICT:
                raise ConflictError(
                    f"{len(conflicting_paths)} file(s) already exist: "
                    + ", ".join(str(path) for path in conflicting_paths),
                    paths=conflicting_paths,
                )

            if policy == WritePolicy.PROMPT_ON_CONFLICT:
                if confirmation_prompt is None:
                    raise ConflictError(
                        "existing files found and no confirmation prompt is available",
                        paths=conflicting_paths,
                    )

                message = "Overwrite existing files?\n" + "\n".join(
                    f"  {path}" for path in conflicting_paths
                )
                if not await confirmation_prompt.confirm(message):
                    raise ConflictError(
                        "overwrite declined",
                        paths=conflicting_paths,
                    )

        result = MaterializeResult()
        for rendered_file in files:
            path = self.resolve_path(rendered_file)

            try:
                self.__write_text(path=path, content=rendered_file.content)
            except OSError as error:
                logger.error(f"materialize: failed to write {path}: {error}")
                result.failed.append(FailedWrite(path=path, reason=str(error)))
                continue

            logger.info(f"materialize: wrote {path}")
            result.succeeded.append(path)

        return result

    def __write_text(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)

        tmp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding=CONFIG_FILE_ENCODING,
                newline="\n",
                dir=path.parent,
                prefix=f".{path.name}.",
                delete=False,
            ) as fp:
                tmp_path = Path(fp.name)
                fp.write(content)
                fp.flush()
                os.fsync(fp.fileno())

            os.replace(tmp_path, path)
            tmp_path = None
        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
