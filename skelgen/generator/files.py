"""Filesystem access and the append-before-closing-brace protocol."""

from collections.abc import Callable
from pathlib import Path

from skelgen.lib.errors import FileNotExistsError
from skelgen.lib.logging import get_logger

logger = get_logger(__name__)

CLOSING_BRACE = "\n}"


def append_before_closing_brace(existing: str, code: str) -> str:
    """
    Insert ``code`` before the last closing brace on its own line.

    The text after that brace is discarded and a closing brace plus newline
    is re-appended. Text without such a brace gets the code appended at the
    end.
    """
    position = existing.rfind(CLOSING_BRACE)
    if position == -1:
        position = len(existing)
    return existing[:position] + code + CLOSING_BRACE + "\n"


class LocalFileSystem:
    """Read/write primitives over the local disk."""

    def read_file(self, path: str | Path) -> str:
        """
        Read a text file.

        Raises:
            FileNotExistsError: If the path is not a file
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotExistsError(str(file_path))
        return file_path.read_text(encoding="utf-8")

    def write_file(self, path: str | Path, text: str) -> None:
        Path(path).write_text(text, encoding="utf-8")

    def exists(self, path: str | Path) -> bool:
        return Path(path).exists()

    def make_dir(self, path: str | Path) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def save_methods(
        self,
        path: str | Path,
        methods: list[str],
        create: Callable[[str], str],
    ) -> bool:
        """
        Write method bodies into a class or trait file.

        A missing file is created from ``create(joined_methods)``; an
        existing one gets the methods appended before its closing brace.

        Args:
            path: Target file
            methods: Rendered method bodies, already filtered for duplicates
            create: Renders a complete file around the joined methods

        Returns:
            True when the file was created, False when it was appended to
        """
        joined = "\n\n".join(methods)
        if self.exists(path):
            existing = self.read_file(path)
            self.write_file(path, append_before_closing_brace(existing, "\n\n" + joined))
            logger.debug("file_appended", path=str(path), methods=len(methods))
            return False

        self.make_dir(Path(path).parent)
        self.write_file(path, create(joined))
        logger.debug("file_created", path=str(path), methods=len(methods))
        return True


__all__ = ["LocalFileSystem", "append_before_closing_brace", "CLOSING_BRACE"]
