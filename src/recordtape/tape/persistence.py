# src/recordtape/tape/persistence.py
"""Filesystem storage for a tape's JSONL content.

The file is always read and written whole. save() after load() therefore
rewrites everything the in-memory log holds; it never appends bytes to the
previous file content. Two processes saving the same path race and the last
writer wins.

Async variants move only the blocking I/O onto a worker thread via
asyncio.to_thread; they raise the same errors as the sync variants.
"""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from recordtape.contracts.errors import (
    MissingFolderError,
    MissingLogsFolderError,
    MissingParentDirectoryError,
    TapeReadError,
)
from recordtape.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_EXTENSION = ".log"


class TapeFile:
    """The on-disk location of a tape.

    Structure: `<base_path><extension>`, e.g. fixtures/checkout.log

    The parent directory must already exist; it is never created here.
    """

    def __init__(
        self,
        base_path: str | os.PathLike[str],
        *,
        extension: str = DEFAULT_EXTENSION,
        encoding: str = "utf-8",
    ) -> None:
        """Initialize tape file location.

        Args:
            base_path: Path without the extension
            extension: Suffix appended to base_path (default ".log")
            encoding: Text encoding used to read and write
        """
        self.path = Path(f"{os.fspath(base_path)}{extension}")
        self._encoding = encoding

    def _require_parent(self, error_cls: type[MissingParentDirectoryError]) -> None:
        if not self.path.parent.is_dir():
            raise error_cls(self.path)

    def read(self) -> str | None:
        """Read the whole file.

        Returns:
            File content, or None when the file does not exist yet

        Raises:
            MissingLogsFolderError: If the parent directory is missing
            TapeReadError: If the file exists but cannot be read
        """
        self._require_parent(MissingLogsFolderError)
        try:
            with self.path.open("r", encoding=self._encoding, newline="") as handle:
                content = handle.read()
        except FileNotFoundError:
            logger.debug("tape_file_absent", path=str(self.path))
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise TapeReadError(self.path, str(exc)) from exc
        return content

    def write(self, content: str) -> None:
        """Overwrite the file with content.

        Raises:
            MissingFolderError: If the parent directory is missing
        """
        self._require_parent(MissingFolderError)
        with self.path.open("w", encoding=self._encoding, newline="") as handle:
            handle.write(content)

    async def aread(self) -> str | None:
        """Async variant of read()."""
        return await asyncio.to_thread(self.read)

    async def awrite(self, content: str) -> None:
        """Async variant of write()."""
        await asyncio.to_thread(self.write, content)
