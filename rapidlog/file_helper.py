"""Opening, writing and sizing of log files."""

from __future__ import annotations

import io
import os
import time
from typing import BinaryIO

from rapidlog.common import SpdlogError

OPEN_TRIES = 5
OPEN_INTERVAL = 0.01


class FileHelper:
    """Owns one log file opened for binary writing."""

    def __init__(self) -> None:
        self._file: BinaryIO | None = None
        self._filename = ""

    def __enter__(self) -> FileHelper:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def open(self, filename: str | os.PathLike[str], truncate: bool = False) -> None:
        """Open ``filename`` for writing, retrying a few times before giving up."""
        self.close()
        self._filename = os.fspath(filename)
        mode = "wb" if truncate else "ab"
        last_errno = None
        for _ in range(OPEN_TRIES):
            try:
                self._file = io.open(self._filename, mode)
                return
            except OSError as ex:
                last_errno = ex.errno
            time.sleep(OPEN_INTERVAL)
        raise SpdlogError(f"Failed opening file {self._filename} for writing", last_errno)

    def reopen(self, truncate: bool) -> None:
        """Open the previously opened file again."""
        if not self._filename:
            raise SpdlogError("Failed re opening file - was not opened before")
        self.open(self._filename, truncate)

    def flush(self) -> None:
        if self._file is not None:
            self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def write(self, data: str | bytes) -> None:
        """Append text (encoded as UTF-8) or raw bytes to the file."""
        raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        if self._file is None:
            raise SpdlogError(f"Failed writing to file {self._filename}")
        try:
            self._file.write(raw)
        except OSError as ex:
            raise SpdlogError(f"Failed writing to file {self._filename}", ex.errno) from ex

    def size(self) -> int:
        """Current size of the open file in bytes."""
        if self._file is None:
            raise SpdlogError(f"Cannot use size() on closed file {self._filename}")
        self._file.flush()
        return os.fstat(self._file.fileno()).st_size

    def filename(self) -> str:
        return self._filename

    @staticmethod
    def file_exists(filename: str | os.PathLike[str]) -> bool:
        return os.path.exists(filename)

    @staticmethod
    def split_by_extension(filename: str) -> tuple[str, str]:
        """Split a path into its base and extension.

        A leading dot of a hidden file does not start an extension, and a
        trailing dot yields an empty extension.
        """
        ext_index = filename.rfind(".")
        if ext_index <= 0 or ext_index == len(filename) - 1:
            return filename, ""
        folder_index = max(filename.rfind("/"), filename.rfind(os.sep))
        if folder_index != -1 and folder_index >= ext_index - 1:
            return filename, ""
        return filename[:ext_index], filename[ext_index:]