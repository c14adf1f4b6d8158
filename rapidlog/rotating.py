"""File sink that rotates its file once it grows past a size limit."""

from __future__ import annotations

import os
import time

from rapidlog.common import LogMessage, SpdlogError
from rapidlog.file_helper import FileHelper
from rapidlog.sinks import Sink

_RENAME_RETRY_DELAY = 0.1


class RotatingFileSink(Sink):
    """Writes to a file and rotates it when it would exceed ``max_size`` bytes.

    Rotation shifts ``log.txt`` to ``log.1.txt``, ``log.1.txt`` to
    ``log.2.txt`` and so on, keeping at most ``max_files`` old files.
    """

    def __init__(
        self,
        base_filename: str | os.PathLike[str],
        max_size: int,
        max_files: int,
        rotate_on_open: bool = False,
    ) -> None:
        super().__init__()
        self._base_filename = os.fspath(base_filename)
        self._max_size = max_size
        self._max_files = max_files
        self._file_helper = FileHelper()
        self._file_helper.open(self.calc_filename(self._base_filename, 0))
        self._current_size = self._file_helper.size()
        if rotate_on_open and self._current_size > 0:
            self._rotate()

    @staticmethod
    def calc_filename(filename: str, index: int) -> str:
        """Name of the file with the given rotation index.

        ``calc_filename("logs/mylog.txt", 3)`` gives ``"logs/mylog.3.txt"``;
        index 0 gives the name unchanged.
        """
        if index == 0:
            return filename
        basename, ext = FileHelper.split_by_extension(filename)
        return f"{basename}.{index}{ext}"

    def filename(self) -> str:
        return self._file_helper.filename()

    def _sink_it(self, msg: LogMessage) -> None:
        data = self._formatter.format(msg).text.encode("utf-8")
        self._current_size += len(data)
        if self._current_size > self._max_size:
            self._rotate()
            self._current_size = len(data)
        self._file_helper.write(data)

    def _flush(self) -> None:
        self._file_helper.flush()

    def _rotate(self) -> None:
        self._file_helper.close()
        for index in range(self._max_files, 0, -1):
            src = self.calc_filename(self._base_filename, index - 1)
            if not FileHelper.file_exists(src):
                continue
            target = self.calc_filename(self._base_filename, index)
            if self._try_rename(src, target) is None:
                continue
            # A quick retry helps where a scanner briefly holds the file.
            time.sleep(_RENAME_RETRY_DELAY)
            error = self._try_rename(src, target)
            if error is not None:
                # Truncate anyway so the file cannot grow past its limit.
                self._file_helper.reopen(True)
                self._current_size = 0
                raise SpdlogError(
                    f"rotating_file_sink: failed renaming {src} to {target}", error.errno
                ) from error
        self._file_helper.reopen(True)

    @staticmethod
    def _try_rename(src: str, target: str) -> OSError | None:
        try:
            os.remove(target)
        except OSError:
            pass
        try:
            os.rename(src, target)
        except OSError as ex:
            return ex
        return None

    @staticmethod
    def rename_file(src: str, target: str) -> bool:
        """Delete ``target`` if it exists and rename ``src`` to it."""
        return RotatingFileSink._try_rename(src, target) is None