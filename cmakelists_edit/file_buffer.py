"""
File buffers — byte storage the listfile model reads from and writes to.
"""

from __future__ import annotations

import logging
import os
import shutil

logger = logging.getLogger(__name__)


class FileBuffer:
    """In-memory content of a listfile.

    Subclasses decide where the bytes come from and where ``save()``
    puts them; the model only uses ``content()`` and ``set_content()``.
    """

    def __init__(self, content: bytes = b"") -> None:
        self._content = content
        self._dirty = False

    @property
    def file_name(self) -> str:
        return "<bytes>"

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def content(self) -> bytes:
        return self._content

    def set_content(self, content: bytes) -> None:
        self._content = content
        self._dirty = True

    def save(self) -> bool:
        self._dirty = False
        return True


class BytesFileBuffer(FileBuffer):
    """A buffer that only lives in memory; ``save()`` keeps the bytes."""


class StandardFileBuffer(FileBuffer):
    """A buffer backed by a file on disk."""

    def __init__(self, file_name: str = "") -> None:
        super().__init__()
        self._file_name = file_name

    @property
    def file_name(self) -> str:
        return self._file_name

    def set_file_name(self, file_name: str) -> None:
        self._file_name = file_name

    def load(self) -> bool:
        """Read the file into the buffer. Returns False on I/O errors."""
        self._dirty = False
        try:
            with open(self._file_name, "rb") as f:
                self._content = f.read()
        except OSError as exc:
            logger.error(
                "[FileBuffer] Could not open %s for reading: %s",
                self._file_name, exc,
            )
            return False
        return True

    def save(self) -> bool:
        """Write the buffer back atomically via temp file + rename."""
        abs_path = os.path.abspath(self._file_name)
        tmp_path = abs_path + ".cmakelists_edit_tmp"

        try:
            with open(tmp_path, "wb") as f:
                f.write(self._content)

            # On Windows, os.rename fails if destination exists
            if os.path.exists(abs_path):
                shutil.move(tmp_path, abs_path)
            else:
                os.rename(tmp_path, abs_path)
        except OSError as exc:
            logger.error(
                "[FileBuffer] Could not write %s: %s", self._file_name, exc,
            )
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            return False

        self._dirty = False
        return True
