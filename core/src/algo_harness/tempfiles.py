from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger("algo_harness.tempfiles")


class TempFileGenerator:
    """
    Temp-file facility handed to algorithms that spill to disk.

    With cleanup enabled, close() removes every file handed out and, if the generator
    created its own directory, the directory as well.
    """

    def __init__(self, directory: str | Path | None = None, *, cleanup: bool = True) -> None:
        self._requested_dir = Path(directory) if directory is not None else None
        self._directory: Path | None = None
        self._owns_directory = False
        self.cleanup = cleanup
        self._files: list[Path] = []
        self._closed = False

    @property
    def directory(self) -> Path:
        if self._directory is None:
            if self._requested_dir is None:
                self._directory = Path(tempfile.mkdtemp(prefix="algo-harness-"))
                self._owns_directory = True
            else:
                self._requested_dir.mkdir(parents=True, exist_ok=True)
                self._directory = self._requested_dir
        return self._directory

    @property
    def files(self) -> list[Path]:
        return list(self._files)

    def get_temp_file(self) -> Path:
        if self._closed:
            raise RuntimeError("TempFileGenerator is closed.")
        handle, name = tempfile.mkstemp(dir=self.directory, prefix="tmp-", suffix=".dat")
        # Only the path is handed out; callers open it themselves.
        os.close(handle)
        path = Path(name)
        self._files.append(path)
        return path

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if not self.cleanup:
            return
        for path in self._files:
            path.unlink(missing_ok=True)
        if self._owns_directory and self._directory is not None:
            shutil.rmtree(self._directory, ignore_errors=True)
        logger.debug("Removed %d temp file(s)", len(self._files))

    def __enter__(self) -> TempFileGenerator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
