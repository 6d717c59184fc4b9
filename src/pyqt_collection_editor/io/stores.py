"""
Durable key-value media for persisted collections.

All media store one JSON string per key. Write failures are wrapped as
StorageWriteError so callers see a single error type per failed attempt.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Union

from PyQt6.QtCore import QSettings

from pyqt_collection_editor.io.exceptions import StorageQuotaExceeded, StorageWriteError

logger = logging.getLogger(__name__)


class MemoryStore:
    """
    In-process medium.

    Args:
        quota_bytes: Optional total size limit across all values (UTF-8 bytes),
            mirroring the per-origin quota of browser storage
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        self._data: Dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self._quota_bytes is not None:
            used = sum(len(v.encode("utf-8")) for k, v in self._data.items() if k != key)
            needed = len(value.encode("utf-8"))
            if used + needed > self._quota_bytes:
                raise StorageQuotaExceeded(
                    f"Writing {needed} bytes to {key!r} exceeds quota of {self._quota_bytes} bytes"
                )
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self):
        return list(self._data)


class JsonFileStore:
    """
    One ``<key>.json`` file per key inside a directory.

    Writes go to a temporary file in the same directory and are moved into
    place with ``os.replace`` so a crash never leaves a half-written document.
    """

    SUFFIX = ".json"

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        safe = "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in key)
        return self._directory / f"{safe}{self.SUFFIX}"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{path.stem}-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            raise StorageWriteError(f"Could not write {path}: {e}") from e

    def remove(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)


class QSettingsStore:
    """Medium backed by Qt's native settings storage."""

    def __init__(self, settings: QSettings):
        self._settings = settings

    @classmethod
    def for_application(cls, organization: str, application: str) -> "QSettingsStore":
        return cls(QSettings(organization, application))

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "QSettingsStore":
        """INI-format settings file at an explicit path."""
        return cls(QSettings(str(path), QSettings.Format.IniFormat))

    def get(self, key: str) -> Optional[str]:
        if not self._settings.contains(key):
            return None
        return self._settings.value(key, type=str)

    def set(self, key: str, value: str) -> None:
        self._settings.setValue(key, value)
        self._settings.sync()
        if self._settings.status() != QSettings.Status.NoError:
            raise StorageWriteError(
                f"QSettings write for {key!r} failed with status {self._settings.status().name}"
            )

    def remove(self, key: str) -> None:
        self._settings.remove(key)
        self._settings.sync()
