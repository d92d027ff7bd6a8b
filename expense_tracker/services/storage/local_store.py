"""
Local Key-Value Store Implementations

JsonFileKeyValueStore keeps every slot in a single JSON object on disk:

    {"expenses": "[...]", "budget": "1000", "darkMode": "false"}

Each value is itself a serialized string, so the file mirrors what a
browser's local storage would hold. Writes go to a temporary file in the
same directory and are moved into place with os.replace, so a crash never
leaves a half-written document behind.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog

from expense_tracker.services.storage.interface import (
    KeyValueStoreInterface,
    StorageReadError,
    StorageWriteError,
)


logger = structlog.get_logger(__name__)


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    File-backed store.

    The whole document is re-read on every get and re-written on every
    set. The data is small (one person's expenses) and this keeps the
    file the single source of truth.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    def _read_document(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageReadError(f"Cannot read {self._path}: {e}") from e
        if not raw.strip():
            return {}
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageReadError(f"Corrupt storage file {self._path}: {e}") from e
        if not isinstance(document, dict):
            raise StorageReadError(
                f"Storage file {self._path} must hold a JSON object, "
                f"got {type(document).__name__}"
            )
        return {str(k): v if isinstance(v, str) else json.dumps(v) for k, v in document.items()}

    def _write_document(self, document: dict[str, str]) -> None:
        directory = self._path.parent if str(self._path.parent) else Path(".")
        temp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                prefix=self._path.name + "-",
                suffix=".tmp",
                dir=directory,
                delete=False,
            ) as tf:
                temp_name = tf.name
                json.dump(document, tf, indent=2)
                tf.flush()
                os.fsync(tf.fileno())
            os.replace(temp_name, self._path)
        except OSError as e:
            if temp_name and os.path.exists(temp_name):
                try:
                    os.unlink(temp_name)
                except OSError:
                    logger.warning("temp_file_cleanup_failed", temp_file=temp_name)
            raise StorageWriteError(f"Cannot write {self._path}: {e}") from e

        logger.debug("storage_written", path=str(self._path), keys=len(document))

    def get_item(self, key: str) -> Optional[str]:
        return self._read_document().get(key)

    def set_item(self, key: str, value: str) -> None:
        try:
            document = self._read_document()
        except StorageReadError:
            # A corrupt document is replaced rather than blocking every write.
            logger.warning("storage_document_reset", path=str(self._path))
            document = {}
        document[key] = value
        self._write_document(document)

    def remove_item(self, key: str) -> None:
        document = self._read_document()
        if key in document:
            del document[key]
            self._write_document(document)

    def keys(self) -> list[str]:
        return list(self._read_document())
