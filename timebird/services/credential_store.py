"""Settings store - durable key-value persistence for credentials."""
import asyncio
import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from timebird.exceptions import CredentialStoreError

logger = logging.getLogger(__name__)

API_TOKEN_KEY = "apiToken"
ADMINISTRATION_ID_KEY = "administrationId"
USER_ID_KEY = "userId"


class SettingsStore:
    """
    JSON file backed key-value store.

    The file is read on first access. Values written with set() live in
    memory until save() writes the whole store to disk. save() replaces the
    file atomically, so a crash leaves either the previous or the new
    contents. A failed save discards the unsaved values, so memory matches
    the file again.
    """

    def __init__(self, path: Path):
        """Initialize store for a settings file path."""
        self.path = Path(path)
        self._values: Optional[dict[str, Any]] = None
        self._saved: dict[str, Any] = {}

    async def load(self) -> dict[str, Any]:
        """
        Read the settings file unless already loaded.

        A missing file yields an empty store.

        Raises:
            CredentialStoreError: If the file exists but cannot be read
        """
        if self._values is None:
            self._values = await asyncio.to_thread(self._read, self.path)
            self._saved = dict(self._values)
            logger.debug("Loaded %d settings from %s", len(self._values), self.path)
        return self._values

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise CredentialStoreError(f"Could not read settings from {path}") from e

        if not isinstance(data, dict):
            raise CredentialStoreError(f"Settings file {path} does not hold an object")

        return data

    async def get(self, key: str) -> Optional[Any]:
        """Get a value, or None if the key is absent."""
        values = await self.load()
        return values.get(key)

    async def set(self, key: str, value: Any) -> None:
        """Set a value in memory. Call save() to persist it."""
        values = await self.load()
        values[key] = value

    async def save(self) -> None:
        """
        Persist every value set since the last save.

        Raises:
            CredentialStoreError: If the file cannot be written. Values set
                since the last successful save are dropped.
        """
        values = dict(await self.load())
        try:
            await asyncio.to_thread(self._write, values)
        except CredentialStoreError:
            self._values = dict(self._saved)
            raise
        self._saved = values

    def _write(self, values: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(values, f, indent=2)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_path, self.path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise CredentialStoreError(f"Could not save settings to {self.path}") from e
