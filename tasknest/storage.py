"""
TaskNest API - Storage Module

Flat JSON document storage. Each collection (users, tasks) is one JSON array
persisted as a single file and rewritten in full on every mutation.
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StorageError(Exception):
    """Raised when a persisted document cannot be read or written."""


class JsonDocument:
    """
    A JSON array persisted as one file.

    Read-modify-write cycles are serialized by a per-document lock so two
    concurrent writers never start from the same snapshot. Writes land in a
    temporary sibling file that atomically replaces the target, so readers
    only ever see a complete document.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def ensure_exists(self) -> None:
        """Create the document as an empty array if it is absent."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self._write(self.path, [])
                logger.info(f"[JsonDocument] Created empty document at {self.path}")
        except OSError as e:
            logger.error(f"[JsonDocument] Cannot initialise {self.path}: {e}", exc_info=True)
            raise StorageError(f"cannot initialise {self.path}") from e

    async def read_all(self) -> list[dict]:
        """Load the full array."""
        return await asyncio.to_thread(self._read)

    async def update(self, mutator: Callable[[list[dict]], T]) -> T:
        """
        Run one serialized read-modify-write cycle.

        ``mutator`` receives the freshly loaded array, changes it in place and
        returns a result. The array is persisted only if the mutator returns
        normally.
        """
        async with self._lock:
            documents = await asyncio.to_thread(self._read)
            result = mutator(documents)
            await self._persist(documents)
            return result

    async def _persist(self, documents: list[dict]) -> None:
        """
        Write the array from a worker thread while the caller holds the lock.

        A worker thread cannot be interrupted, so if the caller is cancelled
        the lock stays held until the thread is done. The cancelled update is
        then either fully on disk or not at all, and the next writer starts
        from whatever the thread left behind.
        """
        write = asyncio.ensure_future(asyncio.to_thread(self._write, self.path, documents))
        try:
            await asyncio.shield(write)
        except asyncio.CancelledError:
            while not write.done():
                try:
                    await asyncio.wait([write])
                except asyncio.CancelledError:
                    pass
            if write.exception() is None:
                logger.warning(f"[JsonDocument] Update of {self.path} was cancelled after it was written")
            raise

    def _read(self) -> list[dict]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error(f"[JsonDocument] Failed to read {self.path}: {e}", exc_info=True)
            raise StorageError(f"cannot read {self.path}") from e

        try:
            data: Any = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"[JsonDocument] Malformed JSON in {self.path}: {e}")
            raise StorageError(f"malformed document {self.path}") from e

        if not isinstance(data, list):
            logger.error(f"[JsonDocument] {self.path} does not hold a JSON array")
            raise StorageError(f"malformed document {self.path}")
        return data

    @staticmethod
    def _write(path: Path, documents: list[dict]) -> None:
        tmp_path = None
        try:
            payload = json.dumps(documents, ensure_ascii=False, indent=2)
            # Each write gets its own temporary file next to the target
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"[JsonDocument] Failed to write {path}: {e}", exc_info=True)
            try:
                if tmp_path is not None:
                    tmp_path.unlink(missing_ok=True)
            except OSError:
                logger.warning(f"[JsonDocument] Could not remove temporary file {tmp_path}")
            raise StorageError(f"cannot write {path}") from e


class Storage:
    """Process-wide holder for the persisted documents."""

    users: JsonDocument | None = None
    tasks: JsonDocument | None = None

    def connect(self, users_path: str | Path, tasks_path: str | Path) -> None:
        """Open both documents, creating them if needed."""
        self.users = JsonDocument(users_path)
        self.tasks = JsonDocument(tasks_path)
        self.users.ensure_exists()
        self.tasks.ensure_exists()

    def disconnect(self) -> None:
        self.users = None
        self.tasks = None

    def get_users(self) -> JsonDocument:
        if self.users is None:
            raise RuntimeError("Storage not connected. Call connect() first.")
        return self.users

    def get_tasks(self) -> JsonDocument:
        if self.tasks is None:
            raise RuntimeError("Storage not connected. Call connect() first.")
        return self.tasks


# Singleton storage instance
storage = Storage()


async def get_users_document() -> JsonDocument:
    """Dependency to get the users document."""
    return storage.get_users()


async def get_tasks_document() -> JsonDocument:
    """Dependency to get the tasks document."""
    return storage.get_tasks()
