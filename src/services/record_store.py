"""Key-value persistence backends for the complaint box collections.

Each logical collection (complaints, accounts, current session) lives under
one key and is always read and written whole.  Values are JSON-compatible
Python objects, serialised with *orjson*.

Backends:

* :class:`InMemoryRecordStore` -- process-local, used by tests.
* :class:`JsonFileRecordStore` -- one ``<key>.json`` file per collection.
* :class:`RedisRecordStore` -- one Redis string per collection.
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final, Protocol, runtime_checkable

import orjson
import structlog

from config.settings import StorageBackend
from src.core.exceptions import StorageError

if TYPE_CHECKING:
    from config.settings import Settings

logger = structlog.get_logger(__name__)

COMPLAINTS_KEY: Final[str] = "college_complaints"
USERS_KEY: Final[str] = "college_users"
CURRENT_USER_KEY: Final[str] = "current_user"


def _decode(raw: bytes, key: str) -> Any:
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise StorageError(f"Stored value for '{key}' is not valid JSON.", {"key": key}) from exc


# ---------------------------------------------------------------------------
# Record store protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class RecordStore(Protocol):
    """Async whole-value get/set interface over named collections."""

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def delete(self, key: str) -> None: ...


# ---------------------------------------------------------------------------
# In-memory backend
# ---------------------------------------------------------------------------


class InMemoryRecordStore:
    """Dict-backed store holding serialised bytes.

    Values are round-tripped through orjson so callers never share mutable
    state with the store.
    """

    __slots__ = ("_data", "_lock")

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Any | None:
        async with self._lock:
            raw = self._data.get(key)
        if raw is None:
            return None
        return _decode(raw, key)

    async def set(self, key: str, value: Any) -> None:
        raw = orjson.dumps(value)
        async with self._lock:
            self._data[key] = raw

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._data.pop(key, None)


# ---------------------------------------------------------------------------
# JSON file backend
# ---------------------------------------------------------------------------


class JsonFileRecordStore:
    """Stores each key as ``<directory>/<key>.json``.

    Writes go to a temporary file in the same directory and are moved into
    place with :func:`os.replace`, so readers see either the old or the new
    collection, never a partial one.
    """

    __slots__ = ("_directory", "_lock")

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)
        self._lock = asyncio.Lock()

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, key: str) -> Path:
        return self._directory / f"{key}.json"

    async def get(self, key: str) -> Any | None:
        path = self._path(key)
        async with self._lock:
            if not path.exists():
                return None
            try:
                raw = path.read_bytes()
            except OSError as exc:
                logger.error("record_store.file_read_failed", path=str(path), error=str(exc))
                raise StorageError(f"Could not read '{path}'.", {"key": key}) from exc
        return _decode(raw, key)

    async def set(self, key: str, value: Any) -> None:
        raw = orjson.dumps(value, option=orjson.OPT_INDENT_2)
        path = self._path(key)
        async with self._lock:
            try:
                self._directory.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{key}.", suffix=".tmp")
                try:
                    with os.fdopen(fd, "wb") as f:
                        f.write(raw)
                    os.replace(tmp_name, path)
                except BaseException:
                    with contextlib.suppress(OSError):
                        os.unlink(tmp_name)
                    raise
            except OSError as exc:
                logger.error("record_store.file_write_failed", path=str(path), error=str(exc))
                raise StorageError(f"Could not write '{path}'.", {"key": key}) from exc

    async def delete(self, key: str) -> None:
        async with self._lock:
            with contextlib.suppress(FileNotFoundError):
                self._path(key).unlink()


# ---------------------------------------------------------------------------
# Redis backend
# ---------------------------------------------------------------------------


class RedisRecordStore:
    """Redis-backed store using ``redis.asyncio`` with connection pooling."""

    __slots__ = ("_namespace", "_pool", "_redis")

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        *,
        namespace: str = "",
        max_connections: int = 10,
    ) -> None:
        import redis.asyncio as aioredis

        self._namespace = namespace
        self._pool = aioredis.ConnectionPool.from_url(
            url,
            max_connections=max_connections,
            decode_responses=False,
        )
        self._redis = aioredis.Redis(connection_pool=self._pool)

    def _make_key(self, key: str) -> str:
        if self._namespace:
            return f"{self._namespace}{key}"
        return key

    async def get(self, key: str) -> Any | None:
        raw = await self._redis.get(self._make_key(key))
        if raw is None:
            return None
        return _decode(raw, key)

    async def set(self, key: str, value: Any) -> None:
        await self._redis.set(self._make_key(key), orjson.dumps(value))

    async def delete(self, key: str) -> None:
        await self._redis.delete(self._make_key(key))

    # -- Lifecycle -------------------------------------------------------------

    async def close(self) -> None:
        await self._redis.aclose()
        await self._pool.aclose()


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def create_record_store(config: Settings) -> RecordStore:
    """Build the backend selected by ``config.storage_backend``."""
    backend = StorageBackend(config.storage_backend)
    if backend == StorageBackend.MEMORY:
        store: RecordStore = InMemoryRecordStore()
    elif backend == StorageBackend.REDIS:
        store = RedisRecordStore(config.redis_url, namespace=config.storage_namespace)
    else:
        store = JsonFileRecordStore(config.data_dir)
    logger.info("record_store.created", backend=backend.value)
    return store
