"""Record storage for analyses, resumes and job descriptions.

Services depend on the abstract BaseRepository so scoring stays pure and
tests can run against the in-memory store. Records are pydantic models
carrying ``id`` and ``user_id``; every store keeps them newest first and
drops a user's oldest records beyond ``limit``. Other users' records are
never touched by a create.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable

from pydantic import BaseModel, ValidationError

from config import settings

logger = logging.getLogger(__name__)


class NotFoundError(LookupError):
    """A record does not exist or belongs to another user."""

    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(f"{kind} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id


def _cap_per_owner(records: list[BaseModel], user_id: str, limit: int) -> list[BaseModel]:
    """Keep the newest ``limit`` records of ``user_id``; others pass through."""
    kept = []
    owned = 0
    for record in records:
        if record.user_id == user_id:
            owned += 1
            if owned > limit:
                continue
        kept.append(record)
    return kept


class BaseRepository(ABC):
    """Base class for record stores.

    Subclasses must implement:
        - _load(): return all records, newest first
        - _save(records): persist the full record list

    Mutations are serialized with an asyncio lock so concurrent requests
    cannot interleave a read-modify-write.
    """

    def __init__(self, model: type[BaseModel], kind: str, limit: int | None = None) -> None:
        self.model = model
        self.kind = kind
        self.limit = settings.record_limit if limit is None else limit
        self._lock = asyncio.Lock()

    @abstractmethod
    def _load(self) -> list[BaseModel]:
        """Read every stored record, newest first."""

    @abstractmethod
    def _save(self, records: list[BaseModel]) -> None:
        """Replace the stored records."""

    async def _read(self) -> list[BaseModel]:
        return self._load()

    async def _write(self, records: list[BaseModel]) -> None:
        self._save(records)

    async def create(self, record: BaseModel) -> BaseModel:
        async with self._lock:
            records = [record] + await self._read()
            await self._write(_cap_per_owner(records, record.user_id, self.limit))
        logger.info("Created %s %s for user %s", self.kind, record.id, record.user_id)
        return record

    async def get(self, record_id: str, user_id: str | None = None) -> BaseModel:
        """Fetch one record; records owned by someone else count as missing."""
        for record in await self._read():
            if record.id == record_id:
                if user_id is not None and record.user_id != user_id:
                    break
                return record
        raise NotFoundError(self.kind, record_id)

    async def list_by_owner(self, user_id: str, limit: int | None = None) -> list[BaseModel]:
        owned = [r for r in await self._read() if r.user_id == user_id]
        return owned if limit is None else owned[:limit]

    async def update(self, record: BaseModel) -> BaseModel:
        async with self._lock:
            records = await self._read()
            for i, existing in enumerate(records):
                if existing.id == record.id:
                    records[i] = record
                    await self._write(records)
                    return record
        raise NotFoundError(self.kind, record.id)

    async def modify(
        self,
        record_id: str,
        user_id: str | None,
        change: Callable[[BaseModel], BaseModel],
    ) -> BaseModel:
        """Replace a record with ``change(record)`` in one locked step."""
        async with self._lock:
            records = await self._read()
            for i, existing in enumerate(records):
                if existing.id == record_id and (user_id is None or existing.user_id == user_id):
                    records[i] = change(existing)
                    await self._write(records)
                    return records[i]
        raise NotFoundError(self.kind, record_id)

    async def delete(self, record_id: str, user_id: str | None = None) -> None:
        async with self._lock:
            await self.get(record_id, user_id)
            await self._write([r for r in await self._read() if r.id != record_id])
        logger.info("Deleted %s %s", self.kind, record_id)


class InMemoryRepository(BaseRepository):
    def __init__(self, model: type[BaseModel], kind: str, limit: int | None = None) -> None:
        super().__init__(model, kind, limit)
        self._records: list[BaseModel] = []

    def _load(self) -> list[BaseModel]:
        return list(self._records)

    def _save(self, records: list[BaseModel]) -> None:
        self._records = list(records)


class JsonFileRepository(BaseRepository):
    """Stores the whole record list as one JSON document.

    File I/O runs in a worker thread so the event loop keeps serving requests.
    """

    def __init__(
        self, path: str | Path, model: type[BaseModel], kind: str, limit: int | None = None
    ) -> None:
        super().__init__(model, kind, limit)
        self.path = Path(path)

    async def _read(self) -> list[BaseModel]:
        return await asyncio.to_thread(self._load)

    async def _write(self, records: list[BaseModel]) -> None:
        await asyncio.to_thread(self._save, records)

    def _load(self) -> list[BaseModel]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return [self.model.model_validate(item) for item in raw]
        except (OSError, json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.warning("Failed to read %s store at %s: %s", self.kind, self.path, e)
            return []

    def _save(self, records: list[BaseModel]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps([r.model_dump(mode="json") for r in records], indent=2)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        tmp_path.replace(self.path)


def create_repository(model: type[BaseModel], kind: str, path: str) -> BaseRepository:
    """Build the store selected by ``settings.storage_backend``."""
    if settings.storage_backend == "json":
        return JsonFileRepository(path, model, kind)
    if settings.storage_backend == "memory":
        return InMemoryRepository(model, kind)
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")
