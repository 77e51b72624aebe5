"""Generic key/value persistence over a single ``kv_store`` table.

Values are arbitrary JSON documents. Collections and secondary indexes are
emulated on top of this by key naming conventions (``request:{id}``,
``workers:index`` ...) and :meth:`KVStore.get_by_prefix`.

There is no eviction, locking or conflict resolution: every call runs inside
the caller's session and inherits whatever isolation the database gives it.
"""
import copy
import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import flag_modified

from app.db.db_models import KVEntry

logger = logging.getLogger(__name__)


class KVStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, key: str) -> Optional[Any]:
        entry = await self.db.get(KVEntry, key)
        # Callers get their own copy; the stored document only changes via set()
        return copy.deepcopy(entry.value) if entry is not None else None

    async def set(self, key: str, value: Any) -> None:
        entry = await self.db.get(KVEntry, key)
        if entry is None:
            self.db.add(KVEntry(key=key, value=value))
        else:
            entry.value = value
            flag_modified(entry, "value")
        await self.db.flush()

    async def delete(self, key: str) -> None:
        await self.db.execute(delete(KVEntry).where(KVEntry.key == key))

    async def mget(self, keys: Iterable[str]) -> List[Any]:
        """Values for ``keys`` in the order given; missing keys are skipped."""
        keys = list(keys)
        if not keys:
            return []
        result = await self.db.execute(select(KVEntry).where(KVEntry.key.in_(keys)))
        found = {entry.key: copy.deepcopy(entry.value) for entry in result.scalars().all()}
        return [found[k] for k in keys if k in found]

    async def mset(self, items: Dict[str, Any]) -> None:
        for key, value in items.items():
            await self.set(key, value)

    async def mdel(self, keys: Iterable[str]) -> None:
        keys = list(keys)
        if keys:
            await self.db.execute(delete(KVEntry).where(KVEntry.key.in_(keys)))

    async def get_by_prefix(self, prefix: str) -> List[Any]:
        """All values whose key starts with ``prefix``, ordered by key."""
        result = await self.db.execute(
            select(KVEntry)
            .where(KVEntry.key.startswith(prefix, autoescape=True))
            .order_by(KVEntry.key)
        )
        # LIKE is case-insensitive on SQLite
        values = [
            copy.deepcopy(entry.value)
            for entry in result.scalars().all()
            if entry.key.startswith(prefix)
        ]
        logger.debug(f"Prefix scan '{prefix}' matched {len(values)} keys")
        return values

    async def commit(self) -> None:
        await self.db.commit()
