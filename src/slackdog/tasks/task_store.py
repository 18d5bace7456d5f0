# src/slackdog/tasks/task_store.py

from __future__ import annotations

import json
import logging

from ..core.ports import HashStore
from .task_models import PendingTask

logger = logging.getLogger(__name__)

DEFAULT_KEY = "pendingTasks"


class PendingTaskStore:
    """
    Pending tasks kept in a single hash: field = thread anchor, value = JSON record.

    Errors from the hash store (StoreError) propagate to the caller.
    Malformed records are skipped on read and logged; they never break listing.
    """

    def __init__(self, hash_store: HashStore, *, key: str = DEFAULT_KEY) -> None:
        self._hash = hash_store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    async def close(self) -> None:
        await self._hash.close()

    # ---- (de)serialization ----

    @staticmethod
    def _encode(task: PendingTask) -> str:
        return json.dumps(task.to_record(), ensure_ascii=False)

    def _decode(self, thread_id: str, raw: str | None) -> PendingTask | None:
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("record is not a JSON object")
            return PendingTask.from_record(thread_id, data)
        except (ValueError, TypeError) as e:
            logger.warning("Skipping malformed task record key=%s thread=%s: %s", self._key, thread_id, e)
            return None

    # ---- public API ----

    async def put(self, thread_id: str, task: PendingTask) -> None:
        """Overwrite the record for thread_id (last writer wins)."""
        if not thread_id:
            raise ValueError("thread_id is required")
        await self._hash.hset(self._key, thread_id, self._encode(task))
        logger.debug("Task stored thread=%s channel=%s", thread_id, task.channel)

    async def get(self, thread_id: str) -> PendingTask | None:
        raw = await self._hash.hget(self._key, thread_id)
        return self._decode(thread_id, raw)

    async def delete(self, thread_id: str) -> None:
        """Remove the record; deleting an absent thread is a no-op."""
        await self._hash.hdel(self._key, thread_id)
        logger.debug("Task deleted thread=%s", thread_id)

    async def list_all(self) -> list[PendingTask]:
        """
        All pending tasks in the order the store returns them.

        The order is not stable across calls; numbering is only meaningful
        within one listing.
        """
        raw_map = await self._hash.hgetall(self._key)
        out: list[PendingTask] = []
        for thread_id, raw in raw_map.items():
            task = self._decode(thread_id, raw)
            if task is not None:
                out.append(task)
        return out
