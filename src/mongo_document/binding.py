# src/mongo_document/binding.py
"""
Deferred handle to the driver collection behind a document type
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable, List, Optional, Sequence, TYPE_CHECKING

from .errors import CollectionNotBoundError
from .models import DriverCalls, IndexSpec

if TYPE_CHECKING:
    from .types import StorageCollection

logger = logging.getLogger(__name__)

_UNSET = object()


async def _resolve(value: Any) -> "StorageCollection":
    if inspect.isawaitable(value):
        value = await value
    return value


class CollectionBinding:
    """
    Holds the (possibly not yet resolved) collection for one document type.

    ``set()`` accepts a collection or an awaitable producing one. Resolution
    and index provisioning start immediately when an event loop is running,
    otherwise on first use. Index failures only surface through
    ``indexes_ready()``; queries never wait for indexes.
    """

    def __init__(
        self,
        owner: str,
        indexes: Sequence[IndexSpec] = (),
        driver: Optional[DriverCalls] = None,
    ):
        self.owner = owner
        self.indexes = tuple(indexes)
        self.driver = driver or DriverCalls()
        self._source: Any = _UNSET
        self._collection: Optional[asyncio.Future] = None
        self._indexes_task: Optional[asyncio.Future] = None

    @property
    def is_set(self) -> bool:
        return self._source is not _UNSET

    def set(self, value: Any) -> None:
        """Bind (or rebind) the collection"""
        logger.debug(f"{self.owner} setting collection")

        self._source = value
        self._collection = None
        self._indexes_task = None

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return
        self._start()

    def _start(self) -> asyncio.Future:
        if self._source is _UNSET:
            raise CollectionNotBoundError(
                f"No collection bound for {self.owner}. Call {self.owner}.bind(collection) first."
            )

        if self._collection is None:
            self._collection = asyncio.ensure_future(_resolve(self._source))
            self._collection.add_done_callback(self._log_ready)

            if self.indexes:
                self._indexes_task = asyncio.ensure_future(self._ensure_indexes())
                self._indexes_task.add_done_callback(self._log_index_failure)

        return self._collection

    def _log_ready(self, future: asyncio.Future) -> None:
        if future.cancelled() or future.exception() is not None:
            return
        collection = future.result()
        name = getattr(collection, "full_name", None) or getattr(collection, "name", collection)
        logger.debug(f"{self.owner} collection {name} ready")

    def _log_index_failure(self, task: asyncio.Future) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"{self.owner} index creation failed: {error}")

    async def get(self) -> "StorageCollection":
        """Resolved collection; raises CollectionNotBoundError when never bound"""
        return await self._start()

    def method(self, collection: Any, capability: str) -> Callable[..., Any]:
        """The driver method configured for a capability, bound to ``collection``"""
        return getattr(collection, getattr(self.driver, capability))

    async def call(self, capability: str, *args: Any, **kwargs: Any) -> Any:
        collection = await self.get()
        return await self.method(collection, capability)(*args, **kwargs)

    async def _create_index(self, index: IndexSpec) -> IndexSpec:
        name = await self.call("create_index", index.key_list(), **index.options)
        logger.debug(f"{self.owner} added index {index.key_list()} with name {name}")
        return index

    async def _ensure_indexes(self) -> List[IndexSpec]:
        return list(await asyncio.gather(*(self._create_index(index) for index in self.indexes)))

    async def indexes_ready(self) -> List[IndexSpec]:
        """Wait for index provisioning. Re-raises the first index failure."""
        self._start()
        if self._indexes_task is None:
            return []
        return await self._indexes_task
