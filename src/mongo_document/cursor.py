"""
Lazy, chainable cursor over a document query.
"""

import logging
from typing import Any, AsyncIterator, List, Tuple, TYPE_CHECKING

from pymongo import ASCENDING, DESCENDING

from .keys import to_storage_sort

if TYPE_CHECKING:
    from .binding import CollectionBinding
    from .types import Query, SortSpec

logger = logging.getLogger(__name__)


class Cursor:
    """
    Deferred query returned by ``Model.find_all()``.

    ``limit``, ``skip`` and ``sort`` record a step and return the cursor
    itself. Nothing reaches the driver until ``to_array()``, ``count()`` or
    async iteration. ``count()`` only honours the filter, never the
    pagination steps.

    Example:
        >>> people = await Person.find_all({"age": 33}).sort({"name": Person.sort.ascending}).limit(10).to_array()
    """

    ascending = ASCENDING
    descending = DESCENDING

    def __init__(self, model: type, binding: "CollectionBinding", query: "Query"):
        self.model = model
        self.binding = binding
        self.query = query
        self._steps: List[Tuple[str, Tuple[Any, ...]]] = []

    def limit(self, limit: int) -> "Cursor":
        logger.debug(f"limit set to {limit}")
        self._steps.append(("limit", (limit,)))
        return self

    def skip(self, skip: int) -> "Cursor":
        logger.debug(f"skip set to {skip}")
        self._steps.append(("skip", (skip,)))
        return self

    def sort(self, sort: "SortSpec") -> "Cursor":
        logger.debug(f"sort set to {sort}")
        self._steps.append(("sort", (to_storage_sort(sort),)))
        return self

    async def _native(self) -> Any:
        collection = await self.binding.get()
        cursor = self.binding.method(collection, "find")(self.query)
        for name, args in self._steps:
            cursor = getattr(cursor, name)(*args)
        return cursor

    async def to_array(self) -> List[Any]:
        cursor = await self._native()
        docs = await getattr(cursor, self.binding.driver.to_list)(None)
        return [self.model.from_storage_document(doc) for doc in docs]  # type: ignore[attr-defined]

    async def count(self) -> int:
        logger.debug("count")
        return await self.binding.call("count", self.query)

    async def __aiter__(self) -> AsyncIterator[Any]:
        cursor = await self._native()
        async for doc in cursor:
            yield self.model.from_storage_document(doc)  # type: ignore[attr-defined]
