from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

from .binding import CollectionBinding
from .hooks import NO_HOOKS, LifecycleHooks
from .models import IndexSpec

JsonDict = Dict[str, Any]
Query = Dict[str, Any]
SortSpec = Union[str, Mapping[str, Any], Sequence[Tuple[str, Any]]]


@dataclass(frozen=True)
class DocumentMeta:
    """Per-model persistence metadata, built by @mongo_document"""
    collection: str
    binding: CollectionBinding = field(compare=False)
    indexes: Tuple[IndexSpec, ...] = ()
    hooks: LifecycleHooks = NO_HOOKS
    eager_remove: bool = True


@runtime_checkable
class StorageCollection(Protocol):
    """Driver collection contract (pymongo AsyncCollection shapes)"""

    def find(self, filter: Optional[Query] = None, *args: Any, **kwargs: Any) -> Any: ...

    async def find_one(self, filter: Optional[Query] = None, *args: Any, **kwargs: Any) -> Optional[JsonDict]: ...

    async def insert_one(self, document: JsonDict, **kwargs: Any) -> Any: ...

    async def update_one(self, filter: Query, update: JsonDict, **kwargs: Any) -> Any: ...

    async def update_many(self, filter: Query, update: JsonDict, **kwargs: Any) -> Any: ...

    async def delete_one(self, filter: Query, **kwargs: Any) -> Any: ...

    async def delete_many(self, filter: Query, **kwargs: Any) -> Any: ...

    async def count_documents(self, filter: Query, **kwargs: Any) -> int: ...

    async def create_index(self, keys: Any, **kwargs: Any) -> str: ...

    async def find_one_and_update(
        self,
        filter: Query,
        update: JsonDict,
        **kwargs: Any
    ) -> Optional[JsonDict]: ...
