"""
Persistence facade mixed into decorated model classes.

Provides the class-level query API (count, find_one, find_all, update,
remove, find_and_modify, fupsert, ...) and the instance-level save/remove,
both translating the logical ``pk`` to MongoDB's ``_id`` on the way in and
back on the way out.
"""

import logging
from collections.abc import Sequence
from typing import Any, Awaitable, Callable, Dict, List, Optional

from pymongo import ReturnDocument

from .binding import CollectionBinding
from .cursor import Cursor
from .errors import InvalidArgumentError
from .keys import (
    ID_FIELD,
    PK_FIELD,
    from_storage_document,
    generate_primary_key,
    parse_primary_key,
    to_storage_document,
    to_storage_query,
    to_storage_sort,
)
from .models import SortOrder
from .registry import ModelRegistry
from .state import is_persisted, mark_persisted
from .types import DocumentMeta, JsonDict, Query, SortSpec

logger = logging.getLogger(__name__)

# find_one_and_update options the facade owns; callers may not override them
_RETURN_DOCUMENT_OPTIONS = ("new", "return_document", "returnDocument")


def init_document(instance: Any) -> Any:
    """Assign a fresh ObjectId as ``pk`` unless the instance already has one."""
    if not getattr(instance, PK_FIELD, None):
        setattr(instance, PK_FIELD, generate_primary_key())
    return instance


class _ClassOrInstanceMethod:
    """Dispatch to one function when accessed on the class, another on instances."""

    def __init__(self, on_class: Callable[..., Any], on_instance: Callable[..., Any]):
        self.on_class = on_class
        self.on_instance = on_instance
        self.__doc__ = on_class.__doc__

    def __get__(self, instance: Any, owner: type) -> Callable[..., Any]:
        if instance is None:
            return self.on_class.__get__(owner, owner)
        return self.on_instance.__get__(instance, owner)


def _pairwise_equal(a: Any, b: Any) -> bool:
    if a is b:
        return True
    if a is None or b is None or type(a) is not type(b):
        return False
    return a.pk == b.pk


class Document:
    """
    Base class for MongoDB-backed models.

    Subclasses describe their own shape and serialization through
    ``to_json(context)`` and ``from_json(data)``; everything about storage
    comes from this class once the subclass is decorated with
    ``@mongo_document`` and bound to a collection.

    Example:
        >>> @mongo_document(indexes=[{"keys": {"name": 1}}])
        ... class Person(Document):
        ...     def __init__(self, name=None, age=None):
        ...         self.name = name
        ...         self.age = age
        ...         super().__init__()
        ...
        >>> Person.bind(db["people"])
        >>> adam = await Person(name="Adam", age=33).save()
        >>> await Person.find_one_by_pk(adam.pk)
    """

    pk: Any = None
    sort = SortOrder()

    _is_persisted: bool = False

    def __init__(self) -> None:
        init_document(self)

    # -------------------------
    # Serialization defaults
    # -------------------------

    def to_json(self, context: Optional[str] = None) -> JsonDict:
        """Public attributes of the instance. Override to control the stored shape."""
        return {key: value for key, value in vars(self).items() if not key.startswith("_")}

    @classmethod
    def from_json(cls, data: JsonDict) -> "Document":
        """Build an instance from a mapping without running ``__init__``."""
        instance = cls.__new__(cls)
        vars(instance).update(data)
        return instance

    # -------------------------
    # Metadata and binding
    # -------------------------

    @classmethod
    def _meta(cls) -> DocumentMeta:
        return ModelRegistry.get(cls)

    @classmethod
    def _binding(cls) -> CollectionBinding:
        return cls._meta().binding

    @classmethod
    def bind(cls, collection: Any) -> None:
        """Bind a collection (or an awaitable resolving to one) to this model."""
        cls._binding().set(collection)

    @classmethod
    async def get_collection(cls) -> Any:
        return await cls._binding().get()

    @classmethod
    async def indexes_ready(cls) -> List[Any]:
        return await cls._binding().indexes_ready()

    @classmethod
    def from_storage_document(cls, doc: Optional[JsonDict]) -> Optional["Document"]:
        return from_storage_document(cls, doc)

    @staticmethod
    def parse_primary_key(text: Any) -> Any:
        return parse_primary_key(text)

    # -------------------------
    # Class-level queries
    # -------------------------

    @classmethod
    async def count(cls, query: Optional[Query] = None, options: Optional[Dict[str, Any]] = None) -> int:
        logger.debug(f"{cls.__name__}.count {query} with options {options}")

        query = to_storage_query(query)
        return await cls._binding().call("count", query if query is not None else {}, **(options or {}))

    @classmethod
    async def find_one(cls, query: Optional[Query] = None) -> Optional["Document"]:
        logger.debug(f"{cls.__name__}.find_one {query}")

        doc = await cls._binding().call("find_one", to_storage_query(query))
        return cls.from_storage_document(doc)

    @classmethod
    async def find_one_by_pk(cls, pk: Any) -> Optional["Document"]:
        logger.debug(f"{cls.__name__}.find_one_by_pk pk: {pk}")

        if not pk:
            return None

        return await cls.find_one({PK_FIELD: pk})

    @classmethod
    def find_all(cls, query: Optional[Query] = None, sort: Optional[SortSpec] = None) -> Cursor:
        logger.debug(f"{cls.__name__}.find_all {query} with sort {sort}")

        query = to_storage_query(query)
        cursor = Cursor(cls, cls._binding(), query if query is not None else {})

        if sort:
            cursor.sort(sort)

        return cursor

    @classmethod
    def find(cls, query: Optional[Query] = None, sort: Optional[SortSpec] = None) -> Cursor:
        """Alias of find_all"""
        return cls.find_all(query, sort)

    @classmethod
    def find_all_by_pk(cls, pks: Sequence) -> Cursor:
        if isinstance(pks, (str, bytes)) or not isinstance(pks, Sequence):
            raise InvalidArgumentError(
                f"{cls.__name__}.find_all_by_pk expects a sequence of keys, got {type(pks).__name__}"
            )

        return cls.find_all({PK_FIELD: {"$in": list(pks)}})

    @classmethod
    def find_by_pk(cls, pks: Sequence) -> Cursor:
        """Alias of find_all_by_pk"""
        return cls.find_all_by_pk(pks)

    @classmethod
    async def _remove_matching(cls, query: Optional[Query] = None, options: Optional[Dict[str, Any]] = None) -> int:
        """Delete every document matching ``query`` (one with ``single``). Returns the removed count."""
        logger.debug(f"{cls.__name__}.remove {query} with options {options}")

        options = dict(options or {})
        capability = "delete_one" if options.pop("single", False) else "delete_many"
        query = to_storage_query(query)

        result = await cls._binding().call(capability, query if query is not None else {}, **options)
        return result.deleted_count

    @classmethod
    async def update(cls, query: Query, patch: JsonDict, options: Optional[Dict[str, Any]] = None) -> Any:
        """Apply ``patch`` to matching documents. Every match is updated unless ``multi`` is False."""
        options = dict(options or {})
        multi = options.pop("multi", True) is not False

        logger.debug(f"{cls.__name__}.update {query} with options {options} (multi={multi})")

        capability = "update_many" if multi else "update_one"
        return await cls._binding().call(capability, to_storage_query(query), patch, **options)

    @classmethod
    def find_and_modify(
        cls,
        query: Query,
        patch: JsonDict,
        sort: Optional[SortSpec] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Awaitable[Optional["Document"]]:
        """
        Atomically update the first match and return the updated document.

        The updated document is always returned; passing ``new`` or
        ``return_document`` raises InvalidArgumentError immediately.
        """
        if options:
            for name in _RETURN_DOCUMENT_OPTIONS:
                if name in options:
                    raise InvalidArgumentError(
                        f"Setting the {name} option is not supported (the updated document is always returned)"
                    )

        return cls._find_and_modify(query, patch, sort, dict(options or {}))

    @classmethod
    async def _find_and_modify(
        cls,
        query: Query,
        patch: JsonDict,
        sort: Optional[SortSpec],
        options: Dict[str, Any],
    ) -> Optional["Document"]:
        logger.debug(f"{cls.__name__}.find_and_modify {query} with options {options} and sort {sort}")

        storage_sort = to_storage_sort(sort)
        if storage_sort:
            options["sort"] = storage_sort

        doc = await cls._binding().call(
            "find_one_and_update",
            to_storage_query(query),
            patch,
            return_document=ReturnDocument.AFTER,
            **options,
        )
        return cls.from_storage_document(doc)

    @classmethod
    def fupsert(
        cls,
        query: Query,
        patch: JsonDict,
        sort: Optional[SortSpec] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Awaitable[Optional["Document"]]:
        """find_and_modify with upsert: inserts query fields plus patch when nothing matches"""
        return cls.find_and_modify(query, patch, sort, {**(options or {}), "upsert": True})

    @classmethod
    def equal(cls, *instances: Any) -> bool:
        """True when every adjacent pair shares type and pk"""
        return all(
            _pairwise_equal(instances[i], instances[i + 1])
            for i in range(len(instances) - 2, -1, -1)
        )

    # -------------------------
    # Instance persistence
    # -------------------------

    def equals(self, other: Any) -> bool:
        return _pairwise_equal(self, other)

    async def save(self) -> "Document":
        """
        Insert or update this document.

        Unpersisted instances are inserted; persisted ones are written back
        with ``$set`` against their ``_id`` (upserting if the record vanished).

        Returns:
            Self for method chaining
        """
        cls = type(self)
        meta = cls._meta()

        logger.debug(f"{cls.__name__}.save")

        if not await meta.hooks.run_before_save(self):
            logger.debug(f"{cls.__name__}.save vetoed by before_save hook")
            return self

        if is_persisted(self):
            await self._update_stored()
        else:
            await self._insert_stored()

        logger.debug(f"{cls.__name__}.save saved")
        mark_persisted(self, True)

        await meta.hooks.run_after_save(self)

        return self

    async def _insert_stored(self) -> Any:
        logger.debug(f"{type(self).__name__}.save inserting")

        return await type(self)._binding().call("insert_one", to_storage_document(self))

    async def _update_stored(self) -> Any:
        logger.debug(f"{type(self).__name__}.save updating")

        doc = to_storage_document(self)
        doc.pop(ID_FIELD, None)

        return await type(self)._binding().call(
            "update_one",
            {ID_FIELD: self.pk},
            {"$set": doc},
            upsert=True,
        )

    async def _remove_self(self) -> "Document":
        """
        Delete this document from its collection. Returns self.

        By default the persisted flag is cleared before the delete is sent,
        so a failed delete leaves it out of step with storage. Decorate with
        ``eager_remove=False`` to clear it only once the delete succeeded.
        """
        cls = type(self)
        eager = cls._meta().eager_remove

        if eager:
            mark_persisted(self, False)

        await cls._remove_matching({PK_FIELD: self.pk}, {"single": True})

        if not eager:
            mark_persisted(self, False)

        return self

    remove = _ClassOrInstanceMethod(_remove_matching, _remove_self)
