"""
Pytest configuration for mongo_document tests.

Provides an in-memory stand-in for a pymongo AsyncCollection covering the
calls the library makes, and a factory for freshly decorated models.
"""

import asyncio
from copy import deepcopy
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from mongo_document import Document, ModelRegistry, mongo_document

_MISSING = object()


def _matches(doc: Dict[str, Any], query: Optional[Dict[str, Any]]) -> bool:
    for field, condition in (query or {}).items():
        value = doc.get(field, _MISSING)
        if isinstance(condition, dict) and any(key.startswith("$") for key in condition):
            for operator, argument in condition.items():
                if operator == "$in":
                    if value not in argument:
                        return False
                else:
                    raise NotImplementedError(operator)
        elif value != condition:
            return False
    return True


def _apply_update(doc: Dict[str, Any], update: Dict[str, Any]) -> None:
    for operator, fields in update.items():
        if operator == "$set":
            doc.update(deepcopy(fields))
        elif operator == "$inc":
            for field, amount in fields.items():
                doc[field] = doc.get(field, 0) + amount
        else:
            raise NotImplementedError(operator)


def _upsert_document(query: Optional[Dict[str, Any]], update: Dict[str, Any]) -> Dict[str, Any]:
    doc = {
        field: deepcopy(value)
        for field, value in (query or {}).items()
        if not (isinstance(value, dict) and any(key.startswith("$") for key in value))
    }
    _apply_update(doc, update)
    doc.setdefault("_id", ObjectId())
    return doc


class FakeCursor:
    def __init__(self, collection: "FakeCollection", query: Optional[Dict[str, Any]]):
        self.collection = collection
        self.query = query
        self.sort_spec: List[Any] = []
        self.skip_count = 0
        self.limit_count = 0

    def sort(self, key_or_list, direction=None):
        self.sort_spec = list(key_or_list)
        return self

    def skip(self, skip):
        self.skip_count = skip
        return self

    def limit(self, limit):
        self.limit_count = limit
        return self

    def _results(self) -> List[Dict[str, Any]]:
        docs = [doc for doc in self.collection.docs if _matches(doc, self.query)]
        for field, direction in reversed(self.sort_spec):
            docs.sort(key=lambda doc: doc.get(field), reverse=direction < 0)
        docs = docs[self.skip_count:]
        if self.limit_count:
            docs = docs[:self.limit_count]
        return [deepcopy(doc) for doc in docs]

    async def to_list(self, length=None):
        return self._results()

    async def __aiter__(self):
        for doc in self._results():
            yield doc


class FakeCollection:
    """
    In-memory asynchronous collection.

    ``calls`` records every driver method invoked. ``fail_on`` maps a method
    name to an exception to raise. ``delete_gate`` holds deletes open until
    the event is set.
    """

    name = "fake"

    def __init__(self):
        self.docs: List[Dict[str, Any]] = []
        self.calls: List[str] = []
        self.indexes: List[Any] = []
        self.fail_on: Dict[str, Exception] = {}
        self.delete_gate: Optional[asyncio.Event] = None
        self.delete_started = asyncio.Event()

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise self.fail_on[name]

    def _first(self, query, sort=None) -> Optional[Dict[str, Any]]:
        cursor = FakeCursor(self, query)
        if sort:
            cursor.sort(sort)
        matches = [doc for doc in self.docs if _matches(doc, query)]
        if not sort:
            return matches[0] if matches else None
        ordered = cursor._results()
        if not ordered:
            return None
        return next(doc for doc in self.docs if doc["_id"] == ordered[0]["_id"])

    def find(self, filter=None, *args, **kwargs):
        self._record("find")
        return FakeCursor(self, filter)

    async def find_one(self, filter=None, *args, **kwargs):
        self._record("find_one")
        doc = self._first(filter)
        return deepcopy(doc) if doc else None

    async def insert_one(self, document, **kwargs):
        self._record("insert_one")
        doc = deepcopy(document)
        doc.setdefault("_id", ObjectId())
        if any(existing["_id"] == doc["_id"] for existing in self.docs):
            raise DuplicateKeyError(f"duplicate key: {doc['_id']}")
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"], acknowledged=True)

    async def _update(self, filter, update, many, upsert=False):
        matches = [doc for doc in self.docs if _matches(doc, filter)]
        if not many:
            matches = matches[:1]
        for doc in matches:
            _apply_update(doc, update)
        upserted_id = None
        if not matches and upsert:
            doc = _upsert_document(filter, update)
            self.docs.append(doc)
            upserted_id = doc["_id"]
        return SimpleNamespace(
            matched_count=len(matches),
            modified_count=len(matches),
            upserted_id=upserted_id,
            acknowledged=True,
        )

    async def update_one(self, filter, update, upsert=False, **kwargs):
        self._record("update_one")
        return await self._update(filter, update, many=False, upsert=upsert)

    async def update_many(self, filter, update, upsert=False, **kwargs):
        self._record("update_many")
        return await self._update(filter, update, many=True, upsert=upsert)

    async def _delete(self, filter, many):
        self.delete_started.set()
        if self.delete_gate is not None:
            await self.delete_gate.wait()
        matches = [doc for doc in self.docs if _matches(doc, filter)]
        if not many:
            matches = matches[:1]
        for doc in matches:
            self.docs.remove(doc)
        return SimpleNamespace(deleted_count=len(matches), acknowledged=True)

    async def delete_one(self, filter, **kwargs):
        self._record("delete_one")
        return await self._delete(filter, many=False)

    async def delete_many(self, filter, **kwargs):
        self._record("delete_many")
        return await self._delete(filter, many=True)

    async def count_documents(self, filter, **kwargs):
        self._record("count_documents")
        return len([doc for doc in self.docs if _matches(doc, filter)])

    async def create_index(self, keys, **kwargs):
        self._record("create_index")
        self.indexes.append((list(keys), kwargs))
        return kwargs.get("name") or "_".join(f"{field}_{direction}" for field, direction in keys)

    async def find_one_and_update(self, filter, update, sort=None, upsert=False,
                                  return_document=ReturnDocument.BEFORE, **kwargs):
        self._record("find_one_and_update")
        doc = self._first(filter, sort)
        if doc is None:
            if not upsert:
                return None
            doc = _upsert_document(filter, update)
            self.docs.append(doc)
            return deepcopy(doc) if return_document == ReturnDocument.AFTER else None
        before = deepcopy(doc)
        _apply_update(doc, update)
        return deepcopy(doc) if return_document == ReturnDocument.AFTER else before


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def model_factory():
    """
    Build a freshly decorated Person-like model bound to its own collection.

    The collection is reachable as ``Model.fake``.
    """
    created = []

    def factory(name: str = "Person", collection: Optional[FakeCollection] = None, **options):
        class Person(Document):
            def __init__(self, name=None, age=None):
                self.name = name
                self.age = age
                super().__init__()

            @classmethod
            def from_json(cls, data):
                person = cls()
                vars(person).update(data)
                return person

            def to_json(self, context=None):
                return {
                    "pk": self.pk,
                    "name": self.name,
                    "age": self.age,
                }

        Person.__name__ = Person.__qualname__ = name
        mongo_document(**options)(Person)

        Person.fake = collection or FakeCollection()
        Person.bind(Person.fake)

        created.append(Person)
        return Person

    yield factory

    for model in created:
        ModelRegistry.unregister(model)
