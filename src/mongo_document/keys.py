# src/mongo_document/keys.py
"""
Translation between the logical primary key (``pk``) and MongoDB's ``_id``

Queries, sort specs and documents pass through here on their way to and
from the driver.
"""
from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple, TYPE_CHECKING

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING

from .state import mark_persisted
from .utils import rename_key

if TYPE_CHECKING:
    from .types import JsonDict, Query, SortSpec

PK_FIELD = "pk"
ID_FIELD = "_id"

# Context tag passed to to_json() when serializing for storage
STORAGE_CONTEXT = "db"


def to_storage_query(query: Optional[Query]) -> Optional[Query]:
    """Rename ``pk`` to ``_id`` in place. ``None`` is returned unchanged."""
    if query is None:
        return query
    return rename_key(query, PK_FIELD, ID_FIELD)


def to_storage_sort(sort: Optional[SortSpec]) -> Optional[List[Tuple[str, Any]]]:
    """Translate a sort spec into the driver's list of (field, direction) pairs"""
    if sort is None:
        return None

    if isinstance(sort, str):
        pairs = [(sort, ASCENDING)]
    elif isinstance(sort, Mapping):
        pairs = list(sort.items())
    else:
        pairs = [tuple(pair) for pair in sort]

    return [(ID_FIELD if name == PK_FIELD else name, direction) for name, direction in pairs]


def to_storage_document(instance: Any) -> JsonDict:
    """Serialize an instance for storage, with ``pk`` stored as ``_id``"""
    data = dict(instance.to_json(STORAGE_CONTEXT))
    return rename_key(data, PK_FIELD, ID_FIELD)  # type: ignore[return-value]


def from_storage_document(model: type, doc: Optional[JsonDict]) -> Any:
    """Hydrate a raw storage document into a persisted model instance"""
    if not doc:
        return None

    rename_key(doc, ID_FIELD, PK_FIELD)

    instance = model.from_json(doc)  # type: ignore[attr-defined]
    mark_persisted(instance, True)

    return instance


def parse_primary_key(text: Any) -> Optional[ObjectId]:
    """
    Parse the 24 hex character form of an ObjectId.

    Returns None instead of raising when the text is not a valid identifier.
    """
    if not isinstance(text, str) or len(text) != 24:
        return None
    try:
        return ObjectId(text)
    except (InvalidId, TypeError):
        return None


def generate_primary_key() -> ObjectId:
    return ObjectId()
