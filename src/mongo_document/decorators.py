# src/mongo_document/decorators.py
from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Optional, TypeVar, Union, overload

from .binding import CollectionBinding
from .document import init_document
from .errors import InvalidModelMetadataError
from .hooks import LifecycleHooks
from .models import DriverCalls, IndexSpec
from .registry import ModelRegistry
from .types import DocumentMeta
from .validation import ModelValidator

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)

IndexOption = Union[IndexSpec, Mapping[str, Any]]

__all__ = ["mongo_document", "init_document"]


def _index_specs(indexes: Optional[Iterable[IndexOption]]) -> tuple:
    try:
        return tuple(IndexSpec.from_value(index) for index in indexes or ())
    except (TypeError, ValueError) as e:
        raise InvalidModelMetadataError(f"Invalid index specification: {e}") from e


def _decorate(
    cls: T,
    indexes: Optional[Iterable[IndexOption]],
    collection: Optional[str],
    driver: Optional[DriverCalls],
    eager_remove: bool,
) -> T:
    name = getattr(cls, "__name__", repr(cls))
    logger.debug(f"{name}.decorate")

    collection_name = collection or name.lower()
    specs = _index_specs(indexes)

    result = ModelValidator.validate_model(cls, collection_name, specs)
    if not result.valid:
        raise InvalidModelMetadataError(f"{name}: " + "; ".join(result.errors))
    for warning in result.warnings:
        logger.debug(warning)

    driver = driver or DriverCalls()
    meta = DocumentMeta(
        collection=collection_name,
        binding=CollectionBinding(name, specs, driver),
        indexes=specs,
        hooks=LifecycleHooks.collect(cls),
        eager_remove=eager_remove,
    )
    ModelRegistry.register(cls, meta)

    return cls


@overload
def mongo_document(cls: T) -> T: ...


@overload
def mongo_document(
    cls: None = None,
    *,
    indexes: Optional[Iterable[IndexOption]] = None,
    collection: Optional[str] = None,
    driver: Optional[DriverCalls] = None,
    eager_remove: bool = True,
) -> Callable[[T], T]: ...


def mongo_document(
    cls: Optional[T] = None,
    *,
    indexes: Optional[Iterable[IndexOption]] = None,
    collection: Optional[str] = None,
    driver: Optional[DriverCalls] = None,
    eager_remove: bool = True,
) -> Any:
    """
    Decorator to register a Document subclass for persistence.

    Usage:
        @mongo_document
        class Person(Document):
            ...

        @mongo_document(indexes=[{"keys": {"email": 1}, "unique": True}], collection="people")
        class Person(Document):
            ...

    Args:
        indexes: IndexSpec objects or ``{"keys": {...}, **index_options}`` mappings,
            created whenever a collection is bound
        collection: Collection name used by MongoConnection (defaults to the lower-cased class name)
        driver: Driver method names, for drivers that differ from pymongo's async API
        eager_remove: Clear the persisted flag before (True) or after (False) the delete is confirmed
    """
    def decorator(target: T) -> T:
        return _decorate(target, indexes, collection, driver, eager_remove)

    if cls is not None:
        return decorator(cls)
    return decorator
