# src/mongo_document/__init__.py
"""
mongo-document - MongoDB persistence mixed into plain model classes
pk/_id translation, insert-or-update saves, lazy cursors, find-and-modify upserts
"""

__version__ = "1.0.0"

from .document import Document, init_document
from .decorators import mongo_document
from .cursor import Cursor
from .binding import CollectionBinding
from .hooks import before_save, after_save, LifecycleHooks
from .keys import PK_FIELD, ID_FIELD, parse_primary_key
from .models import IndexSpec, DriverCalls, SortOrder
from .registry import ModelRegistry
from .settings import MongoSettings
from .connection import MongoConnection
from .errors import (
    MongoDocumentError,
    InvalidArgumentError,
    ModelNotRegisteredError,
    InvalidModelMetadataError,
    CollectionNotBoundError,
    ConnectionError,
)

__all__ = [
    # Documents
    "Document",
    "mongo_document",
    "init_document",
    "Cursor",
    "CollectionBinding",
    # Hooks
    "before_save",
    "after_save",
    "LifecycleHooks",
    # Keys
    "PK_FIELD",
    "ID_FIELD",
    "parse_primary_key",
    # Models & Config
    "IndexSpec",
    "DriverCalls",
    "SortOrder",
    "ModelRegistry",
    "MongoSettings",
    "MongoConnection",
    # Errors
    "MongoDocumentError",
    "InvalidArgumentError",
    "ModelNotRegisteredError",
    "InvalidModelMetadataError",
    "CollectionNotBoundError",
    "ConnectionError",
]
