# src/mongo_document/errors.py
"""
Structured exceptions for document persistence

Driver failures (pymongo.errors.*) are never wrapped here; they reach the
caller unchanged.
"""
from __future__ import annotations


class MongoDocumentError(Exception):
    """Base exception for mongo_document"""

    pass


class InvalidArgumentError(MongoDocumentError, ValueError):
    """Programmer misuse detected before any storage call"""

    pass


class ModelNotRegisteredError(MongoDocumentError):
    """Raised when a model has not been decorated with @mongo_document."""

    pass


class InvalidModelMetadataError(MongoDocumentError):
    """Raised when @mongo_document receives invalid options."""

    pass


class CollectionNotBoundError(MongoDocumentError):
    """Raised when a model is queried before a collection was bound."""

    pass


class ConnectionError(MongoDocumentError):
    """Connection to MongoDB failed"""

    pass
