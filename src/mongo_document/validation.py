"""
Validation of @mongo_document options
"""
from typing import Any, List, Sequence
from dataclasses import dataclass

from pymongo import ASCENDING, DESCENDING, GEO2D, GEOSPHERE, HASHED, TEXT

from .errors import InvalidModelMetadataError
from .models import IndexSpec
from .utils import validate_collection_name


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str]
    warnings: List[str]


class ModelValidator:
    """Validates a model class and its decoration options"""

    VALID_DIRECTIONS = {ASCENDING, DESCENDING, GEO2D, GEOSPHERE, HASHED, TEXT}

    @classmethod
    def validate_model(cls, model: type, collection: str, indexes: Sequence[IndexSpec]) -> ValidationResult:
        """Comprehensive model validation"""
        from .document import Document

        errors = []
        warnings = []

        if not isinstance(model, type) or not issubclass(model, Document):
            errors.append(f"{getattr(model, '__name__', model)!r} must derive from Document")
            return ValidationResult(valid=False, errors=errors, warnings=warnings)

        try:
            validate_collection_name(collection)
        except InvalidModelMetadataError as e:
            errors.append(str(e))

        for index in indexes:
            errors.extend(cls._validate_index(index))

        if model.to_json is Document.to_json:
            warnings.append(f"{model.__name__} uses the default to_json (all public attributes are stored)")

        if getattr(model.from_json, "__func__", None) is Document.from_json.__func__:  # type: ignore[attr-defined]
            warnings.append(f"{model.__name__} uses the default from_json (__init__ is not run on load)")

        return ValidationResult(
            valid=len(errors) == 0,
            errors=errors,
            warnings=warnings
        )

    @classmethod
    def _validate_index(cls, index: IndexSpec) -> List[str]:
        errors = []

        if not index.keys:
            errors.append(f"Index {index.options or ''} has no keys")
            return errors

        for pair in index.keys:
            if len(pair) != 2:
                errors.append(f"Index key {pair!r} must be a (field, direction) pair")
                continue
            field_name, direction = pair
            if not isinstance(field_name, str) or not field_name:
                errors.append(f"Index field name must be a non-empty string, got {field_name!r}")
            if not cls._valid_direction(direction):
                errors.append(f"Invalid index direction for '{field_name}': {direction!r}")

        return errors

    @classmethod
    def _valid_direction(cls, direction: Any) -> bool:
        try:
            return direction in cls.VALID_DIRECTIONS
        except TypeError:
            return False
