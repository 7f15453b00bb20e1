# src/mongo_document/registry.py
from typing import Dict, List, Type, Union

from .errors import ModelNotRegisteredError
from .types import DocumentMeta


class ModelRegistry:
    """
    Lightweight registry of decorated document types.

    Supports:
    - register(model, meta)
    - get(model) → DocumentMeta
    - resolve(model_or_name) → model class
    - models() → every registered class
    """

    _models: Dict[Type, DocumentMeta] = {}

    @classmethod
    def register(cls, model: Type, meta: DocumentMeta) -> None:
        cls._models[model] = meta

    @classmethod
    def resolve(cls, model: Union[Type, str]) -> Type:
        """
        Resolve model class from:
        - class
        - class name string

        Returns actual class
        """
        # Already class
        if isinstance(model, type):
            if model not in cls._models:
                raise ModelNotRegisteredError(
                    f"Model not registered: {model.__name__}. Decorate it with @mongo_document."
                )
            return model

        # String name, most recent registration wins
        if isinstance(model, str):
            for m in reversed(list(cls._models)):
                if m.__name__ == model:
                    return m

            raise ModelNotRegisteredError(f"Model not registered: '{model}'")

        raise TypeError(f"Invalid model reference {model!r}. Must be class or class name.")

    @classmethod
    def get(cls, model: Union[Type, str]) -> DocumentMeta:
        """Get model metadata"""
        return cls._models[cls.resolve(model)]

    @classmethod
    def models(cls) -> List[Type]:
        return list(cls._models)

    @classmethod
    def unregister(cls, model: Type) -> None:
        cls._models.pop(model, None)
