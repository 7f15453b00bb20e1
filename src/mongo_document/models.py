"""
Configuration models for decorated documents
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple, Union

from pymongo import ASCENDING, DESCENDING


@dataclass(frozen=True)
class SortOrder:
    """Sort direction constants exposed as ``Model.sort``"""
    ascending: int = ASCENDING
    descending: int = DESCENDING


@dataclass(frozen=True)
class IndexSpec:
    """An index to provision when a collection is bound"""
    keys: Tuple[Tuple[str, Any], ...]
    options: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_value(cls, value: Union["IndexSpec", Mapping[str, Any]]) -> "IndexSpec":
        """Accept an IndexSpec or a ``{"keys": {...}, **options}`` mapping"""
        if isinstance(value, IndexSpec):
            return value

        options = dict(value)
        keys = options.pop("keys", None)
        if isinstance(keys, Mapping):
            keys = tuple(keys.items())
        elif isinstance(keys, str):
            keys = ((keys, ASCENDING),)
        elif keys is not None:
            keys = tuple(tuple(pair) for pair in keys)

        return cls(keys=keys or (), options=options)

    def key_list(self) -> List[Tuple[str, Any]]:
        """Keys in the list-of-pairs shape create_index expects"""
        return list(self.keys)


@dataclass(frozen=True)
class DriverCalls:
    """Names of the driver methods used for each storage capability.

    Defaults match pymongo's asynchronous API. Override to target a driver
    with the same call shapes under different names.
    """
    find: str = "find"
    find_one: str = "find_one"
    insert_one: str = "insert_one"
    update_one: str = "update_one"
    update_many: str = "update_many"
    delete_one: str = "delete_one"
    delete_many: str = "delete_many"
    count: str = "count_documents"
    create_index: str = "create_index"
    find_one_and_update: str = "find_one_and_update"
    to_list: str = "to_list"
