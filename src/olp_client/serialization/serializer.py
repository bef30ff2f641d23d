"""
JSON serialization for request and response documents.

``Serializer`` is the collaborator protocol used by the dispatcher;
``PydanticSerializer`` implements it with pydantic ``TypeAdapter``s, so
target types can be pydantic models, dataclasses, TypedDicts, builtins or
typing constructs such as ``Optional[Model]`` and ``list[Model]``.
"""

from functools import lru_cache
from typing import Any, BinaryIO, Protocol, TypeVar

from pydantic import BaseModel, TypeAdapter


T = TypeVar("T")


class Serializer(Protocol):
    """Converts typed values to JSON text and JSON streams back to typed values."""

    def to_json(self, obj: Any) -> str:
        ...

    def from_json(self, stream: BinaryIO, target_type: type[T]) -> T:
        """
        Read the whole stream and parse it as ``target_type``.

        Raises:
            ValueError: Malformed JSON or a document not matching the type
        """
        ...


@lru_cache(maxsize=256)
def _type_adapter(target_type: Any) -> TypeAdapter:
    return TypeAdapter(target_type)


class PydanticSerializer:
    """
    Serializer backed by pydantic.

    Models are written with their field aliases and without ``None``
    fields, matching the camelCase documents resource servers exchange.
    """

    def __init__(self, by_alias: bool = True, exclude_none: bool = True):
        self.by_alias = by_alias
        self.exclude_none = exclude_none

    def to_json(self, obj: Any) -> str:
        if isinstance(obj, BaseModel):
            return obj.model_dump_json(by_alias=self.by_alias, exclude_none=self.exclude_none)
        return (
            _type_adapter(type(obj))
            .dump_json(obj, by_alias=self.by_alias, exclude_none=self.exclude_none)
            .decode("utf-8")
        )

    def from_json(self, stream: BinaryIO, target_type: type[T]) -> T:
        return _type_adapter(target_type).validate_json(stream.read())
