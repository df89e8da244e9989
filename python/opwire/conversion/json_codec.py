"""JSON codec used for object parameters and results.

The dispatcher never parses JSON itself: object and list parameters are
handed to a JsonCodec together with their declared annotation, and the
gateway uses the same codec to encode results. The default codec is
backed by pydantic ``TypeAdapter``s, so any annotation pydantic can
validate (models, dataclasses, TypedDicts, containers of them) works.

Example:
    >>> codec = PydanticJsonCodec()
    >>> codec.decode(list[Account], '[{"id": 1}]')
    [Account(id=1)]
    >>> codec.encode(Account(id=1))
    '{"id":1}'
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any

from pydantic import TypeAdapter


class JsonCodec(ABC):
    """Abstract JSON codec.

    Implementations may raise any exception from ``decode``; the type
    converter turns it into a ConversionError with the cause attached.
    """

    @property
    def name(self) -> str:
        """Human-readable name for this codec (for logging/debugging)."""
        return type(self).__name__

    @abstractmethod
    def decode(self, annotation: Any, text: str) -> Any:
        """Decode JSON text into the declared annotation.

        Args:
            annotation: Declared parameter annotation (Optional already stripped).
            text: Raw JSON document.

        Returns:
            The decoded value.
        """
        ...

    @abstractmethod
    def encode(self, value: Any) -> str:
        """Encode a value as JSON text.

        Args:
            value: Any operation result, including None.

        Returns:
            JSON document.
        """
        ...


class PydanticJsonCodec(JsonCodec):
    """JSON codec backed by pydantic TypeAdapters.

    Adapters are built once per annotation and reused. Unknown fields
    in JSON objects are ignored, matching pydantic's default.
    """

    def __init__(self, *, by_alias: bool = True, exclude_none: bool = True) -> None:
        """Initialize the codec.

        Args:
            by_alias: Encode model fields by alias.
            exclude_none: Leave None fields out of encoded objects.
        """
        self._by_alias = by_alias
        self._exclude_none = exclude_none
        self._adapters: dict[Any, TypeAdapter[Any]] = {}
        self._lock = threading.RLock()

    def decode(self, annotation: Any, text: str) -> Any:
        return self.adapter_for(annotation).validate_json(text)

    def encode(self, value: Any) -> str:
        if value is None:
            return "null"
        adapter = self.adapter_for(type(value))
        return adapter.dump_json(
            value, by_alias=self._by_alias, exclude_none=self._exclude_none
        ).decode("utf-8")

    def adapter_for(self, annotation: Any) -> TypeAdapter[Any]:
        """Get (or build) the TypeAdapter for an annotation.

        Args:
            annotation: Any annotation pydantic understands.

        Returns:
            The cached adapter; unhashable annotations get a fresh one.
        """
        try:
            adapter = self._adapters.get(annotation)
        except TypeError:
            return TypeAdapter(annotation)

        if adapter is None:
            with self._lock:
                adapter = self._adapters.get(annotation)
                if adapter is None:
                    adapter = TypeAdapter(annotation)
                    self._adapters[annotation] = adapter
        return adapter


__all__ = ["JsonCodec", "PydanticJsonCodec"]
