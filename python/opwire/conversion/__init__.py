"""Parameter conversion infrastructure.

Each parameter's annotation is resolved once into a TypeDescriptor,
whose shape selects one ConversionStrategy:

- ScalarStrategy: int, float, bool, Decimal
- StringStrategy: str and unannotated parameters
- ValueStrategy: dates, UUIDs, enums and classes with a textual factory
- JsonStrategy: objects and lists of objects, via a JsonCodec

Custom Codecs:
Subclass JsonCodec and hand it to the dispatcher:

    from opwire.conversion import JsonCodec

    class OrjsonCodec(JsonCodec):
        def decode(self, annotation, text):
            ...

        def encode(self, value):
            ...
"""

from __future__ import annotations

from .base_strategy import ConversionStrategy
from .json_codec import JsonCodec, PydanticJsonCodec
from .strategies import JsonStrategy, ScalarStrategy, StringStrategy, ValueStrategy
from .type_converter import TypeConverter
from .type_descriptor import TypeDescriptor, TypeShape, find_textual_factory

__all__ = [
    # Core types
    "TypeDescriptor",
    "TypeShape",
    "find_textual_factory",
    # Converter
    "TypeConverter",
    # Strategies
    "ConversionStrategy",
    "ScalarStrategy",
    "StringStrategy",
    "ValueStrategy",
    "JsonStrategy",
    # Codecs
    "JsonCodec",
    "PydanticJsonCodec",
]
