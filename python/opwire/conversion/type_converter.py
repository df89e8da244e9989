"""Type converter for string-valued operation parameters.

The TypeConverter turns the raw text of one parameter into the value
its method declares, by delegating to the strategy registered for the
descriptor's shape.

Conversion rules:
1. None, or the empty string for any non-string shape, is "absent":
   scalars get their zero value, everything else gets None
2. Otherwise the shape's strategy converts the text and raises
   ConversionError when it cannot

Example:
    >>> converter = TypeConverter()
    >>> converter.convert(TypeDescriptor.from_annotation(int), "34")
    34
    >>> converter.convert(TypeDescriptor.from_annotation(bool), "true")
    True
    >>> converter.convert(TypeDescriptor.from_annotation(int), None)
    0
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..exceptions import ConversionError
from .base_strategy import ConversionStrategy
from .json_codec import JsonCodec, PydanticJsonCodec
from .strategies import JsonStrategy, ScalarStrategy, StringStrategy, ValueStrategy
from .type_descriptor import TypeDescriptor, TypeShape


class TypeConverter:
    """Converts raw parameter text using one strategy per shape.

    Holds no per-call state, so one converter can serve concurrent calls.

    Attributes:
        json_codec: Codec used for OBJECT and OBJECT_LIST shapes.
    """

    def __init__(
        self,
        json_codec: JsonCodec | None = None,
        *,
        date_formats: Sequence[str] = ("%d/%m/%Y",),
    ) -> None:
        """Initialize the converter with the default strategies.

        Args:
            json_codec: Codec for JSON shapes; defaults to PydanticJsonCodec.
            date_formats: strptime formats tried for dates after ISO-8601.
        """
        self._json_codec = json_codec or PydanticJsonCodec()
        self._strategies: dict[TypeShape, ConversionStrategy] = {}
        self.register_strategy(ScalarStrategy())
        self.register_strategy(StringStrategy())
        self.register_strategy(ValueStrategy(date_formats))
        self.register_strategy(JsonStrategy(self._json_codec, TypeShape.OBJECT))
        self.register_strategy(JsonStrategy(self._json_codec, TypeShape.OBJECT_LIST))

    @property
    def json_codec(self) -> JsonCodec:
        """Get the JSON codec."""
        return self._json_codec

    def register_strategy(self, strategy: ConversionStrategy) -> TypeConverter:
        """Register (or replace) the strategy for a shape.

        Args:
            strategy: Strategy to register.

        Returns:
            Self for method chaining.
        """
        self._strategies[strategy.shape] = strategy
        return self

    def strategy_for(self, descriptor: TypeDescriptor) -> ConversionStrategy:
        """Get the strategy serving a descriptor's shape.

        Args:
            descriptor: Target type descriptor.

        Returns:
            The strategy.
        """
        return self._strategies[descriptor.shape]

    def convert(
        self,
        descriptor: TypeDescriptor,
        raw: str | None,
        *,
        parameter: str | None = None,
    ) -> Any:
        """Convert raw text to the descriptor's type.

        Args:
            descriptor: Target type descriptor.
            raw: Raw text, or None when absent.
            parameter: External parameter name, attached to errors.

        Returns:
            The converted value.

        Raises:
            ConversionError: If the text cannot be converted.
        """
        strategy = self.strategy_for(descriptor)

        if raw is None or (raw == "" and descriptor.shape is not TypeShape.STRING):
            return strategy.absent_value(descriptor)

        try:
            return strategy.convert(descriptor, raw)
        except ConversionError as e:
            if e.parameter is None:
                e.parameter = parameter
            raise

    def absent_value(self, descriptor: TypeDescriptor) -> Any:
        """Value used for a parameter that was not supplied.

        Args:
            descriptor: Target type descriptor.

        Returns:
            Zero for non-optional scalars, None otherwise.
        """
        return self.strategy_for(descriptor).absent_value(descriptor)


__all__ = ["TypeConverter"]
