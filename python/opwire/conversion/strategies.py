"""Built-in conversion strategies, one per TypeShape.

- ScalarStrategy: int, float, bool and Decimal literals
- StringStrategy: identity
- ValueStrategy: dates and times, then the value class's textual factory
- JsonStrategy: JSON documents through the injected JsonCodec
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any

from ..exceptions import ConversionError
from .base_strategy import ConversionStrategy
from .json_codec import JsonCodec
from .type_descriptor import TypeDescriptor, TypeShape

INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")
GROUPED_INTEGER_PATTERN = re.compile(r"^[+-]?\d{1,3}(,\d{3})+$")

TRUE_LITERALS = frozenset({"true", "1", "yes"})
FALSE_LITERALS = frozenset({"false", "0", "no"})

DATE_YEAR_LOWER_BOUND = 1000
DATE_YEAR_UPPER_BOUND = 2999

ZERO_VALUES: dict[type, Any] = {
    bool: False,
    int: 0,
    float: 0.0,
    Decimal: Decimal(0),
}


class ScalarStrategy(ConversionStrategy):
    """Parses scalar literals.

    Integers accept a sign and comma thousands grouping; anything with a
    fractional part is rejected rather than truncated.
    """

    @property
    def shape(self) -> TypeShape:
        return TypeShape.SCALAR

    def convert(self, descriptor: TypeDescriptor, raw: str) -> Any:
        text = raw.strip()
        target = descriptor.target

        if target is bool:
            lowered = text.lower()
            if lowered in TRUE_LITERALS:
                return True
            if lowered in FALSE_LITERALS:
                return False
            raise ConversionError(f"Cannot convert [{raw}] to bool", raw_value=raw)

        if target is int:
            if INTEGER_PATTERN.match(text):
                return int(text)
            if GROUPED_INTEGER_PATTERN.match(text):
                return int(text.replace(",", ""))
            raise ConversionError(f"Cannot convert [{raw}] to int", raw_value=raw)

        if target is float:
            try:
                return float(text)
            except ValueError as e:
                raise ConversionError(f"Cannot convert [{raw}] to float", raw_value=raw) from e

        if target is Decimal:
            try:
                return Decimal(text)
            except InvalidOperation as e:
                raise ConversionError(f"Cannot convert [{raw}] to Decimal", raw_value=raw) from e

        raise ConversionError(f"Unsupported scalar type {descriptor.type_name}", raw_value=raw)

    def absent_value(self, descriptor: TypeDescriptor) -> Any:
        if descriptor.optional:
            return None
        return ZERO_VALUES.get(descriptor.target)


class StringStrategy(ConversionStrategy):
    """Returns the raw text unchanged; the empty string is a value."""

    @property
    def shape(self) -> TypeShape:
        return TypeShape.STRING

    def convert(self, descriptor: TypeDescriptor, raw: str) -> Any:
        return raw


class ValueStrategy(ConversionStrategy):
    """Builds value objects from text.

    Dates try ISO-8601 first and then each configured strptime format,
    so a locale format that happens to look like ISO never wins.
    """

    def __init__(self, date_formats: Sequence[str] = ("%d/%m/%Y",)) -> None:
        """Initialize the strategy.

        Args:
            date_formats: strptime formats tried after ISO-8601.
        """
        self._date_formats = tuple(date_formats)

    @property
    def shape(self) -> TypeShape:
        return TypeShape.VALUE

    @property
    def date_formats(self) -> tuple[str, ...]:
        """Formats tried for dates after ISO-8601."""
        return self._date_formats

    def convert(self, descriptor: TypeDescriptor, raw: str) -> Any:
        target = descriptor.target

        if target is date:
            return self._parse_date(raw)
        if target is datetime:
            return self._parse_iso(datetime, raw)
        if target is time:
            return self._parse_iso(time, raw)

        if descriptor.factory is None:
            raise ConversionError(
                f"No textual factory for {descriptor.type_name}", raw_value=raw
            )

        try:
            return descriptor.factory(raw)
        except Exception as e:
            raise ConversionError(
                f"Cannot convert [{raw}] to {descriptor.type_name} "
                f"via {descriptor.factory_name}: {e}",
                raw_value=raw,
            ) from e

    def _parse_date(self, raw: str) -> date:
        text = raw.strip()
        parsed: date | None = None

        try:
            parsed = date.fromisoformat(text)
        except ValueError:
            # Not ISO-8601, try the configured formats
            for fmt in self._date_formats:
                try:
                    parsed = datetime.strptime(text, fmt).date()
                    break
                except ValueError:
                    continue

        if parsed is None:
            raise ConversionError(f"Cannot convert [{raw}] to date", raw_value=raw)

        if not DATE_YEAR_LOWER_BOUND <= parsed.year <= DATE_YEAR_UPPER_BOUND:
            raise ConversionError(
                f"Date [{raw}] is outside the supported years "
                f"{DATE_YEAR_LOWER_BOUND}-{DATE_YEAR_UPPER_BOUND}",
                raw_value=raw,
            )
        return parsed

    @staticmethod
    def _parse_iso(target: type, raw: str) -> Any:
        try:
            return target.fromisoformat(raw.strip())  # type: ignore[attr-defined]
        except ValueError as e:
            raise ConversionError(
                f"Cannot convert [{raw}] to {target.__name__}", raw_value=raw
            ) from e


class JsonStrategy(ConversionStrategy):
    """Decodes JSON documents into objects and lists of objects."""

    def __init__(self, codec: JsonCodec, shape: TypeShape = TypeShape.OBJECT) -> None:
        """Initialize the strategy.

        Args:
            codec: JSON codec to decode with.
            shape: OBJECT or OBJECT_LIST.
        """
        self._codec = codec
        self._shape = shape

    @property
    def shape(self) -> TypeShape:
        return self._shape

    @property
    def codec(self) -> JsonCodec:
        """The codec used for decoding."""
        return self._codec

    def convert(self, descriptor: TypeDescriptor, raw: str) -> Any:
        try:
            return self._codec.decode(descriptor.annotation, raw)
        except Exception as e:
            raise ConversionError(
                f"Cannot decode JSON into {descriptor.type_name}: {e}",
                raw_value=raw,
            ) from e


__all__ = [
    "ScalarStrategy",
    "StringStrategy",
    "ValueStrategy",
    "JsonStrategy",
]
