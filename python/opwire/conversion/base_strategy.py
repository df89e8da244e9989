"""Abstract base class for parameter conversion strategies.

Each TypeShape has exactly one strategy. The TypeConverter selects the
strategy by the descriptor's shape, so a parameter's conversion path is
fixed when its descriptor is built.

Conversion Contract:
1. shape - The TypeShape this strategy serves
2. convert() - Turn non-empty raw text into a value, or raise ConversionError
3. absent_value() - What a parameter of this shape receives when nothing was supplied
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .type_descriptor import TypeDescriptor, TypeShape


class ConversionStrategy(ABC):
    """Abstract base class for conversion strategies."""

    @property
    @abstractmethod
    def shape(self) -> TypeShape:
        """The shape this strategy converts.

        Returns:
            The TypeShape.
        """
        ...

    @abstractmethod
    def convert(self, descriptor: TypeDescriptor, raw: str) -> Any:
        """Convert raw text to the descriptor's type.

        Args:
            descriptor: Target type descriptor.
            raw: Raw parameter text (never None).

        Returns:
            The converted value.

        Raises:
            ConversionError: If the text cannot be converted.
        """
        ...

    def absent_value(self, descriptor: TypeDescriptor) -> Any:
        """Value used when the parameter was not supplied.

        Args:
            descriptor: Target type descriptor.

        Returns:
            None unless the strategy has a zero value.
        """
        return None
