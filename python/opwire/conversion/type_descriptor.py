"""Type descriptors for operation parameters.

A TypeDescriptor is the converter's view of a parameter annotation,
resolved once when the service class is described. It places the
annotation into one of a closed set of shapes and, for value classes,
records the textual factory that builds an instance from a string.

Shapes:
- SCALAR: int, float, bool, Decimal
- STRING: str, Any, or no annotation at all
- VALUE: dates and times, UUID, paths, Enum subclasses, and any class
  with a ``parse``/``value_of``-style factory or a one-argument constructor
- OBJECT: pydantic models, dataclasses, TypedDicts, mappings, and
  anything else, decoded from JSON
- OBJECT_LIST: lists, tuples, sets and sequences, decoded from JSON

Example:
    >>> TypeDescriptor.from_annotation(int).shape
    <TypeShape.SCALAR: 'scalar'>
    >>> TypeDescriptor.from_annotation(list[Account]).shape
    <TypeShape.OBJECT_LIST: 'object_list'>
    >>> TypeDescriptor.from_annotation(date | None).optional
    True
"""

from __future__ import annotations

import collections.abc
import dataclasses
import inspect
import types
import typing
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from pathlib import PurePath
from typing import Annotated, Any, Union

from pydantic import BaseModel

SCALAR_TYPES: tuple[type, ...] = (bool, int, float, Decimal)
TEMPORAL_TYPES: tuple[type, ...] = (datetime, date, time)

# Static/class method names tried, in order, for the textual factory convention
FACTORY_METHOD_NAMES: tuple[str, ...] = (
    "parse",
    "value_of",
    "valueOf",
    "from_string",
    "fromString",
    "of",
)

LIST_ORIGINS: tuple[Any, ...] = (
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
)

MAPPING_ORIGINS: tuple[Any, ...] = (
    dict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)


class TypeShape(str, Enum):
    """Shapes the type converter understands."""

    SCALAR = "scalar"
    STRING = "string"
    VALUE = "value"
    OBJECT = "object"
    OBJECT_LIST = "object_list"


@dataclass(frozen=True)
class TypeDescriptor:
    """Converter-facing description of one parameter annotation.

    Attributes:
        annotation: The annotation with ``Annotated`` metadata and
            ``Optional`` stripped; this is what the JSON codec decodes into.
        shape: The converter shape.
        target: The runtime class (or container origin) behind the annotation.
        optional: True if the annotation admits None.
        factory: For VALUE shapes, the callable building an instance from text.
        factory_name: Human-readable name of the factory, for diagnostics.
        item: For OBJECT_LIST shapes, the element descriptor.
    """

    annotation: Any
    shape: TypeShape
    target: Any = None
    optional: bool = False
    factory: Callable[[str], Any] | None = None
    factory_name: str | None = None
    item: TypeDescriptor | None = None

    @property
    def type_name(self) -> str:
        """Readable name of the annotation for messages."""
        if isinstance(self.annotation, type) and typing.get_origin(self.annotation) is None:
            return self.annotation.__name__
        return repr(self.annotation)

    @classmethod
    def from_annotation(cls, annotation: Any) -> TypeDescriptor:
        """Resolve an annotation into a descriptor.

        Args:
            annotation: A resolved annotation (not a string). ``inspect.Parameter.empty``
                is treated as "no annotation".

        Returns:
            The descriptor.
        """
        annotation, optional = _unwrap(annotation)

        if annotation is inspect.Parameter.empty or annotation is Any:
            return cls(annotation=str, shape=TypeShape.STRING, target=str, optional=optional)

        origin = typing.get_origin(annotation)

        if origin is not None:
            if origin in LIST_ORIGINS:
                args = [a for a in typing.get_args(annotation) if a is not Ellipsis]
                item = cls.from_annotation(args[0] if args else Any)
                return cls(
                    annotation=annotation,
                    shape=TypeShape.OBJECT_LIST,
                    target=origin,
                    optional=optional,
                    item=item,
                )
            # Mappings, multi-member unions, Literal and other generics
            return cls(
                annotation=annotation, shape=TypeShape.OBJECT, target=origin, optional=optional
            )

        if not isinstance(annotation, type):
            return cls(
                annotation=annotation, shape=TypeShape.OBJECT, target=annotation, optional=optional
            )

        return cls._from_class(annotation, optional)

    @classmethod
    def _from_class(cls, target: type, optional: bool) -> TypeDescriptor:
        if issubclass(target, Enum):
            return cls(
                annotation=target,
                shape=TypeShape.VALUE,
                target=target,
                optional=optional,
                factory=_enum_factory(target),
                factory_name=f"{target.__name__}(value) or {target.__name__}[name]",
            )

        if target is str:
            return cls(annotation=target, shape=TypeShape.STRING, target=target, optional=optional)

        if target in SCALAR_TYPES:
            return cls(annotation=target, shape=TypeShape.SCALAR, target=target, optional=optional)

        if target in TEMPORAL_TYPES:
            # Date formats are dispatcher configuration, so the converter parses these itself
            return cls(
                annotation=target,
                shape=TypeShape.VALUE,
                target=target,
                optional=optional,
                factory_name=f"{target.__name__}.fromisoformat",
            )

        if target in LIST_ORIGINS:
            return cls(
                annotation=target,
                shape=TypeShape.OBJECT_LIST,
                target=target,
                optional=optional,
                item=cls.from_annotation(Any),
            )

        if _is_json_object_class(target):
            return cls(annotation=target, shape=TypeShape.OBJECT, target=target, optional=optional)

        if issubclass(target, (uuid.UUID, PurePath)):
            return cls(
                annotation=target,
                shape=TypeShape.VALUE,
                target=target,
                optional=optional,
                factory=target,
                factory_name=f"{target.__name__}(str)",
            )

        factory, factory_name = find_textual_factory(target)
        if factory is not None:
            return cls(
                annotation=target,
                shape=TypeShape.VALUE,
                target=target,
                optional=optional,
                factory=factory,
                factory_name=factory_name,
            )

        return cls(annotation=target, shape=TypeShape.OBJECT, target=target, optional=optional)


def find_textual_factory(target: type) -> tuple[Callable[[str], Any] | None, str | None]:
    """Find the string-to-instance factory of a value class.

    Static or class methods named in FACTORY_METHOD_NAMES are tried in
    order, then a constructor taking exactly one positional argument.

    Args:
        target: The class to inspect.

    Returns:
        (factory, description), or (None, None) if the class has no
        textual factory.
    """
    for name in FACTORY_METHOD_NAMES:
        raw = inspect.getattr_static(target, name, None)
        if not isinstance(raw, (staticmethod, classmethod)):
            continue
        factory = getattr(target, name)
        if _accepts_single_positional(factory):
            return factory, f"{target.__name__}.{name}"

    if target.__init__ is not object.__init__ or target.__new__ is not object.__new__:
        if _accepts_single_positional(target):
            return target, f"{target.__name__}(str)"

    return None, None


def _unwrap(annotation: Any) -> tuple[Any, bool]:
    """Strip ``Annotated`` metadata and ``Optional``."""
    optional = False
    while True:
        origin = typing.get_origin(annotation)
        if origin is Annotated:
            annotation = typing.get_args(annotation)[0]
            continue
        if origin is Union or origin is types.UnionType:
            members = [a for a in typing.get_args(annotation) if a is not type(None)]
            if len(members) < len(typing.get_args(annotation)):
                optional = True
            if len(members) == 1:
                annotation = members[0]
                continue
            annotation = Union[tuple(members)] if len(members) > 1 else annotation
        return annotation, optional


def _is_json_object_class(target: type) -> bool:
    if issubclass(target, BaseModel) or dataclasses.is_dataclass(target):
        return True
    if typing.is_typeddict(target):
        return True
    return issubclass(target, dict) or target in MAPPING_ORIGINS


def _accepts_single_positional(func: Callable[..., Any]) -> bool:
    """Check that a callable can be called with exactly one positional argument."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return False

    positional = [
        p
        for p in signature.parameters.values()
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    required = [
        p
        for p in signature.parameters.values()
        if p.default is inspect.Parameter.empty
        and p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]
    has_varargs = any(
        p.kind is inspect.Parameter.VAR_POSITIONAL for p in signature.parameters.values()
    )
    return len(required) <= 1 and (len(positional) >= 1 or has_varargs) and (
        not required or required[0] in positional
    )


def _enum_factory(target: type[Enum]) -> Callable[[str], Any]:
    """Build members by value, then by value coerced to the members' value type, then by name."""
    value_type = type(next(iter(target)).value) if len(target) else str

    def build(text: str) -> Enum:
        try:
            return target(text)
        except ValueError:
            pass
        if value_type is not str:
            try:
                return target(value_type(text))
            except (ValueError, TypeError):
                pass
        try:
            return target[text]
        except KeyError:
            raise ValueError(f"{text!r} is not a valid {target.__name__}") from None

    return build


__all__ = [
    "TypeShape",
    "TypeDescriptor",
    "find_textual_factory",
    "FACTORY_METHOD_NAMES",
]
