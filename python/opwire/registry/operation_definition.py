"""Operation descriptors built from a service class.

This module scans a service class once and records everything the
dispatcher needs per call: which methods are exposed, under which
operation names, and how each parameter is named, typed and sourced.
Nothing downstream inspects annotations or signatures again.

A method is exposed when:
- its name does not start with an underscore
- it is not marked ``@web_method(exclude=True)``
- it is defined on the class itself or on an ancestor that is not a
  hidden base (``object``, builtins, or ``@hidden_base`` classes)

Example:
    >>> descriptor = describe_service(Accounts)
    >>> descriptor.operation_names()
    ['getBalance', 'transfer']
    >>> [p.name for p in descriptor.by_name["getBalance"][0].parameters]
    ['accountId', 'session']
"""

from __future__ import annotations

import inspect
import threading
import types
import typing
import weakref
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Annotated, Any, Union

from ..annotations import HIDDEN_BASE_ATTRIBUTE, WebParam, is_hidden_base, web_method_options
from ..conversion.type_descriptor import TypeDescriptor
from ..exceptions import DescriptorError
from ..logging import log_debug

INSTANCE_BINDING = "instance"
STATIC_BINDING = "static"
CLASS_BINDING = "class"


@dataclass(frozen=True)
class ParameterDescriptor:
    """One exposed parameter of an operation.

    Attributes:
        name: External parameter name (the key in the parameter maps).
        python_name: Name of the Python parameter.
        kind: The inspect parameter kind.
        type: Converter-facing type descriptor.
        header: True if sourced from the header map.
        required: True if the parameter has no default and is not a header.
        default: The Python default, or ``inspect.Parameter.empty``.
    """

    name: str
    python_name: str
    kind: inspect._ParameterKind
    type: TypeDescriptor
    header: bool = False
    required: bool = True
    default: Any = inspect.Parameter.empty

    @property
    def has_default(self) -> bool:
        """Check if the Python parameter declares a default."""
        return self.default is not inspect.Parameter.empty

    @property
    def positional_only(self) -> bool:
        """Check if the parameter must be passed positionally."""
        return self.kind is inspect.Parameter.POSITIONAL_ONLY


@dataclass(frozen=True)
class OperationDescriptor:
    """One exposed method of a service class.

    Attributes:
        operation_name: External operation name.
        method_name: Attribute name of the method on the class.
        parameters: Exposed parameters in declaration order.
        return_type: The return annotation (``inspect.Signature.empty`` if none).
        declaring_class: Class whose ``__dict__`` holds the method.
        function: The underlying function.
        binding: "instance", "static" or "class".
    """

    operation_name: str
    method_name: str
    parameters: tuple[ParameterDescriptor, ...]
    return_type: Any
    declaring_class: type
    function: Callable[..., Any]
    binding: str = INSTANCE_BINDING

    def header_names(self) -> frozenset[str]:
        """External names of header parameters."""
        return frozenset(p.name for p in self.parameters if p.header)

    def non_header_names(self) -> frozenset[str]:
        """External names of non-header parameters."""
        return frozenset(p.name for p in self.parameters if not p.header)

    def required_names(self) -> frozenset[str]:
        """External names of required (non-header, no default) parameters."""
        return frozenset(p.name for p in self.parameters if p.required)

    def parameter(self, name: str) -> ParameterDescriptor | None:
        """Find a parameter by external name."""
        for parameter in self.parameters:
            if parameter.name == name:
                return parameter
        return None

    def signature_text(self) -> str:
        """Readable signature for logs, e.g. ``getBalance(accountId, [session])``."""
        names = [f"[{p.name}]" if p.header else p.name for p in self.parameters]
        return f"{self.operation_name}({', '.join(names)})"


@dataclass(frozen=True)
class ServiceDescriptor:
    """All operations a service class exposes.

    Attributes:
        service_class: The described class.
        operations: Operation descriptors in discovery order.
        by_name: Operation name to the descriptors sharing it.
    """

    service_class: type
    operations: tuple[OperationDescriptor, ...]
    by_name: Mapping[str, tuple[OperationDescriptor, ...]] = field(default_factory=dict)

    def operation_names(self) -> list[str]:
        """Exposed operation names, sorted."""
        return sorted(self.by_name)

    def candidates(self, operation_name: str) -> tuple[OperationDescriptor, ...]:
        """Descriptors whose external name equals operation_name exactly."""
        return self.by_name.get(operation_name, ())


def describe_service(service_class: type) -> ServiceDescriptor:
    """Scan a service class and build its descriptor.

    Args:
        service_class: The class to describe.

    Returns:
        The service descriptor.

    Raises:
        DescriptorError: If the class or one of its methods cannot be described.
    """
    if not isinstance(service_class, type):
        raise DescriptorError(f"Expected a class, got {service_class!r}")
    if service_class.__dict__.get(HIDDEN_BASE_ATTRIBUTE, False):
        raise DescriptorError(
            f"{service_class.__name__} is marked hidden_base and exposes no operations; "
            "dispatch a subclass instead"
        )

    operations: list[OperationDescriptor] = []
    seen: set[str] = set()

    for klass in service_class.__mro__:
        hidden = is_hidden_base(klass)
        for attribute, member in klass.__dict__.items():
            # Nearest definition wins, even when it is hidden or private
            if attribute in seen:
                continue
            seen.add(attribute)

            if hidden or attribute.startswith("_"):
                continue

            operation = _describe_member(klass, attribute, member)
            if operation is not None:
                operations.append(operation)

    by_name: dict[str, list[OperationDescriptor]] = {}
    for operation in operations:
        by_name.setdefault(operation.operation_name, []).append(operation)

    log_debug(
        f"Described {service_class.__name__}: {len(operations)} operations",
        {"service": service_class.__name__},
    )

    return ServiceDescriptor(
        service_class=service_class,
        operations=tuple(operations),
        by_name=types.MappingProxyType({k: tuple(v) for k, v in by_name.items()}),
    )


def _describe_member(klass: type, attribute: str, member: Any) -> OperationDescriptor | None:
    if isinstance(member, staticmethod):
        binding, function = STATIC_BINDING, member.__func__
    elif isinstance(member, classmethod):
        binding, function = CLASS_BINDING, member.__func__
    elif inspect.isfunction(member):
        binding, function = INSTANCE_BINDING, member
    else:
        return None

    options = web_method_options(member)
    if options is not None and options.exclude:
        return None

    operation_name = (options.operation_name if options else None) or attribute

    try:
        hints = typing.get_type_hints(function, include_extras=True)
        signature = inspect.signature(function)
    except (NameError, TypeError, ValueError) as e:
        raise DescriptorError(
            f"Cannot describe {klass.__name__}.{attribute}: {e}"
        ) from e

    declared = list(signature.parameters.values())
    if binding != STATIC_BINDING:
        # Drop self / cls
        declared = declared[1:]

    parameters: list[ParameterDescriptor] = []
    names: set[str] = set()
    for parameter in declared:
        if parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue

        annotation = hints.get(parameter.name, inspect.Parameter.empty)
        web_param = _find_web_param(annotation, f"{klass.__name__}.{attribute}")
        external_name = (web_param.name if web_param else None) or parameter.name
        header = bool(web_param and web_param.header)

        if external_name in names:
            raise DescriptorError(
                f"Duplicate parameter name '{external_name}' in {klass.__name__}.{attribute}"
            )
        names.add(external_name)

        parameters.append(
            ParameterDescriptor(
                name=external_name,
                python_name=parameter.name,
                kind=parameter.kind,
                type=TypeDescriptor.from_annotation(annotation),
                header=header,
                required=parameter.default is inspect.Parameter.empty and not header,
                default=parameter.default,
            )
        )

    return OperationDescriptor(
        operation_name=operation_name,
        method_name=attribute,
        parameters=tuple(parameters),
        return_type=hints.get("return", signature.return_annotation),
        declaring_class=klass,
        function=function,
        binding=binding,
    )


def _find_web_param(annotation: Any, where: str) -> WebParam | None:
    """Find WebParam metadata in an annotation, looking through Optional."""
    origin = typing.get_origin(annotation)

    if origin is Annotated:
        args = typing.get_args(annotation)
        found = [m for m in args[1:] if isinstance(m, WebParam)]
        if len(found) > 1:
            raise DescriptorError(f"WebParam given more than once on a parameter of {where}")
        if found:
            return found[0]
        return _find_web_param(args[0], where)

    if origin is Union or origin is types.UnionType:
        for member in typing.get_args(annotation):
            found_member = _find_web_param(member, where)
            if found_member is not None:
                return found_member

    return None


class DescriptorCache:
    """Process-wide cache of service descriptors, one per class.

    Descriptors are built on first request and never mutated, so reads
    after the first build need no coordination. Entries go away with
    their class.
    """

    def __init__(self) -> None:
        self._descriptors: weakref.WeakKeyDictionary[type, ServiceDescriptor] = (
            weakref.WeakKeyDictionary()
        )
        self._lock = threading.RLock()

    def get(self, service_class: type) -> ServiceDescriptor:
        """Get (or build) the descriptor for a class.

        Args:
            service_class: The service class.

        Returns:
            The cached descriptor.
        """
        descriptor = self._descriptors.get(service_class)
        if descriptor is not None:
            return descriptor

        with self._lock:
            descriptor = self._descriptors.get(service_class)
            if descriptor is None:
                descriptor = describe_service(service_class)
                self._descriptors[service_class] = descriptor
            return descriptor

    def __contains__(self, service_class: type) -> bool:
        return service_class in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)

    def clear(self) -> None:
        """Drop every cached descriptor."""
        with self._lock:
            self._descriptors.clear()


# Singleton instance for convenience
_default_cache: DescriptorCache | None = None


def get_descriptor_cache() -> DescriptorCache:
    """Get the default descriptor cache instance.

    Returns:
        The singleton DescriptorCache instance
    """
    global _default_cache
    if _default_cache is None:
        _default_cache = DescriptorCache()
    return _default_cache


__all__ = [
    "ParameterDescriptor",
    "OperationDescriptor",
    "ServiceDescriptor",
    "DescriptorCache",
    "describe_service",
    "get_descriptor_cache",
]
