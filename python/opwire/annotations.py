"""Markers that shape how a service class is exposed.

Service classes stay plain Python: every public method is an operation
under its own name unless a marker says otherwise.

- ``@web_method`` renames an operation or excludes it
- ``WebParam`` (inside ``typing.Annotated``) renames a parameter or
  marks it as a header parameter
- ``@hidden_base`` keeps a base class's methods out of every subclass

Example:
    >>> from typing import Annotated
    >>> from opwire.annotations import WebParam, hidden_base, web_method
    >>>
    >>> @hidden_base
    ... class Auditable:
    ...     def audit_trail(self) -> list[str]:
    ...         return []
    ...
    >>> class Accounts(Auditable):
    ...     @web_method(operation_name="getBalance")
    ...     def balance(
    ...         self,
    ...         account: Annotated[str, WebParam("accountId")],
    ...         session: Annotated[str | None, WebParam(header=True)] = None,
    ...     ) -> int:
    ...         return 0
    ...
    ...     @web_method(exclude=True)
    ...     def reindex(self) -> None:
    ...         ...
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar, overload

WEB_METHOD_ATTRIBUTE = "__opwire_web_method__"
HIDDEN_BASE_ATTRIBUTE = "__opwire_hidden__"

F = TypeVar("F", bound=Callable[..., Any])
C = TypeVar("C", bound=type)


@dataclass(frozen=True)
class WebMethodOptions:
    """Options recorded on a function by ``@web_method``.

    Attributes:
        operation_name: External name override; None keeps the method name.
        exclude: When True the method is never exposed.
    """

    operation_name: str | None = None
    exclude: bool = False


@dataclass(frozen=True)
class WebParam:
    """Parameter metadata, used inside ``typing.Annotated``.

    Attributes:
        name: External parameter name; None keeps the Python name.
        header: True if the value comes from the header map.

    Example:
        >>> def lookup(self, key: Annotated[int, WebParam("accountKey")]) -> str: ...
    """

    name: str | None = None
    header: bool = False


@overload
def web_method(operation_name: F, *, exclude: bool = False) -> F: ...


@overload
def web_method(
    operation_name: str | None = None, *, exclude: bool = False
) -> Callable[[F], F]: ...


def web_method(operation_name: Any = None, *, exclude: bool = False) -> Any:
    """Mark a method as an operation, optionally renaming or excluding it.

    Usable bare (``@web_method``) or called (``@web_method("name")``).
    An empty operation name means "no override".

    Args:
        operation_name: External name for the operation.
        exclude: Hide the method from every dispatcher.

    Returns:
        The decorated function, or a decorator.
    """
    if callable(operation_name) and not isinstance(operation_name, str):
        func = operation_name
        _record_options(func, WebMethodOptions(exclude=exclude))
        return func

    def decorator(func: F) -> F:
        _record_options(func, WebMethodOptions(operation_name or None, exclude))
        return func

    return decorator


def hidden_base(cls: C) -> C:
    """Mark a class whose own methods are never exposed through subclasses.

    Only the class's own ``__dict__`` is flagged, so subclasses of a
    hidden base are still exposed normally.

    A hidden base cannot itself be dispatched; describing it raises
    DescriptorError.
    """
    setattr(cls, HIDDEN_BASE_ATTRIBUTE, True)
    return cls


def web_method_options(member: Any) -> WebMethodOptions | None:
    """Return the ``@web_method`` options recorded on a class member."""
    func = member.__func__ if isinstance(member, (staticmethod, classmethod)) else member
    return getattr(func, WEB_METHOD_ATTRIBUTE, None)


def is_hidden_base(cls: type) -> bool:
    """Check whether a class contributes no operations to its subclasses."""
    if cls is object or cls.__module__ == "builtins":
        return True
    return bool(cls.__dict__.get(HIDDEN_BASE_ATTRIBUTE, False))


def _record_options(member: Any, options: WebMethodOptions) -> None:
    func = member.__func__ if isinstance(member, (staticmethod, classmethod)) else member
    setattr(func, WEB_METHOD_ATTRIBUTE, options)


__all__ = [
    "WebMethodOptions",
    "WebParam",
    "web_method",
    "hidden_base",
    "web_method_options",
    "is_hidden_base",
]
