"""Operation registry for service classes.

This package turns a plain service class into the tables the
dispatcher works from:

- operation_definition: descriptors built once per class and cached
- method_resolver: candidate lookup by operation name
- parameter_binder: matching parameter maps against one candidate

Example:
    >>> from opwire.registry import MethodResolver, ParameterBinder
    >>>
    >>> resolver = MethodResolver(Accounts)
    >>> binder = ParameterBinder()
    >>> results = [
    ...     binder.bind(op, {"accountId": "7"}, {})
    ...     for op in resolver.resolve("getBalance")
    ... ]
"""

from __future__ import annotations

from .method_resolver import MethodResolver
from .operation_definition import (
    DescriptorCache,
    OperationDescriptor,
    ParameterDescriptor,
    ServiceDescriptor,
    describe_service,
    get_descriptor_cache,
)
from .parameter_binder import BindOutcome, BindResult, BoundArgument, ParameterBinder

__all__ = [
    # Descriptors
    "ParameterDescriptor",
    "OperationDescriptor",
    "ServiceDescriptor",
    "DescriptorCache",
    "describe_service",
    "get_descriptor_cache",
    # Resolution
    "MethodResolver",
    # Binding
    "BindOutcome",
    "BindResult",
    "BoundArgument",
    "ParameterBinder",
]
