"""Lookup of candidate operations by name.

The MethodResolver answers one question for the dispatcher: which
exposed methods of a service class carry a given operation name. The
scan itself happens once per class in the shared DescriptorCache.

Matching is exact and case-sensitive. Several candidates come back when
overloads share an operation name; the binder picks among them.

Example:
    >>> resolver = MethodResolver(MockedService)
    >>> [op.method_name for op in resolver.resolve("mockedMethod")]
    ['mocked_method']
    >>> resolver.resolve("privateMethod")
    ()
"""

from __future__ import annotations

from ..logging import log_debug
from .operation_definition import (
    DescriptorCache,
    OperationDescriptor,
    ServiceDescriptor,
    get_descriptor_cache,
)


class MethodResolver:
    """Resolves operation names on one service class.

    Attributes:
        service_class: The resolved class.
    """

    def __init__(self, service_class: type, *, cache: DescriptorCache | None = None) -> None:
        """Initialize the resolver, describing the class if needed.

        Args:
            service_class: The service class.
            cache: Descriptor cache; defaults to the process-wide one.

        Raises:
            DescriptorError: If the class cannot be described.
        """
        self.service_class = service_class
        if cache is None:
            cache = get_descriptor_cache()
        self._descriptor = cache.get(service_class)

    def resolve(self, operation_name: str) -> tuple[OperationDescriptor, ...]:
        """Get every exposed operation with this exact name.

        Args:
            operation_name: External operation name.

        Returns:
            Candidate operations, empty when none.
        """
        candidates = self._descriptor.candidates(operation_name)
        log_debug(
            f"Resolved {operation_name}: {len(candidates)} candidates",
            {"service": self.service_class.__name__, "operation": operation_name},
        )
        return candidates

    def operation_names(self) -> list[str]:
        """Sorted names of every exposed operation."""
        return self._descriptor.operation_names()

    def describe(self) -> ServiceDescriptor:
        return self._descriptor

    def __repr__(self) -> str:
        return f"MethodResolver({self.service_class.__name__})"


__all__ = ["MethodResolver"]
