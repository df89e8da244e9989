"""Operation dispatcher: the entry point for invoking a service by name.

A dispatcher is built for one service class. Each call goes through
the same steps:

1. Resolve candidates by operation name (NotFound when there are none)
2. Bind the parameter maps against every candidate; exactly one must
   match (BadRequest when several do, or when the only near-match put
   a parameter in the wrong map; NotFound otherwise)
3. Convert each bound raw value to its declared type (BadRequest on
   failure)
4. Obtain the target from the factory and invoke the method
5. Classify anything the method raises into one categorized failure

Example:
    >>> from opwire import OperationDispatcher
    >>>
    >>> dispatcher = OperationDispatcher(Accounts)
    >>> dispatcher.invoke_operation("getBalance", {"accountId": "7"})
    120
    >>> dispatcher.invoke_operation(
    ...     "getBalance", {"accountId": "7"}, {"session": "abc"}
    ... )
    120
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from .conversion import JsonCodec, TypeConverter, TypeShape
from .errors import BadRequestError, InternalServerError, NotFoundError, OperationFailure
from .errors.failure_classifier import ExceptionMapperLike, FailureClassifier
from .events import DispatchEvents, EventNames
from .exceptions import ConversionError
from .logging import log_debug, log_error, log_info
from .registry import (
    BindOutcome,
    BoundArgument,
    MethodResolver,
    OperationDescriptor,
    ParameterBinder,
    ParameterDescriptor,
)
from .registry.operation_definition import CLASS_BINDING, STATIC_BINDING
from .types import DispatchConfig

ABSENCE_REJECTING_SHAPES = frozenset({TypeShape.VALUE, TypeShape.OBJECT, TypeShape.OBJECT_LIST})


class OperationDispatcher:
    """Invokes operations of one service class by name.

    The dispatcher holds no per-call state; concurrent calls are safe
    as long as the factory and the service methods are.

    Attributes:
        service_class: The dispatched class.
        config: Dispatch configuration.
    """

    def __init__(
        self,
        service_class: type,
        factory: Callable[[], Any] | None = None,
        *,
        json_codec: JsonCodec | None = None,
        exception_mapper: ExceptionMapperLike | None = None,
        config: DispatchConfig | None = None,
        events: DispatchEvents | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            service_class: The service class to expose.
            factory: Zero-argument callable returning the target instance;
                defaults to calling the class.
            json_codec: Codec for object parameters.
            exception_mapper: Mapper (or plain callable) for raised exceptions.
            config: Dispatch configuration.
            events: Event bus for lifecycle events.

        Raises:
            DescriptorError: If the class cannot be described.
        """
        self.service_class = service_class
        self.config = config or DispatchConfig()
        self._factory = factory or service_class
        self._resolver = MethodResolver(service_class)
        self._binder = ParameterBinder()
        self._converter = TypeConverter(json_codec, date_formats=self.config.date_formats)
        self._classifier = FailureClassifier(exception_mapper)
        self._events = events

    @classmethod
    def for_class(
        cls,
        service_class: type,
        factory: Callable[[], Any] | None = None,
        **kwargs: Any,
    ) -> OperationDispatcher:
        """Create a dispatcher for a class and instance factory."""
        return cls(service_class, factory, **kwargs)

    @property
    def resolver(self) -> MethodResolver:
        return self._resolver

    @property
    def converter(self) -> TypeConverter:
        return self._converter

    @property
    def classifier(self) -> FailureClassifier:
        return self._classifier

    def operation_names(self) -> list[str]:
        """Sorted names of every exposed operation."""
        return self._resolver.operation_names()

    def invoke_operation(
        self,
        operation_name: str,
        non_header_parameters: Mapping[str, str | None] | None = None,
        header_parameters: Mapping[str, str | None] | None = None,
    ) -> Any:
        """Invoke an operation by name.

        Args:
            operation_name: External operation name.
            non_header_parameters: Parameters by external name.
            header_parameters: Header parameters by external name.

        Returns:
            The method's return value (None for procedures).

        Raises:
            NotFoundError: No exposed operation takes these parameters.
            BadRequestError: Ambiguous call, misplaced or unconvertible parameter.
            InternalServerError: The factory or the operation failed.
        """
        non_header = dict(non_header_parameters or {})
        header = dict(header_parameters or {})
        service = self.service_class.__name__

        log_info(f"Invoking {operation_name}", {"service": service, "operation": operation_name})
        if self.config.log_parameters:
            log_debug(
                f"Parameters for {operation_name}: {non_header}, headers: {header}",
                {"service": service, "operation": operation_name},
            )

        try:
            operation, arguments = self._select(operation_name, non_header, header)
            args, kwargs = self._convert(operation, arguments)
            target = self._target(operation)
        except OperationFailure as failure:
            self._publish_failure(operation_name, failure)
            raise

        self._publish(
            EventNames.OPERATION_INVOKED,
            service=service,
            operation=operation_name,
            parameters=non_header,
        )

        try:
            result = target(*args, **kwargs)
        except Exception as e:
            failure = self._classifier.classify(e)
            log_error(
                f"Operation {operation_name} raised {type(e).__name__}: {e}",
                {"service": service, "operation": operation_name, "error_type": type(e).__name__},
            )
            self._publish_failure(operation_name, failure)
            if failure is e:
                raise
            raise failure from e

        self._publish(
            EventNames.OPERATION_COMPLETED,
            service=service,
            operation=operation_name,
            result=result,
        )
        return result

    def _select(
        self,
        operation_name: str,
        non_header: dict[str, str | None],
        header: dict[str, str | None],
    ) -> tuple[OperationDescriptor, tuple[BoundArgument, ...]]:
        candidates = self._resolver.resolve(operation_name)
        if not candidates:
            raise NotFoundError(
                f"Operation '{operation_name}' not found",
                metadata={"operation": operation_name},
            )

        results = [self._binder.bind(op, non_header, header) for op in candidates]
        matches = [r for r in results if r.outcome is BindOutcome.MATCH]

        if len(matches) > 1:
            raise BadRequestError(
                "Unable to distinguish methods",
                metadata={
                    "operation": operation_name,
                    "candidates": [r.operation.signature_text() for r in matches],
                },
            )

        if not matches:
            misplaced = sorted(
                {
                    name
                    for r in results
                    if r.outcome is BindOutcome.HEADER_MISMATCH
                    for name in r.misplaced
                }
            )
            if misplaced:
                raise BadRequestError(
                    f"Parameters [{', '.join(misplaced)}] of operation '{operation_name}' "
                    "were supplied in the wrong parameter group",
                    metadata={"operation": operation_name, "parameters": misplaced},
                )
            raise NotFoundError(
                f"Operation '{operation_name}' not found for parameters "
                f"[{', '.join(sorted(non_header))}]",
                metadata={"operation": operation_name, "parameters": sorted(non_header)},
            )

        match = matches[0]
        log_debug(f"Selected {match.operation.signature_text()}")
        return match.operation, match.arguments

    def _convert(
        self,
        operation: OperationDescriptor,
        arguments: tuple[BoundArgument, ...],
    ) -> tuple[list[Any], dict[str, Any]]:
        args: list[Any] = []
        kwargs: dict[str, Any] = {}

        for argument in arguments:
            parameter = argument.descriptor

            if not argument.supplied and parameter.has_default:
                if parameter.positional_only:
                    args.append(parameter.default)
                continue

            try:
                value = self._converter.convert(
                    parameter.type, argument.raw, parameter=parameter.name
                )
            except ConversionError as e:
                raise BadRequestError(
                    f"Parameter '{parameter.name}' of operation '{operation.operation_name}' "
                    f"cannot be converted from [{argument.raw}] to {parameter.type.type_name}",
                    metadata={"parameter": parameter.name, "raw_value": argument.raw},
                ) from e

            if value is None and self._rejects_absence(parameter):
                raise BadRequestError(
                    f"Parameter '{parameter.name}' of operation '{operation.operation_name}' "
                    f"is required but received [{argument.raw}]",
                    metadata={"parameter": parameter.name, "raw_value": argument.raw},
                )

            if parameter.positional_only:
                args.append(value)
            else:
                kwargs[parameter.python_name] = value

        return args, kwargs

    @staticmethod
    def _rejects_absence(parameter: ParameterDescriptor) -> bool:
        """Check whether an absent value must be refused for this parameter."""
        return (
            parameter.required
            and not parameter.header
            and not parameter.type.optional
            and parameter.type.shape in ABSENCE_REJECTING_SHAPES
        )

    def _target(self, operation: OperationDescriptor) -> Callable[..., Any]:
        if operation.binding == STATIC_BINDING:
            return operation.function
        if operation.binding == CLASS_BINDING:
            return operation.function.__get__(self.service_class, self.service_class)

        try:
            instance = self._factory()
        except Exception as e:
            log_error(
                f"Factory for {self.service_class.__name__} failed: {e}",
                {"service": self.service_class.__name__, "error_type": type(e).__name__},
            )
            raise InternalServerError(cause=e) from e

        return operation.function.__get__(instance, type(instance))

    def _publish(self, event: str, **payload: Any) -> None:
        if self._events is not None:
            self._events.publish(event, **payload)

    def _publish_failure(self, operation_name: str, failure: OperationFailure) -> None:
        self._publish(
            EventNames.OPERATION_FAILED,
            service=self.service_class.__name__,
            operation=operation_name,
            failure=failure,
        )

    def __repr__(self) -> str:
        return f"OperationDispatcher({self.service_class.__name__})"


__all__ = ["OperationDispatcher"]
