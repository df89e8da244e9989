"""Classification of exceptions raised by invoked operations.

When an operation raises, the dispatcher hands the exception to a
FailureClassifier, which turns it into exactly one categorized failure.

Classification order:
1. The configured ExceptionMapper, on the exception itself
2. The mapper again, on the exception's direct ``__cause__``
3. An OperationFailure already raised (directly or as the direct cause)
   passes through unchanged
4. Anything else becomes InternalServerError with the exception as cause

Example:
    >>> def map_lookup_errors(exc):
    ...     if isinstance(exc, KeyError):
    ...         return NotFoundError(f"No record {exc}")
    ...     return None
    ...
    >>> classifier = FailureClassifier(map_lookup_errors)
    >>> classifier.classify(KeyError("7")).kind
    <FailureKind.NOT_FOUND: 'not_found'>
    >>> classifier.classify(ZeroDivisionError()).kind
    <FailureKind.INTERNAL_SERVER_ERROR: 'internal_server_error'>
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from ..logging import log_debug, log_warn
from . import InternalServerError, OperationFailure


class ExceptionMapper(ABC):
    """Maps service-specific exceptions to categorized failures."""

    @abstractmethod
    def map_exception(self, exception: BaseException) -> OperationFailure | None:
        """Map an exception.

        Args:
            exception: The raised exception.

        Returns:
            A failure to report, or None to leave the exception unmapped.
        """
        ...


class CallableExceptionMapper(ExceptionMapper):
    """Adapts a plain function to the ExceptionMapper interface."""

    def __init__(self, func: Callable[[BaseException], OperationFailure | None]) -> None:
        self._func = func

    def map_exception(self, exception: BaseException) -> OperationFailure | None:
        return self._func(exception)

    def __repr__(self) -> str:
        return f"CallableExceptionMapper({getattr(self._func, '__name__', self._func)!r})"


ExceptionMapperLike = ExceptionMapper | Callable[[BaseException], OperationFailure | None]


def as_exception_mapper(mapper: ExceptionMapperLike | None) -> ExceptionMapper | None:
    """Normalize a mapper or plain callable to an ExceptionMapper."""
    if mapper is None or isinstance(mapper, ExceptionMapper):
        return mapper
    if callable(mapper):
        return CallableExceptionMapper(mapper)
    raise TypeError(f"Expected an ExceptionMapper or callable, got {type(mapper).__name__}")


class FailureClassifier:
    """Turns exceptions into categorized failures.

    Example:
        >>> classifier = FailureClassifier()
        >>> classifier.classify(NotFoundError("gone")).message
        'gone'
        >>> classifier.classify(ValueError("boom")).message
        'Internal server error'
    """

    def __init__(self, exception_mapper: ExceptionMapperLike | None = None) -> None:
        """Initialize the classifier.

        Args:
            exception_mapper: Optional mapper consulted before the defaults.
        """
        self._mapper = as_exception_mapper(exception_mapper)

    @property
    def exception_mapper(self) -> ExceptionMapper | None:
        return self._mapper

    def classify(self, exception: BaseException) -> OperationFailure:
        """Classify an exception.

        Args:
            exception: The exception raised by the operation.

        Returns:
            The categorized failure to raise.
        """
        return self._classify(exception)[0]

    def classify_details(self, exception: BaseException) -> dict[str, str]:
        """Classify an exception and return full details.

        Args:
            exception: The exception to classify

        Returns:
            Dictionary with classification details:
            - error_type: Exception class name
            - kind: The failure kind
            - classification: How the classification was determined

        Example:
            >>> FailureClassifier().classify_details(ValueError("x"))
            {'error_type': 'ValueError', 'kind': 'internal_server_error',
             'classification': 'default'}
        """
        failure, classification = self._classify(exception)
        return {
            "error_type": type(exception).__name__,
            "kind": failure.kind.value,
            "classification": classification,
        }

    def _classify(self, exception: BaseException) -> tuple[OperationFailure, str]:
        cause = exception.__cause__

        mapped = self._apply_mapper(exception)
        if mapped is not None:
            return mapped, "mapped"

        if cause is not None:
            mapped = self._apply_mapper(cause)
            if mapped is not None:
                return mapped, "mapped_cause"

        if isinstance(exception, OperationFailure):
            return exception, "failure"
        if isinstance(cause, OperationFailure):
            return cause, "failure_cause"

        return InternalServerError(cause=exception), "default"

    def _apply_mapper(self, exception: BaseException) -> OperationFailure | None:
        if self._mapper is None:
            return None

        try:
            mapped = self._mapper.map_exception(exception)
        except Exception as e:
            log_warn(
                f"Exception mapper failed on {type(exception).__name__}: {e}",
                {"error_type": type(e).__name__},
            )
            return None

        if mapped is None:
            return None
        if not isinstance(mapped, OperationFailure):
            log_warn(
                f"Exception mapper returned {type(mapped).__name__}, ignoring",
                {"error_type": type(exception).__name__},
            )
            return None

        log_debug(f"Mapped {type(exception).__name__} to {mapped.kind.value}")
        return mapped


__all__ = [
    "ExceptionMapper",
    "CallableExceptionMapper",
    "ExceptionMapperLike",
    "as_exception_mapper",
    "FailureClassifier",
]
