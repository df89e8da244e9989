"""Categorized failures raised by the operation dispatcher.

Every failure that reaches the caller of ``invoke_operation`` is one of
three kinds, so transports can map them without inspecting service
specific exception types:

- NotFoundError: the operation is absent, excluded, non-public, or no
  binding matches the supplied parameters
- BadRequestError: the request is ambiguous, misplaces a header
  parameter, or carries a value that cannot be converted
- InternalServerError: the invoked operation failed

Example:
    >>> from opwire.errors import BadRequestError, NotFoundError
    >>>
    >>> try:
    ...     dispatcher.invoke_operation("lookup", {"id": "seven"})
    ... except BadRequestError as e:
    ...     print(e.message)
    ... except NotFoundError:
    ...     print("no such operation")
"""

from __future__ import annotations

from typing import Any

from ..exceptions import OpwireError
from ..types import FailureKind


class OperationFailure(OpwireError):
    """Base class for categorized failures.

    Attributes:
        kind: The failure category.
        message: Human-readable error message
        metadata: Additional error context
    """

    kind: FailureKind = FailureKind.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        *,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the failure.

        Args:
            message: Error message
            metadata: Additional context
        """
        super().__init__(message)
        self.message = message
        self.metadata = metadata or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization.

        Returns:
            Dictionary with error details
        """
        return {
            "error_type": self.__class__.__name__,
            "kind": self.kind.value,
            "message": self.message,
            "metadata": self.metadata,
        }


class NotFoundError(OperationFailure):
    """No exposed operation matches the request.

    Example:
        >>> raise NotFoundError("Operation 'deleteEverything' not found")
    """

    kind = FailureKind.NOT_FOUND


class BadRequestError(OperationFailure):
    """The request cannot be served as sent.

    Raised for ambiguous overloads, header parameters supplied in the
    wrong map, and parameter values that cannot be converted.

    Example:
        >>> raise BadRequestError("Unable to distinguish methods")
    """

    kind = FailureKind.BAD_REQUEST


class InternalServerError(OperationFailure):
    """The invoked operation failed.

    The message is deliberately generic; diagnostic detail stays on
    ``cause`` for logging.

    Attributes:
        cause: The original exception, if any.

    Example:
        >>> try:
        ...     service.lookup("7")
        ... except KeyError as e:
        ...     raise InternalServerError(cause=e) from e
    """

    kind = FailureKind.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str = "Internal server error",
        *,
        cause: BaseException | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, metadata=metadata)
        self.cause = cause
        if cause is not None and self.__cause__ is None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.cause is not None:
            data["cause_type"] = type(self.cause).__name__
        return data


__all__ = [
    "OperationFailure",
    "NotFoundError",
    "BadRequestError",
    "InternalServerError",
]
