"""Matching of supplied parameter maps against one operation.

A call supplies two maps: non-header parameters (query string or body
fields) and header parameters. An operation accepts a call when the
non-header map names all and only its non-header parameters, apart
from those with defaults which may be left out. Header parameters are
always optional.

Binding has three outcomes:

- MATCH: the maps satisfy the operation; arguments are ready to convert
- NO_MATCH: the operation does not take these parameters
- HEADER_MISMATCH: the operation would match if some entries were moved
  between the header map and the non-header map

Example:
    >>> binder = ParameterBinder()
    >>> result = binder.bind(operation, {"parameter": "x"}, {})
    >>> result.outcome
    <BindOutcome.MATCH: 'match'>
    >>> [a.raw for a in result.arguments]
    ['x']
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from .operation_definition import OperationDescriptor, ParameterDescriptor


class BindOutcome(str, Enum):
    """Result of binding one operation."""

    MATCH = "match"
    NO_MATCH = "no_match"
    HEADER_MISMATCH = "header_mismatch"


@dataclass(frozen=True)
class BoundArgument:
    """Raw value selected for one parameter.

    Attributes:
        descriptor: The parameter.
        raw: The supplied text, or None.
        supplied: True if the key was present in its map.
    """

    descriptor: ParameterDescriptor
    raw: str | None
    supplied: bool


@dataclass(frozen=True)
class BindResult:
    """Outcome of binding parameter maps to one operation.

    Attributes:
        operation: The candidate operation.
        outcome: MATCH, NO_MATCH or HEADER_MISMATCH.
        arguments: Bound arguments in declaration order (MATCH only).
        unknown: Non-header keys the operation does not declare.
        missing: Required parameters that were not supplied.
        misplaced: Keys supplied in the wrong map.
    """

    operation: OperationDescriptor
    outcome: BindOutcome
    arguments: tuple[BoundArgument, ...] = ()
    unknown: tuple[str, ...] = ()
    missing: tuple[str, ...] = ()
    misplaced: tuple[str, ...] = ()

    @property
    def matched(self) -> bool:
        return self.outcome is BindOutcome.MATCH


class ParameterBinder:
    """Binds parameter maps to operations. Stateless."""

    def bind(
        self,
        operation: OperationDescriptor,
        non_header: Mapping[str, str | None] | None = None,
        header: Mapping[str, str | None] | None = None,
    ) -> BindResult:
        """Bind the supplied maps to one operation.

        Args:
            operation: Candidate operation.
            non_header: Non-header parameters by external name.
            header: Header parameters by external name.

        Returns:
            The bind result.
        """
        non_header = non_header or {}
        header = header or {}

        declared_non_header = operation.non_header_names()
        declared_header = operation.header_names()
        required = operation.required_names()

        from_header = [k for k in header if k in declared_non_header and k not in non_header]
        from_body = [k for k in non_header if k in declared_header]
        misplaced = tuple(sorted(set(from_header) | set(from_body)))

        supplied = set(non_header) - set(from_body)
        unknown = tuple(sorted(supplied - declared_non_header))
        if unknown:
            return BindResult(operation, BindOutcome.NO_MATCH, unknown=unknown)

        if misplaced:
            relocated = supplied | set(from_header)
            outcome = (
                BindOutcome.HEADER_MISMATCH if required <= relocated else BindOutcome.NO_MATCH
            )
            return BindResult(
                operation,
                outcome,
                missing=tuple(sorted(required - relocated)),
                misplaced=misplaced,
            )

        missing = tuple(sorted(required - supplied))
        if missing:
            return BindResult(operation, BindOutcome.NO_MATCH, missing=missing)

        arguments = []
        for parameter in operation.parameters:
            source = header if parameter.header else non_header
            present = parameter.name in source
            arguments.append(
                BoundArgument(
                    descriptor=parameter,
                    raw=source[parameter.name] if present else None,
                    supplied=present,
                )
            )

        return BindResult(operation, BindOutcome.MATCH, arguments=tuple(arguments))


__all__ = ["BindOutcome", "BoundArgument", "BindResult", "ParameterBinder"]
