"""Tests for categorized failures and the FailureClassifier."""

from __future__ import annotations

import pytest

from opwire import (
    BadRequestError,
    CallableExceptionMapper,
    ExceptionMapper,
    FailureClassifier,
    FailureKind,
    InternalServerError,
    NotFoundError,
    OperationFailure,
    OpwireError,
)
from opwire.errors.failure_classifier import as_exception_mapper

# =============================================================================
# Test Mappers
# =============================================================================


class TimeoutMapper(ExceptionMapper):
    """Maps TimeoutError to BadRequest."""

    def map_exception(self, exception):
        if isinstance(exception, TimeoutError):
            return BadRequestError("Upstream timed out")
        return None


class RaisingMapper(ExceptionMapper):
    def map_exception(self, exception):
        raise RuntimeError("mapper is broken")


def wrong_type_mapper(exception):
    return "not a failure"


def raise_with_cause(exc, cause):
    try:
        try:
            raise cause
        except type(cause) as inner:
            raise exc from inner
    except type(exc) as outer:
        return outer


# =============================================================================
# Failure Tests
# =============================================================================


class TestOperationFailures:
    """Tests for the categorized failure types."""

    @pytest.mark.parametrize(
        ("failure_type", "kind"),
        [
            (NotFoundError, FailureKind.NOT_FOUND),
            (BadRequestError, FailureKind.BAD_REQUEST),
            (InternalServerError, FailureKind.INTERNAL_SERVER_ERROR),
        ],
    )
    def test_kinds(self, failure_type, kind):
        failure = failure_type("message")
        assert failure.kind is kind
        assert isinstance(failure, OperationFailure)
        assert isinstance(failure, OpwireError)

    def test_message_and_metadata(self):
        failure = BadRequestError("bad", metadata={"parameter": "id"})
        assert failure.message == "bad"
        assert str(failure) == "bad"
        assert failure.metadata == {"parameter": "id"}

    def test_to_dict(self):
        assert NotFoundError("gone").to_dict() == {
            "error_type": "NotFoundError",
            "kind": "not_found",
            "message": "gone",
            "metadata": {},
        }

    def test_internal_server_error_defaults(self):
        cause = KeyError("id")
        failure = InternalServerError(cause=cause)

        assert failure.message == "Internal server error"
        assert failure.cause is cause
        assert failure.__cause__ is cause
        assert failure.to_dict()["cause_type"] == "KeyError"

    def test_internal_server_error_without_cause(self):
        failure = InternalServerError()
        assert failure.cause is None
        assert "cause_type" not in failure.to_dict()


# =============================================================================
# Classifier Tests
# =============================================================================


class TestFailureClassifier:
    """Tests for FailureClassifier."""

    def test_default_is_internal_server_error(self):
        exc = ValueError("boom")
        failure = FailureClassifier().classify(exc)

        assert isinstance(failure, InternalServerError)
        assert failure.cause is exc
        assert failure.message == "Internal server error"

    def test_existing_failure_passes_through(self):
        failure = NotFoundError("gone")
        assert FailureClassifier().classify(failure) is failure

    def test_failure_as_direct_cause_passes_through(self):
        cause = BadRequestError("bad input")
        exc = raise_with_cause(RuntimeError("wrapper"), cause)
        assert FailureClassifier().classify(exc) is cause

    def test_mapper_on_exception(self):
        failure = FailureClassifier(TimeoutMapper()).classify(TimeoutError())
        assert isinstance(failure, BadRequestError)
        assert failure.message == "Upstream timed out"

    def test_mapper_on_cause(self):
        exc = raise_with_cause(RuntimeError("wrapper"), TimeoutError("slow"))
        failure = FailureClassifier(TimeoutMapper()).classify(exc)
        assert isinstance(failure, BadRequestError)

    def test_mapper_preferred_over_passthrough(self):
        class RemapNotFound(ExceptionMapper):
            def map_exception(self, exception):
                if isinstance(exception, NotFoundError):
                    return BadRequestError("remapped")
                return None

        failure = FailureClassifier(RemapNotFound()).classify(NotFoundError("gone"))
        assert failure.message == "remapped"

    def test_mapper_returning_none(self):
        failure = FailureClassifier(TimeoutMapper()).classify(KeyError("x"))
        assert isinstance(failure, InternalServerError)

    def test_raising_mapper_is_ignored(self):
        failure = FailureClassifier(RaisingMapper()).classify(KeyError("x"))
        assert isinstance(failure, InternalServerError)
        assert isinstance(failure.cause, KeyError)

    def test_mapper_returning_wrong_type_is_ignored(self):
        failure = FailureClassifier(wrong_type_mapper).classify(KeyError("x"))
        assert isinstance(failure, InternalServerError)

    def test_plain_callable_mapper(self):
        classifier = FailureClassifier(
            lambda exc: NotFoundError("missing") if isinstance(exc, KeyError) else None
        )
        assert isinstance(classifier.exception_mapper, CallableExceptionMapper)
        assert isinstance(classifier.classify(KeyError("x")), NotFoundError)

    @pytest.mark.parametrize(
        ("exception", "classification", "kind"),
        [
            (TimeoutError(), "mapped", "bad_request"),
            (NotFoundError("gone"), "failure", "not_found"),
            (ValueError("x"), "default", "internal_server_error"),
        ],
    )
    def test_classify_details(self, exception, classification, kind):
        details = FailureClassifier(TimeoutMapper()).classify_details(exception)
        assert details == {
            "error_type": type(exception).__name__,
            "kind": kind,
            "classification": classification,
        }

    def test_classify_details_for_causes(self):
        classifier = FailureClassifier(TimeoutMapper())
        mapped = raise_with_cause(RuntimeError("w"), TimeoutError())
        passed = raise_with_cause(RuntimeError("w"), NotFoundError("gone"))

        assert classifier.classify_details(mapped)["classification"] == "mapped_cause"
        assert classifier.classify_details(passed)["classification"] == "failure_cause"


class TestAsExceptionMapper:
    """Tests for as_exception_mapper."""

    def test_none(self):
        assert as_exception_mapper(None) is None

    def test_mapper_instance_unchanged(self):
        mapper = TimeoutMapper()
        assert as_exception_mapper(mapper) is mapper

    def test_callable_wrapped(self):
        mapper = as_exception_mapper(wrong_type_mapper)
        assert isinstance(mapper, CallableExceptionMapper)
        assert "wrong_type_mapper" in repr(mapper)

    def test_rejects_non_callable(self):
        with pytest.raises(TypeError):
            as_exception_mapper("not a mapper")
