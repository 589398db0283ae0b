"""Tests for wren.envelope — ApiResponse and envelope construction."""

from wren.envelope import (
    UNKNOWN_ERROR,
    ApiResponse,
    error_envelope,
    exception_block,
    internal_error_envelope,
    success_envelope,
)
from wren.errors import ApiError, BadRequest, NotFound


class TestApiResponse:
    def test_defaults(self) -> None:
        response = ApiResponse()
        assert response.code == 200
        assert response.data is None
        assert dict(response.meta) == {}
        assert response.body is None

    def test_with_methods_return_new_instances(self) -> None:
        original = ApiResponse(data=[1])
        changed = original.with_data([2]).with_meta({"total": 1}).with_code(201)
        assert original.data == [1]
        assert original.code == 200
        assert changed.data == [2]
        assert changed.meta == {"total": 1}
        assert changed.code == 201

    def test_with_body(self) -> None:
        response = ApiResponse().with_body("a,b", "text/csv")
        assert response.body == "a,b"
        assert response.content_type == "text/csv"


class TestEnvelopes:
    def test_success(self) -> None:
        envelope = success_envelope(ApiResponse(data=["x"], meta={"total": 1}, code=201))
        assert envelope == {"status": 201, "data": ["x"], "meta": {"total": 1}}

    def test_success_zero_code_becomes_200(self) -> None:
        assert success_envelope(ApiResponse(code=0))["status"] == 200

    def test_error(self) -> None:
        envelope = error_envelope(BadRequest("Validation failed", details={"name": "required"}))
        assert envelope == {
            "status": 400,
            "error": "Validation failed",
            "details": {"name": "required"},
        }

    def test_error_defaults(self) -> None:
        envelope = error_envelope(ApiError(status=0))
        assert envelope == {"status": 500, "error": UNKNOWN_ERROR, "details": {}}

    def test_internal_error_includes_exception_block(self) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError as exc:
            envelope = internal_error_envelope(exc)
        assert envelope["status"] == 500
        assert envelope["error"] == "boom"
        assert envelope["details"] == {}
        assert envelope["exception"]["type"] == "RuntimeError"
        assert envelope["exception"]["file"].endswith("test_envelope.py")
        assert envelope["exception"]["line"] > 0

    def test_internal_error_without_message(self) -> None:
        assert internal_error_envelope(RuntimeError())["error"] == UNKNOWN_ERROR


class TestExceptionBlock:
    def test_unraised_error_only_has_type(self) -> None:
        assert exception_block(NotFound()) == {"type": "NotFound"}

    def test_raised_error_has_location(self) -> None:
        try:
            raise ValueError("bad")
        except ValueError as exc:
            block = exception_block(exc)
        assert set(block) == {"type", "file", "line"}
