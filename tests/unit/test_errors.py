"""Tests for ft_common.errors and ft_common.response."""

from src.ft_common.errors import (
    AppError,
    CategoryInUseError,
    CategoryTypeMismatchError,
    InvalidDateRangeError,
    InvalidPeriodError,
    ReadOnlyUserError,
    SelfModificationError,
    TransactionNotFoundError,
    UserNotFoundError,
)
from src.ft_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_custom_http_status(self) -> None:
        err = AppError(code=1001, message="Username taken", http_status=409)
        assert err.http_status == 409

    def test_is_exception(self) -> None:
        err = AppError(code=1001, message="test")
        assert isinstance(err, Exception)


class TestSpecificErrors:
    def test_read_only(self) -> None:
        err = ReadOnlyUserError()
        assert err.code == 1007
        assert err.http_status == 403

    def test_user_not_found(self) -> None:
        err = UserNotFoundError("abc")
        assert err.code == 1008
        assert err.http_status == 404
        assert "abc" in err.message

    def test_self_modification(self) -> None:
        err = SelfModificationError("delete")
        assert err.http_status == 400
        assert err.message == "You cannot delete your own account"

    def test_transaction_not_found(self) -> None:
        err = TransactionNotFoundError(42)
        assert err.code == 2001
        assert err.http_status == 404

    def test_category_type_mismatch(self) -> None:
        err = CategoryTypeMismatchError("income", "expense")
        assert err.code == 2002
        assert err.http_status == 400
        assert "income" in err.message
        assert "expense" in err.message

    def test_category_in_use(self) -> None:
        err = CategoryInUseError(3)
        assert err.code == 3003
        assert err.http_status == 409

    def test_analytics_errors(self) -> None:
        assert InvalidPeriodError("hourly").code == 4001
        assert InvalidDateRangeError().code == 4002
        assert InvalidDateRangeError().http_status == 422


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"id": 1})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"id": 1}

    def test_success_custom_message(self) -> None:
        resp = success_response(None, "Category deleted successfully")
        assert resp.message == "Category deleted successfully"
        assert resp.data is None

    def test_error(self) -> None:
        resp = error_response(2001, "Transaction not found: 1")
        assert resp.code == 2001
        assert resp.message == "Transaction not found: 1"
        assert resp.data is None

    def test_serialization(self) -> None:
        resp = success_response({"amount_cents": 6500})
        d = resp.model_dump()
        assert "code" in d
        assert "message" in d
        assert "data" in d
        assert "timestamp" in d
        assert "request_id" in d

    def test_request_ids_are_unique(self) -> None:
        assert ApiResponse().request_id != ApiResponse().request_id
        assert ApiResponse().request_id.startswith("req_")
