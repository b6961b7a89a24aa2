"""Tests for the exception hierarchy and JSON error responses."""

import sqlite3

from sqlalchemy.exc import IntegrityError

from errors import (
    CardooError,
    ConflictError,
    ExcessWindowClosedError,
    ForbiddenError,
    InsufficientBalanceError,
    NotFoundError,
    RequestValidationError,
    UnauthorizedError,
    is_unique_violation,
)


class TestExceptionHierarchy:
    def test_status_codes(self):
        assert UnauthorizedError().status_code == 401
        assert ForbiddenError().status_code == 403
        assert NotFoundError().status_code == 404
        assert RequestValidationError().status_code == 400
        assert ConflictError().status_code == 409

    def test_domain_validation_errors(self):
        assert isinstance(InsufficientBalanceError(), RequestValidationError)
        assert isinstance(ExcessWindowClosedError(), RequestValidationError)
        assert InsufficientBalanceError().status_code == 400

    def test_all_are_cardoo_errors(self):
        for cls in (UnauthorizedError, ForbiddenError, NotFoundError, RequestValidationError, ConflictError):
            assert issubclass(cls, CardooError)

    def test_default_and_custom_message(self):
        assert str(NotFoundError()) == "Not found"
        assert str(NotFoundError("Booking not found")) == "Booking not found"

    def test_to_dict_includes_details_only_when_set(self):
        assert NotFoundError().to_dict() == {"error": "Not found"}
        err = RequestValidationError("Invalid status", details={"allowed": ["APPROVED"]})
        assert err.to_dict() == {"error": "Invalid status", "details": {"allowed": ["APPROVED"]}}


class TestErrorResponses:
    def test_unauthenticated_request_is_json_401(self, client):
        response = client.get("/bookings")
        assert response.status_code == 401
        assert response.get_json() == {"error": "Unauthorized"}

    def test_missing_entity_is_json_404(self, make_account, login):
        client = login(make_account())
        response = client.get("/bookings/999")
        assert response.status_code == 404
        assert response.get_json()["error"] == "Booking not found"

    def test_body_validation_is_json_400_with_details(self, make_account, login):
        client = login(make_account())
        response = client.post("/bookings", json={"contract_id": "CT-1"})
        assert response.status_code == 400
        body = response.get_json()
        assert body["error"] == "Validation error"
        fields = {tuple(item["loc"]) for item in body["details"]}
        assert ("daily_rate",) in fields

    def test_unknown_route_is_json_404(self, client):
        response = client.get("/no-such-route")
        assert response.status_code == 404
        assert "error" in response.get_json()

    def test_health(self, client):
        assert client.get("/health").get_json() == {"status": "ok"}


class TestIntegrityErrors:
    def test_unique_violation_detection(self):
        unique = IntegrityError("INSERT", {}, sqlite3.IntegrityError("UNIQUE constraint failed: bookings.contract_id"))
        not_null = IntegrityError("UPDATE", {}, sqlite3.IntegrityError("NOT NULL constraint failed: bookings.status"))
        assert is_unique_violation(unique)
        assert not is_unique_violation(not_null)

    def test_postgres_unique_code(self):
        class PgError(Exception):
            pgcode = "23505"

        assert is_unique_violation(IntegrityError("INSERT", {}, PgError("duplicate key")))

    def test_not_null_violation_is_400_not_conflict(self, app):
        @app.route("/raise-not-null")
        def raise_not_null():
            raise IntegrityError("UPDATE", {}, sqlite3.IntegrityError("NOT NULL constraint failed: bookings.status"))

        response = app.test_client().get("/raise-not-null")
        assert response.status_code == 400
        assert response.get_json()["error"] == "Validation error"

    def test_unique_violation_is_409(self, app):
        @app.route("/raise-unique")
        def raise_unique():
            raise IntegrityError("INSERT", {}, sqlite3.IntegrityError("UNIQUE constraint failed: accounts.email"))

        response = app.test_client().get("/raise-unique")
        assert response.status_code == 409
        assert response.get_json()["error"] == "Conflict"
