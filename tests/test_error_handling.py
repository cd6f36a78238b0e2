import pytest

from leadflow.errors import (
    ActionError,
    AutomationError,
    DomainError,
    InvalidStateTransition,
    NotFoundError,
    TransportError,
    ValidationError,
)


@pytest.fixture()
def failing_client(app):
    errors = {
        "validation": ValidationError("name is required"),
        "missing": NotFoundError("lead 7 not found"),
        "conflict": InvalidStateTransition("job 3 is not running"),
        "crash": RuntimeError("database exploded"),
    }

    @app.route("/boom/<kind>")
    def boom(kind):
        raise errors[kind]

    return app.test_client()


@pytest.mark.parametrize("kind, status, error", [
    ("validation", 400, "validation_error"),
    ("missing", 404, "not_found"),
    ("conflict", 409, "conflict"),
])
def test_domain_errors_map_to_status_codes(failing_client, kind, status, error):
    response = failing_client.get(f"/boom/{kind}")

    assert response.status_code == status
    assert response.get_json()["error"] == error


def test_unexpected_errors_hide_details(failing_client):
    response = failing_client.get("/boom/crash")

    assert response.status_code == 500
    body = response.get_json()
    assert "database exploded" not in body["message"]


def test_unknown_route_uses_http_handler(client):
    response = client.get("/does-not-exist")

    assert response.status_code == 404
    assert response.get_json()["status_code"] == 404


def test_error_hierarchy():
    assert issubclass(TransportError, ActionError)
    assert issubclass(ActionError, AutomationError)
    assert issubclass(InvalidStateTransition, AutomationError)
    assert issubclass(AutomationError, DomainError)
    assert TransportError("down", status_code=503).status_code == 503
