"""Unit tests for Users dependency wiring.

Covers the observation context bound into service observability for each request.
"""

from typing import Annotated

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from shared_kernel.observability_context import ObservationContext
from users.application.value_objects import CurrentUser
from users.dependencies import (
    get_auth_service_probe,
    get_observation_context,
    get_user_service_probe,
)
from users.domain.value_objects import Role


def _context_app() -> FastAPI:
    app = FastAPI()

    @app.get("/context", name="show_context")
    def show_context(
        context: Annotated[ObservationContext, Depends(get_observation_context)],
    ) -> dict:
        return context.as_dict()

    return app


class TestObservationContext:
    """Tests for get_observation_context."""

    def test_reuses_request_id_header(self):
        client = TestClient(_context_app())

        body = client.get("/context", headers={"X-Request-ID": "req-42"}).json()

        assert body["request_id"] == "req-42"

    def test_generates_request_id_when_missing(self):
        client = TestClient(_context_app())

        first = client.get("/context").json()
        second = client.get("/context").json()

        assert first["request_id"]
        assert first["request_id"] != second["request_id"]

    def test_operation_is_route_name(self):
        client = TestClient(_context_app())

        body = client.get("/context").json()

        assert body["operation"] == "show_context"
        assert "actor_id" not in body


class TestContextBinding:
    """Tests for service observers built with request and caller context."""

    def test_user_service_observer_carries_caller(self):
        context = ObservationContext(request_id="req-1", operation="delete_user")
        caller = CurrentUser(user_id="7", role=Role.ADMIN)

        observer = get_user_service_probe(context=context, current_user=caller)

        assert observer._context.as_dict() == {
            "request_id": "req-1",
            "actor_id": "7",
            "actor_role": "ADMIN",
            "operation": "delete_user",
        }

    def test_auth_service_observer_carries_request(self):
        context = ObservationContext(request_id="req-2", operation="login")

        observer = get_auth_service_probe(context=context)

        assert observer._context is context

    def test_with_actor_keeps_request_fields(self):
        context = ObservationContext(request_id="req-3", operation="me")

        bound = context.with_actor("9", "NORMAL")

        assert bound.request_id == "req-3"
        assert bound.operation == "me"
        assert bound.actor_id == "9"
        assert context.actor_id is None
