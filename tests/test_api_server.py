"""HTTP tests for the child-facing API."""

from __future__ import annotations

from fastapi.testclient import TestClient
import pytest

from waai_app.core.classroom_manager import ClassroomManager
from waai_app.core.errors import (
    AuthError,
    GateMismatchError,
    NotFoundError,
    ReadError,
    ValidationError,
)
from waai_app.core.models import Activity, Child
from waai_app.server.api_server import create_api_app

from tests.conftest import ManualScheduler


@pytest.fixture()
def client(signed_in_manager: ClassroomManager) -> TestClient:
    return TestClient(create_api_app(signed_in_manager))


@pytest.fixture()
def open_child(signed_in_manager: ClassroomManager) -> Child:
    return signed_in_manager.add_child("Lina", "cat_avatar_01")


@pytest.fixture()
def pin_child(signed_in_manager: ClassroomManager) -> Child:
    return signed_in_manager.add_child("Omar", "dog_avatar_02", "5678")


def _session_url(child_id: str, activity_id: str, suffix: str = "") -> str:
    return f"/children/{child_id}/activities/{activity_id}/session{suffix}"


def test_child_page_is_served(client: TestClient):
    response = client.get("/")
    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]


def test_health(client: TestClient):
    assert client.get("/health").json() == {"status": "ok", "teacher_signed_in": True}


def test_children_require_signed_in_teacher(manager: ClassroomManager):
    client = TestClient(create_api_app(manager))
    response = client.get("/children")
    assert response.status_code == 401
    assert response.json() == {"detail": "No teacher is signed in."}


def test_children_are_listed_without_pins(client: TestClient, open_child: Child, pin_child: Child):
    children = {child["name"]: child for child in client.get("/children").json()["children"]}
    assert set(children) == {"Lina", "Omar"}
    assert children["Lina"]["has_pin"] is False
    assert children["Omar"]["has_pin"] is True
    assert all("pin" not in child for child in children.values())
    assert children["Lina"]["avatar_url"].startswith("https://")


def test_locked_child_cannot_list_activities(client: TestClient, pin_child: Child, activity: Activity):
    response = client.get(f"/children/{pin_child.id}/activities")
    assert response.status_code == 401

    response = client.post(_session_url(pin_child.id, activity.id))
    assert response.status_code == 401


def test_unlock_with_pin(client: TestClient, pin_child: Child, activity: Activity):
    assert client.post(f"/children/{pin_child.id}/unlock", json={"pin": "0000"}).status_code == 403
    assert client.post(f"/children/{pin_child.id}/unlock", json={}).status_code == 403
    assert client.post(f"/children/{pin_child.id}/unlock", json={"pin": "12a4"}).status_code == 422

    response = client.post(f"/children/{pin_child.id}/unlock", json={"pin": "5678"})
    assert response.status_code == 200
    assert response.json()["unlocked"] is True

    activities = client.get(f"/children/{pin_child.id}/activities").json()["activities"]
    assert [item["id"] for item in activities] == [activity.id]
    assert activities[0]["question_count"] == 3


def test_child_without_pin_unlocks_directly(client: TestClient, open_child: Child):
    response = client.post(f"/children/{open_child.id}/unlock", json={})
    assert response.status_code == 200
    assert response.json()["child"]["name"] == "Lina"


def test_unknown_child_is_not_found(client: TestClient):
    response = client.post("/children/missing/unlock", json={"pin": "1234"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Could not find this child profile."


def test_quiz_session_flow(
    client: TestClient,
    open_child: Child,
    activity: Activity,
    scheduler: ManualScheduler,
):
    client.post(f"/children/{open_child.id}/unlock", json={})

    session = client.post(_session_url(open_child.id, activity.id)).json()
    assert session["current_question_index"] == 0
    assert session["question"]["id"] == "q1"
    assert all("is_correct" not in option for option in session["question"]["options"])

    session = client.post(_session_url(open_child.id, activity.id, "/answer"), json={"option_id": "q1_opt_0"}).json()
    assert session["show_feedback"] is True
    assert session["is_correct"] is True
    assert session["score"]["correct"] == 1

    scheduler.run_pending()
    session = client.get(_session_url(open_child.id, activity.id)).json()
    assert session["current_question_index"] == 1
    assert session["show_feedback"] is False

    for option_id in ("q2_opt_1", "q3_opt_0"):
        client.post(_session_url(open_child.id, activity.id, "/answer"), json={"option_id": option_id})
        scheduler.run_pending()

    session = client.get(_session_url(open_child.id, activity.id)).json()
    assert session["completed"] is True
    assert session["score"] == {"correct": 2, "total": 3, "percentage": 67}

    session = client.post(_session_url(open_child.id, activity.id, "/restart")).json()
    assert session["completed"] is False
    assert session["current_question_index"] == 0

    assert client.delete(_session_url(open_child.id, activity.id)).json() == {"left": True}
    assert client.get(_session_url(open_child.id, activity.id)).status_code == 404


def test_answer_requires_option_id(client: TestClient, open_child: Child, activity: Activity):
    client.post(f"/children/{open_child.id}/unlock", json={})
    client.post(_session_url(open_child.id, activity.id))
    response = client.post(_session_url(open_child.id, activity.id, "/answer"), json={})
    assert response.status_code == 422


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (ValidationError("bad"), 422),
        (AuthError("who"), 401),
        (GateMismatchError("nope"), 403),
        (NotFoundError("gone"), 404),
        (ReadError("disk"), 503),
    ],
)
def test_errors_map_to_status_codes(signed_in_manager: ClassroomManager, error, status_code: int):
    app = create_api_app(signed_in_manager)

    @app.get("/boom")
    def boom() -> None:
        raise error

    response = TestClient(app).get("/boom")
    assert response.status_code == status_code
    assert response.json() == {"detail": error.user_message}


def test_gateway_failure_hides_internal_cause(signed_in_manager: ClassroomManager):
    app = create_api_app(signed_in_manager)

    @app.get("/boom")
    def boom() -> None:
        raise ReadError("connection refused by 10.0.0.3")

    response = TestClient(app).get("/boom")
    assert response.status_code == 503
    assert "10.0.0.3" not in response.json()["detail"]
