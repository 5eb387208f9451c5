"""Tests for teacher sign-in and the session lifecycle."""

from __future__ import annotations

import pytest

from waai_app.core.errors import AuthError, GatewayError, ValidationError
from waai_app.core.gateway import InMemoryGateway
from waai_app.core.services.session_store import SessionStore
from waai_app.core.session_context import SessionContext

from tests.conftest import TEACHER_EMAIL, TEACHER_PASSWORD


@pytest.fixture()
def context() -> SessionContext:
    return SessionContext()


@pytest.fixture()
def store(gateway, context: SessionContext) -> SessionStore:
    return SessionStore(gateway, context)


def test_register_writes_profile_and_begins_session(store: SessionStore, gateway, context: SessionContext):
    teacher = store.register(" Ms Frizzle ", TEACHER_EMAIL, TEACHER_PASSWORD)
    assert teacher.name == "Ms Frizzle"
    assert not teacher.has_pin
    assert context.teacher == teacher
    assert gateway.read_path(f"teachers/{teacher.id}/profile") == {
        "name": "Ms Frizzle",
        "email": TEACHER_EMAIL,
        "hasPin": False,
    }


@pytest.mark.parametrize(
    "name,email,password",
    [("", TEACHER_EMAIL, TEACHER_PASSWORD), ("T", " ", TEACHER_PASSWORD), ("T", TEACHER_EMAIL, "")],
)
def test_register_requires_all_fields(store: SessionStore, name, email, password):
    with pytest.raises(ValidationError):
        store.register(name, email, password)


def test_login_restores_pin_flag(store: SessionStore):
    teacher = store.register("T", TEACHER_EMAIL, TEACHER_PASSWORD)
    store.setup_pin("2468")
    store.logout()

    again = store.login(TEACHER_EMAIL, TEACHER_PASSWORD)
    assert again.id == teacher.id
    assert again.has_pin
    assert not store.pin_verified


def test_login_with_wrong_password(store: SessionStore):
    store.register("T", TEACHER_EMAIL, TEACHER_PASSWORD)
    store.logout()
    with pytest.raises(AuthError):
        store.login(TEACHER_EMAIL, "wrong-password")
    assert store.current_teacher is None


def test_verify_pin(store: SessionStore):
    store.register("T", TEACHER_EMAIL, TEACHER_PASSWORD)
    store.setup_pin("2468")
    store.logout()
    store.login(TEACHER_EMAIL, TEACHER_PASSWORD)

    assert store.verify_pin("1111") is False
    assert not store.pin_verified
    assert store.verify_pin("2468") is True
    assert store.pin_verified


def test_setup_pin_requires_session(store: SessionStore):
    with pytest.raises(AuthError):
        store.setup_pin("1234")


def test_setup_pin_gateway_failure_surfaces_generic_message(store: SessionStore, gateway):
    store.register("T", TEACHER_EMAIL, TEACHER_PASSWORD)
    gateway.fail_writes = True
    with pytest.raises(GatewayError) as excinfo:
        store.setup_pin("1234")
    assert "outage" not in excinfo.value.user_message
    assert not store.current_teacher.has_pin


def test_begin_replaces_previous_session(context: SessionContext, store: SessionStore):
    events: list = []
    context.add_listener(events.append)
    first = store.register("A", "a@example.com", TEACHER_PASSWORD)
    context.mark_child_unlocked("c1")
    second = store.register("B", "b@example.com", TEACHER_PASSWORD)

    assert events == [first, second]
    assert context.teacher == second
    assert not context.is_child_unlocked("c1")


def test_end_notifies_once(context: SessionContext, store: SessionStore):
    events: list = []
    context.add_listener(events.append)
    store.register("A", "a@example.com", TEACHER_PASSWORD)
    store.logout()
    store.logout()
    assert events[1:] == [None]


def test_separate_contexts_do_not_share_state():
    gateway = InMemoryGateway()
    first = SessionStore(gateway, SessionContext())
    second = SessionStore(gateway, SessionContext())
    first.register("A", "a@example.com", TEACHER_PASSWORD)
    assert second.current_teacher is None
