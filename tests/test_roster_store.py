"""Tests for waai_app.core.services.roster_store."""

from __future__ import annotations

import pytest

from waai_app.core.classroom_manager import ClassroomManager
from waai_app.core.errors import AuthError, GatewayError, GateMismatchError, NotFoundError, ValidationError

from tests.conftest import TEACHER_EMAIL, TEACHER_PASSWORD


def test_add_child_appears_through_subscription(signed_in_manager: ClassroomManager, gateway):
    child = signed_in_manager.add_child("Lina", "cat_avatar_01")
    teacher = signed_in_manager.current_teacher()
    assert gateway.read_path(f"teachers/{teacher.id}/children/{child.id}")["avatarId"] == "cat_avatar_01"
    assert [c.id for c in signed_in_manager.get_children()] == [child.id]


def test_children_are_replaced_not_merged(signed_in_manager: ClassroomManager, gateway):
    signed_in_manager.add_child("Lina", "cat_avatar_01")
    teacher = signed_in_manager.current_teacher()
    gateway.write_path(
        f"teachers/{teacher.id}/children",
        {"external": {"name": "Noor", "avatarId": "owl_avatar_05", "createdAt": 1}},
    )
    assert [child.name for child in signed_in_manager.get_children()] == ["Noor"]


def test_invalid_records_are_skipped(signed_in_manager: ClassroomManager, gateway):
    teacher = signed_in_manager.current_teacher()
    gateway.write_path(f"teachers/{teacher.id}/children/bad", {"name": "", "avatarId": "cat_avatar_01"})
    assert signed_in_manager.get_children() == []


def test_malformed_records_do_not_break_writes(signed_in_manager: ClassroomManager, gateway):
    teacher = signed_in_manager.current_teacher()
    gateway.write_path(
        f"teachers/{teacher.id}/children/odd",
        {"name": "Odd", "avatarId": "cat_avatar_01", "createdAt": "soon"},
    )

    child = signed_in_manager.add_child("Lina", "cat_avatar_01")
    assert [c.id for c in signed_in_manager.get_children()] == [child.id]


def test_numeric_pin_record_is_read_as_text(signed_in_manager: ClassroomManager, gateway):
    teacher = signed_in_manager.current_teacher()
    gateway.write_path(
        f"teachers/{teacher.id}/children/omar",
        {"name": "Omar", "avatarId": "dog_avatar_02", "createdAt": 1, "pin": 5678},
    )

    omar = signed_in_manager.get_child("omar")
    assert omar.pin == "5678"
    assert signed_in_manager.roster.verify_child_pin("omar", "5678")


def test_duplicate_pin_is_rejected(signed_in_manager: ClassroomManager):
    signed_in_manager.add_child("Omar", "fox_avatar_04", "5678")
    with pytest.raises(ValidationError, match="already assigned"):
        signed_in_manager.add_child("Sara", "owl_avatar_05", "5678")
    assert len(signed_in_manager.get_children()) == 1


def test_children_without_pin_may_coexist(signed_in_manager: ClassroomManager):
    signed_in_manager.add_child("A", "cat_avatar_01")
    signed_in_manager.add_child("B", "dog_avatar_02", "")
    assert len(signed_in_manager.get_children()) == 2


def test_pin_confirmation_must_match(signed_in_manager: ClassroomManager):
    with pytest.raises(GateMismatchError):
        signed_in_manager.add_child("Omar", "fox_avatar_04", "5678", "5677")
    assert signed_in_manager.get_children() == []


@pytest.mark.parametrize("name,avatar_id,pin", [("", "cat_avatar_01", None), ("Lina", "unicorn", None), ("Lina", "cat_avatar_01", "12")])
def test_invalid_child_is_rejected(signed_in_manager: ClassroomManager, name, avatar_id, pin):
    with pytest.raises(ValidationError):
        signed_in_manager.add_child(name, avatar_id, pin)
    assert signed_in_manager.get_children() == []


def test_write_failure_leaves_roster_unchanged(signed_in_manager: ClassroomManager, gateway):
    gateway.fail_writes = True
    with pytest.raises(GatewayError):
        signed_in_manager.add_child("Lina", "cat_avatar_01")
    assert signed_in_manager.get_children() == []


def test_add_child_requires_teacher(manager: ClassroomManager):
    with pytest.raises(AuthError):
        manager.add_child("Lina", "cat_avatar_01")


def test_logout_clears_roster(signed_in_manager: ClassroomManager, gateway):
    signed_in_manager.add_child("Lina", "cat_avatar_01")
    signed_in_manager.logout()
    assert signed_in_manager.get_children() == []
    assert gateway.listener_count() == 0

    signed_in_manager.login(TEACHER_EMAIL, TEACHER_PASSWORD)
    assert [child.name for child in signed_in_manager.get_children()] == ["Lina"]


def test_select_and_lookup(signed_in_manager: ClassroomManager):
    child = signed_in_manager.add_child("Lina", "cat_avatar_01")
    assert signed_in_manager.select_child(child.id) == child
    assert signed_in_manager.roster.active_child == child
    with pytest.raises(NotFoundError):
        signed_in_manager.get_child("missing")


def test_avatar_catalog(signed_in_manager: ClassroomManager):
    avatars = signed_in_manager.get_avatars()
    assert len(avatars) == 6
    assert avatars[0].id == "cat_avatar_01"
