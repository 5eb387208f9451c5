"""Service for teacher registration, login and the teacher PIN credential."""

from __future__ import annotations

from dataclasses import replace
import logging

from waai_app.core.errors import GatewayError, ValidationError
from waai_app.core.gateway import PersistenceGateway
from waai_app.core.models import Teacher, validate_pin
from waai_app.core.paths import teacher_profile_path, teacher_security_path
from waai_app.core.pin_hasher import hash_pin, verify_pin
from waai_app.core.session_context import SessionContext

logger = logging.getLogger(__name__)


class SessionStore:
    """Signs teachers in and out and manages their PIN through the gateway."""

    def __init__(self, gateway: PersistenceGateway, context: SessionContext) -> None:
        self._gateway = gateway
        self._context = context

    @property
    def current_teacher(self) -> Teacher | None:
        return self._context.teacher

    @property
    def pin_verified(self) -> bool:
        return self._context.pin_verified

    def register(self, name: str, email: str, password: str) -> Teacher:
        """Create an account plus profile and start a session for it."""
        cleaned_name = name.strip()
        if not cleaned_name:
            raise ValidationError("Please enter your name.")
        if not email.strip() or not password:
            raise ValidationError("Please enter your email and password.")

        identity = self._gateway.create_account(email, password, {"name": cleaned_name})
        teacher = Teacher(id=identity.uid, name=cleaned_name, email=identity.email, has_pin=False)
        try:
            self._gateway.write_path(teacher_profile_path(teacher.id), teacher.to_profile())
        except GatewayError:
            logger.exception("Could not store profile for teacher %s", teacher.id)
            raise
        self._context.begin(teacher)
        return teacher

    def login(self, email: str, password: str) -> Teacher:
        if not email.strip() or not password:
            raise ValidationError("Please enter your email and password.")

        identity = self._gateway.authenticate(email, password)
        try:
            profile = self._gateway.read_path(teacher_profile_path(identity.uid)) or {}
            security = self._gateway.read_path(teacher_security_path(identity.uid)) or {}
        except GatewayError:
            logger.exception("Could not load profile for teacher %s", identity.uid)
            raise

        teacher = Teacher.from_profile(identity.uid, profile)
        teacher.email = identity.email
        if not teacher.name:
            teacher.name = identity.display_name or identity.email.split("@", 1)[0]
        teacher.has_pin = bool(security.get("hasPin")) or teacher.has_pin
        self._context.begin(teacher)
        return teacher

    def logout(self) -> None:
        self._context.end()

    def setup_pin(self, pin: str) -> Teacher:
        """Store a salted hash of ``pin`` and mark the session as verified."""
        teacher = self._context.require_teacher()
        validate_pin(pin)
        try:
            self._gateway.write_path(
                teacher_security_path(teacher.id),
                {"hasPin": True, "hashedPin": hash_pin(pin)},
            )
            self._gateway.merge_path(teacher_profile_path(teacher.id), {"hasPin": True})
        except GatewayError:
            logger.exception("Could not store PIN for teacher %s", teacher.id)
            raise

        updated = replace(teacher, has_pin=True)
        self._context.update_teacher(updated)
        self._context.mark_pin_verified()
        return updated

    def verify_pin(self, pin: str) -> bool:
        teacher = self._context.require_teacher()
        try:
            security = self._gateway.read_path(teacher_security_path(teacher.id)) or {}
        except GatewayError:
            logger.exception("Could not read PIN for teacher %s", teacher.id)
            raise
        if not verify_pin(pin, security.get("hashedPin")):
            return False
        self._context.mark_pin_verified()
        return True
