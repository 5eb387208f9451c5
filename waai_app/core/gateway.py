"""Persistence gateway contract and the bundled key-tree backends.

The hosted database exposes a tree of JSON values addressed by
slash-separated paths. Writes replace the value at a path, merges update
individual children, and subscribers receive the full value at their path
after every change underneath (or above) it, starting with an initial push.
Empty objects and ``None`` are not stored: writing them deletes the node.

``InMemoryGateway`` implements that contract for a single process and keeps
teacher accounts alongside the tree. ``JsonFileGateway`` additionally
snapshots everything to a JSON file after each mutation.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Protocol
from uuid import uuid4

import bcrypt

from waai_app.constants.quiz_constants import MIN_PASSWORD_LENGTH
from waai_app.core.errors import AuthError, ReadError, WriteError
from waai_app.core.paths import split_path

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[Any], None]

_BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True, slots=True)
class AuthIdentity:
    """Identity returned by the authentication service."""

    uid: str
    email: str
    display_name: str | None = None


class Subscription:
    """Handle for a realtime listener; ``unsubscribe`` is idempotent."""

    def __init__(self, cancel: Callable[[], None]) -> None:
        self._cancel: Callable[[], None] | None = cancel

    @property
    def active(self) -> bool:
        return self._cancel is not None

    def unsubscribe(self) -> None:
        cancel, self._cancel = self._cancel, None
        if cancel is not None:
            cancel()


class PersistenceGateway(Protocol):
    """Operations the stores consume from the hosted database and auth service."""

    def authenticate(self, email: str, password: str) -> AuthIdentity: ...

    def create_account(self, email: str, password: str, profile: dict[str, Any]) -> AuthIdentity: ...

    def read_path(self, path: str) -> Any: ...

    def write_path(self, path: str, value: Any) -> None: ...

    def merge_path(self, path: str, partial: dict[str, Any]) -> None: ...

    def delete_path(self, path: str) -> None: ...

    def push_key(self, path: str) -> str: ...

    def subscribe(self, path: str, on_change: ChangeCallback) -> Subscription: ...


@dataclass(slots=True)
class _Account:
    uid: str
    email: str
    password_hash: str
    display_name: str | None = None


class InMemoryGateway:
    """Single-process stand-in for the hosted database and auth service."""

    def __init__(self, initial_tree: dict[str, Any] | None = None) -> None:
        self._lock = RLock()
        self._tree: dict[str, Any] = deepcopy(initial_tree) if initial_tree else {}
        self._accounts: dict[str, _Account] = {}
        self._listeners: dict[int, tuple[list[str], ChangeCallback]] = {}
        self._listener_counter = 0

    # --- Authentication ---

    def authenticate(self, email: str, password: str) -> AuthIdentity:
        with self._lock:
            account = self._accounts.get(_normalize_email(email))
        if account is None or not _password_matches(password, account.password_hash):
            raise AuthError("Invalid email or password.")
        return AuthIdentity(uid=account.uid, email=account.email, display_name=account.display_name)

    def create_account(self, email: str, password: str, profile: dict[str, Any]) -> AuthIdentity:
        normalized = _normalize_email(email)
        if "@" not in normalized:
            raise AuthError("Please enter a valid email address.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        if len(password.encode("utf-8")) > _BCRYPT_MAX_BYTES:
            raise AuthError(f"Password must be at most {_BCRYPT_MAX_BYTES} bytes long.")

        password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("ascii")
        with self._lock:
            if normalized in self._accounts:
                raise AuthError("An account with this email already exists.")
            account = _Account(
                uid=uuid4().hex,
                email=normalized,
                password_hash=password_hash,
                display_name=profile.get("name"),
            )
            self._accounts[normalized] = account
            try:
                self._persist()
            except WriteError:
                del self._accounts[normalized]
                raise
        logger.info("Created account %s", account.uid)
        return AuthIdentity(uid=account.uid, email=account.email, display_name=account.display_name)

    # --- Key tree ---

    def read_path(self, path: str) -> Any:
        """Return a copy of the value at ``path`` or ``None`` when nothing is stored."""
        with self._lock:
            node: Any = self._tree
            for key in split_path(path):
                if not isinstance(node, dict) or key not in node:
                    return None
                node = node[key]
            return deepcopy(node)

    def write_path(self, path: str, value: Any) -> None:
        keys = self._require_keys(path)
        with self._lock:
            previous = deepcopy(self._tree)
            self._set(keys, deepcopy(value))
            self._commit(previous)
            pending = self._collect_notifications(keys)
        self._deliver(pending)

    def merge_path(self, path: str, partial: dict[str, Any]) -> None:
        if not isinstance(partial, dict):
            raise WriteError("Merge requires an object of child values.")
        keys = self._require_keys(path)
        with self._lock:
            previous = deepcopy(self._tree)
            for child_key, child_value in partial.items():
                self._set(keys + split_path(str(child_key)), deepcopy(child_value))
            self._commit(previous)
            pending = self._collect_notifications(keys)
        self._deliver(pending)

    def delete_path(self, path: str) -> None:
        self.write_path(path, None)

    def push_key(self, path: str) -> str:
        # keys are generated client-side; nothing is written until the caller stores a value
        return uuid4().hex[:20]

    def subscribe(self, path: str, on_change: ChangeCallback) -> Subscription:
        keys = split_path(path)
        with self._lock:
            self._listener_counter += 1
            listener_id = self._listener_counter
            self._listeners[listener_id] = (keys, on_change)

        def cancel() -> None:
            with self._lock:
                self._listeners.pop(listener_id, None)

        on_change(self.read_path(path))
        return Subscription(cancel)

    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    # --- Internals ---

    @staticmethod
    def _require_keys(path: str) -> list[str]:
        keys = split_path(path)
        if not keys:
            raise WriteError("Refusing to replace the database root.")
        return keys

    def _set(self, keys: list[str], value: Any) -> None:
        if value is None or value == {}:
            self._remove(keys)
            return
        node = self._tree
        for key in keys[:-1]:
            child = node.get(key)
            if not isinstance(child, dict):
                child = {}
                node[key] = child
            node = child
        node[keys[-1]] = value

    def _remove(self, keys: list[str]) -> None:
        trail: list[tuple[dict[str, Any], str]] = []
        node: Any = self._tree
        for key in keys:
            if not isinstance(node, dict) or key not in node:
                return
            trail.append((node, key))
            node = node[key]
        parent, key = trail.pop()
        del parent[key]
        # drop parents left empty, mirroring the hosted database
        while trail:
            parent, key = trail.pop()
            if parent[key]:
                break
            del parent[key]

    def _collect_notifications(self, changed: list[str]) -> list[tuple[ChangeCallback, Any]]:
        pending: list[tuple[ChangeCallback, Any]] = []
        for keys, callback in list(self._listeners.values()):
            overlap = min(len(keys), len(changed))
            if keys[:overlap] == changed[:overlap]:
                pending.append((callback, self.read_path("/".join(keys))))
        return pending

    @staticmethod
    def _deliver(pending: list[tuple[ChangeCallback, Any]]) -> None:
        for callback, value in pending:
            callback(value)

    def _commit(self, previous_tree: dict[str, Any]) -> None:
        """Persist the mutated tree, restoring ``previous_tree`` when that fails."""
        try:
            self._persist()
        except WriteError:
            self._tree = previous_tree
            raise

    def _persist(self) -> None:
        """Hook for subclasses that keep a durable copy; called with the lock held."""


class JsonFileGateway(InMemoryGateway):
    """In-memory gateway that snapshots the tree and accounts to a JSON file."""

    def __init__(self, file_path: Path) -> None:
        super().__init__()
        self._file_path = Path(file_path)
        if self._file_path.exists():
            self._load()

    def _load(self) -> None:
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ReadError(f"Could not read data file {self._file_path}: {exc}") from exc
        self._tree = payload.get("tree") or {}
        self._accounts = {
            email: _Account(
                uid=data["uid"],
                email=email,
                password_hash=data["passwordHash"],
                display_name=data.get("displayName"),
            )
            for email, data in (payload.get("accounts") or {}).items()
        }
        logger.info("Loaded %d account(s) from %s", len(self._accounts), self._file_path)

    def _persist(self) -> None:
        payload = {
            "tree": self._tree,
            "accounts": {
                email: {
                    "uid": account.uid,
                    "passwordHash": account.password_hash,
                    "displayName": account.display_name,
                }
                for email, account in self._accounts.items()
            },
        }
        temp_path = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            os.replace(temp_path, self._file_path)
        except OSError as exc:
            raise WriteError(f"Could not write data file {self._file_path}: {exc}") from exc


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _password_matches(password: str, password_hash: str) -> bool:
    encoded = password.encode("utf-8")
    if len(encoded) > _BCRYPT_MAX_BYTES:
        return False
    return bcrypt.checkpw(encoded, password_hash.encode("ascii"))
