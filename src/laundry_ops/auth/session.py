"""Credentials and the cookie-carried session.

The session token is base64url(JSON) with the keys ``role``, ``outletId``,
``outletName``, ``email`` and ``selectedOutletId``. It is not signed: the
cookie is the whole session and there is no server-side table to revoke it.
"""
from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import re
from dataclasses import dataclass, replace
from typing import Any, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.enums import Role

_LEGACY_SHA256 = re.compile(r"^[0-9a-f]{64}$")


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def legacy_hash(password: str) -> str:
    """Unsalted SHA-256 hex digest used by accounts created before salted hashes."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def verify_password(stored_hash: Optional[str], password: str) -> bool:
    if not stored_hash or password is None:
        return False
    if _LEGACY_SHA256.match(stored_hash):
        return hmac.compare_digest(stored_hash, legacy_hash(password))
    try:
        return check_password_hash(stored_hash, password)
    except ValueError:
        # e.g. placeholder hashes like 'CHANGE_ME' or an unknown method
        return False


@dataclass(frozen=True)
class Session:
    role: Role
    email: str
    outlet_id: Optional[str] = None
    outlet_name: Optional[str] = None
    selected_outlet_id: Optional[str] = None

    @property
    def is_owner(self) -> bool:
        return self.role == Role.OWNER

    def select_outlet(self, outlet_id: Optional[str]) -> "Session":
        """Owner-only scope switch; a manager's outlet never changes."""
        if not self.is_owner:
            return self
        return replace(self, selected_outlet_id=outlet_id or None)

    def to_payload(self) -> dict:
        payload = {
            "role": self.role.value,
            "outletId": self.outlet_id,
            "outletName": self.outlet_name,
            "email": self.email,
        }
        if self.is_owner:
            payload["selectedOutletId"] = self.selected_outlet_id
        return payload

    @classmethod
    def from_payload(cls, data: Any) -> Optional["Session"]:
        if not isinstance(data, dict):
            return None
        try:
            role = Role(data.get("role"))
        except ValueError:
            return None
        email = data.get("email")
        if not isinstance(email, str):
            return None
        outlet_id = data.get("outletId") or None
        if role == Role.MANAGER and not outlet_id:
            # A manager without an outlet would read as "all outlets".
            return None
        return cls(
            role=role,
            email=email,
            outlet_id=outlet_id,
            outlet_name=data.get("outletName") or None,
            selected_outlet_id=(data.get("selectedOutletId") or None) if role == Role.OWNER else None,
        )


def encode_session(session: Session) -> str:
    raw = json.dumps(session.to_payload(), separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def decode_session(value: Optional[str]) -> Optional[Session]:
    if not value:
        return None
    try:
        padded = value + "=" * (-len(value) % 4)
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        data = json.loads(raw.decode("utf-8"))
    except (ValueError, binascii.Error, UnicodeError):
        return None
    return Session.from_payload(data)


def effective_outlet_id(session: Optional[Session]) -> Optional[str]:
    """Outlet every query must be restricted to; None means all outlets."""
    if session is None:
        return None
    if session.role == Role.MANAGER:
        return session.outlet_id
    return session.selected_outlet_id or None
