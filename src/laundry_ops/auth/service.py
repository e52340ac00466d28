from __future__ import annotations

import logging
from typing import List, Optional

from ..common.lookup import join_names
from ..common.validators import require_min_length
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import RegistrationStatus, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, StoreError, ValidationError
from ..database.store import Query, RecordStore
from .session import Session, hash_password, verify_password

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Role, email and password are required."
INVALID_ROLE_MESSAGE = "Invalid role."
MISSING_OUTLET_MESSAGE = "Please select an outlet."
INVALID_OWNER_LOGIN = "Invalid email or password."
INVALID_MANAGER_LOGIN = "Invalid email, outlet or password."
PENDING_MESSAGE = "Your registration is pending. Please wait until we approve your request."
REJECTED_MESSAGE = "Your registration request was not approved."
DUPLICATE_MESSAGE = "This email (and outlet) is already registered."


def _parse_credentials(role: Optional[str], email: Optional[str], password: Optional[str]):
    role_s = (role or "").strip()
    email_s = (email or "").strip().lower()
    if not role_s or not email_s or not password:
        raise ValidationError(MISSING_FIELDS_MESSAGE)
    try:
        return Role(role_s), email_s
    except ValueError:
        raise ValidationError(INVALID_ROLE_MESSAGE)


def _account_query(email: str, outlet_id: Optional[str]) -> Query:
    query = Query("dashboard_users").eq("email", email)
    return query.eq("outlet_id", outlet_id) if outlet_id else query.is_null("outlet_id")


class AuthService:
    """Use case: authenticate a dashboard user (login)."""

    def __init__(self, store: RecordStore):
        self._store = store

    def login(
        self,
        *,
        role: Optional[str],
        email: Optional[str],
        password: Optional[str],
        outlet_id: Optional[str] = None,
    ) -> Session:
        role_v, email_s = _parse_credentials(role, email, password)

        outlet = None
        if role_v == Role.MANAGER:
            outlet = (outlet_id or "").strip()
            if not outlet:
                raise ValidationError(MISSING_OUTLET_MESSAGE)
        invalid = INVALID_MANAGER_LOGIN if role_v == Role.MANAGER else INVALID_OWNER_LOGIN

        user = self._store.fetch_one(
            _account_query(email_s, outlet)
            .eq("role", role_v.value)
            .select("id", "email", "password_hash", "outlet_id", "status")
        )
        # Same message for "no such account" and "wrong password".
        if not user or not verify_password(user.get("password_hash"), password):
            logger.info("Rejected login for %s (%s)", email_s, role_v.value)
            raise AuthenticationError(invalid)

        status = user.get("status") or RegistrationStatus.APPROVED.value
        if status == RegistrationStatus.PENDING.value:
            raise AuthenticationError(PENDING_MESSAGE)
        if status != RegistrationStatus.APPROVED.value:
            raise AuthenticationError(REJECTED_MESSAGE)

        outlet_name = None
        if outlet:
            row = self._store.fetch_one(Query("outlets").select("outlet_name").eq("id", outlet))
            outlet_name = row.get("outlet_name") if row else None

        logger.info("Signed in %s as %s", email_s, role_v.value)
        return Session(
            role=role_v,
            email=user.get("email") or email_s,
            outlet_id=outlet,
            outlet_name=outlet_name,
            selected_outlet_id=None,
        )


class RegistrationService:
    """Use case: self-registration and the owner's approval queue."""

    def __init__(self, store: RecordStore):
        self._store = store

    def register(
        self,
        *,
        role: Optional[str],
        email: Optional[str],
        password: Optional[str],
        outlet_id: Optional[str] = None,
    ) -> str:
        role_v, email_s = _parse_credentials(role, email, password)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        outlet = None
        if role_v == Role.MANAGER:
            outlet = (outlet_id or "").strip()
            if not outlet:
                raise ValidationError(MISSING_OUTLET_MESSAGE)

        if self._store.fetch_one(_account_query(email_s, outlet).select("id")):
            raise ValidationError(DUPLICATE_MESSAGE)

        try:
            row = self._store.insert(
                "dashboard_users",
                {
                    "email": email_s,
                    "password_hash": hash_password(password),
                    "role": role_v.value,
                    "outlet_id": outlet,
                    "status": RegistrationStatus.PENDING.value,
                },
            )
        except StoreError as e:
            if e.is_duplicate:
                raise ValidationError(DUPLICATE_MESSAGE)
            raise ValidationError(str(e))

        logger.info("Registration request from %s (%s)", email_s, role_v.value)
        return str(row["id"])

    def list_pending(self, session: Optional[Session]) -> List[dict]:
        self._require_owner(session)
        rows = self._store.fetch(
            Query("dashboard_users")
            .select("id", "email", "role", "outlet_id", "created_at")
            .eq("status", RegistrationStatus.PENDING.value)
            .order("created_at", descending=True)
        )
        return join_names(
            self._store, rows, fk="outlet_id", collection="outlets", value_column="outlet_name", as_name="outlet_name"
        )

    def approve(self, session: Optional[Session], user_id: Optional[str]) -> bool:
        return self._decide(session, user_id, RegistrationStatus.APPROVED)

    def reject(self, session: Optional[Session], user_id: Optional[str]) -> bool:
        return self._decide(session, user_id, RegistrationStatus.REJECTED)

    def _decide(self, session: Optional[Session], user_id: Optional[str], status: RegistrationStatus) -> bool:
        if not user_id:
            raise ValidationError("Missing user")
        self._require_owner(session)
        # Only pending rows transition; processed requests are left alone.
        matched = self._store.update(
            Query("dashboard_users").eq("id", user_id).eq("status", RegistrationStatus.PENDING.value),
            {"status": status.value},
        )
        logger.info("Registration %s -> %s by %s (matched=%s)", user_id, status.value, session.email, matched)
        return matched > 0

    @staticmethod
    def _require_owner(session: Optional[Session]) -> None:
        if session is None or not session.is_owner:
            raise AuthorizationError("Unauthorized")
