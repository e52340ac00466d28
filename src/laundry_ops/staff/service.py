from __future__ import annotations

import logging
from typing import List, Optional

from ..auth.session import Session, effective_outlet_id
from ..common.lookup import join_names
from ..common.pagination import Page, clamp_page, page_bounds
from ..common.validators import optional_text, require_choice, require_non_empty
from ..core.constants import STAFF_PAGE_SIZE
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..database.store import Query, RecordStore
from .model import INVALID_ROLE_MESSAGE, STAFF_ROLES, StaffMember

logger = logging.getLogger(__name__)


class StaffService:
    """Staff listing and edits, restricted to the caller's outlet scope."""

    def __init__(self, store: RecordStore):
        self._store = store

    def list_page(self, session: Optional[Session], page: int = 1) -> Page[StaffMember]:
        scoped = Query("staff").scoped("outlet_id", effective_outlet_id(session))
        total = self._store.count(scoped)
        if total == 0:
            return Page.empty(STAFF_PAGE_SIZE)
        page = clamp_page(page, total, STAFF_PAGE_SIZE)

        rows = self._store.fetch(scoped.order("id").range(*page_bounds(page, STAFF_PAGE_SIZE)))
        rows = join_names(
            self._store, rows, fk="outlet_id", collection="outlets", value_column="outlet_name", as_name="outlet_name"
        )
        return Page(
            items=[StaffMember.from_row(r) for r in rows], total=total, page=page, page_size=STAFF_PAGE_SIZE
        )

    def outlet_options(self, outlet_id: Optional[str] = None) -> List[dict]:
        """Outlets a staff member can be assigned to from the add/edit forms."""
        return self._store.fetch(
            Query("outlets").select("id", "outlet_name").scoped("id", outlet_id).order("outlet_name")
        )

    def get(self, session: Optional[Session], staff_id: str) -> StaffMember:
        row = self._store.fetch_one(Query("staff").eq("id", staff_id))
        if not row:
            raise NotFoundError("Staff member not found")
        scope = effective_outlet_id(session)
        if scope and row.get("outlet_id") != scope:
            raise NotFoundError("Staff member not found")
        return StaffMember.from_row(row)

    def add(
        self,
        session: Optional[Session],
        *,
        full_name: Optional[str],
        role: Optional[str],
        outlet_id: Optional[str],
        phone_number: Optional[str],
    ) -> str:
        name = require_non_empty(full_name, "Name")
        role_v = require_choice(role, STAFF_ROLES, INVALID_ROLE_MESSAGE)
        outlet = self._resolve_outlet(session, optional_text(outlet_id))

        row = self._store.insert(
            "staff",
            {
                "full_name": name,
                "role": role_v,
                "outlet_id": outlet,
                "phone_number": optional_text(phone_number),
                "is_active": True,
            },
        )
        logger.info("Staff %s added (%s)", row["id"], role_v)
        return str(row["id"])

    def update(
        self,
        session: Optional[Session],
        staff_id: Optional[str],
        *,
        full_name: Optional[str] = None,
        role: Optional[str] = None,
        outlet_id: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> None:
        """Partial update: blank name/role keep the stored values; blank outlet/phone clear them."""
        if not staff_id:
            raise ValidationError("Missing staff")
        payload: dict = {}
        if optional_text(full_name):
            payload["full_name"] = optional_text(full_name)
        if optional_text(role):
            payload["role"] = require_choice(role, STAFF_ROLES, INVALID_ROLE_MESSAGE)
        payload["outlet_id"] = self._resolve_outlet(session, optional_text(outlet_id))
        payload["phone_number"] = optional_text(phone_number)

        self.get(session, staff_id)
        self._store.update(Query("staff").eq("id", staff_id), payload)
        logger.info("Staff %s updated (%s)", staff_id, ", ".join(sorted(payload)))

    def set_active(self, session: Optional[Session], staff_id: Optional[str], is_active: bool) -> None:
        if not staff_id:
            raise ValidationError("Missing staff")
        if session is None:
            raise AuthorizationError("Unauthorized")
        self.get(session, staff_id)
        self._store.update(Query("staff").eq("id", staff_id), {"is_active": bool(is_active)})
        logger.info("Staff %s set active=%s", staff_id, bool(is_active))

    @staticmethod
    def _resolve_outlet(session: Optional[Session], outlet_id: Optional[str]) -> Optional[str]:
        if session is None:
            raise AuthorizationError("Unauthorized")
        scope = effective_outlet_id(session)
        if not scope:
            return outlet_id
        if outlet_id and outlet_id != scope:
            raise AuthorizationError("Unauthorized")
        # Scoped callers can only place staff in their own outlet.
        return scope
