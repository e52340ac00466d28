from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import StaffRole

STAFF_ROLES = [r.value for r in StaffRole]
INVALID_ROLE_MESSAGE = "Role must be one of: " + ", ".join(STAFF_ROLES)


@dataclass(frozen=True)
class StaffMember:
    id: str
    full_name: str
    role: str
    outlet_id: Optional[str]
    phone_number: Optional[str]
    is_active: bool
    outlet_name: str = ""

    @classmethod
    def from_row(cls, row: dict) -> "StaffMember":
        outlet_id = row.get("outlet_id")
        phone = row.get("phone_number")
        return cls(
            id=str(row.get("id") or ""),
            full_name=str(row.get("full_name") or "—"),
            role=str(row.get("role") or "—"),
            outlet_id=str(outlet_id) if outlet_id is not None else None,
            phone_number=str(phone) if phone is not None else None,
            # Rows without the flag are treated as active.
            is_active=row.get("is_active") is None or bool(row.get("is_active")),
            outlet_name=str(row.get("outlet_name") or ""),
        )
