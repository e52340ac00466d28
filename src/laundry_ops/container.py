from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .auth.service import AuthService, RegistrationService
from .dashboard.service import OverviewService
from .database.connection import DatabaseConnection, DBConfig
from .database.mysql_store import MySQLRecordStore
from .database.store import RecordStore
from .feedback.service import FeedbackService
from .orders.service import OrderService
from .outlets.service import OutletService
from .staff.service import StaffService


@dataclass(frozen=True)
class Container:
    store: RecordStore

    auth_service: AuthService
    registration_service: RegistrationService
    overview_service: OverviewService
    outlet_service: OutletService
    order_service: OrderService
    staff_service: StaffService
    feedback_service: FeedbackService


def build_services(store: RecordStore) -> Container:
    return Container(
        store=store,
        auth_service=AuthService(store),
        registration_service=RegistrationService(store),
        overview_service=OverviewService(store),
        outlet_service=OutletService(store),
        order_service=OrderService(store),
        staff_service=StaffService(store),
        feedback_service=FeedbackService(store),
    )


def build_container(*, db_config: Optional[DBConfig]) -> Optional[Container]:
    """Wire services to MySQL; None when the store is not configured."""
    if db_config is None:
        return None
    return build_services(MySQLRecordStore(DatabaseConnection(db_config)))
