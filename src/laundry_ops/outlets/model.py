from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class OutletCard:
    """One outlet with its order statistics, as shown on the outlets page."""

    id: str
    outlet_name: str
    is_active: bool
    city: Optional[str]
    orders: int = 0
    revenue: float = 0.0
    delivered: int = 0
    running: int = 0
    electricity_usage_kwh: Optional[float] = None
    detergent_usage_kg: Optional[float] = None
