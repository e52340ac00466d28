from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class TrendPoint:
    date: str
    orders: int
    revenue: float


@dataclass(frozen=True)
class Overview:
    total_orders: int = 0
    total_revenue: float = 0.0
    total_customers: int = 0
    total_feedback: int = 0
    outlets_count: int = 0
    staff_count: int = 0
    express_count: int = 0
    outlet_chart: List[dict] = field(default_factory=list)
    status_chart: List[dict] = field(default_factory=list)
    trend: List[TrendPoint] = field(default_factory=list)
    recent_orders: List[dict] = field(default_factory=list)
    outlets: List[dict] = field(default_factory=list)

    @property
    def kpis(self) -> List[dict]:
        return [
            {"label": "Total Orders", "value": self.total_orders},
            {"label": "Total Revenue", "value": f"₹{self.total_revenue:,.0f}"},
            {"label": "Customers", "value": self.total_customers},
            {"label": "Outlets", "value": self.outlets_count},
            {"label": "Express Orders", "value": self.express_count},
            {"label": "Feedback", "value": self.total_feedback},
        ]

    @property
    def trend_peak(self) -> float:
        return max([p.revenue for p in self.trend] + [0.0])

    @property
    def outlet_peak(self) -> float:
        return max([o["revenue"] for o in self.outlet_chart] + [0.0])
