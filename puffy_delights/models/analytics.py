"""
Dashboard aggregate data models
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Any


@dataclass(frozen=True)
class OrderStats:
    """Revenue summary over revenue-counting orders"""
    total_revenue: Decimal
    total_orders: int
    avg_order_value: Decimal
    total_desserts: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "total_revenue": float(self.total_revenue),
            "total_orders": self.total_orders,
            "avg_order_value": float(self.avg_order_value),
            "total_desserts": self.total_desserts
        }


@dataclass(frozen=True)
class DailyPoint:
    """Revenue and order count for one calendar day"""
    date: str
    label: str
    revenue: Decimal
    order_count: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "date": self.date,
            "label": self.label,
            "revenue": float(self.revenue),
            "order_count": self.order_count
        }


@dataclass(frozen=True)
class StatusSlice:
    """One slice of the order status chart"""
    status: str
    name: str
    value: int
    color: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "status": self.status,
            "name": self.name,
            "value": self.value,
            "color": self.color
        }


@dataclass(frozen=True)
class StatusRevenue:
    """Revenue collected by orders in one status"""
    status: str
    name: str
    revenue: Decimal
    count: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "status": self.status,
            "name": self.name,
            "revenue": float(self.revenue),
            "count": self.count
        }
