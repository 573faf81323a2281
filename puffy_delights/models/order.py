"""
Order related data models
"""
from dataclasses import dataclass, field, fields
from typing import List, Optional, Dict, Any
from enum import Enum

from .dessert import Dessert


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()

    @property
    def counts_as_revenue(self) -> bool:
        return self not in (OrderStatus.PENDING, OrderStatus.CANCELLED)


REVENUE_STATUSES = tuple(status for status in OrderStatus if status.counts_as_revenue)


@dataclass
class OrderItem:
    """Order item data model"""
    name: str
    quantity: int
    price_cents: int
    dessert_id: Optional[int] = None
    pack_of: Optional[int] = None
    id: Optional[int] = None
    order_id: Optional[int] = None
    dessert: Optional[Dessert] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "order_id": self.order_id,
            "dessert_id": self.dessert_id,
            "name": self.name,
            "quantity": self.quantity,
            "price_cents": self.price_cents,
            "pack_of": self.pack_of,
            "dessert": self.dessert.to_dict() if self.dessert else None
        }


@dataclass
class CustomerInfo:
    """Customer information collected at checkout"""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    zip_code: str = ""
    special_instructions: str = ""

    REQUIRED = ("first_name", "last_name", "email", "phone", "address", "city", "zip_code")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def missing_fields(self) -> List[str]:
        # Required fields that are empty once whitespace is stripped
        return [name for name in self.REQUIRED if not str(getattr(self, name) or "").strip()]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CustomerInfo":
        # Accepts snake_case keys as well as the camelCase keys of the web form
        data = data or {}
        aliases = {
            "first_name": "firstName",
            "last_name": "lastName",
            "zip_code": "zipCode",
            "special_instructions": "specialInstructions",
        }
        values = {}
        for f in fields(cls):
            value = data.get(f.name, data.get(aliases.get(f.name, f.name), ""))
            values[f.name] = "" if value is None else str(value)
        return cls(**values)


@dataclass
class Order:
    """Order data model"""
    customer_info: CustomerInfo
    total_cents: int
    delivery_date: str
    status: OrderStatus = OrderStatus.PENDING
    transaction_ref_id: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    order_items: List[OrderItem] = field(default_factory=list)

    @property
    def total(self) -> float:
        return self.total_cents / 100

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.order_items)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "transaction_ref_id": self.transaction_ref_id,
            "customer_info": self.customer_info.to_dict(),
            "total_cents": self.total_cents,
            "delivery_date": self.delivery_date,
            "status": self.status.value,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "order_items": [item.to_dict() for item in self.order_items]
        }
