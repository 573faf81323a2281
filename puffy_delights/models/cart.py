"""
Cart related data models and cart actions
"""
from dataclasses import dataclass
from typing import Optional, Dict, Any, Tuple, Union


@dataclass(frozen=True)
class CartLine:
    """One dessert in the cart, priced at the time it was added"""
    dessert_id: int
    name: str
    price_cents: int
    quantity: int
    image: Optional[str] = None

    @property
    def line_total_cents(self) -> int:
        return self.price_cents * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "dessert_id": self.dessert_id,
            "name": self.name,
            "price_cents": self.price_cents,
            "quantity": self.quantity,
            "image": self.image,
            "line_total_cents": self.line_total_cents
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartLine":
        return cls(
            dessert_id=int(data["dessert_id"]),
            name=data["name"],
            price_cents=int(data["price_cents"]),
            quantity=int(data["quantity"]),
            image=data.get("image")
        )


@dataclass(frozen=True)
class CartState:
    """Immutable snapshot of the cart"""
    lines: Tuple[CartLine, ...] = ()

    def find(self, dessert_id: int) -> Optional[CartLine]:
        return next((line for line in self.lines if line.dessert_id == dessert_id), None)


# Cart actions dispatched to the reducer

@dataclass(frozen=True)
class AddItem:
    line: CartLine


@dataclass(frozen=True)
class RemoveItem:
    dessert_id: int


@dataclass(frozen=True)
class UpdateQuantity:
    dessert_id: int
    quantity: int


@dataclass(frozen=True)
class ClearCart:
    pass


CartAction = Union[AddItem, RemoveItem, UpdateQuantity, ClearCart]
