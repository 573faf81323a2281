"""
Cart service - reducer-driven cart store
"""
from dataclasses import replace
from decimal import Decimal
from typing import Dict, List, Any, Optional

from ..models.cart import (
    CartAction, CartLine, CartState, AddItem, RemoveItem, UpdateQuantity, ClearCart
)
from ..models.dessert import Dessert


def cart_reducer(state: CartState, action: CartAction) -> CartState:
    """Return the cart state that results from applying ``action`` to ``state``.

    Pure: ``state`` is never modified. Lines stay unique per dessert id and a
    quantity that drops to zero or below removes the line.
    """
    if isinstance(action, AddItem):
        existing = state.find(action.line.dessert_id)
        if existing:
            return cart_reducer(state, UpdateQuantity(
                existing.dessert_id, existing.quantity + action.line.quantity))
        if action.line.quantity <= 0:
            return state
        return CartState(lines=state.lines + (action.line,))

    if isinstance(action, RemoveItem):
        return CartState(lines=tuple(
            line for line in state.lines if line.dessert_id != action.dessert_id
        ))

    if isinstance(action, UpdateQuantity):
        return CartState(lines=tuple(
            replace(line, quantity=action.quantity) if line.dessert_id == action.dessert_id else line
            for line in state.lines
            if line.dessert_id != action.dessert_id or action.quantity > 0
        ))

    if isinstance(action, ClearCart):
        return CartState()

    return state


class CartService:
    # In-memory cart for one shopper; every mutation goes through the reducer

    def __init__(self, state: Optional[CartState] = None):
        self.state = state or CartState()

    def dispatch(self, action: CartAction) -> CartState:
        self.state = cart_reducer(self.state, action)
        return self.state

    @property
    def lines(self) -> List[CartLine]:
        return list(self.state.lines)

    def is_empty(self) -> bool:
        return not self.state.lines

    def add_item(self, dessert: Dessert, quantity: int = 1) -> CartState:
        # No stock check here; the storefront refuses out-of-stock desserts before calling
        return self.dispatch(AddItem(CartLine(
            dessert_id=dessert.id,
            name=dessert.name,
            price_cents=dessert.price_cents,
            quantity=quantity,
            image=dessert.image
        )))

    def update_quantity(self, dessert_id: int, new_quantity: int) -> CartState:
        return self.dispatch(UpdateQuantity(dessert_id, new_quantity))

    def remove_item(self, dessert_id: int) -> CartState:
        return self.dispatch(RemoveItem(dessert_id))

    def clear_cart(self) -> CartState:
        return self.dispatch(ClearCart())

    def get_subtotal_cents(self) -> int:
        return sum(line.line_total_cents for line in self.state.lines)

    def get_total(self) -> Decimal:
        # Major currency units, converted once from the cents sum
        return Decimal(self.get_subtotal_cents()) / 100

    def get_item_count(self) -> int:
        return sum(line.quantity for line in self.state.lines)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the cart for session storage"""
        return {"items": [line.to_dict() for line in self.state.lines]}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CartService":
        # Rebuild through the reducer so a tampered session cannot break line uniqueness
        service = cls()
        for item in (data or {}).get("items", []):
            line = CartLine.from_dict(item)
            if line.quantity > 0:
                service.dispatch(AddItem(line))
        return service
