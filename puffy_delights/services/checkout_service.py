"""
Checkout service - turns a cart subtotal into the amount charged
"""
import secrets
import string
import time
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Any, Union

Amount = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
_BASE36 = string.digits + string.ascii_uppercase


def to_decimal(value: Amount) -> Decimal:
    # Floats go through str() so 5.99 stays 5.99
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_cents(amount: Decimal) -> int:
    """Round a major-unit amount to whole minor units (half up)"""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _base36(number: int) -> str:
    digits = []
    while True:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
        if not number:
            return "".join(reversed(digits))


def generate_transaction_ref() -> str:
    """Reference customers quote on their bank transfer, e.g. TXN-M2ABCD1F-7QX3K9PZ"""
    timestamp = _base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_BASE36) for _ in range(8))
    return f"TXN-{timestamp}-{suffix}"


@dataclass(frozen=True)
class CheckoutTotals:
    """Monetary breakdown of an order, exact until total_cents"""
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal

    @property
    def total_cents(self) -> int:
        return to_cents(self.total)

    def to_dict(self) -> Dict[str, Any]:
        """Display values rounded to cents"""
        return {
            "subtotal": float(self.subtotal.quantize(CENT, rounding=ROUND_HALF_UP)),
            "tax": float(self.tax.quantize(CENT, rounding=ROUND_HALF_UP)),
            "shipping": float(self.shipping.quantize(CENT, rounding=ROUND_HALF_UP)),
            "total": float(self.total.quantize(CENT, rounding=ROUND_HALF_UP)),
            "total_cents": self.total_cents
        }


class CheckoutCalculator:
    # One tax rate and one shipping rule for every place totals are shown or charged

    def __init__(self, tax_rate: Amount = Decimal("0.08"),
                 free_shipping_threshold: Amount = Decimal("50"),
                 flat_shipping_fee: Amount = Decimal("5.99")):
        self.tax_rate = to_decimal(tax_rate)
        self.free_shipping_threshold = to_decimal(free_shipping_threshold)
        self.flat_shipping_fee = to_decimal(flat_shipping_fee)

    @classmethod
    def from_settings(cls, settings) -> "CheckoutCalculator":
        return cls(settings.tax_rate, settings.free_shipping_threshold, settings.flat_shipping_fee)

    def shipping_for(self, subtotal: Decimal) -> Decimal:
        # Nothing to ship for an empty cart
        if subtotal <= 0 or subtotal > self.free_shipping_threshold:
            return Decimal("0")
        return self.flat_shipping_fee

    def calculate(self, subtotal: Amount) -> CheckoutTotals:
        subtotal = to_decimal(subtotal)
        if subtotal < 0:
            raise ValueError("subtotal must not be negative")

        tax = subtotal * self.tax_rate
        shipping = self.shipping_for(subtotal)
        return CheckoutTotals(
            subtotal=subtotal,
            tax=tax,
            shipping=shipping,
            total=subtotal + tax + shipping
        )

    def calculate_cents(self, subtotal_cents: int) -> CheckoutTotals:
        return self.calculate(Decimal(subtotal_cents) / 100)
