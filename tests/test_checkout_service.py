"""
Tests for the checkout total calculator
"""
import re
import unittest
from decimal import Decimal

from puffy_delights.services.checkout_service import (
    CheckoutCalculator, generate_transaction_ref, to_cents
)


class TestCheckoutCalculator(unittest.TestCase):
    """Test cases for CheckoutCalculator"""

    def setUp(self):
        self.calculator = CheckoutCalculator(Decimal("0.08"), Decimal("50"), Decimal("5.99"))

    def test_below_threshold_pays_shipping(self):
        totals = self.calculator.calculate(40)
        self.assertEqual(totals.tax, Decimal("3.20"))
        self.assertEqual(totals.shipping, Decimal("5.99"))
        self.assertEqual(totals.total, Decimal("49.19"))
        self.assertEqual(totals.total_cents, 4919)

    def test_above_threshold_ships_free(self):
        totals = self.calculator.calculate(60)
        self.assertEqual(totals.shipping, Decimal("0"))
        self.assertEqual(totals.total, Decimal("64.8"))
        self.assertEqual(totals.total_cents, 6480)

    def test_exactly_threshold_pays_shipping(self):
        totals = self.calculator.calculate(50)
        self.assertEqual(totals.shipping, Decimal("5.99"))

    def test_empty_subtotal_is_free(self):
        totals = self.calculator.calculate(0)
        self.assertEqual(totals.total, Decimal("0"))
        self.assertEqual(totals.total_cents, 0)

    def test_rounds_once_at_the_end(self):
        # 12.99 * 0.08 = 1.0392; rounding the tax first would lose the fraction
        totals = self.calculator.calculate_cents(1299 * 3)
        self.assertEqual(totals.total, Decimal("38.97") + Decimal("3.1176") + Decimal("5.99"))
        self.assertEqual(totals.total_cents, 4808)

    def test_float_input_is_exact(self):
        self.assertEqual(self.calculator.calculate(40.1).subtotal, Decimal("40.1"))

    def test_negative_subtotal_rejected(self):
        with self.assertRaises(ValueError):
            self.calculator.calculate(-1)

    def test_display_dict(self):
        data = self.calculator.calculate(40).to_dict()
        self.assertEqual(data, {"subtotal": 40.0, "tax": 3.2, "shipping": 5.99,
                                "total": 49.19, "total_cents": 4919})

    def test_configured_rates(self):
        calculator = CheckoutCalculator("0.005", "100", "2.50")
        totals = calculator.calculate(80)
        self.assertEqual(totals.total, Decimal("80") + Decimal("0.4") + Decimal("2.50"))


class TestTransactionRef(unittest.TestCase):
    """Test cases for transaction references"""

    def test_format(self):
        self.assertRegex(generate_transaction_ref(), re.compile(r"^TXN-[0-9A-Z]+-[0-9A-Z]{8}$"))

    def test_unique(self):
        refs = {generate_transaction_ref() for _ in range(1000)}
        self.assertEqual(len(refs), 1000)

    def test_to_cents_half_up(self):
        self.assertEqual(to_cents(Decimal("1.005")), 101)
        self.assertEqual(to_cents(Decimal("1.004")), 100)


if __name__ == '__main__':
    unittest.main()
