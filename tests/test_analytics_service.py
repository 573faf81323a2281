"""
Tests for the dashboard aggregates
"""
import copy
import unittest
from datetime import date
from decimal import Decimal

from puffy_delights.config import STATUS_COLORS
from puffy_delights.models.dessert import Dessert
from puffy_delights.models.order import Order, OrderStatus, CustomerInfo
from puffy_delights.services import analytics_service as analytics


def make_order(status: str, total_cents: int = 0, created_at: str = None) -> Order:
    return Order(customer_info=CustomerInfo(first_name="Ada"), total_cents=total_cents,
                 delivery_date="2026-10-20", status=OrderStatus(status), created_at=created_at)


class TestAnalyticsService(unittest.TestCase):
    """Test cases for analytics aggregates"""

    def setUp(self):
        self.orders = [
            make_order("pending", 500, "2026-10-18T09:00:00+00:00"),
            make_order("confirmed", 1000, "2026-10-18T10:00:00+00:00"),
            make_order("delivered", 2000, "2026-10-17T23:30:00+00:00"),
        ]

    def test_count_by_status_includes_zeros(self):
        counts = analytics.count_by_status(self.orders)
        self.assertEqual(counts["pending"], 1)
        self.assertEqual(counts["confirmed"], 1)
        self.assertEqual(counts["delivered"], 1)
        self.assertEqual(counts["preparing"], 0)
        self.assertEqual(counts["out_for_delivery"], 0)
        self.assertEqual(counts["cancelled"], 0)
        self.assertEqual(counts["total"], 3)
        for status in OrderStatus:
            self.assertIn(status.value, counts)

    def test_revenue_stats(self):
        stats = analytics.revenue_stats(self.orders)
        self.assertEqual(stats.total_orders, 2)
        self.assertEqual(stats.total_revenue, Decimal("30.00"))
        self.assertEqual(stats.avg_order_value, Decimal("15.00"))

    def test_revenue_stats_without_revenue_orders(self):
        stats = analytics.revenue_stats([make_order("pending", 900), make_order("cancelled", 100)])
        self.assertEqual(stats.total_orders, 0)
        self.assertEqual(stats.total_revenue, 0)
        self.assertEqual(stats.avg_order_value, 0)
        self.assertEqual(stats.to_dict()["avg_order_value"], 0.0)

    def test_revenue_stats_counts_desserts(self):
        desserts = [Dessert(id=1, name="Tart", description="", price_cents=100)]
        self.assertEqual(analytics.revenue_stats([], desserts).total_desserts, 1)

    def test_daily_series_utc(self):
        series = analytics.daily_series(self.orders, days=7, today=date(2026, 10, 18))

        self.assertEqual(len(series), 7)
        self.assertEqual(series[0].date, "2026-10-12")
        self.assertEqual(series[-1].date, "2026-10-18")
        self.assertEqual(series[-1].label, "Oct 18")
        # pending order on the 18th is not revenue
        self.assertEqual(series[-1].revenue, Decimal("10"))
        self.assertEqual(series[-1].order_count, 1)
        self.assertEqual(series[-2].revenue, Decimal("20"))
        self.assertEqual(sum(point.order_count for point in series[:-2]), 0)

    def test_daily_series_respects_timezone(self):
        # 23:30 UTC on the 17th is already the 18th in Lagos (UTC+1)
        series = analytics.daily_series(self.orders, days=2, today=date(2026, 10, 18),
                                        tz="Africa/Lagos")
        self.assertEqual(series[-1].order_count, 2)
        self.assertEqual(series[-1].revenue, Decimal("30"))

    def test_daily_series_naive_timestamps_are_utc(self):
        orders = [make_order("confirmed", 700, "2026-10-18 08:00:00")]
        series = analytics.daily_series(orders, days=1, today=date(2026, 10, 18))
        self.assertEqual(series[0].order_count, 1)

    def test_status_distribution_omits_zero(self):
        slices = analytics.status_distribution(self.orders, STATUS_COLORS)
        self.assertEqual([s.status for s in slices], ["pending", "confirmed", "delivered"])
        self.assertEqual(slices[0].color, STATUS_COLORS["pending"])
        self.assertEqual(slices[2].name, "Delivered")

    def test_revenue_by_status(self):
        rows = {row.status: row for row in analytics.revenue_by_status(self.orders)}
        self.assertNotIn("pending", rows)
        self.assertEqual(rows["confirmed"].revenue, Decimal("10"))
        self.assertEqual(rows["out_for_delivery"].count, 0)

    def test_functions_are_idempotent_and_pure(self):
        snapshot = copy.deepcopy(self.orders)
        today = date(2026, 10, 18)
        for func in (analytics.count_by_status, analytics.revenue_stats,
                     analytics.status_distribution, analytics.revenue_by_status,
                     lambda orders: analytics.daily_series(orders, today=today)):
            self.assertEqual(func(self.orders), func(self.orders))
        self.assertEqual(self.orders, snapshot)

    def test_build_dashboard(self):
        dashboard = analytics.build_dashboard(self.orders, [], today=date(2026, 10, 18))
        self.assertEqual(dashboard["stats"]["total_revenue"], 30.0)
        self.assertEqual(len(dashboard["daily"]), 7)
        self.assertEqual(dashboard["status_counts"]["total"], 3)


if __name__ == '__main__':
    unittest.main()
