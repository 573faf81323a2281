"""
Main PuffyStorefront class - wires repositories and services together
"""
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Dict, Any, Optional

import httpx

from ..config import Settings
from ..database.connection import DatabaseConnection
from ..database.repository import DessertRepository, OrderRepository
from ..services.cart_service import CartService
from ..services.checkout_service import CheckoutCalculator
from ..services.dessert_service import DessertService
from ..services.email_service import EmailService
from ..services.order_service import OrderService
from ..services import analytics_service


class PuffyStorefront:
    # Central object handed to the web layer; no module-level state

    def __init__(self, settings: Settings, executor: Optional[Executor] = None,
                 http_client: Optional[httpx.Client] = None,
                 background_emails: bool = True):
        self.settings = settings

        # Data access layer
        self.db_connection = DatabaseConnection(settings.database_path, settings.request_timeout)
        self.dessert_repo = DessertRepository(self.db_connection)
        self.order_repo = OrderRepository(self.db_connection)

        # Service layer
        if executor is None and background_emails:
            executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="puffy-email")
        self.executor = executor

        self.calculator = CheckoutCalculator.from_settings(settings)
        self.email_service = EmailService.from_settings(settings, client=http_client)
        self.dessert_service = DessertService(self.dessert_repo)
        self.order_service = OrderService(
            self.order_repo,
            self.calculator,
            email_service=self.email_service,
            executor=self.executor,
            bank_details=settings.bank_details,
            retries=settings.order_create_retries,
            backoff=settings.order_retry_backoff
        )

    def new_cart(self, data: Optional[Dict[str, Any]] = None) -> CartService:
        return CartService.from_dict(data)

    def cart_summary(self, cart: CartService) -> Dict[str, Any]:
        return {
            "items": [line.to_dict() for line in cart.lines],
            "item_count": cart.get_item_count(),
            "total": float(cart.get_total()),
            "totals": self.order_service.quote(cart).to_dict()
        }

    def dashboard(self, days: int = 7) -> Dict[str, Any]:
        # Recomputed on every call from the current order list
        orders = self.order_service.all_orders()
        desserts = self.dessert_repo.find_desserts()
        return analytics_service.build_dashboard(
            orders, desserts, days=days,
            tz=self.settings.dashboard_timezone,
            colors=self.settings.status_colors
        )

    def shutdown(self):
        if isinstance(self.executor, ThreadPoolExecutor):
            self.executor.shutdown(wait=True)
