"""
Order service - checkout submission and admin order management
"""
import logging
import time
from concurrent.futures import Executor, Future
from dataclasses import replace
from datetime import date
from typing import Dict, List, Any, Optional, Callable, Union

from ..config import BankDetails
from ..exceptions import BackendError, NotFoundError, ValidationError
from ..models.order import Order, OrderItem, OrderStatus, CustomerInfo
from ..database.repository import OrderRepository
from .cart_service import CartService
from .checkout_service import CheckoutCalculator, CheckoutTotals, generate_transaction_ref
from .email_service import EmailService

logger = logging.getLogger(__name__)


def parse_status(value: Union[str, OrderStatus]) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(status.value for status in OrderStatus)
        raise ValidationError(f"Unknown order status {value!r}. Use one of: {allowed}", ["status"])


def validate_checkout(cart: CartService, customer_info: CustomerInfo, delivery_date: Optional[str]) -> str:
    # Returns the normalized delivery date or raises ValidationError
    if cart.is_empty():
        raise ValidationError("Your cart is empty.", ["cart"])

    missing = customer_info.missing_fields()
    delivery_date = (delivery_date or "").strip()
    if not delivery_date:
        missing.append("delivery_date")
    if missing:
        raise ValidationError(f"Please fill in: {', '.join(missing)}", missing)

    try:
        return date.fromisoformat(delivery_date).isoformat()
    except ValueError:
        raise ValidationError("Delivery date must be a date like 2025-01-31.", ["delivery_date"])


class OrderService:
    # Places orders from a cart and serves the admin order views

    def __init__(self, order_repository: OrderRepository, calculator: CheckoutCalculator,
                 email_service: Optional[EmailService] = None,
                 executor: Optional[Executor] = None,
                 bank_details: Optional[BankDetails] = None,
                 retries: int = 3, backoff: float = 0.5,
                 sleep: Callable[[float], None] = time.sleep):
        self.order_repo = order_repository
        self.calculator = calculator
        self.email_service = email_service
        self.executor = executor
        self.bank_details = bank_details or BankDetails()
        self.retries = max(1, retries)
        self.backoff = backoff
        self.sleep = sleep

    def quote(self, cart: CartService) -> CheckoutTotals:
        return self.calculator.calculate_cents(cart.get_subtotal_cents())

    def place_order(self, cart: CartService, customer_info: CustomerInfo,
                    delivery_date: Optional[str]) -> Dict[str, Any]:
        # Validate, persist (with retries), clear the cart, then notify without waiting
        try:
            delivery_date = validate_checkout(cart, customer_info, delivery_date)
        except ValidationError as e:
            return {"success": False, "error": str(e), "missing_fields": e.missing_fields}

        totals = self.quote(cart)
        lines = cart.lines
        order = Order(
            customer_info=customer_info,
            total_cents=totals.total_cents,
            delivery_date=delivery_date,
            status=OrderStatus.PENDING,
            transaction_ref_id=generate_transaction_ref(),
            order_items=[
                OrderItem(dessert_id=line.dessert_id, name=line.name,
                          quantity=line.quantity, price_cents=line.price_cents)
                for line in lines
            ]
        )

        try:
            created = self._create_with_retry(order)
        except BackendError as e:
            logger.error("Order creation failed: %s", e,
                         extra={"transaction_ref": order.transaction_ref_id})
            return {
                "success": False,
                "error": "Failed to place order. Please try again.",
                "backend_error": True
            }

        logger.info("Order placed", extra={"order_id": created.id,
                                           "transaction_ref": created.transaction_ref_id})
        item_count = cart.get_item_count()
        cart.clear_cart()
        self._notify_order_placed(created, totals, item_count)

        return {
            "success": True,
            "order": created.to_dict(),
            "order_id": created.id,
            "transaction_ref": created.transaction_ref_id,
            "totals": totals.to_dict(),
            "bank_details": self.bank_details.to_dict(),
            "message": "Order placed successfully! Please complete payment using the "
                       "bank transfer details."
        }

    def _create_with_retry(self, order: Order) -> Order:
        # Only the insert is retried; once it commits the order must not be written again
        order_id = self._insert_with_retry(order)
        try:
            stored = self.order_repo.get_order(order_id)
        except BackendError as e:
            logger.warning("Order stored but could not be read back: %s", e, extra={"order_id": order_id})
            stored = None
        return stored or replace(order, id=order_id)

    def _insert_with_retry(self, order: Order) -> int:
        # Bounded retry with exponential backoff; the last error propagates
        for attempt in range(1, self.retries + 1):
            try:
                return self.order_repo.insert_order(order)
            except BackendError as e:
                if attempt == self.retries:
                    raise
                delay = self.backoff * (2 ** (attempt - 1))
                logger.warning("Order creation attempt failed, retrying in %.2fs: %s", delay, e,
                               extra={"attempt": attempt})
                self.sleep(delay)
        raise BackendError("Order creation was not attempted")

    def build_email_payloads(self, order: Order, totals: CheckoutTotals, item_count: int):
        display = totals.to_dict()
        customer = order.customer_info
        order_data = {
            "customerEmail": customer.email,
            "customerName": customer.first_name,
            "orderId": str(order.id) if order.id is not None else "UNKNOWN",
            "transactionRef": order.transaction_ref_id,
            "orderItems": [
                {"name": item.name, "quantity": item.quantity,
                 "price": item.price_cents / 100,
                 "pack_of": item.dessert.pack_of if item.dessert else item.pack_of}
                for item in order.order_items
            ],
            "subtotal": display["subtotal"],
            "tax": display["tax"],
            "shipping": display["shipping"],
            "total": display["total"],
            "deliveryDate": order.delivery_date,
            "customerAddress": f"{customer.address}, {customer.city} {customer.zip_code}".strip(),
            "customerPhone": customer.phone,
        }
        admin_data = {
            "orderId": order_data["orderId"],
            "customerName": customer.full_name,
            "customerEmail": customer.email,
            "total": display["total"],
            "itemCount": item_count,
            "deliveryDate": order.delivery_date,
        }
        return order_data, admin_data

    def _notify_order_placed(self, order: Order, totals: CheckoutTotals, item_count: int):
        # Fire-and-forget: nothing here may change the outcome of the checkout
        if self.email_service is None:
            return

        try:
            order_data, admin_data = self.build_email_payloads(order, totals, item_count)
            if self.executor is not None:
                future = self.executor.submit(
                    self.email_service.dispatch_order_emails, order_data, admin_data)
                future.add_done_callback(self._log_dispatch)
            else:
                self._log_results(self.email_service.dispatch_order_emails(order_data, admin_data))
        except Exception:
            logger.exception("Order emails could not be dispatched", extra={"order_id": order.id})

    def _log_dispatch(self, future: Future):
        if future.exception() is not None:
            logger.error("Order email dispatch crashed: %s", future.exception())
            return
        self._log_results(future.result())

    def _log_results(self, results: List[Dict[str, Any]]):
        for name, result in zip(("confirmation", "admin notification"), results):
            if result.get("success"):
                logger.info("Order %s email sent", name)
            else:
                logger.warning("Order %s email failed: %s", name, result.get("error"))

    def list_orders(self, status: Optional[str] = None) -> Dict[str, Any]:
        try:
            status_filter = None if status in (None, "", "all") else parse_status(status)
            orders = self.order_repo.get_orders(status_filter)
        except ValidationError as e:
            return {"success": False, "error": str(e)}
        except BackendError as e:
            logger.error("Loading orders failed: %s", e)
            return {"success": False, "error": "Error loading orders.", "backend_error": True}

        return {
            "success": True,
            "orders": [order.to_dict() for order in orders],
            "total_found": len(orders)
        }

    def all_orders(self) -> List[Order]:
        return self.order_repo.get_orders()

    def get_order_details(self, order_id: int) -> Dict[str, Any]:
        try:
            order = self.order_repo.get_order(order_id)
        except BackendError as e:
            logger.error("Loading order %s failed: %s", order_id, e)
            return {"success": False, "error": "Error loading order.", "backend_error": True}

        if not order:
            return {"success": False, "error": f"Order {order_id} not found", "not_found": True}
        return {"success": True, "order": order.to_dict()}

    def update_status(self, order_id: int, status: Union[str, OrderStatus],
                      notify_customer: bool = False) -> Dict[str, Any]:
        # Any status may follow any other; only unknown values are rejected
        try:
            new_status = parse_status(status)
            order = self.order_repo.update_status(order_id, new_status)
        except ValidationError as e:
            return {"success": False, "error": str(e)}
        except NotFoundError as e:
            return {"success": False, "error": str(e), "not_found": True}
        except BackendError as e:
            logger.error("Order %s status update failed: %s", order_id, e)
            return {"success": False, "error": "Error updating order status. Please try again.",
                    "backend_error": True}

        logger.info("Order status updated", extra={"order_id": order_id, "status": new_status.value})

        if notify_customer and self.email_service is not None:
            self._notify_status_change(order)

        return {
            "success": True,
            "order": order.to_dict(),
            "message": f"Order status updated to: {new_status.value}"
        }

    def _notify_status_change(self, order: Order):
        customer = order.customer_info
        args = (customer.email, customer.first_name, str(order.id), order.status.value)
        try:
            if self.executor is not None:
                self.executor.submit(self.email_service.send_status_update, *args)
            else:
                self.email_service.send_status_update(*args)
        except Exception:
            logger.exception("Status email could not be dispatched", extra={"order_id": order.id})
