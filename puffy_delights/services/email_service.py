"""
Email service - best-effort calls to the remote notification functions
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Any, Optional, Union

import httpx

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    "pending": "Your order has been received and is being processed.",
    "confirmed": "Your order has been confirmed and is being prepared.",
    "preparing": "Your delicious treats are being freshly prepared!",
    "out_for_delivery": "Your order is on its way! Our delivery team will contact you soon.",
    "delivered": "Your order has been successfully delivered. Enjoy your treats!",
    "cancelled": "Your order has been cancelled. If you have any questions, please contact us.",
}


def status_message(status: str) -> str:
    return STATUS_MESSAGES.get(status, f"Your order status has been updated to: {status}")


def format_currency(amount: Union[Decimal, float, int]) -> str:
    return f"₦{Decimal(str(amount)):,.2f}"


def format_date(value: str) -> str:
    # "2026-10-20" -> "Tuesday, October 20, 2026"; unparseable input is returned unchanged
    try:
        parsed = date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return value
    return f"{parsed.strftime('%A, %B')} {parsed.day}, {parsed.year}"


class EmailService:
    # Posts JSON payloads to named functions; never raises to the caller

    def __init__(self, functions_url: str, api_key: str,
                 order_confirmation_function: str = "send-order-confirmation",
                 admin_notification_function: str = "send-admin-notification",
                 status_update_function: str = "send-status-update",
                 timeout: float = 5.0,
                 client: Optional[httpx.Client] = None):
        self.functions_url = functions_url.rstrip("/")
        self.api_key = api_key
        self.order_confirmation_function = order_confirmation_function
        self.admin_notification_function = admin_notification_function
        self.status_update_function = status_update_function
        self.timeout = timeout
        self.client = client

    @classmethod
    def from_settings(cls, settings, client: Optional[httpx.Client] = None) -> "EmailService":
        return cls(
            functions_url=settings.functions_url,
            api_key=settings.api_key,
            order_confirmation_function=settings.order_confirmation_function,
            admin_notification_function=settings.admin_notification_function,
            status_update_function=settings.status_update_function,
            timeout=settings.request_timeout,
            client=client
        )

    def function_url(self, function_name: str) -> str:
        return f"{self.functions_url}/functions/v1/{function_name}"

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _post(self, function_name: str, payload: Dict[str, Any]) -> httpx.Response:
        url = self.function_url(function_name)
        if self.client is not None:
            return self.client.post(url, json=payload, headers=self._headers(), timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(url, json=payload, headers=self._headers())

    def send_email(self, function_name: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        # Any failure becomes {"success": False, "error": ...} and is only logged
        try:
            response = self._post(function_name, payload)
            response.raise_for_status()
            data = response.json() if response.content else {}
        except httpx.TimeoutException as e:
            logger.warning("Email function timed out", extra={"function": function_name})
            return {"success": False, "error": f"timeout: {e}"}
        except httpx.HTTPStatusError as e:
            logger.warning("Email function returned an error status",
                           extra={"function": function_name, "status_code": e.response.status_code})
            return {"success": False, "error": f"HTTP {e.response.status_code}"}
        except httpx.HTTPError as e:
            logger.warning("Email function unreachable: %s", e, extra={"function": function_name})
            return {"success": False, "error": str(e)}
        except ValueError as e:
            logger.warning("Email function answered with invalid JSON", extra={"function": function_name})
            return {"success": False, "error": f"invalid response: {e}"}

        if isinstance(data, dict) and (data.get("error") or data.get("success") is False):
            logger.warning("Email function reported failure: %s", data.get("error"),
                           extra={"function": function_name})
            return {"success": False, "error": data.get("error") or "remote function failed"}

        logger.info("Email sent", extra={"function": function_name})
        return {"success": True, "data": data}

    def send_order_confirmation(self, order_data: Dict[str, Any]) -> Dict[str, Any]:
        """Send the order confirmation email to the customer"""
        logger.info("Sending order confirmation for order %s: %s, delivery %s",
                    order_data["orderId"], format_currency(order_data["total"]),
                    format_date(order_data["deliveryDate"]), extra={"order_id": order_data["orderId"]})
        return self.send_email(self.order_confirmation_function, {
            "to": order_data["customerEmail"],
            "customerName": order_data["customerName"],
            "orderId": order_data["orderId"],
            "transactionRef": order_data["transactionRef"],
            "orderItems": order_data["orderItems"],
            "subtotal": order_data["subtotal"],
            "tax": order_data["tax"],
            "shipping": order_data["shipping"],
            "total": order_data["total"],
            "deliveryDate": order_data["deliveryDate"],
            "customerAddress": order_data["customerAddress"],
            "customerPhone": order_data["customerPhone"],
        })

    def send_admin_notification(self, admin_data: Dict[str, Any]) -> Dict[str, Any]:
        """Alert the shop owner about a new order"""
        logger.info("Sending admin notification for order %s: %s items, %s, delivery %s",
                    admin_data["orderId"], admin_data["itemCount"], format_currency(admin_data["total"]),
                    format_date(admin_data["deliveryDate"]), extra={"order_id": admin_data["orderId"]})
        return self.send_email(self.admin_notification_function, {
            "orderId": admin_data["orderId"],
            "customerName": admin_data["customerName"],
            "customerEmail": admin_data["customerEmail"],
            "total": admin_data["total"],
            "itemCount": admin_data["itemCount"],
            "deliveryDate": admin_data["deliveryDate"],
        })

    def send_status_update(self, customer_email: str, customer_name: str, order_id: str,
                           new_status: str, message: Optional[str] = None) -> Dict[str, Any]:
        """Tell the customer their order moved to a new status"""
        return self.send_email(self.status_update_function, {
            "to": customer_email,
            "customerName": customer_name,
            "orderId": order_id,
            "newStatus": new_status,
            "statusMessage": message or status_message(new_status),
        })

    def dispatch_order_emails(self, order_data: Dict[str, Any],
                              admin_data: Dict[str, Any]) -> List[Dict[str, Any]]:
        # Each call runs regardless of how the other one went
        results = []
        for send, data in ((self.send_order_confirmation, order_data),
                           (self.send_admin_notification, admin_data)):
            try:
                results.append(send(data))
            except Exception as e:
                logger.exception("Unexpected error while sending %s", send.__name__)
                results.append({"success": False, "error": str(e)})
        return results
