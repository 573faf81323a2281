"""
Runtime configuration loaded from the environment (.env supported)
"""
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from .exceptions import ConfigurationError


# Chart colors per order status, kept stable across renders
STATUS_COLORS: Dict[str, str] = {
    "pending": "#EAB308",
    "confirmed": "#3B82F6",
    "preparing": "#8B5CF6",
    "out_for_delivery": "#F97316",
    "delivered": "#10B981",
    "cancelled": "#EF4444",
}

REQUIRED_VARIABLES = ("PUFFY_FUNCTIONS_URL", "PUFFY_API_KEY", "SECRET_KEY")


def is_placeholder(value: Optional[str]) -> bool:
    # Unset, blank, or left at the "your-..." template value
    return not value or not value.strip() or value.strip().lower().startswith("your-")


def _decimal(name: str, default: str) -> Decimal:
    raw = os.getenv(name, default)
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


def _int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def _float(name: str, default: float) -> float:
    raw = os.getenv(name, str(default))
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


def _timezone(name: str, default: str) -> str:
    raw = os.getenv(name, default).strip()
    if raw == "UTC":
        return raw
    try:
        ZoneInfo(raw)
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigurationError(f"{name} must be an IANA timezone name, got {raw!r}")
    return raw


@dataclass
class BankDetails:
    """Account customers transfer payment into"""
    bank_name: str = ""
    account_number: str = ""
    account_name: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "bank_name": self.bank_name,
            "account_number": self.account_number,
            "account_name": self.account_name
        }


@dataclass
class Settings:
    """Storefront settings"""
    functions_url: str
    api_key: str
    secret_key: str = "dev"
    database_path: str = "puffy_delights.db"
    admin_token: Optional[str] = None
    tax_rate: Decimal = Decimal("0.08")
    free_shipping_threshold: Decimal = Decimal("50")
    flat_shipping_fee: Decimal = Decimal("5.99")
    request_timeout: float = 5.0
    order_create_retries: int = 3
    order_retry_backoff: float = 0.5
    dashboard_timezone: str = "UTC"
    order_confirmation_function: str = "send-order-confirmation"
    admin_notification_function: str = "send-admin-notification"
    status_update_function: str = "send-status-update"
    bank_details: BankDetails = field(default_factory=BankDetails)
    status_colors: Dict[str, str] = field(default_factory=lambda: dict(STATUS_COLORS))
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        # Read settings once at start up; required values must be real
        if load_env_file:
            load_dotenv()

        missing = [name for name in REQUIRED_VARIABLES if is_placeholder(os.getenv(name))]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )

        admin_token = os.getenv("PUFFY_ADMIN_TOKEN")
        if is_placeholder(admin_token):
            admin_token = None

        return cls(
            functions_url=os.environ["PUFFY_FUNCTIONS_URL"].rstrip("/"),
            api_key=os.environ["PUFFY_API_KEY"],
            secret_key=os.environ["SECRET_KEY"],
            database_path=os.getenv("PUFFY_DATABASE_PATH", "puffy_delights.db"),
            admin_token=admin_token,
            tax_rate=_decimal("TAX_RATE", "0.08"),
            free_shipping_threshold=_decimal("FREE_SHIPPING_THRESHOLD", "50"),
            flat_shipping_fee=_decimal("FLAT_SHIPPING_FEE", "5.99"),
            request_timeout=_float("REQUEST_TIMEOUT", 5.0),
            order_create_retries=_int("ORDER_CREATE_RETRIES", 3),
            order_retry_backoff=_float("ORDER_RETRY_BACKOFF", 0.5),
            dashboard_timezone=_timezone("DASHBOARD_TIMEZONE", "UTC"),
            order_confirmation_function=os.getenv(
                "ORDER_CONFIRMATION_FUNCTION", "send-order-confirmation"),
            admin_notification_function=os.getenv(
                "ADMIN_NOTIFICATION_FUNCTION", "send-admin-notification"),
            status_update_function=os.getenv("STATUS_UPDATE_FUNCTION", "send-status-update"),
            bank_details=BankDetails(
                bank_name=os.getenv("BANK_NAME", ""),
                account_number=os.getenv("BANK_ACCOUNT_NUMBER", ""),
                account_name=os.getenv("BANK_ACCOUNT_NAME", "")
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper()
        )
