"""
Services package for Puffy Delights
Contains business logic services
"""

from .cart_service import CartService, cart_reducer
from .checkout_service import CheckoutCalculator, CheckoutTotals, generate_transaction_ref
from .dessert_service import DessertService
from .email_service import EmailService
from .order_service import OrderService
from . import analytics_service

__all__ = [
    'CartService', 'cart_reducer',
    'CheckoutCalculator', 'CheckoutTotals', 'generate_transaction_ref',
    'DessertService', 'EmailService', 'OrderService', 'analytics_service'
]
