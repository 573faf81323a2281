"""
Models package for Puffy Delights
Contains data models and type definitions
"""

from .dessert import Dessert, DessertForm
from .cart import CartLine, CartState, AddItem, RemoveItem, UpdateQuantity, ClearCart
from .order import Order, OrderItem, OrderStatus, CustomerInfo, REVENUE_STATUSES
from .analytics import OrderStats, DailyPoint, StatusSlice, StatusRevenue

__all__ = [
    'Dessert', 'DessertForm',
    'CartLine', 'CartState', 'AddItem', 'RemoveItem', 'UpdateQuantity', 'ClearCart',
    'Order', 'OrderItem', 'OrderStatus', 'CustomerInfo', 'REVENUE_STATUSES',
    'OrderStats', 'DailyPoint', 'StatusSlice', 'StatusRevenue'
]
