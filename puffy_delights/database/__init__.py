"""
Database package for Puffy Delights
Contains database connection and repository classes
"""

from .connection import DatabaseConnection
from .repository import DessertRepository, OrderRepository

__all__ = [
    'DatabaseConnection',
    'DessertRepository', 'OrderRepository'
]
