"""
Core package for Puffy Delights
Contains main business logic and orchestration
"""

from .storefront import PuffyStorefront

__all__ = [
    'PuffyStorefront'
]
