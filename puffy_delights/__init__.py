"""
Puffy Delights - dessert storefront with cart, bank-transfer checkout and admin dashboard
"""

__version__ = "1.0.0"
