#!/usr/bin/env python3
"""
Database initialization script
Creates the storefront tables and seeds the sample dessert catalog.
"""
import logging
import os
import sys

from dotenv import load_dotenv

from .database.connection import DatabaseConnection
from .database.repository import DessertRepository, OrderRepository
from .exceptions import BackendError
from .models.dessert import DessertForm

logger = logging.getLogger(__name__)

SAMPLE_DESSERTS = [
    DessertForm(name="Chocolate Cloud Cake",
                description="Decadent chocolate sponge with fluffy cream clouds and dark chocolate ganache",
                price_cents=1299, pack_of=1, is_featured=True,
                tags=["chocolate", "cake", "premium"],
                ingredients="Belgian chocolate, cream, eggs, flour"),
    DessertForm(name="Berry Bliss Tart",
                description="Fresh seasonal berries on vanilla custard base with buttery pastry crust",
                price_cents=999, pack_of=1, is_featured=True,
                tags=["berries", "tart", "fresh"],
                ingredients="Mixed berries, vanilla custard, butter pastry"),
    DessertForm(name="Caramel Dream Éclair",
                description="Light choux pastry filled with salted caramel cream and topped with caramel glaze",
                price_cents=799, pack_of=1, is_featured=True,
                tags=["caramel", "éclair", "classic"],
                ingredients="Choux pastry, salted caramel, cream"),
    DessertForm(name="Vanilla Bean Cheesecake",
                description="Creamy New York style cheesecake with Madagascar vanilla beans",
                price_cents=1199, pack_of=1,
                tags=["vanilla", "cheesecake", "creamy"]),
    DessertForm(name="Lemon Meringue Tart",
                description="Zesty lemon curd under a cloud of toasted meringue",
                price_cents=899, pack_of=1,
                tags=["lemon", "tart", "citrus"]),
    DessertForm(name="Double Chocolate Cookies",
                description="Chewy cookies loaded with dark and milk chocolate chunks",
                price_cents=499, pack_of=6, in_stock=False,
                tags=["chocolate", "cookies"]),
    DessertForm(name="Strawberry Shortcake",
                description="Fluffy sponge layered with fresh strawberries and whipped cream",
                price_cents=699, pack_of=1,
                tags=["strawberry", "cake", "fresh"]),
    DessertForm(name="Tiramisu",
                description="Espresso-soaked ladyfingers with mascarpone cream and cocoa",
                price_cents=1099, pack_of=1,
                tags=["coffee", "italian", "classic"]),
]


def init_database(db_path: str, seed: bool = True) -> bool:
    """Create tables and, when the catalog is empty, insert the sample desserts"""
    try:
        db = DatabaseConnection(db_path)
        desserts = DessertRepository(db)

        if seed and desserts.count_desserts() == 0:
            for form in SAMPLE_DESSERTS:
                desserts.create_dessert(form)

        dessert_count = desserts.count_desserts()
        order_count = len(OrderRepository(db).get_orders())
    except BackendError as e:
        print(f"❌ Database initialization failed: {e}")
        return False

    print("✅ Database initialized!")
    print(f"📊 desserts table: {dessert_count} desserts")
    print(f"📊 orders table: {order_count} orders")
    return True


def main() -> int:
    load_dotenv()
    db_path = sys.argv[1] if len(sys.argv) > 1 else os.getenv("PUFFY_DATABASE_PATH", "puffy_delights.db")

    print("=== Puffy Delights database initialization ===")
    if init_database(db_path):
        print("\nYou can now start the app with: python -m puffy_delights.app")
        return 0
    print("\nInitialization failed. Check the database path and permissions.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
