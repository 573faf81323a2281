"""
Database connection management
"""
import logging
import sqlite3
from contextlib import contextmanager
from typing import Generator, List

from ..exceptions import BackendError

logger = logging.getLogger(__name__)

TABLES = ("desserts", "orders", "order_items")


class DatabaseConnection:
    # Owns the sqlite file that stands in for the hosted desserts/orders tables

    def __init__(self, db_path: str = "puffy_delights.db", timeout: float = 5.0,
                 create_schema: bool = True):
        self.db_path = db_path
        self.timeout = timeout
        if create_schema:
            self.init_database()

    def init_database(self):
        # Create the tables on first use
        with self.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute('''
            CREATE TABLE IF NOT EXISTS desserts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                price_cents INTEGER NOT NULL CHECK (price_cents >= 0),
                pack_of INTEGER NOT NULL DEFAULT 1 CHECK (pack_of >= 1),
                image TEXT,
                ingredients TEXT,
                tags TEXT,
                is_featured INTEGER NOT NULL DEFAULT 0,
                in_stock INTEGER NOT NULL DEFAULT 1,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            ''')

            cursor.execute('''
            CREATE TABLE IF NOT EXISTS orders (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                transaction_ref_id TEXT,
                customer_info TEXT NOT NULL,
                total_cents INTEGER NOT NULL,
                delivery_date TEXT,
                status TEXT NOT NULL DEFAULT 'pending',
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            ''')

            # dessert_id survives dessert deletion as NULL; the line keeps its snapshot
            cursor.execute('''
            CREATE TABLE IF NOT EXISTS order_items (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                order_id INTEGER NOT NULL,
                dessert_id INTEGER,
                name TEXT NOT NULL,
                quantity INTEGER NOT NULL CHECK (quantity >= 1),
                price_cents INTEGER NOT NULL,
                pack_of INTEGER,
                created_at TEXT NOT NULL,
                FOREIGN KEY(order_id) REFERENCES orders(id),
                FOREIGN KEY(dessert_id) REFERENCES desserts(id) ON DELETE SET NULL
            )
            ''')

            conn.commit()

    @contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        # Open a connection per unit of work and always close it
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        except sqlite3.Error as e:
            raise BackendError(f"Could not open database {self.db_path}: {e}") from e

        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        finally:
            conn.close()

    def existing_tables(self) -> List[str]:
        # Names of the storefront tables present in the database file
        with self.get_connection() as conn:
            rows = conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'"
            ).fetchall()
        present = {row["name"] for row in rows}
        return [name for name in TABLES if name in present]
