"""
Database repository classes
"""
import json
import sqlite3
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any

from ..exceptions import BackendError, NotFoundError
from ..models.dessert import Dessert, DessertForm
from ..models.order import Order, OrderItem, OrderStatus, CustomerInfo
from .connection import DatabaseConnection


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_dessert(row: sqlite3.Row, prefix: str = "") -> Dessert:
    return Dessert(
        id=row[prefix + "id"],
        name=row[prefix + "name"],
        description=row[prefix + "description"],
        price_cents=row[prefix + "price_cents"],
        pack_of=row[prefix + "pack_of"],
        in_stock=bool(row[prefix + "in_stock"]),
        is_featured=bool(row[prefix + "is_featured"]),
        tags=json.loads(row[prefix + "tags"]) if row[prefix + "tags"] else [],
        image=row[prefix + "image"],
        ingredients=row[prefix + "ingredients"],
        created_at=row[prefix + "created_at"],
        updated_at=row[prefix + "updated_at"]
    )


class DessertRepository:
    # Data access for the desserts table

    def __init__(self, db_connection: DatabaseConnection):
        self.db = db_connection

    def find_desserts(self, in_stock_only: bool = False) -> List[Dessert]:
        # Newest first, like the catalog listing
        sql = "SELECT * FROM desserts"
        if in_stock_only:
            sql += " WHERE in_stock = 1"
        sql += " ORDER BY created_at DESC, id DESC"

        try:
            with self.db.get_connection() as conn:
                rows = conn.execute(sql).fetchall()
        except sqlite3.Error as e:
            raise BackendError(f"Could not load desserts: {e}") from e

        return [_row_to_dessert(row) for row in rows]

    def get_dessert_by_id(self, dessert_id: int) -> Optional[Dessert]:
        try:
            with self.db.get_connection() as conn:
                row = conn.execute("SELECT * FROM desserts WHERE id = ?", (dessert_id,)).fetchone()
        except sqlite3.Error as e:
            raise BackendError(f"Could not load dessert {dessert_id}: {e}") from e

        return _row_to_dessert(row) if row else None

    def create_dessert(self, form: DessertForm) -> Dessert:
        now = utc_now()
        try:
            with self.db.get_connection() as conn:
                cursor = conn.execute("""
                INSERT INTO desserts (
                    name, description, price_cents, pack_of, image, ingredients,
                    tags, is_featured, in_stock, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    form.name, form.description, form.price_cents, form.pack_of,
                    form.image, form.ingredients, json.dumps(form.tags),
                    int(form.is_featured), int(form.in_stock), now, now
                ))
                conn.commit()
                dessert_id = cursor.lastrowid
        except sqlite3.Error as e:
            raise BackendError(f"Could not create dessert: {e}") from e

        return self.get_dessert_by_id(dessert_id)

    def update_dessert(self, dessert_id: int, form: DessertForm) -> Dessert:
        # Last write wins; no version check
        try:
            with self.db.get_connection() as conn:
                cursor = conn.execute("""
                UPDATE desserts SET
                    name = ?, description = ?, price_cents = ?, pack_of = ?, image = ?,
                    ingredients = ?, tags = ?, is_featured = ?, in_stock = ?, updated_at = ?
                WHERE id = ?
                """, (
                    form.name, form.description, form.price_cents, form.pack_of,
                    form.image, form.ingredients, json.dumps(form.tags),
                    int(form.is_featured), int(form.in_stock), utc_now(), dessert_id
                ))
                conn.commit()
                updated = cursor.rowcount
        except sqlite3.Error as e:
            raise BackendError(f"Could not update dessert {dessert_id}: {e}") from e

        if not updated:
            raise NotFoundError(f"Dessert {dessert_id} not found")
        return self.get_dessert_by_id(dessert_id)

    def delete_dessert(self, dessert_id: int) -> None:
        try:
            with self.db.get_connection() as conn:
                cursor = conn.execute("DELETE FROM desserts WHERE id = ?", (dessert_id,))
                conn.commit()
                deleted = cursor.rowcount
        except sqlite3.Error as e:
            raise BackendError(f"Could not delete dessert {dessert_id}: {e}") from e

        if not deleted:
            raise NotFoundError(f"Dessert {dessert_id} not found")

    def count_desserts(self) -> int:
        try:
            with self.db.get_connection() as conn:
                return conn.execute("SELECT COUNT(*) FROM desserts").fetchone()[0]
        except sqlite3.Error as e:
            raise BackendError(f"Could not count desserts: {e}") from e


class OrderRepository:
    # Data access for orders and their line snapshots

    def __init__(self, db_connection: DatabaseConnection):
        self.db = db_connection

    def insert_order(self, order: Order) -> int:
        # Order row and its items are written in one transaction; returns the new id
        now = utc_now()
        try:
            with self.db.get_connection() as conn:
                cursor = conn.execute("""
                INSERT INTO orders (
                    transaction_ref_id, customer_info, total_cents, delivery_date,
                    status, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (
                    order.transaction_ref_id, json.dumps(order.customer_info.to_dict()),
                    order.total_cents, order.delivery_date, order.status.value, now, now
                ))
                order_id = cursor.lastrowid

                for item in order.order_items:
                    conn.execute("""
                    INSERT INTO order_items (
                        order_id, dessert_id, name, quantity, price_cents, pack_of, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """, (
                        order_id, item.dessert_id, item.name, item.quantity,
                        item.price_cents, item.pack_of, now
                    ))

                conn.commit()
        except sqlite3.Error as e:
            raise BackendError(f"Could not create order: {e}") from e

        return order_id

    def get_orders(self, status: Optional[OrderStatus] = None) -> List[Order]:
        # All orders newest first, with items joined to their desserts
        sql = "SELECT * FROM orders"
        params: List[Any] = []
        if status is not None:
            sql += " WHERE status = ?"
            params.append(status.value)
        sql += " ORDER BY created_at DESC, id DESC"

        try:
            with self.db.get_connection() as conn:
                order_rows = conn.execute(sql, params).fetchall()
                items = self._load_items(conn, [row["id"] for row in order_rows])
        except sqlite3.Error as e:
            raise BackendError(f"Could not load orders: {e}") from e

        return [self._row_to_order(row, items.get(row["id"], [])) for row in order_rows]

    def get_order(self, order_id: int) -> Optional[Order]:
        try:
            with self.db.get_connection() as conn:
                row = conn.execute("SELECT * FROM orders WHERE id = ?", (order_id,)).fetchone()
                if not row:
                    return None
                items = self._load_items(conn, [order_id])
        except sqlite3.Error as e:
            raise BackendError(f"Could not load order {order_id}: {e}") from e

        return self._row_to_order(row, items.get(order_id, []))

    def update_status(self, order_id: int, status: OrderStatus) -> Order:
        try:
            with self.db.get_connection() as conn:
                cursor = conn.execute(
                    "UPDATE orders SET status = ?, updated_at = ? WHERE id = ?",
                    (status.value, utc_now(), order_id)
                )
                conn.commit()
                updated = cursor.rowcount
        except sqlite3.Error as e:
            raise BackendError(f"Could not update order {order_id}: {e}") from e

        if not updated:
            raise NotFoundError(f"Order {order_id} not found")
        return self.get_order(order_id)

    def _load_items(self, conn: sqlite3.Connection, order_ids: List[int]) -> Dict[int, List[OrderItem]]:
        if not order_ids:
            return {}

        placeholders = ", ".join("?" for _ in order_ids)
        rows = conn.execute(f"""
        SELECT oi.id AS item_id, oi.order_id, oi.dessert_id, oi.name AS item_name,
               oi.quantity, oi.price_cents AS item_price_cents, oi.pack_of AS item_pack_of,
               d.id AS d_id, d.name AS d_name, d.description AS d_description,
               d.price_cents AS d_price_cents, d.pack_of AS d_pack_of, d.image AS d_image,
               d.ingredients AS d_ingredients, d.tags AS d_tags, d.is_featured AS d_is_featured,
               d.in_stock AS d_in_stock, d.created_at AS d_created_at, d.updated_at AS d_updated_at
        FROM order_items oi
        LEFT JOIN desserts d ON d.id = oi.dessert_id
        WHERE oi.order_id IN ({placeholders})
        ORDER BY oi.id
        """, order_ids).fetchall()

        items: Dict[int, List[OrderItem]] = {}
        for row in rows:
            items.setdefault(row["order_id"], []).append(OrderItem(
                id=row["item_id"],
                order_id=row["order_id"],
                dessert_id=row["dessert_id"],
                name=row["item_name"],
                quantity=row["quantity"],
                price_cents=row["item_price_cents"],
                pack_of=row["item_pack_of"],
                dessert=_row_to_dessert(row, prefix="d_") if row["d_id"] is not None else None
            ))
        return items

    def _row_to_order(self, row: sqlite3.Row, items: List[OrderItem]) -> Order:
        return Order(
            id=row["id"],
            transaction_ref_id=row["transaction_ref_id"],
            customer_info=CustomerInfo.from_dict(json.loads(row["customer_info"])),
            total_cents=row["total_cents"],
            delivery_date=row["delivery_date"],
            status=OrderStatus(row["status"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            order_items=items
        )
