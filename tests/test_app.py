"""
Tests for the storefront HTTP endpoints
"""
import json
import os
import tempfile
import unittest

import httpx

from puffy_delights.app import create_app
from puffy_delights.config import Settings
from puffy_delights.core.storefront import PuffyStorefront
from puffy_delights.models.dessert import DessertForm

ADMIN = {"Authorization": "Bearer let-me-in"}

CHECKOUT = {
    "customer_info": {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "phone": "08012345678",
        "address": "1 Cake Street",
        "city": "Lagos",
        "zipCode": "100001",
    },
    "delivery_date": "2026-10-20",
}


class TestStorefrontApp(unittest.TestCase):
    """Test cases for the Flask app"""

    def setUp(self):
        """Set up a storefront on a temporary database"""
        self.test_db = tempfile.NamedTemporaryFile(delete=False, suffix='.db')
        self.test_db.close()

        self.sent = []

        def handler(request):
            self.sent.append((request.url.path, json.loads(request.content)))
            return httpx.Response(200, json={"success": True})

        settings = Settings(
            functions_url="https://functions.example.com",
            api_key="anon-key",
            secret_key="test-secret",
            database_path=self.test_db.name,
            admin_token="let-me-in",
        )
        self.storefront = PuffyStorefront(
            settings,
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
            background_emails=False
        )
        self.app = create_app(storefront=self.storefront)
        self.app.testing = True
        self.client = self.app.test_client()

        repo = self.storefront.dessert_repo
        self.tart = repo.create_dessert(DessertForm(name="Lemon Tart", description="Zesty",
                                                    price_cents=2000, pack_of=1, is_featured=True))
        self.cookies = repo.create_dessert(DessertForm(name="Cookies", description="Crunchy",
                                                       price_cents=500, pack_of=6, in_stock=False))

    def tearDown(self):
        """Clean up test database"""
        self.storefront.shutdown()
        os.unlink(self.test_db.name)

    def add_to_cart(self, dessert_id, quantity=1):
        return self.client.post('/api/cart/items', json={"dessert_id": dessert_id,
                                                        "quantity": quantity})

    def test_health(self):
        response = self.client.get('/health')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["status"], "ok")

    def test_catalog(self):
        """Test listing, searching and fetching desserts"""
        data = self.client.get('/api/desserts?sort=price-low').get_json()
        self.assertEqual([d["name"] for d in data["desserts"]], ["Cookies", "Lemon Tart"])

        data = self.client.get('/api/desserts?search=zest').get_json()
        self.assertEqual(data["total_found"], 1)

        featured = self.client.get('/api/desserts/featured').get_json()["desserts"]
        self.assertEqual([d["id"] for d in featured], [self.tart.id])

        self.assertEqual(self.client.get(f'/api/desserts/{self.tart.id}').status_code, 200)
        self.assertEqual(self.client.get('/api/desserts/999').status_code, 404)

    def test_cart_flow(self):
        """Test the cart persists across requests in the session"""
        response = self.add_to_cart(self.tart.id, 2)
        self.assertEqual(response.status_code, 201)
        self.add_to_cart(self.tart.id, 1)

        cart = self.client.get('/api/cart').get_json()
        self.assertEqual(len(cart["items"]), 1)
        self.assertEqual(cart["item_count"], 3)
        self.assertEqual(cart["total"], 60.0)
        self.assertEqual(cart["totals"]["shipping"], 0.0)

        cart = self.client.patch(f'/api/cart/items/{self.tart.id}', json={"quantity": 1}).get_json()
        self.assertEqual(cart["totals"]["total"], 27.59)

        cart = self.client.patch(f'/api/cart/items/{self.tart.id}', json={"quantity": 0}).get_json()
        self.assertEqual(cart["items"], [])

    def test_cart_remove_and_clear(self):
        self.add_to_cart(self.tart.id)
        self.assertEqual(self.client.delete(f'/api/cart/items/{self.tart.id}').get_json()["items"], [])

        self.add_to_cart(self.tart.id)
        self.assertEqual(self.client.delete('/api/cart').get_json()["item_count"], 0)

    def test_cart_rejects_bad_items(self):
        self.assertEqual(self.add_to_cart(999).status_code, 404)
        self.assertEqual(self.add_to_cart(self.cookies.id).status_code, 409)
        self.assertEqual(self.add_to_cart(self.tart.id, 0).status_code, 400)
        self.assertEqual(self.client.post('/api/cart/items', json={}).status_code, 400)

    def test_checkout(self):
        """Test checkout stores the order, clears the cart and sends both emails"""
        self.add_to_cart(self.tart.id, 1)
        response = self.client.post('/api/checkout', json=CHECKOUT)

        self.assertEqual(response.status_code, 201)
        result = response.get_json()
        self.assertTrue(result["success"])
        self.assertEqual(result["totals"]["total_cents"], 2759)
        self.assertEqual(self.client.get('/api/cart').get_json()["items"], [])
        self.assertEqual([path for path, _ in self.sent],
                         ["/functions/v1/send-order-confirmation",
                          "/functions/v1/send-admin-notification"])

    def test_checkout_validation(self):
        self.assertEqual(self.client.post('/api/checkout', json=CHECKOUT).status_code, 400)

        self.add_to_cart(self.tart.id)
        response = self.client.post('/api/checkout', json={"customer_info": {"firstName": "Ada"}})
        self.assertEqual(response.status_code, 400)
        self.assertIn("email", response.get_json()["missing_fields"])
        self.assertEqual(self.client.get('/api/cart').get_json()["item_count"], 1)
        self.assertEqual(self.sent, [])

    def test_admin_requires_token(self):
        """Test admin endpoints refuse missing or wrong tokens"""
        self.assertEqual(self.client.get('/api/admin/orders').status_code, 401)
        response = self.client.get('/api/admin/orders', headers={"Authorization": "Bearer nope"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(self.client.get('/api/admin/orders', headers=ADMIN).status_code, 200)

    def test_admin_disabled_without_token(self):
        self.storefront.settings.admin_token = None
        self.assertEqual(self.client.get('/api/admin/orders', headers=ADMIN).status_code, 503)

    def test_admin_dessert_crud(self):
        response = self.client.post('/api/admin/desserts', headers=ADMIN,
                                    json={"name": "Brownie", "price_cents": "450"})
        self.assertEqual(response.status_code, 201)
        dessert_id = response.get_json()["dessert"]["id"]

        response = self.client.put(f'/api/admin/desserts/{dessert_id}', headers=ADMIN,
                                   json={"name": "Fudge Brownie", "price_cents": 500})
        self.assertEqual(response.get_json()["dessert"]["name"], "Fudge Brownie")

        response = self.client.post('/api/admin/desserts', headers=ADMIN, json={"name": ""})
        self.assertEqual(response.status_code, 400)

        self.assertEqual(self.client.delete(f'/api/admin/desserts/{dessert_id}',
                                            headers=ADMIN).status_code, 200)
        self.assertEqual(self.client.delete(f'/api/admin/desserts/{dessert_id}',
                                            headers=ADMIN).status_code, 404)

    def test_admin_order_management(self):
        """Test listing orders and changing their status"""
        self.add_to_cart(self.tart.id)
        order_id = self.client.post('/api/checkout', json=CHECKOUT).get_json()["order_id"]

        orders = self.client.get('/api/admin/orders?status=pending', headers=ADMIN).get_json()
        self.assertEqual(orders["total_found"], 1)

        response = self.client.patch(f'/api/admin/orders/{order_id}/status', headers=ADMIN,
                                     json={"status": "delivered", "notify_customer": True})
        self.assertEqual(response.get_json()["order"]["status"], "delivered")
        self.assertEqual(self.sent[-1][0], "/functions/v1/send-status-update")
        self.assertEqual(self.sent[-1][1]["newStatus"], "delivered")

        response = self.client.patch(f'/api/admin/orders/{order_id}/status', headers=ADMIN,
                                     json={"status": "lost"})
        self.assertEqual(response.status_code, 400)

        detail = self.client.get(f'/api/admin/orders/{order_id}', headers=ADMIN).get_json()
        self.assertEqual(detail["order"]["order_items"][0]["name"], "Lemon Tart")
        self.assertEqual(self.client.get('/api/admin/orders/999', headers=ADMIN).status_code, 404)

    def test_analytics(self):
        """Test the dashboard reflects confirmed revenue only"""
        self.add_to_cart(self.tart.id)
        order_id = self.client.post('/api/checkout', json=CHECKOUT).get_json()["order_id"]

        data = self.client.get('/api/admin/analytics', headers=ADMIN).get_json()
        self.assertEqual(data["stats"]["total_revenue"], 0.0)
        self.assertEqual(data["status_counts"]["pending"], 1)
        self.assertEqual(len(data["daily"]), 7)

        self.client.patch(f'/api/admin/orders/{order_id}/status', headers=ADMIN,
                          json={"status": "confirmed"})
        data = self.client.get('/api/admin/analytics?days=3', headers=ADMIN).get_json()
        self.assertEqual(data["stats"]["total_revenue"], 27.59)
        self.assertEqual(data["stats"]["total_orders"], 1)
        self.assertEqual(len(data["daily"]), 3)

        self.assertEqual(self.client.get('/api/admin/analytics?days=0',
                                         headers=ADMIN).status_code, 400)


if __name__ == '__main__':
    unittest.main()
