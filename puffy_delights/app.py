from functools import wraps
import hmac
import logging
import os
import time

from flask import Flask, current_app, g, jsonify, request, session

from .config import Settings
from .core.storefront import PuffyStorefront
from .exceptions import BackendError
from .logging_config import setup_logging
from .models.order import CustomerInfo

logger = logging.getLogger(__name__)


def _storefront() -> PuffyStorefront:
    return current_app.extensions["puffy_storefront"]


def _load_cart():
    return _storefront().new_cart(session.get("cart"))


def _save_cart(cart):
    session["cart"] = cart.to_dict()


def _error_status(result) -> int:
    if result.get("not_found"):
        return 404
    if result.get("backend_error"):
        return 503
    return 400


def _int_or_none(value, default=None):
    try:
        number = int(value if value is not None else default)
    except (TypeError, ValueError):
        return None
    return number


def admin_required(view):
    """Require the admin bearer token"""
    @wraps(view)
    def wrapper(*args, **kwargs):
        token = _storefront().settings.admin_token
        if not token:
            return jsonify({'error': 'Admin access is not configured.'}), 503

        header = request.headers.get('Authorization', '')
        supplied = header[7:] if header.startswith('Bearer ') else ''
        if not hmac.compare_digest(supplied.encode(), token.encode()):
            return jsonify({'error': 'Authentication required.'}), 401
        return view(*args, **kwargs)
    return wrapper


def create_app(settings: Settings = None, storefront: PuffyStorefront = None) -> Flask:
    """Build the storefront web app"""
    if storefront is None:
        settings = settings or Settings.from_env()
        storefront = PuffyStorefront(settings)
    settings = storefront.settings

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.extensions["puffy_storefront"] = storefront

    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        started = g.pop("request_started", None)
        extra = {
            "method": request.method,
            "path": request.path,
            "status_code": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2) if started is not None else None,
        }
        if response.status_code >= 500:
            logger.error("Request Failed", extra=extra)
        elif response.status_code >= 400:
            logger.warning("Request Error", extra=extra)
        else:
            logger.info("Request Processed", extra=extra)
        return response

    @app.errorhandler(BackendError)
    def backend_error(e):
        logger.error("Backend error: %s", e)
        return jsonify({'error': 'The store is temporarily unavailable. Please try again.'}), 503

    @app.route('/health')
    def health():
        """Health check endpoint"""
        return jsonify({'status': 'ok', 'message': 'Puffy Delights is running!'})

    # === Catalog ===
    @app.route('/api/desserts')
    def list_desserts():
        desserts = _storefront().dessert_service.list_desserts(
            search=request.args.get('search'),
            tag=request.args.get('tag'),
            sort=request.args.get('sort', 'name')
        )
        return jsonify({'desserts': [d.to_dict() for d in desserts], 'total_found': len(desserts)})

    @app.route('/api/desserts/featured')
    def featured_desserts():
        desserts = _storefront().dessert_service.featured_desserts()
        return jsonify({'desserts': [d.to_dict() for d in desserts]})

    @app.route('/api/desserts/<int:dessert_id>')
    def get_dessert(dessert_id):
        dessert = _storefront().dessert_service.get_dessert(dessert_id)
        if not dessert:
            return jsonify({'error': 'Dessert not found.'}), 404
        return jsonify({'dessert': dessert.to_dict()})

    # === Cart ===
    @app.route('/api/cart')
    def get_cart():
        return jsonify(_storefront().cart_summary(_load_cart()))

    @app.route('/api/cart/items', methods=['POST'])
    def add_cart_item():
        data = request.get_json(silent=True) or {}
        dessert_id = _int_or_none(data.get('dessert_id'))
        quantity = _int_or_none(data.get('quantity'), 1)
        if dessert_id is None or quantity is None or quantity < 1:
            return jsonify({'error': 'dessert_id and a positive quantity are required.'}), 400

        dessert = _storefront().dessert_service.get_dessert(dessert_id)
        if not dessert:
            return jsonify({'error': 'Dessert not found.'}), 404
        if not dessert.in_stock:
            return jsonify({'error': f'{dessert.name} is out of stock.'}), 409

        cart = _load_cart()
        cart.add_item(dessert, quantity)
        _save_cart(cart)
        return jsonify(_storefront().cart_summary(cart)), 201

    @app.route('/api/cart/items/<int:dessert_id>', methods=['PATCH'])
    def update_cart_item(dessert_id):
        data = request.get_json(silent=True) or {}
        quantity = _int_or_none(data.get('quantity'))
        if quantity is None:
            return jsonify({'error': 'quantity must be an integer.'}), 400

        cart = _load_cart()
        cart.update_quantity(dessert_id, quantity)
        _save_cart(cart)
        return jsonify(_storefront().cart_summary(cart))

    @app.route('/api/cart/items/<int:dessert_id>', methods=['DELETE'])
    def remove_cart_item(dessert_id):
        cart = _load_cart()
        cart.remove_item(dessert_id)
        _save_cart(cart)
        return jsonify(_storefront().cart_summary(cart))

    @app.route('/api/cart', methods=['DELETE'])
    def clear_cart():
        cart = _load_cart()
        cart.clear_cart()
        _save_cart(cart)
        return jsonify(_storefront().cart_summary(cart))

    # === Checkout ===
    @app.route('/api/checkout', methods=['POST'])
    def checkout():
        data = request.get_json(silent=True) or {}
        cart = _load_cart()
        result = _storefront().order_service.place_order(
            cart,
            CustomerInfo.from_dict(data.get('customer_info')),
            data.get('delivery_date')
        )
        # The service clears the cart only when the order was stored
        _save_cart(cart)

        if not result["success"]:
            return jsonify(result), _error_status(result)
        return jsonify(result), 201

    # === Admin ===
    @app.route('/api/admin/desserts', methods=['POST'])
    @admin_required
    def create_dessert():
        result = _storefront().dessert_service.create_dessert(request.get_json(silent=True) or {})
        if not result["success"]:
            return jsonify(result), _error_status(result)
        return jsonify(result), 201

    @app.route('/api/admin/desserts/<int:dessert_id>', methods=['PUT'])
    @admin_required
    def update_dessert(dessert_id):
        result = _storefront().dessert_service.update_dessert(
            dessert_id, request.get_json(silent=True) or {})
        if not result["success"]:
            return jsonify(result), _error_status(result)
        return jsonify(result)

    @app.route('/api/admin/desserts/<int:dessert_id>', methods=['DELETE'])
    @admin_required
    def delete_dessert(dessert_id):
        result = _storefront().dessert_service.delete_dessert(dessert_id)
        if not result["success"]:
            return jsonify(result), _error_status(result)
        return jsonify(result)

    @app.route('/api/admin/orders')
    @admin_required
    def list_orders():
        result = _storefront().order_service.list_orders(request.args.get('status'))
        if not result["success"]:
            return jsonify(result), _error_status(result)
        return jsonify(result)

    @app.route('/api/admin/orders/<int:order_id>')
    @admin_required
    def get_order(order_id):
        result = _storefront().order_service.get_order_details(order_id)
        if not result["success"]:
            return jsonify(result), _error_status(result)
        return jsonify(result)

    @app.route('/api/admin/orders/<int:order_id>/status', methods=['PATCH'])
    @admin_required
    def update_order_status(order_id):
        data = request.get_json(silent=True) or {}
        result = _storefront().order_service.update_status(
            order_id, data.get('status', ''), notify_customer=bool(data.get('notify_customer')))
        if not result["success"]:
            return jsonify(result), _error_status(result)
        return jsonify(result)

    @app.route('/api/admin/analytics')
    @admin_required
    def analytics():
        days = _int_or_none(request.args.get('days'), 7)
        if days is None or not 1 <= days <= 90:
            return jsonify({'error': 'days must be between 1 and 90.'}), 400
        return jsonify(_storefront().dashboard(days))

    return app


def main():
    settings = Settings.from_env()
    setup_logging("puffy-delights", settings.log_level)
    app = create_app(settings)

    port = int(os.getenv('PORT', 5000))
    debug = os.getenv('DEBUG', 'False').lower() == 'true'

    logger.info("Starting Puffy Delights on port %s", port)
    app.run(
        host='0.0.0.0',
        port=port,
        debug=debug
    )


if __name__ == '__main__':
    main()
