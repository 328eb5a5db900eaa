# ==============================================================================
# API HTTP (Flask)
# ==============================================================================
# Todas las respuestas son JSON con la convención {"ok": true, ...} /
# {"ok": false, "error": "..."}.
#
# Si BASIC_AUTH_USER y BASIC_AUTH_PASS están definidas, toda la API pide
# autenticación básica (los archivos estáticos quedan libres).
#
# Producción: usar wsgi.py con gunicorn/waitress.
# ==============================================================================

import hmac
import logging

from flask import Flask, Response, request
from werkzeug.security import check_password_hash, generate_password_hash

from app_inventario import config
from app_inventario.app_container import AppContainer, get_container
from app_inventario.errors import InsufficientStockError, NotFoundError, SyncError, ValidationError
from app_inventario.models import AppData, to_int
from app_inventario.performance_logger import configure_logging, init_profiling
from app_inventario.services import generate_sku, last_sale_date, total_units_sold

logger = logging.getLogger(__name__)


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("El cuerpo debe ser un objeto JSON")
    return body


def _status(result: dict, created: bool = False):
    """201 en altas, 200 en el resto."""
    return result, (201 if created else 200)


# ═══════════════════════════════════════════════════════════════════════════════
# AUTENTICACIÓN BÁSICA
# ═══════════════════════════════════════════════════════════════════════════════

def init_basic_auth(app, user: str = None, password: str = None) -> None:
    """
    Protege todas las rutas con HTTP Basic si hay usuario y contraseña.

    La contraseña se guarda solo como hash.
    """
    if not user or not password:
        return

    password_hash = generate_password_hash(password)

    @app.before_request
    def _require_basic_auth():
        if request.path.startswith('/static'):
            return None
        auth = request.authorization
        if (
            auth is not None
            and auth.username is not None
            and hmac.compare_digest(auth.username, user)
            and check_password_hash(password_hash, auth.password or '')
        ):
            return None
        return Response(
            'Autenticación requerida',
            401,
            {'WWW-Authenticate': 'Basic realm="Secure Area"'},
        )

    logger.info("[AUTH] Autenticación básica activada")


# ═══════════════════════════════════════════════════════════════════════════════
# MANEJO DE ERRORES
# ═══════════════════════════════════════════════════════════════════════════════

def register_error_handlers(app) -> None:
    @app.errorhandler(InsufficientStockError)
    def _insufficient_stock(e):
        return {
            'ok': False,
            'error': str(e),
            'productId': e.product_id,
            'available': e.available,
            'requested': e.requested,
        }, 400

    @app.errorhandler(ValidationError)
    def _validation_error(e):
        return {'ok': False, 'error': str(e)}, 400

    @app.errorhandler(NotFoundError)
    def _not_found(e):
        return {'ok': False, 'error': str(e)}, 404

    @app.errorhandler(SyncError)
    def _sync_error(e):
        logger.error("[SYNC] %s", e)
        return {'ok': False, 'error': str(e)}, 502


# ═══════════════════════════════════════════════════════════════════════════════
# RUTAS
# ═══════════════════════════════════════════════════════════════════════════════

def register_routes(app, container: AppContainer) -> None:

    # ---------------------------------------------------------------- datos --

    @app.route('/api/data', methods=['GET'])
    def api_data():
        sync = container.synchronizer
        return {'ok': True, 'data': sync.data.to_dict(), 'syncError': sync.last_error}

    @app.route('/api/sheets/read', methods=['POST'])
    def api_sheets_read():
        data = container.synchronizer.reload()
        return {'ok': True, 'data': data.to_dict()}

    @app.route('/api/sheets/sync', methods=['POST'])
    def api_sheets_sync():
        body = _json_body()
        result = container.synchronizer.commit(AppData.from_dict(body))
        if not result['synced']:
            return {'ok': False, 'error': result['warning']}, 502
        return result

    # ----------------------------------------------------------- inventario --

    @app.route('/api/inventory', methods=['GET'])
    def api_inventory():
        args = request.args
        rows = container.inventory_service.report(
            search=args.get('search', ''),
            low_stock_only=args.get('low_stock', '').lower() in ('1', 'true', 'si'),
            sort_field=args.get('sort', 'stock'),
            descending=args.get('dir', 'asc').lower() == 'desc',
            levels=args.getlist('level') or None,
            category=args.get('category'),
        )
        return {'ok': True, 'items': rows, 'total': len(rows)}

    @app.route('/api/products/<product_id>', methods=['GET'])
    def api_get_product(product_id):
        product = container.inventory_service.get_product(product_id)
        data = container.synchronizer.data
        return {
            'ok': True,
            'product': product.to_dict(),
            'stock': container.inventory_service.available_stock(product_id),
            'totalSold': total_units_sold(product_id, data),
            'lastSale': last_sale_date(product_id, data),
        }

    @app.route('/api/sku/next', methods=['GET'])
    def api_next_sku():
        return {'ok': True, 'sku': generate_sku(container.synchronizer.data)}

    @app.route('/api/products', methods=['POST'])
    def api_create_product():
        body = _json_body()
        common = {
            'name': body.get('name'),
            'category': body.get('category'),
            'default_unit_price': body.get('defaultUnitPrice'),
            'initial_stock': body.get('initialStock', 0),
        }
        variants = body.get('variants')
        if variants:
            if not isinstance(variants, list) or not all(isinstance(v, dict) for v in variants):
                raise ValidationError("variants debe ser una lista de objetos")
            result = container.inventory_service.create_variants(variants=variants, **common)
        else:
            result = container.inventory_service.create_product(
                model=body.get('model', ''), color=body.get('color', ''), **common
            )
        return _status(result, created=True)

    @app.route('/api/products/<product_id>', methods=['PUT'])
    def api_update_product(product_id):
        return container.inventory_service.update_product(product_id, _json_body())

    @app.route('/api/products/<product_id>', methods=['DELETE'])
    def api_delete_product(product_id):
        return container.inventory_service.delete_product(product_id)

    @app.route('/api/products/delete', methods=['POST'])
    def api_delete_products():
        ids = _json_body().get('ids')
        if not isinstance(ids, list) or not ids:
            raise ValidationError("Indicá los productos a eliminar (ids)")
        return container.inventory_service.delete_products([str(i) for i in ids])

    # ---------------------------------------------------------------- stock --

    @app.route('/api/stock', methods=['POST'])
    def api_add_stock():
        body = _json_body()
        result = container.inventory_service.add_stock(
            body.get('productId'), body.get('quantity'), body.get('date')
        )
        return _status(result, created=True)

    @app.route('/api/stock/adjust', methods=['POST'])
    def api_adjust_stock():
        body = _json_body()
        return container.inventory_service.adjust_stock(
            body.get('productId'), body.get('stock'), body.get('date')
        )

    # --------------------------------------------------------------- ventas --

    @app.route('/api/sales', methods=['POST'])
    def api_create_sale():
        body = _json_body()
        result = container.sales_service.create_sale(
            body.get('items') or [],
            date=body.get('date'),
            payment_method=body.get('paymentMethod'),
            total_amount=body.get('totalAmount'),
        )
        return _status(result, created=True)

    @app.route('/api/sales/<sale_id>', methods=['PUT'])
    def api_update_sale(sale_id):
        body = _json_body()
        return container.sales_service.update_sale(
            sale_id,
            body.get('items') or [],
            date=body.get('date'),
            payment_method=body.get('paymentMethod'),
            total_amount=body.get('totalAmount'),
        )

    @app.route('/api/sales/<sale_id>', methods=['DELETE'])
    def api_delete_sale(sale_id):
        return container.sales_service.delete_sale(sale_id)

    # ------------------------------------------------------------- reportes --

    @app.route('/api/reports/sales-by-day', methods=['GET'])
    def api_sales_by_day():
        args = request.args
        report = container.stats_service.sales_by_day(
            date_from=args.get('from'),
            date_to=args.get('to'),
            order=args.get('order', 'desc').lower(),
        )
        report['ok'] = True
        return report

    @app.route('/api/reports/transactions', methods=['GET'])
    def api_transactions():
        args = request.args
        page = container.stats_service.transactions(
            date_from=args.get('from'),
            date_to=args.get('to'),
            page=to_int(args.get('page'), 1),
        )
        page['ok'] = True
        return page


# ═══════════════════════════════════════════════════════════════════════════════
# FÁBRICA DE LA APLICACIÓN
# ═══════════════════════════════════════════════════════════════════════════════

def create_app(container: AppContainer = None, basic_auth: tuple = None) -> Flask:
    """
    Crea la aplicación Flask.

    Args:
        container: Contenedor de dependencias (por defecto el global)
        basic_auth: (usuario, contraseña); por defecto BASIC_AUTH_USER/PASS

    Returns:
        Aplicación lista para servir
    """
    configure_logging()

    app = Flask(__name__)
    app.secret_key = config.SECRET_KEY
    if config.SECRET_KEY == config._DEFAULT_SECRET:
        logger.warning("[CONFIG] Usando SECRET_KEY por defecto; definí INVENTARIO_SECRET_KEY en producción")

    user, password = basic_auth or (config.BASIC_AUTH_USER, config.BASIC_AUTH_PASS)
    init_basic_auth(app, user, password)
    init_profiling(app)

    @app.after_request
    def set_security_headers(response):
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'
        return response

    register_error_handlers(app)
    register_routes(app, container or get_container())
    return app


if __name__ == "__main__":
    # En producción usar WSGI (gunicorn, waitress, etc.)
    create_app().run(host=config.FLASK_HOST, port=config.FLASK_PORT, debug=config.FLASK_DEBUG)
