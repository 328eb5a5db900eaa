# ==============================================================================
# CÁLCULO DE STOCK (LIBRO DE MOVIMIENTOS)
# ==============================================================================
# El stock nunca se guarda: se reconstruye en cada consulta.
#
#   stock disponible = Σ movimientos del producto - Σ unidades vendidas
#
# No se recorta a cero. Un stock negativo indica que se vendió más de lo
# que se cargó y se muestra tal cual para que el operador lo corrija.
# Todas las funciones son puras sobre el AppData recibido.
# ==============================================================================

from collections import defaultdict
from typing import Any, Dict, List, Optional

from app_inventario import config
from app_inventario.models import AppData
from app_inventario.performance_logger import profile_function
from app_inventario.services.dates import sort_key

# Niveles de stock (filtros del inventario)
LEVEL_NEGATIVE = 'negativo'
LEVEL_NO_STOCK = 'sin-stock'
LEVEL_CRITICAL = 'critico'
LEVEL_LOW = 'bajo'
LEVEL_NORMAL = 'normal'

STOCK_LEVELS = (LEVEL_NEGATIVE, LEVEL_NO_STOCK, LEVEL_CRITICAL, LEVEL_LOW, LEVEL_NORMAL)

SORT_FIELDS = frozenset(['name', 'stock', 'model', 'color', 'unitPrice', 'totalSold'])


def stock_in(product_id: str, data: AppData) -> int:
    """Suma de movimientos de stock (ingresos y ajustes con signo)."""
    return sum(m.quantity for m in data.stock_movements if m.product_id == product_id)


def total_units_sold(product_id: str, data: AppData) -> int:
    """Unidades vendidas del producto en todas las ventas."""
    return sum(
        item.quantity
        for sale in data.sales
        for item in sale.items
        if item.product_id == product_id
    )


def available_stock(product_id: str, data: AppData) -> int:
    """Stock disponible = ingresos - vendidos (puede ser negativo)."""
    return stock_in(product_id, data) - total_units_sold(product_id, data)


def last_sale_date(product_id: str, data: AppData) -> Optional[str]:
    """
    Fecha de la venta más reciente que incluye al producto.

    Si varias ventas comparten el instante más reciente, gana la que
    aparece primero en data.sales (orden de inserción).

    Returns:
        La fecha tal como está guardada en la venta, o None si nunca se vendió
    """
    latest = None
    latest_key = None
    for sale in data.sales:
        if not any(item.product_id == product_id for item in sale.items):
            continue
        key = sort_key(sale.date)
        if latest is None or key > latest_key:
            latest, latest_key = sale, key
    return latest.date if latest else None


def stock_level(stock: int) -> str:
    """
    Clasifica un stock:
        negativo (< 0), sin-stock (0), critico (1-5), bajo (6-10), normal (> 10)
    """
    if stock < 0:
        return LEVEL_NEGATIVE
    if stock == 0:
        return LEVEL_NO_STOCK
    if stock <= 5:
        return LEVEL_CRITICAL
    if stock <= 10:
        return LEVEL_LOW
    return LEVEL_NORMAL


# ==============================================================================
# REPORTE DE INVENTARIO
# ==============================================================================

def _ledger_totals(data: AppData) -> Dict[str, Dict[str, Any]]:
    """Una sola pasada por ambos registros: {pid: {in, sold, last_sale, last_key}}."""
    totals = defaultdict(lambda: {'in': 0, 'sold': 0, 'last_sale': None, 'last_key': None})

    for movement in data.stock_movements:
        totals[movement.product_id]['in'] += movement.quantity

    for sale in data.sales:
        key = sort_key(sale.date)
        seen = set()
        for item in sale.items:
            entry = totals[item.product_id]
            entry['sold'] += item.quantity
            if item.product_id in seen:
                continue
            seen.add(item.product_id)
            if entry['last_sale'] is None or key > entry['last_key']:
                entry['last_sale'] = sale.date
                entry['last_key'] = key

    return totals


def _matches(product, query: str) -> bool:
    if not query:
        return True
    fields = (product.name, product.sku or '', product.model or '', product.color or '')
    return any(query in f.lower() for f in fields)


@profile_function(name="Reporte de inventario")
def inventory_report(
    data: AppData,
    search: str = '',
    low_stock_only: bool = False,
    sort_field: str = 'stock',
    descending: bool = False,
    levels: List[str] = None,
    category: str = None,
) -> List[Dict[str, Any]]:
    """
    Arma las filas del inventario con los valores derivados.

    Args:
        data: Conjunto de datos
        search: Texto a buscar en nombre, SKU, modelo o color
        low_stock_only: Solo productos con stock < LOW_STOCK_THRESHOLD
        sort_field: name, stock, model, color, unitPrice o totalSold
        descending: Orden descendente
        levels: Filtrar por niveles de stock (ver STOCK_LEVELS)
        category: Filtrar por categoría

    Returns:
        Lista de filas {id, name, sku, category, model, color, unitPrice,
        stock, totalSold, lastSale, level}
    """
    query = (search or '').strip().lower()
    totals = _ledger_totals(data)
    rows = []

    for product in data.products:
        if not _matches(product, query):
            continue
        if category is not None and product.category != category:
            continue

        entry = totals.get(product.id) or {'in': 0, 'sold': 0, 'last_sale': None}
        stock = entry['in'] - entry['sold']
        level = stock_level(stock)

        if low_stock_only and stock >= config.LOW_STOCK_THRESHOLD:
            continue
        if levels and level not in levels:
            continue

        rows.append({
            'id': product.id,
            'name': product.name,
            'sku': product.sku,
            'category': product.category,
            'model': product.model,
            'color': product.color,
            'unitPrice': product.default_unit_price,
            'stock': stock,
            'totalSold': entry['sold'],
            'lastSale': entry['last_sale'],
            'level': level,
        })

    if sort_field not in SORT_FIELDS:
        sort_field = 'stock'

    def key(row):
        value = row[sort_field]
        if isinstance(value, str) or value is None:
            return (value or '').casefold()
        return value

    rows.sort(key=key, reverse=descending)
    return rows
