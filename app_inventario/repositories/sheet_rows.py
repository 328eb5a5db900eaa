# ==============================================================================
# CONVERSIÓN ENTIDADES <-> FILAS DE PLANILLA
# ==============================================================================
# Cada hoja tiene un orden de columnas fijo. La lectura es tolerante:
# celdas faltantes, números ilegibles o JSON roto se convierten en valores
# seguros (0, "", []) en lugar de abortar la carga.
# ==============================================================================

import json
from typing import Any, Dict, List

from app_inventario.models import AppData, Product, Sale, StockMovement
from app_inventario.models.entities import SaleItem, parse_items_json, to_float, to_int, to_str

SHEET_PRODUCTS = 'products'
SHEET_STOCK_MOVEMENTS = 'stockMovements'
SHEET_SALES = 'sales'

SHEET_NAMES = (SHEET_PRODUCTS, SHEET_STOCK_MOVEMENTS, SHEET_SALES)

HEADERS: Dict[str, List[str]] = {
    SHEET_PRODUCTS: ['id', 'name', 'sku', 'category', 'model', 'color', 'defaultUnitPrice', 'createdAt'],
    SHEET_STOCK_MOVEMENTS: ['id', 'productId', 'quantity', 'date', 'createdAt'],
    SHEET_SALES: ['id', 'date', 'paymentMethod', 'totalAmount', 'items'],
}


def _cell(row: List[Any], index: int) -> Any:
    return row[index] if index < len(row) else None


def _is_blank(row: List[Any]) -> bool:
    return all(cell is None or str(cell).strip() == '' for cell in row)


# ==============================================================================
# ENTIDAD -> FILA
# ==============================================================================

def product_to_row(product: Product) -> List[Any]:
    return [
        product.id,
        product.name,
        product.sku or '',
        product.category,
        product.model or '',
        product.color or '',
        product.default_unit_price,
        product.created_at,
    ]


def stock_movement_to_row(movement: StockMovement) -> List[Any]:
    return [movement.id, movement.product_id, movement.quantity, movement.date, movement.created_at]


def sale_to_row(sale: Sale) -> List[Any]:
    items = json.dumps([item.to_dict() for item in sale.items], ensure_ascii=False)
    return [sale.id, sale.date, sale.payment_method, sale.total_amount, items]


# ==============================================================================
# FILA -> ENTIDAD
# ==============================================================================

def row_to_product(row: List[Any]) -> Product:
    return Product(
        id=to_str(_cell(row, 0)),
        name=to_str(_cell(row, 1)),
        sku=to_str(_cell(row, 2)) or None,
        category=to_str(_cell(row, 3)),
        model=to_str(_cell(row, 4)),
        color=to_str(_cell(row, 5)),
        default_unit_price=to_float(_cell(row, 6)),
        created_at=to_str(_cell(row, 7)),
    )


def row_to_stock_movement(row: List[Any]) -> StockMovement:
    return StockMovement(
        id=to_str(_cell(row, 0)),
        product_id=to_str(_cell(row, 1)),
        quantity=to_int(_cell(row, 2)),
        date=to_str(_cell(row, 3)),
        created_at=to_str(_cell(row, 4)),
    )


def row_to_sale(row: List[Any]) -> Sale:
    sale_id = to_str(_cell(row, 0))
    raw_items = _cell(row, 4)
    if isinstance(raw_items, str):
        raw_items = parse_items_json(raw_items, sale_id)
    elif not isinstance(raw_items, list):
        raw_items = []
    return Sale(
        id=sale_id,
        date=to_str(_cell(row, 1)),
        payment_method=to_str(_cell(row, 2)),
        total_amount=to_float(_cell(row, 3)),
        items=[SaleItem.from_dict(i) for i in raw_items if isinstance(i, dict)],
    )


# ==============================================================================
# CONJUNTO COMPLETO
# ==============================================================================

def appdata_to_sheets(data: AppData) -> Dict[str, List[List[Any]]]:
    """Convierte AppData en {hoja: [encabezados, filas...]}."""
    return {
        SHEET_PRODUCTS: [list(HEADERS[SHEET_PRODUCTS])] + [product_to_row(p) for p in data.products],
        SHEET_STOCK_MOVEMENTS: [list(HEADERS[SHEET_STOCK_MOVEMENTS])]
        + [stock_movement_to_row(m) for m in data.stock_movements],
        SHEET_SALES: [list(HEADERS[SHEET_SALES])] + [sale_to_row(s) for s in data.sales],
    }


def sheets_to_appdata(sheets: Dict[str, List[List[Any]]]) -> AppData:
    """
    Convierte {hoja: matriz} en AppData.
    La primera fila de cada hoja se descarta (encabezados); las filas
    totalmente vacías se ignoran.
    """
    def body(name: str) -> List[List[Any]]:
        rows = sheets.get(name) or []
        return [row for row in rows[1:] if isinstance(row, list) and not _is_blank(row)]

    return AppData(
        products=[row_to_product(r) for r in body(SHEET_PRODUCTS)],
        stock_movements=[row_to_stock_movement(r) for r in body(SHEET_STOCK_MOVEMENTS)],
        sales=[row_to_sale(r) for r in body(SHEET_SALES)],
    )
