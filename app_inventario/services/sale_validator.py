# ==============================================================================
# VALIDACIÓN DE VENTAS
# ==============================================================================
# Antes de registrar (o editar) una venta se verifica que cada producto
# tenga stock suficiente. Todo o nada: si una línea falla no se aplica nada.
#
# EDICIÓN: las unidades de la venta original ya están descontadas del stock,
# así que se devuelven antes de comparar:
#
#   disponible ajustado = stock disponible + unidades en la venta original
# ==============================================================================

from typing import Any, Dict, List, Optional

from app_inventario.errors import InsufficientStockError, ValidationError
from app_inventario.models import AppData, Sale, SaleItem, to_float, to_int
from app_inventario.services.ledger_service import available_stock


def clean_draft_lines(lines: List[Dict[str, Any]], data: AppData = None) -> List[Dict[str, Any]]:
    """
    Filtra las líneas válidas de un borrador de venta.

    Línea válida: productId informado, quantity > 0 y unitPrice >= 0.
    Si falta unitPrice se usa el precio por defecto del producto.

    Raises:
        ValidationError: Si no queda ninguna línea válida
    """
    valid = []
    for line in lines or []:
        if not isinstance(line, dict):
            continue
        product_id = str(line.get('productId') or '').strip()
        quantity = to_int(line.get('quantity'))
        unit_price = to_float(line.get('unitPrice'), None)

        if unit_price is None and data is not None:
            product = data.get_product(product_id)
            unit_price = product.default_unit_price if product else None

        if not product_id or quantity <= 0 or unit_price is None or unit_price < 0:
            continue
        valid.append({'productId': product_id, 'quantity': quantity, 'unitPrice': unit_price})

    if not valid:
        raise ValidationError("Agregá al menos un producto válido a la venta")
    return valid


def validate_sale_items(
    items: List[SaleItem],
    data: AppData,
    original_sale: Optional[Sale] = None,
) -> None:
    """
    Verifica stock para todas las líneas de una venta.

    Las cantidades de un mismo producto en varias líneas se suman antes de
    comparar.

    Args:
        items: Líneas de la venta nueva o editada
        data: Datos actuales (la venta original todavía incluida)
        original_sale: Venta que se está editando, o None si es alta

    Raises:
        InsufficientStockError: Con el disponible ya ajustado del primer
                                producto que no alcanza
    """
    requested: Dict[str, int] = {}
    names: Dict[str, str] = {}
    for item in items:
        requested[item.product_id] = requested.get(item.product_id, 0) + item.quantity
        names.setdefault(item.product_id, item.product_name)

    for product_id, quantity in requested.items():
        available = available_stock(product_id, data)
        if original_sale is not None:
            available += original_sale.quantity_of(product_id)

        if quantity > available:
            product = data.get_product(product_id)
            name = product.name if product else names.get(product_id, '')
            raise InsufficientStockError(product_id, name, available, quantity)
