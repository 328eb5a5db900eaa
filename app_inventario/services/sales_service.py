# ==============================================================================
# SERVICIO DE VENTAS
# ==============================================================================
# Registro, edición y baja de ventas.
#
# - El nombre del producto se copia a la línea al vender y no se actualiza
# - line_total = precio unitario * cantidad, se guarda en la línea
# - total_amount es el total manual si se informó, si no la suma de líneas
# - Editar reemplaza la venta completa; borrar la elimina entera
# ==============================================================================

import logging
from dataclasses import replace
from typing import Any, Dict, List

from app_inventario.errors import NotFoundError
from app_inventario.models import AppData, PaymentMethod, Sale, SaleItem, generate_id, now_iso, to_float
from app_inventario.services.sale_validator import clean_draft_lines, validate_sale_items
from app_inventario.services.sync_service import DataSynchronizer

logger = logging.getLogger(__name__)


def build_sale_items(lines: List[Dict[str, Any]], data: AppData) -> List[SaleItem]:
    """
    Arma las líneas de venta desde un borrador.

    Args:
        lines: [{'productId', 'quantity', 'unitPrice'}]
        data: Datos actuales (para copiar el nombre del producto)

    Raises:
        ValidationError: Si el borrador no tiene ninguna línea válida
    """
    items = []
    for line in clean_draft_lines(lines, data):
        product = data.get_product(line['productId'])
        items.append(SaleItem(
            product_id=line['productId'],
            product_name=product.name if product else '',
            unit_price=round(line['unitPrice'], 2),
            quantity=line['quantity'],
        ))
    return items


def resolve_total(sale: Sale, total_amount: Any = None) -> float:
    """Total manual si se informó, si no la suma de líneas de la venta."""
    manual = to_float(total_amount, None)
    if manual is not None:
        return round(manual, 2)
    return sale.computed_total


class SalesService:
    """
    Servicio para gestión de ventas.

    Responsabilidades:
    - Validar stock antes de registrar o editar
    - Armar líneas con nombre y total de línea
    - Reemplazar o borrar ventas completas
    """

    def __init__(self, synchronizer: DataSynchronizer):
        self.sync = synchronizer

    def get_sale(self, sale_id: str) -> Sale:
        """
        Raises:
            NotFoundError: Si la venta no existe
        """
        sale = self.sync.data.get_sale(sale_id)
        if sale is None:
            raise NotFoundError(f"Venta {sale_id} no encontrada")
        return sale

    def create_sale(
        self,
        lines: List[Dict[str, Any]],
        date: str = None,
        payment_method: str = None,
        total_amount: Any = None,
    ) -> Dict[str, Any]:
        """
        Registra una venta nueva.

        Args:
            lines: Líneas del borrador [{'productId', 'quantity', 'unitPrice'}]
            date: Fecha de la venta (ahora si no se informa)
            payment_method: efectivo, tarjeta, transferencia, qr, ...
            total_amount: Total manual (opcional)

        Returns:
            {'ok': True, 'sale': dict, 'synced': bool, 'warning': ...}

        Raises:
            ValidationError: Borrador vacío
            InsufficientStockError: Alguna línea supera el stock disponible
        """
        with self.sync.transaction() as data:
            items = build_sale_items(lines, data)
            validate_sale_items(items, data)

            sale = Sale(
                id=generate_id(),
                date=str(date or '').strip() or now_iso(),
                payment_method=str(payment_method or '').strip() or PaymentMethod.EFECTIVO.value,
                items=items,
            )
            sale.total_amount = resolve_total(sale, total_amount)
            new_data = replace(data, sales=data.sales + [sale])
            logger.info("[VENTA] Registrada %s: %d líneas, total %.2f", sale.id, len(items), sale.total_amount)
            return self.sync.commit(new_data, sale=sale.to_dict())

    def update_sale(
        self,
        sale_id: str,
        lines: List[Dict[str, Any]],
        date: str = None,
        payment_method: str = None,
        total_amount: Any = None,
    ) -> Dict[str, Any]:
        """
        Reemplaza una venta existente.

        Las unidades de la venta original se devuelven al stock antes de
        validar. Los campos no informados conservan el valor original,
        salvo el total, que se recalcula si no hay total manual.

        Raises:
            NotFoundError: Si la venta no existe
            ValidationError / InsufficientStockError: Como en create_sale
        """
        with self.sync.transaction() as data:
            original = self.get_sale(sale_id)
            items = build_sale_items(lines, data)
            validate_sale_items(items, data, original_sale=original)

            updated = Sale(
                id=original.id,
                date=str(date or '').strip() or original.date,
                payment_method=str(payment_method or '').strip() or original.payment_method,
                items=items,
            )
            updated.total_amount = resolve_total(updated, total_amount)
            new_data = replace(
                data,
                sales=[updated if s.id == sale_id else s for s in data.sales],
            )
            logger.info("[VENTA] Editada %s", sale_id)
            return self.sync.commit(new_data, sale=updated.to_dict())

    def delete_sale(self, sale_id: str) -> Dict[str, Any]:
        """
        Borra una venta completa; sus unidades vuelven al stock.

        Raises:
            NotFoundError: Si la venta no existe
        """
        with self.sync.transaction() as data:
            removed = self.get_sale(sale_id)
            new_data = replace(data, sales=[s for s in data.sales if s.id != sale_id])
            logger.info("[VENTA] Eliminada %s", sale_id)
            return self.sync.commit(new_data, sale=removed.to_dict())
