# ==============================================================================
# SERVICIO DE INVENTARIO
# ==============================================================================
# Altas, ediciones y bajas de productos, ingresos y ajustes de stock.
#
# Cada operación valida el borrador, arma un AppData nuevo completo y lo
# entrega al DataSynchronizer. Los movimientos de stock nunca se editan ni
# se borran; borrar un producto deja sus movimientos y ventas intactos.
# ==============================================================================

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional

from app_inventario.errors import NotFoundError, ValidationError
from app_inventario.models import (
    AppData, Category, Product, StockMovement, generate_id, now_iso, to_float, to_int
)
from app_inventario.services.ledger_service import available_stock, inventory_report
from app_inventario.services.sku_service import SkuSequence, generate_sku
from app_inventario.services.sync_service import DataSynchronizer

logger = logging.getLogger(__name__)

# Categorías que se pueden elegir al cargar un producto
SELECTABLE_CATEGORIES = frozenset([Category.FUNDA.value, Category.ACCESORIO.value])

# Campos editables (claves del formulario / JSON)
EDITABLE_FIELDS = ('name', 'category', 'model', 'color', 'defaultUnitPrice')


def _clean(value: Any) -> str:
    return str(value or '').strip()


def _validate_product_fields(name: str, category: str, price: Optional[float], model: str) -> None:
    """
    Reglas del formulario de productos.

    Raises:
        ValidationError: Nombre, categoría o precio faltante; modelo faltante en fundas
    """
    if not name:
        raise ValidationError("El nombre es obligatorio")
    if category not in SELECTABLE_CATEGORIES:
        raise ValidationError("La categoría es obligatoria (Funda o Accesorio)")
    if price is None:
        raise ValidationError("El precio es obligatorio")
    if price < 0:
        raise ValidationError("El precio no puede ser negativo")
    if category == Category.FUNDA.value and not model:
        raise ValidationError("El modelo es obligatorio para fundas")


def variant_name(name: str, model: str, color: str) -> str:
    """Nombre de una variante: "Funda Silicona iPhone 15 - Negro"."""
    result = f"{name} {model}".strip()
    if color:
        result = f"{result} - {color}"
    return result


class InventoryService:
    """
    Servicio para gestión de productos y stock.

    Responsabilidades:
    - Alta de productos (simple o por variantes) con SKU automático
    - Edición y baja de productos
    - Ingresos de mercadería y ajustes de inventario
    - Reporte de inventario con stock derivado
    """

    def __init__(self, synchronizer: DataSynchronizer):
        self.sync = synchronizer

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get_product(self, product_id: str) -> Product:
        """
        Raises:
            NotFoundError: Si el producto no existe
        """
        product = self.sync.data.get_product(product_id)
        if product is None:
            raise NotFoundError(f"Producto {product_id} no encontrado")
        return product

    def report(self, **filters) -> List[Dict[str, Any]]:
        """Reporte de inventario (ver ledger_service.inventory_report)."""
        return inventory_report(self.sync.data, **filters)

    def available_stock(self, product_id: str) -> int:
        return available_stock(product_id, self.sync.data)

    # =========================================================================
    # ALTA DE PRODUCTOS
    # =========================================================================

    def create_product(
        self,
        name: str,
        category: str,
        default_unit_price: Any,
        model: str = '',
        color: str = '',
        initial_stock: Any = 0,
    ) -> Dict[str, Any]:
        """
        Crea un producto con el siguiente SKU libre.

        Args:
            name: Nombre
            category: "Funda" o "Accesorio"
            default_unit_price: Precio sugerido (>= 0)
            model: Modelo (obligatorio en fundas)
            color: Color (opcional)
            initial_stock: Si es > 0 se registra un ingreso inicial

        Returns:
            {'ok': True, 'product': dict, 'synced': bool, 'warning': ...}

        Raises:
            ValidationError: Si falta un campo obligatorio
        """
        name, category, model, color = _clean(name), _clean(category), _clean(model), _clean(color)
        price = to_float(default_unit_price, None)
        _validate_product_fields(name, category, price, model)

        with self.sync.transaction() as data:
            product = Product(
                id=generate_id(),
                name=name,
                sku=generate_sku(data),
                category=category,
                model=model,
                color=color,
                default_unit_price=round(price, 2),
            )
            movements = self._initial_movements([product], initial_stock)

            new_data = replace(
                data,
                products=data.products + [product],
                stock_movements=data.stock_movements + movements,
            )
            logger.info("[PRODUCTO] Alta %s (%s)", product.name, product.sku)
            return self.sync.commit(new_data, product=product.to_dict())

    def create_variants(
        self,
        name: str,
        category: str,
        default_unit_price: Any,
        variants: List[Dict[str, Any]],
        initial_stock: Any = 0,
    ) -> Dict[str, Any]:
        """
        Alta en lote: un producto por cada combinación modelo/color.

        El nombre de cada producto es "<nombre> <modelo> - <color>". Los SKU
        se asignan consecutivos desde el mayor existente.

        Args:
            name: Nombre base
            category: Categoría común
            default_unit_price: Precio común
            variants: [{'model': str, 'color': str}, ...]
            initial_stock: Stock inicial de cada variante

        Returns:
            {'ok': True, 'products': [dict], 'synced': bool, 'warning': ...}

        Raises:
            ValidationError: Sin variantes, variante repetida o campo faltante
        """
        name, category = _clean(name), _clean(category)
        price = to_float(default_unit_price, None)

        if not variants:
            raise ValidationError("Agregá al menos una variante")

        seen = set()
        cleaned = []
        for variant in variants:
            model = _clean(variant.get('model'))
            color = _clean(variant.get('color'))
            _validate_product_fields(name, category, price, model)
            key = (model.lower(), color.lower())
            if key in seen:
                raise ValidationError(f"Variante repetida: {model} {color}".strip())
            seen.add(key)
            cleaned.append((model, color))

        with self.sync.transaction() as data:
            sequence = SkuSequence.from_data(data)
            products = [
                Product(
                    id=generate_id(),
                    name=variant_name(name, model, color),
                    sku=sequence.next(),
                    category=category,
                    model=model,
                    color=color,
                    default_unit_price=round(price, 2),
                )
                for model, color in cleaned
            ]
            movements = self._initial_movements(products, initial_stock)

            new_data = replace(
                data,
                products=data.products + products,
                stock_movements=data.stock_movements + movements,
            )
            logger.info("[PRODUCTO] Alta de %d variantes de %s", len(products), name)
            return self.sync.commit(new_data, products=[p.to_dict() for p in products])

    def _initial_movements(self, products: List[Product], initial_stock: Any) -> List[StockMovement]:
        quantity = to_int(initial_stock)
        if quantity < 0:
            raise ValidationError("El stock inicial no puede ser negativo")
        if quantity == 0:
            return []
        date = now_iso()
        return [
            StockMovement(id=generate_id(), product_id=p.id, quantity=quantity, date=date)
            for p in products
        ]

    # =========================================================================
    # EDICIÓN Y BAJA
    # =========================================================================

    def update_product(self, product_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Edita un producto reemplazándolo por id. El SKU y la fecha de alta
        no cambian.

        Args:
            product_id: ID del producto
            updates: Campos a cambiar (name, category, model, color, defaultUnitPrice)

        Raises:
            NotFoundError: Si el producto no existe
            ValidationError: Si el resultado no es válido
        """
        filtered = {k: v for k, v in updates.items() if k in EDITABLE_FIELDS}

        with self.sync.transaction() as data:
            current = self.get_product(product_id)
            name = _clean(filtered.get('name', current.name))
            category = _clean(filtered.get('category', current.category))
            model = _clean(filtered.get('model', current.model))
            color = _clean(filtered.get('color', current.color))
            price = to_float(filtered.get('defaultUnitPrice', current.default_unit_price), None)
            _validate_product_fields(name, category, price, model)

            updated = replace(
                current,
                name=name,
                category=category,
                model=model,
                color=color,
                default_unit_price=round(price, 2),
            )
            new_data = replace(
                data,
                products=[updated if p.id == product_id else p for p in data.products],
            )
            logger.info("[PRODUCTO] Editado %s", product_id)
            return self.sync.commit(new_data, product=updated.to_dict())

    def delete_product(self, product_id: str) -> Dict[str, Any]:
        """
        Borra un producto. Sus movimientos y líneas de venta quedan.

        Raises:
            NotFoundError: Si el producto no existe
        """
        with self.sync.transaction() as data:
            removed = self.get_product(product_id)
            new_data = replace(data, products=[p for p in data.products if p.id != product_id])
            logger.info("[PRODUCTO] Eliminado %s (%s)", removed.name, product_id)
            return self.sync.commit(new_data, product=removed.to_dict())

    def delete_products(self, product_ids: List[str]) -> Dict[str, Any]:
        """
        Baja múltiple. Los ids inexistentes se ignoran.

        Raises:
            NotFoundError: Si ninguno de los ids existe
        """
        ids = set(product_ids or [])
        with self.sync.transaction() as data:
            remaining = [p for p in data.products if p.id not in ids]
            deleted = len(data.products) - len(remaining)
            if deleted == 0:
                raise NotFoundError("Ninguno de los productos existe")

            logger.info("[PRODUCTO] Eliminados %d productos", deleted)
            return self.sync.commit(replace(data, products=remaining), deleted=deleted)

    # =========================================================================
    # STOCK
    # =========================================================================

    def add_stock(self, product_id: str, quantity: Any, date: str = None) -> Dict[str, Any]:
        """
        Registra un ingreso de mercadería.

        Raises:
            NotFoundError: Si el producto no existe
            ValidationError: Si la cantidad no es > 0
        """
        with self.sync.transaction() as data:
            product = self.get_product(product_id)
            quantity = to_int(quantity)
            if quantity <= 0:
                raise ValidationError("La cantidad debe ser mayor a 0")

            movement = StockMovement(
                id=generate_id(),
                product_id=product.id,
                quantity=quantity,
                date=_clean(date) or now_iso(),
            )
            new_data = replace(data, stock_movements=data.stock_movements + [movement])
            logger.info("[STOCK] +%d %s", quantity, product.name)
            return self.sync.commit(new_data, movement=movement.to_dict())

    def adjust_stock(self, product_id: str, declared_stock: Any, date: str = None) -> Dict[str, Any]:
        """
        Ajusta el stock a un valor contado.

        Se agrega un movimiento con cantidad = declarado - calculado. Si no
        hay diferencia no se agrega nada.

        Returns:
            {'ok': True, 'movement': dict | None, 'stock': int, ...}

        Raises:
            NotFoundError: Si el producto no existe
            ValidationError: Si el valor declarado es negativo
        """
        with self.sync.transaction() as data:
            product = self.get_product(product_id)
            declared = to_int(declared_stock, None)
            if declared is None or declared < 0:
                raise ValidationError("El stock declarado debe ser un número >= 0")

            delta = declared - available_stock(product.id, data)
            if delta == 0:
                return {'ok': True, 'synced': True, 'warning': None, 'movement': None, 'stock': declared}

            movement = StockMovement(
                id=generate_id(),
                product_id=product.id,
                quantity=delta,
                date=_clean(date) or now_iso(),
            )
            new_data = replace(data, stock_movements=data.stock_movements + [movement])
            logger.info("[STOCK] Ajuste %+d %s (declarado %d)", delta, product.name, declared)
            return self.sync.commit(new_data, movement=movement.to_dict(), stock=declared)
