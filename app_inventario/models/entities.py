# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio.
# El stock NO es un campo: se deriva de dos registros de eventos
# (movimientos de stock y ventas) que solo crecen.
#
# Los diccionarios de persistencia usan las claves camelCase que ya existen
# en la planilla (productId, defaultUnitPrice, createdAt, ...).
# ==============================================================================

import json
import logging
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


# ==============================================================================
# ENUMERACIONES
# ==============================================================================

class Category(str, Enum):
    """Categorías de producto admitidas."""
    FUNDA = "Funda"
    ACCESORIO = "Accesorio"
    NONE = ""


class PaymentMethod(str, Enum):
    """Métodos de pago habituales (la venta acepta cualquier texto)."""
    EFECTIVO = "efectivo"
    TARJETA = "tarjeta"
    TRANSFERENCIA = "transferencia"
    QR = "qr"


VALID_CATEGORIES = frozenset(c.value for c in Category)


# ==============================================================================
# HELPERS DE CONVERSIÓN TOLERANTE
# ==============================================================================
# La planilla puede traer celdas vacías o con basura. Estas funciones nunca
# lanzan: devuelven un valor seguro por defecto.

def to_float(value: Any, default: float = 0.0) -> float:
    """Convierte a float; devuelve `default` si no es numérico."""
    if value is None or value == '':
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(result):  # NaN, inf
        return default
    return result


def to_int(value: Any, default: int = 0) -> int:
    """Convierte a int truncando decimales; devuelve `default` si no es numérico."""
    if value is None or value == '' or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    number = to_float(value, None)
    if number is None:
        return default
    return int(number)


def to_str(value: Any) -> str:
    if value is None:
        return ''
    return str(value)


def generate_id() -> str:
    """Genera un identificador opaco único."""
    return uuid.uuid4().hex


def now_iso() -> str:
    """Timestamp actual en UTC, formato ISO."""
    return datetime.now(timezone.utc).isoformat()


# ==============================================================================
# PRODUCTOS
# ==============================================================================

@dataclass
class Product:
    """
    Producto del catálogo.

    Attributes:
        id: Identificador único (opaco)
        name: Nombre visible
        sku: Código SKU (opcional, formato SKU-0001)
        category: "Funda", "Accesorio" o vacío
        model: Modelo de teléfono compatible (obligatorio en fundas)
        color: Color (opcional)
        default_unit_price: Precio sugerido al vender
        created_at: Fecha de alta
    """
    id: str
    name: str
    sku: Optional[str] = None
    category: str = ''
    model: str = ''
    color: str = ''
    default_unit_price: float = 0.0
    created_at: str = ''

    def __post_init__(self):
        if not self.created_at:
            self.created_at = now_iso()

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia."""
        return {
            'id': self.id,
            'name': self.name,
            'sku': self.sku,
            'category': self.category,
            'model': self.model,
            'color': self.color,
            'defaultUnitPrice': self.default_unit_price,
            'createdAt': self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        """Crea instancia desde diccionario."""
        category = to_str(data.get('category'))
        if category not in VALID_CATEGORIES:
            logger.warning("[PRODUCTO] Categoría desconocida %r en %s", category, data.get('id'))
        return cls(
            id=to_str(data.get('id')),
            name=to_str(data.get('name')),
            sku=to_str(data.get('sku')) or None,
            category=category,
            model=to_str(data.get('model')),
            color=to_str(data.get('color')),
            default_unit_price=to_float(data.get('defaultUnitPrice')),
            created_at=to_str(data.get('createdAt')),
        )


# ==============================================================================
# MOVIMIENTOS DE STOCK
# ==============================================================================

@dataclass
class StockMovement:
    """
    Ingreso de mercadería (o ajuste con signo).

    Los movimientos no se editan ni se borran: un ajuste de inventario es
    otro movimiento con cantidad = stock declarado - stock calculado.
    """
    id: str
    product_id: str
    quantity: int
    date: str
    created_at: str = ''

    def __post_init__(self):
        if not self.created_at:
            self.created_at = now_iso()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'productId': self.product_id,
            'quantity': self.quantity,
            'date': self.date,
            'createdAt': self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StockMovement':
        return cls(
            id=to_str(data.get('id')),
            product_id=to_str(data.get('productId')),
            quantity=to_int(data.get('quantity')),
            date=to_str(data.get('date')),
            created_at=to_str(data.get('createdAt')),
        )


# ==============================================================================
# VENTAS
# ==============================================================================

@dataclass
class SaleItem:
    """
    Línea de una venta.

    Attributes:
        product_id: ID del producto vendido
        product_name: Nombre al momento de la venta (no se resincroniza)
        unit_price: Precio unitario cobrado
        quantity: Cantidad vendida
        line_total: unit_price * quantity, calculado al crear la línea
    """
    product_id: str
    product_name: str
    unit_price: float
    quantity: int
    line_total: Optional[float] = None

    def __post_init__(self):
        if self.line_total is None:
            self.line_total = round(self.unit_price * self.quantity, 2)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'productId': self.product_id,
            'productName': self.product_name,
            'unitPrice': self.unit_price,
            'quantity': self.quantity,
            'lineTotal': self.line_total,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SaleItem':
        return cls(
            product_id=to_str(data.get('productId')),
            product_name=to_str(data.get('productName')),
            unit_price=to_float(data.get('unitPrice')),
            quantity=to_int(data.get('quantity')),
            line_total=to_float(data.get('lineTotal'), None),
        )


@dataclass
class Sale:
    """
    Venta completa.

    `total_amount` puede diferir de la suma de líneas: el operador puede
    cargar un total manual (descuentos, redondeos). No se recalcula.
    """
    id: str
    date: str
    payment_method: str = PaymentMethod.EFECTIVO.value
    total_amount: float = 0.0
    items: List[SaleItem] = field(default_factory=list)

    @property
    def computed_total(self) -> float:
        """Suma de los totales de línea."""
        return round(sum(item.line_total for item in self.items), 2)

    def quantity_of(self, product_id: str) -> int:
        """Unidades de un producto en esta venta (suma de todas sus líneas)."""
        return sum(item.quantity for item in self.items if item.product_id == product_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'date': self.date,
            'paymentMethod': self.payment_method,
            'totalAmount': self.total_amount,
            'items': [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Sale':
        raw_items = data.get('items') or []
        if isinstance(raw_items, str):
            raw_items = parse_items_json(raw_items, data.get('id'))
        if not isinstance(raw_items, list):
            raw_items = []
        return cls(
            id=to_str(data.get('id')),
            date=to_str(data.get('date')),
            payment_method=to_str(data.get('paymentMethod')),
            total_amount=to_float(data.get('totalAmount')),
            items=[SaleItem.from_dict(i) for i in raw_items if isinstance(i, dict)],
        )


def parse_items_json(raw: str, sale_id: Any = None) -> List[Dict[str, Any]]:
    """
    Decodifica la columna `items` de la hoja de ventas.
    JSON inválido → lista vacía (se registra advertencia).
    """
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning("[VENTA] Columna items ilegible en venta %s, se usa []", sale_id)
        return []
    return parsed if isinstance(parsed, list) else []


# ==============================================================================
# AGREGADO RAÍZ
# ==============================================================================

@dataclass
class AppData:
    """
    Conjunto de datos completo. Siempre se lee y se escribe como una unidad.
    """
    products: List[Product] = field(default_factory=list)
    stock_movements: List[StockMovement] = field(default_factory=list)
    sales: List[Sale] = field(default_factory=list)

    def get_product(self, product_id: str) -> Optional[Product]:
        """Busca un producto por ID (None si no existe o fue eliminado)."""
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def get_sale(self, sale_id: str) -> Optional[Sale]:
        for sale in self.sales:
            if sale.id == sale_id:
                return sale
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'products': [p.to_dict() for p in self.products],
            'stockMovements': [m.to_dict() for m in self.stock_movements],
            'sales': [s.to_dict() for s in self.sales],
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'AppData':
        data = data or {}
        return cls(
            products=[Product.from_dict(p) for p in data.get('products') or [] if isinstance(p, dict)],
            stock_movements=[
                StockMovement.from_dict(m) for m in data.get('stockMovements') or [] if isinstance(m, dict)
            ],
            sales=[Sale.from_dict(s) for s in data.get('sales') or [] if isinstance(s, dict)],
        )
