# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Entidades del dominio como dataclasses, independientes de la persistencia
# (archivo JSON local o Google Sheets).
# ==============================================================================

from .entities import (
    # Enumeraciones
    Category,
    PaymentMethod,

    # Catálogo
    Product,

    # Registros de eventos
    StockMovement,
    Sale,
    SaleItem,

    # Agregado raíz
    AppData,

    # Helpers
    generate_id,
    now_iso,
    to_float,
    to_int,
)

__all__ = [
    'Category',
    'PaymentMethod',
    'Product',
    'StockMovement',
    'Sale',
    'SaleItem',
    'AppData',
    'generate_id',
    'now_iso',
    'to_float',
    'to_int',
]
