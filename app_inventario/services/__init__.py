# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# ├── ledger_service.py     → Stock derivado, nivel de stock, reporte
# ├── sku_service.py        → SKU-0001, SKU-0002, ...
# ├── stats_service.py      → Ventas por día (hora Argentina), transacciones
# ├── sale_validator.py     → Control de stock antes de vender/editar
# ├── inventory_service.py  → Productos, ingresos y ajustes de stock
# ├── sales_service.py      → Alta, edición y baja de ventas
# └── sync_service.py       → Copia local + persistencia completa
# ==============================================================================

from app_inventario.services.ledger_service import (
    available_stock, inventory_report, last_sale_date, stock_level, total_units_sold
)
from app_inventario.services.sku_service import SkuSequence, generate_sku
from app_inventario.services.stats_service import StatsService, group_sales_by_day
from app_inventario.services.sale_validator import validate_sale_items
from app_inventario.services.sync_service import DataSynchronizer
from app_inventario.services.inventory_service import InventoryService
from app_inventario.services.sales_service import SalesService

__all__ = [
    'available_stock',
    'total_units_sold',
    'last_sale_date',
    'stock_level',
    'inventory_report',
    'generate_sku',
    'SkuSequence',
    'group_sales_by_day',
    'StatsService',
    'validate_sale_items',
    'DataSynchronizer',
    'InventoryService',
    'SalesService',
]
