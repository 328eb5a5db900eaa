# ==============================================================================
# SERVICIO DE REPORTES DE VENTAS
# ==============================================================================
# Agrupa ventas por día calendario de Argentina (UTC-3).
#
# REGLAS:
# - El total de cada día suma `total_amount` de la venta (el total cobrado,
#   que puede ser un total manual), no la suma de líneas.
# - El rango [desde, hasta] compara días locales como texto YYYY-MM-DD.
# - Ventas con fecha ilegible no se cuentan.
# ==============================================================================

import logging
import math
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

from app_inventario.models import Sale
from app_inventario.performance_logger import profile_function
from app_inventario.services.dates import local_day, local_days_ago, local_today, sort_key

logger = logging.getLogger(__name__)

PER_PAGE = 10

# Días hacia atrás del período por defecto (última semana, hoy incluido)
DEFAULT_PERIOD_DAYS = 6


def _in_range(day: str, date_from: Optional[str], date_to: Optional[str]) -> bool:
    if date_from and day < date_from:
        return False
    if date_to and day > date_to:
        return False
    return True


@profile_function(name="Ventas por día")
def group_sales_by_day(
    sales: List[Sale],
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    descending: bool = False,
) -> List[Dict[str, Any]]:
    """
    Agrupa ventas por día local.

    Args:
        sales: Ventas a agrupar
        date_from: Día inicial (YYYY-MM-DD), None = sin límite
        date_to: Día final (YYYY-MM-DD), None = sin límite
        descending: True para tablas (más reciente primero), False para gráficos

    Returns:
        [{'date': 'YYYY-MM-DD', 'count': int, 'total': float}]
    """
    daily_data = defaultdict(lambda: {'count': 0, 'total': 0.0})

    for sale in sales:
        day = local_day(sale.date)
        if day is None:
            logger.warning("[REPORTE] Venta %s con fecha ilegible %r, se omite", sale.id, sale.date)
            continue
        if not _in_range(day, date_from, date_to):
            continue
        daily_data[day]['count'] += 1
        daily_data[day]['total'] += sale.total_amount

    return [
        {'date': day, 'count': values['count'], 'total': round(values['total'], 2)}
        for day, values in sorted(daily_data.items(), reverse=descending)
    ]


def summary_totals(days: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Totales del período a partir de las filas agrupadas."""
    return {
        'count': sum(d['count'] for d in days),
        'total': round(sum(d['total'] for d in days), 2),
    }


def sales_in_period(
    sales: List[Sale],
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> List[Sale]:
    """Ventas dentro del rango, la más reciente primero."""
    selected = []
    for sale in sales:
        day = local_day(sale.date)
        if day is not None and _in_range(day, date_from, date_to):
            selected.append(sale)
    selected.sort(key=lambda s: sort_key(s.date), reverse=True)
    return selected


def paginate(items: List[Any], page: int = 1, per_page: int = PER_PAGE) -> Dict[str, Any]:
    """
    Corta una lista en páginas.

    Una página fuera de rango se ajusta a la primera o a la última.

    Returns:
        {'items': [...], 'page': int, 'pages': int, 'total': int}
    """
    total = len(items)
    pages = max(1, math.ceil(total / per_page))
    page = min(max(1, page), pages)
    start = (page - 1) * per_page
    return {
        'items': items[start:start + per_page],
        'page': page,
        'pages': pages,
        'total': total,
    }


class StatsService:
    """
    Reportes de ventas sobre los datos actuales.

    Responsabilidades:
    - Resumen diario del período (tabla y gráfico)
    - Lista paginada de transacciones
    """

    def __init__(self, sales_loader: Callable[[], List[Sale]] = None):
        """
        Args:
            sales_loader: Función que retorna la lista de ventas.
                          Permite inyectar dependencia para testing.
        """
        self._sales_loader = sales_loader

    def _load_sales(self) -> List[Sale]:
        if self._sales_loader:
            return self._sales_loader()
        return []

    @staticmethod
    def default_period() -> Dict[str, str]:
        """Última semana hasta hoy (hora local)."""
        return {'from': local_days_ago(DEFAULT_PERIOD_DAYS), 'to': local_today()}

    def sales_by_day(
        self,
        date_from: str = None,
        date_to: str = None,
        order: str = 'desc',
    ) -> Dict[str, Any]:
        """
        Resumen por día del período.

        Returns:
            {
                'date_range': {'from': str, 'to': str},
                'days': [{'date', 'count', 'total'}],
                'summary': {'count': int, 'total': float}
            }
        """
        if not date_from and not date_to:
            period = self.default_period()
            date_from, date_to = period['from'], period['to']

        days = group_sales_by_day(
            self._load_sales(), date_from, date_to, descending=(order != 'asc')
        )
        return {
            'date_range': {'from': date_from, 'to': date_to},
            'days': days,
            'summary': summary_totals(days),
        }

    def transactions(
        self,
        date_from: str = None,
        date_to: str = None,
        page: int = 1,
        per_page: int = PER_PAGE,
    ) -> Dict[str, Any]:
        """Transacciones del período, más recientes primero, paginadas."""
        sales = sales_in_period(self._load_sales(), date_from, date_to)
        result = paginate(sales, page, per_page)
        result['items'] = [sale.to_dict() for sale in result['items']]
        return result
