# ==============================================================================
# FECHAS Y ZONA HORARIA
# ==============================================================================
# Los días de venta se calculan en hora de Argentina (UTC-3 fijo, sin horario
# de verano). Una venta registrada a las 01:00 UTC pertenece al día anterior
# en el local.
# ==============================================================================

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

AR_TZ = timezone(timedelta(hours=-3), 'ART')

_DATE_ONLY = re.compile(r'^\d{4}-\d{2}-\d{2}$')

# Instante mínimo: las fechas ilegibles ordenan como las más antiguas
OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def is_date_only(value: str) -> bool:
    return bool(value) and bool(_DATE_ONLY.match(value))


def parse_timestamp(value: str) -> Optional[datetime]:
    """
    Parsea una fecha ISO y la devuelve con zona horaria.

    - "YYYY-MM-DD" se toma como medianoche local (Argentina)
    - Timestamps sin zona se toman como UTC
    - Retorna None si no puede parsear
    """
    if not value:
        return None
    value = str(value).strip()
    try:
        if is_date_only(value):
            return datetime.strptime(value, '%Y-%m-%d').replace(tzinfo=AR_TZ)
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def local_day(value: str) -> Optional[str]:
    """
    Día calendario local (YYYY-MM-DD) de una fecha de venta.

    Las fechas sin hora ya son días locales y se devuelven tal cual.
    """
    if not value:
        return None
    value = str(value).strip()
    if is_date_only(value):
        return value
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return parsed.astimezone(AR_TZ).strftime('%Y-%m-%d')


def sort_key(value: str) -> datetime:
    """Clave de orden cronológico; fechas ilegibles van primero."""
    return parse_timestamp(value) or OLDEST


def local_today() -> str:
    """Fecha de hoy en Argentina (YYYY-MM-DD)."""
    return datetime.now(AR_TZ).strftime('%Y-%m-%d')


def local_days_ago(days: int) -> str:
    return (datetime.now(AR_TZ) - timedelta(days=days)).strftime('%Y-%m-%d')
