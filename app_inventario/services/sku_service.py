# ==============================================================================
# GENERACIÓN DE SKU
# ==============================================================================
# Formato: SKU-0001, SKU-0002, ...
# El siguiente código es (mayor número existente + 1). Los SKU que no
# respetan el formato se ignoran. Los números no se reutilizan mientras el
# mayor siga en la lista; si se borra el producto con el SKU más alto, ese
# número puede volver a asignarse.
# ==============================================================================

import re
from typing import Iterable

from app_inventario.models import AppData, Product

SKU_PATTERN = re.compile(r'^SKU-(\d+)$')


def max_sku_number(products: Iterable[Product]) -> int:
    """Mayor número de SKU con formato válido (0 si no hay ninguno)."""
    highest = 0
    for product in products:
        match = SKU_PATTERN.match(product.sku or '')
        if match:
            highest = max(highest, int(match.group(1)))
    return highest


def format_sku(number: int) -> str:
    return f"SKU-{number:04d}"


def generate_sku(data: AppData) -> str:
    """
    Siguiente SKU libre para el conjunto de datos.

    Ejemplos:
        SKU-0001, SKU-0099, "ABC" → SKU-0100
        sin productos → SKU-0001
    """
    return format_sku(max_sku_number(data.products) + 1)


class SkuSequence:
    """
    Secuencia de SKU para altas en lote.

    Se calcula el máximo una sola vez y luego se entregan códigos
    consecutivos, sin volver a recorrer la lista de productos.

    Uso:
        seq = SkuSequence.from_data(data)
        seq.next()  # SKU-0005
        seq.next()  # SKU-0006
    """

    def __init__(self, products: Iterable[Product] = ()):
        self._last = max_sku_number(products)

    @classmethod
    def from_data(cls, data: AppData) -> 'SkuSequence':
        return cls(data.products)

    def next(self) -> str:
        self._last += 1
        return format_sku(self._last)
