# ==============================================================================
# ALMACÉN TABULAR EN ARCHIVOS JSON
# ==============================================================================
# Una hoja = un archivo <nombre>.json dentro del directorio de datos.
# Sirve para trabajar sin conexión y para los tests.
# ==============================================================================

import os
from typing import Any, Dict, List

from app_inventario.repositories.base import SheetFileRepository
from app_inventario.repositories.sheet_rows import HEADERS


class JsonSheetStore:
    """
    Implementación de ISheetStore sobre archivos locales.

    Formato de products.json:
    [
        ["id", "name", "sku", ...],
        ["a1b2", "Funda iPhone 15 - Negro", "SKU-0001", ...]
    ]
    """

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Directorio donde viven los archivos de cada hoja
        """
        self.base_path = base_path
        os.makedirs(base_path, exist_ok=True)
        self._sheets: Dict[str, SheetFileRepository] = {}

    def _sheet(self, name: str) -> SheetFileRepository:
        if name not in self._sheets:
            file_path = os.path.join(self.base_path, f'{name}.json')
            self._sheets[name] = SheetFileRepository(file_path, HEADERS.get(name))
        return self._sheets[name]

    def read_sheet(self, name: str) -> List[List[Any]]:
        return self._sheet(name).get_rows()

    def write_sheet(self, name: str, rows: List[List[Any]]) -> None:
        self._sheet(name).save_rows(rows)
