# ==============================================================================
# REPOSITORIO DEL CONJUNTO DE DATOS
# ==============================================================================
# Lee y escribe AppData completo sobre un almacén tabular (ISheetStore).
# No hay escrituras incrementales: save_all reemplaza las tres hojas.
# No hay control de versiones: si dos clientes escriben, gana el último.
# ==============================================================================

import logging
from typing import Dict, List

from app_inventario.errors import SyncError
from app_inventario.models import AppData
from app_inventario.repositories.interfaces import ISheetStore
from app_inventario.repositories.sheet_rows import SHEET_NAMES, appdata_to_sheets, sheets_to_appdata

logger = logging.getLogger(__name__)


class DataRepository:
    """
    Repositorio con la interfaz load_all()/save_all(AppData).

    Uso:
        repo = DataRepository(JsonSheetStore('/tmp/datos'))
        data = repo.load_all()
        repo.save_all(data)
    """

    def __init__(self, store: ISheetStore):
        self.store = store

    def load_all(self) -> AppData:
        """
        Lee las tres hojas y arma AppData.

        Raises:
            SyncError: Si alguna hoja no se pudo leer
        """
        sheets = {}
        for name in SHEET_NAMES:
            try:
                sheets[name] = self.store.read_sheet(name)
            except OSError as e:
                raise SyncError(f"No se pudo leer la hoja {name}: {e}") from e

        data = sheets_to_appdata(sheets)
        logger.info(
            "[SYNC] Datos cargados: %d productos, %d movimientos, %d ventas",
            len(data.products), len(data.stock_movements), len(data.sales)
        )
        return data

    def save_all(self, data: AppData) -> None:
        """
        Escribe las tres hojas. Se intenta cada hoja aunque otra falle y al
        final se informa cuáles fallaron.

        Raises:
            SyncError: Si una o más hojas no se pudieron escribir
        """
        failures: Dict[str, str] = {}
        for name, rows in appdata_to_sheets(data).items():
            try:
                self.store.write_sheet(name, rows)
            except (SyncError, OSError) as e:
                logger.error("[SYNC] Falló la hoja %s: %s", name, e)
                failures[name] = str(e)

        if failures:
            failed: List[str] = sorted(failures)
            raise SyncError(f"Algunas hojas no se sincronizaron: {', '.join(failed)}")

        logger.info("[SYNC] ✓ Todas las hojas sincronizadas")
