# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Punto central para obtener el almacén, el repositorio y los servicios.
#
# ALMACÉN:
#   - GOOGLE_SHEETS_WEB_APP_URL definida → AppsScriptSheetStore (Google Sheets)
#   - Si no                               → JsonSheetStore en INVENTARIO_DATA_DIR
#
# Los servicios no cambian con el almacén: dependen de IDataRepository.
# Para tests se puede pasar cualquier ISheetStore al constructor.
# ==============================================================================

import logging
from typing import Optional

from app_inventario import config
from app_inventario.repositories import (
    AppsScriptSheetStore,
    DataRepository,
    ISheetStore,
    JsonSheetStore,
)
from app_inventario.services import (
    DataSynchronizer,
    InventoryService,
    SalesService,
    StatsService,
)

logger = logging.getLogger(__name__)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Implementa el patrón Singleton para asegurar una única copia local de
    los datos por proceso.

    Uso:
        container = AppContainer(data_dir='/tmp/datos')
        container.inventory_service.add_stock(pid, 5)
    """

    _instance: Optional['AppContainer'] = None

    def __new__(cls, data_dir: str = None, store: ISheetStore = None):
        """Singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, data_dir: str = None, store: ISheetStore = None):
        """
        Args:
            data_dir: Directorio del almacén JSON (por defecto config.DATA_DIR)
            store: Almacén ya construido (tiene prioridad sobre todo lo demás)
        """
        if self._initialized:
            return

        self._data_dir = data_dir or config.DATA_DIR
        self._store: Optional[ISheetStore] = store
        self._repository: Optional[DataRepository] = None

        self._synchronizer: Optional[DataSynchronizer] = None
        self._inventory_service: Optional[InventoryService] = None
        self._sales_service: Optional[SalesService] = None
        self._stats_service: Optional[StatsService] = None

        self._initialized = True

    # =========================================================================
    # PERSISTENCIA
    # =========================================================================

    @property
    def store(self) -> ISheetStore:
        """Almacén tabular (singleton)."""
        if self._store is None:
            if config.GOOGLE_SHEETS_WEB_APP_URL:
                logger.info("[SYNC] Usando Google Sheets (Apps Script)")
                self._store = AppsScriptSheetStore(
                    config.GOOGLE_SHEETS_WEB_APP_URL, timeout=config.SYNC_TIMEOUT
                )
            else:
                logger.info("[SYNC] Usando almacén JSON local en %s", self._data_dir)
                self._store = JsonSheetStore(self._data_dir)
        return self._store

    @property
    def repository(self) -> DataRepository:
        if self._repository is None:
            self._repository = DataRepository(self.store)
        return self._repository

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def synchronizer(self) -> DataSynchronizer:
        """Copia local de los datos (singleton)."""
        if self._synchronizer is None:
            self._synchronizer = DataSynchronizer(self.repository)
        return self._synchronizer

    @property
    def inventory_service(self) -> InventoryService:
        if self._inventory_service is None:
            self._inventory_service = InventoryService(self.synchronizer)
        return self._inventory_service

    @property
    def sales_service(self) -> SalesService:
        if self._sales_service is None:
            self._sales_service = SalesService(self.synchronizer)
        return self._sales_service

    @property
    def stats_service(self) -> StatsService:
        if self._stats_service is None:
            self._stats_service = StatsService(lambda: self.synchronizer.data.sales)
        return self._stats_service

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def reset(self) -> None:
        """Descarta las instancias (la próxima lectura vuelve al almacén)."""
        self._repository = None
        self._synchronizer = None
        self._inventory_service = None
        self._sales_service = None
        self._stats_service = None

    @classmethod
    def reset_instance(cls) -> None:
        """Elimina la instancia singleton (útil para tests)."""
        if cls._instance is not None:
            cls._instance.reset()
            cls._instance = None


def get_container(data_dir: str = None, store: ISheetStore = None) -> AppContainer:
    """Obtiene el contenedor global (los argumentos solo valen en la primera llamada)."""
    return AppContainer(data_dir, store)
