# ==============================================================================
# SINCRONIZACIÓN DE DATOS
# ==============================================================================
# Mantiene la copia local del AppData y la persiste completa en el almacén.
#
# ORDEN EN CADA CAMBIO:
#   1. Se aplica el nuevo AppData localmente (la UI ya lo ve)
#   2. Se escriben las tres hojas
#   3. Si la escritura falla se registra y se avisa; NO se revierte lo local
# ==============================================================================

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from app_inventario.errors import SyncError
from app_inventario.models import AppData
from app_inventario.repositories.interfaces import IDataRepository

logger = logging.getLogger(__name__)


class DataSynchronizer:
    """
    Punto único de escritura del conjunto de datos.

    Uso:
        sync = DataSynchronizer(DataRepository(store))
        sync.load()
        result = sync.update_data(new_data)
        if not result['synced']:
            print(result['error'])
    """

    def __init__(self, repository: IDataRepository):
        self.repository = repository
        self._data = AppData()
        self._lock = threading.RLock()
        self.loaded = False
        self.last_error = None

    @property
    def data(self) -> AppData:
        """Snapshot actual. Se carga del almacén en el primer acceso."""
        if not self.loaded:
            self.load()
        return self._data

    def load(self) -> AppData:
        """
        Lee todo desde el almacén.

        Si la lectura falla se conserva el estado local (vacío al inicio)
        y el error queda en `last_error`.
        """
        with self._lock:
            try:
                self._data = self.repository.load_all()
                self.last_error = None
            except SyncError as e:
                logger.error("[SYNC] Error al cargar datos: %s", e)
                self.last_error = str(e)
            self.loaded = True
            return self._data

    @contextmanager
    def transaction(self) -> Iterator[AppData]:
        """
        Bloquea el conjunto de datos durante un ciclo leer-validar-escribir.

        Mientras dura el bloque ningún otro hilo puede hacer commit ni abrir
        otra transacción.

        Uso:
            with sync.transaction() as data:
                new_data = replace(data, sales=data.sales + [sale])
                return sync.commit(new_data)
        """
        with self._lock:
            yield self.data

    def reload(self) -> AppData:
        """
        Relee desde el almacén.

        Raises:
            SyncError: Si la lectura falla (el estado local no cambia)
        """
        with self._lock:
            self._data = self.repository.load_all()
            self.loaded = True
            self.last_error = None
            return self._data

    def update_data(self, new_data: AppData) -> Dict[str, Any]:
        """
        Reemplaza el conjunto de datos y lo persiste.

        Args:
            new_data: AppData completo ya validado

        Returns:
            {'synced': True} o {'synced': False, 'error': str}
        """
        with self._lock:
            self._data = new_data
            self.loaded = True
            try:
                self.repository.save_all(new_data)
            except SyncError as e:
                logger.error("[SYNC] Cambios aplicados localmente pero no guardados: %s", e)
                self.last_error = str(e)
                return {'synced': False, 'error': str(e)}

            self.last_error = None
            return {'synced': True}

    def commit(self, new_data: AppData, **payload) -> Dict[str, Any]:
        """
        update_data() con el formato de respuesta de los servicios.

        Returns:
            {'ok': True, 'synced': bool, 'warning': str | None, **payload}
        """
        status = self.update_data(new_data)
        result = {'ok': True, 'synced': status['synced'], 'warning': status.get('error')}
        result.update(payload)
        return result
