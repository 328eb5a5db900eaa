# ==============================================================================
# REPOSITORIO BASE - Funcionalidad común para acceso a archivos JSON
# ==============================================================================

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from typing import Any, List

logger = logging.getLogger(__name__)


class BaseRepository(ABC):
    """
    Clase base abstracta para los repositorios en archivo.
    Proporciona lectura/escritura de JSON con un lock global y escritura
    atómica (archivo temporal + os.replace).
    """

    # Lock global para evitar escrituras concurrentes a archivos
    _file_lock = threading.RLock()

    def __init__(self, file_path: str):
        """
        Inicializa el repositorio con la ruta al archivo JSON.

        Args:
            file_path: Ruta absoluta al archivo JSON de datos
        """
        self.file_path = file_path
        self._ensure_file_exists()

    def _ensure_file_exists(self) -> None:
        """Crea el archivo (y su directorio) con datos vacíos si no existe."""
        if not os.path.exists(self.file_path):
            os.makedirs(os.path.dirname(self.file_path) or '.', exist_ok=True)
            self._write_raw(self._empty_data())

    @abstractmethod
    def _empty_data(self) -> Any:
        """Estructura vacía para este repositorio."""
        pass

    def _read_raw(self) -> Any:
        """
        Lee los datos crudos del archivo JSON.

        Returns:
            Datos parseados, o la estructura vacía si el archivo falta o
            está corrupto (una lectura nunca tumba la aplicación).
        """
        with self._file_lock:
            try:
                with open(self.file_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except FileNotFoundError:
                return self._empty_data()
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.warning("[JSON] Archivo corrupto %s (%s), se usan datos vacíos", self.file_path, e)
                return self._empty_data()

    def _write_raw(self, data: Any) -> None:
        """
        Escribe datos al archivo JSON.

        Raises:
            OSError: Si hay error de escritura
        """
        with self._file_lock:
            temp_path = self.file_path + '.tmp'
            try:
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(temp_path, self.file_path)
            except Exception:
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise


class SheetFileRepository(BaseRepository):
    """
    Una hoja guardada como matriz JSON: [[encabezados], [fila], ...]

    Ejemplo: products.json -> [["id", "name", ...], ["a1", "Funda X", ...]]
    """

    def __init__(self, file_path: str, headers: List[str] = None):
        self.headers = list(headers or [])
        super().__init__(file_path)

    def _empty_data(self) -> List[List[Any]]:
        return [list(self.headers)] if self.headers else []

    def get_rows(self) -> List[List[Any]]:
        """Obtiene la hoja completa (encabezados incluidos)."""
        data = self._read_raw()
        if not isinstance(data, list):
            logger.warning("[JSON] %s no contiene una lista de filas", self.file_path)
            return self._empty_data()
        return [row if isinstance(row, list) else [] for row in data]

    def save_rows(self, rows: List[List[Any]]) -> None:
        """Reemplaza la hoja completa."""
        self._write_raw(rows)
