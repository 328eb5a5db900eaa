# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Contratos que deben cumplir los almacenes. Los servicios dependen de estas
# interfaces, NO de implementaciones concretas, de modo que cambiar el
# archivo JSON local por Google Sheets (o cualquier otro almacén tabular)
# solo requiere otra implementación de ISheetStore.
#
# ==============================================================================

from typing import Any, List, Protocol, runtime_checkable

from app_inventario.models import AppData


@runtime_checkable
class ISheetStore(Protocol):
    """
    Almacén tabular: cada hoja es una matriz de filas.
    La primera fila son los encabezados.
    """

    def read_sheet(self, name: str) -> List[List[Any]]:
        """Lee la hoja completa (encabezados + filas)."""
        ...

    def write_sheet(self, name: str, rows: List[List[Any]]) -> None:
        """Reemplaza la hoja completa."""
        ...


@runtime_checkable
class IDataRepository(Protocol):
    """
    Repositorio del conjunto de datos completo.
    No existen escrituras parciales: cada cambio reescribe todo.
    """

    def load_all(self) -> AppData:
        """Carga productos, movimientos y ventas."""
        ...

    def save_all(self, data: AppData) -> None:
        """Persiste el conjunto completo."""
        ...
