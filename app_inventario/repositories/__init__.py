# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso a la persistencia.
#
# ESTRUCTURA:
# ├── interfaces.py          → Protocolos (ISheetStore, IDataRepository)
# ├── base.py                → Archivos JSON con lock y escritura atómica
# ├── sheet_rows.py          → Conversión entidades <-> filas de planilla
# ├── json_sheet_store.py    → Hojas como archivos JSON locales
# ├── apps_script_store.py   → Hojas en Google Sheets (Apps Script)
# └── data_repository.py     → load_all()/save_all() del AppData completo
#
# Para cambiar de almacén solo se cambia el ISheetStore en app_container.py.
# ==============================================================================

from app_inventario.repositories.interfaces import IDataRepository, ISheetStore
from app_inventario.repositories.base import BaseRepository, SheetFileRepository
from app_inventario.repositories.json_sheet_store import JsonSheetStore
from app_inventario.repositories.apps_script_store import AppsScriptSheetStore
from app_inventario.repositories.data_repository import DataRepository

__all__ = [
    # Interfaces
    'IDataRepository',
    'ISheetStore',

    # Clases base
    'BaseRepository',
    'SheetFileRepository',

    # Implementaciones
    'JsonSheetStore',
    'AppsScriptSheetStore',
    'DataRepository',
]
