# ==============================================================================
# CONFIGURACIÓN
# ==============================================================================
# Todas las opciones se leen de variables de entorno con valores por defecto
# aptos para desarrollo local.
#
#   export GOOGLE_SHEETS_WEB_APP_URL="https://script.google.com/macros/s/.../exec"
#   export INVENTARIO_DATA_DIR="/var/lib/inventario"
# ==============================================================================

import os

BASE = os.path.dirname(os.path.abspath(__file__))


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'si', 'on')


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


# Directorio del almacén JSON local (una hoja = un archivo)
DATA_DIR = os.environ.get('INVENTARIO_DATA_DIR') or os.path.join(BASE, 'data')

# URL del Web App de Apps Script. Si está definida se usa Google Sheets.
GOOGLE_SHEETS_WEB_APP_URL = os.environ.get('GOOGLE_SHEETS_WEB_APP_URL', '').strip()

# Timeout (segundos) para las llamadas al almacén externo
SYNC_TIMEOUT = _env_float('SYNC_TIMEOUT', 30.0)

# Logging
LOG_LEVEL = os.environ.get('INVENTARIO_LOG_LEVEL', 'INFO').upper()
LOGS_DIR = os.environ.get('INVENTARIO_LOGS_DIR') or os.path.join(BASE, 'logs')
ENABLE_PROFILING = _env_flag('ENABLE_PROFILING', True)

# Autenticación básica (opcional, ambas deben estar definidas)
BASIC_AUTH_USER = os.environ.get('BASIC_AUTH_USER')
BASIC_AUTH_PASS = os.environ.get('BASIC_AUTH_PASS')

# Flask
_DEFAULT_SECRET = 'app_inventario_dev_secret_key_change_in_production'
SECRET_KEY = os.environ.get('INVENTARIO_SECRET_KEY') or _DEFAULT_SECRET

# Umbral de "stock bajo" en el reporte de inventario
LOW_STOCK_THRESHOLD = 10

# Escribir logs/inventario.log además de la consola
LOG_TO_FILE = _env_flag('INVENTARIO_LOG_TO_FILE', True)

# Servidor de desarrollo (python -m app_inventario.main)
FLASK_DEBUG = _env_flag('FLASK_DEBUG', False)
FLASK_HOST = os.environ.get('FLASK_HOST', '0.0.0.0')
FLASK_PORT = int(os.environ.get('FLASK_PORT', 5000))
