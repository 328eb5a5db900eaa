# ==============================================================================
# LOGGING Y PROFILING INTERNO
# ==============================================================================
# - configure_logging(): consola + archivo rotativo en logs/inventario.log
# - init_profiling(app): mide cada petición Flask y avisa de rutas lentas
# - profile_function: decorador para funciones clave de los servicios
#
# ACTIVAR/DESACTIVAR profiling: variable de entorno ENABLE_PROFILING=0
# ==============================================================================

import logging
import os
import time
from functools import wraps
from logging.handlers import RotatingFileHandler

from app_inventario import config

# Umbrales de tiempo (en milisegundos)
THRESHOLD_WARNING = 300   # Advertencia si supera 300ms
THRESHOLD_CRITICAL = 700  # Crítico si supera 700ms

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'

perf_logger = logging.getLogger('app_inventario.performance')

_configured = False


# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN DE LOGGING
# ═══════════════════════════════════════════════════════════════════════════

def configure_logging(level: str = None, logs_dir: str = None, to_file: bool = None) -> None:
    """
    Configura el logger raíz del paquete una sola vez.

    Args:
        level: Nivel (DEBUG, INFO, ...). Por defecto config.LOG_LEVEL
        logs_dir: Directorio de logs. Por defecto config.LOGS_DIR
        to_file: Si False solo se loguea a consola. Por defecto config.LOG_TO_FILE
    """
    global _configured
    if _configured:
        return

    root = logging.getLogger('app_inventario')
    root.setLevel(level or config.LOG_LEVEL)

    formatter = logging.Formatter(LOG_FORMAT)
    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    root.addHandler(stream)

    if to_file is None:
        to_file = config.LOG_TO_FILE
    if to_file:
        logs_dir = logs_dir or config.LOGS_DIR
        os.makedirs(logs_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(logs_dir, 'inventario.log'),
            maxBytes=1024 * 1024,
            backupCount=5,
            encoding='utf-8',
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    _configured = True


# ═══════════════════════════════════════════════════════════════════════════
# PROFILING DE RUTAS (hooks Flask)
# ═══════════════════════════════════════════════════════════════════════════

def _log_route(method, path, time_ms):
    if time_ms >= THRESHOLD_CRITICAL:
        perf_logger.critical("[PERFORMANCE] Ruta MUY LENTA %s %s: %.0f ms", method, path, time_ms)
    elif time_ms >= THRESHOLD_WARNING:
        perf_logger.warning("[PERFORMANCE] Ruta LENTA %s %s: %.0f ms", method, path, time_ms)
    else:
        perf_logger.debug("[PERFORMANCE] %s %s: %.0f ms", method, path, time_ms)


def init_profiling(app, enabled: bool = None):
    """
    Registra hooks before_request/after_request que miden cada petición.

    Uso:
        init_profiling(app)
    """
    enabled = config.ENABLE_PROFILING if enabled is None else enabled
    if not enabled:
        return

    @app.before_request
    def _start_timer():
        from flask import g
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        from flask import g, request

        if not hasattr(g, 'start_time'):
            return response
        if request.path.startswith('/static'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000
        _log_route(request.method, request.path, elapsed)
        return response


# ═══════════════════════════════════════════════════════════════════════════
# DECORADOR PARA FUNCIONES CLAVE
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name=None):
    """
    Decorador para medir rendimiento de funciones críticas.

    Uso:
        @profile_function
        def mi_funcion():
            ...

        @profile_function(name="Inventario completo")
        def inventory_report():
            ...
    """
    def decorator(fn):
        if not config.ENABLE_PROFILING:
            return fn

        func_name = name or fn.__name__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000
                if elapsed_ms >= THRESHOLD_WARNING:
                    severity = 'CRÍTICO' if elapsed_ms >= THRESHOLD_CRITICAL else 'LENTO'
                    perf_logger.warning("[%s] Función %s: %.0f ms", severity, func_name, elapsed_ms)

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator


__all__ = [
    'configure_logging',
    'init_profiling',
    'profile_function',
]
