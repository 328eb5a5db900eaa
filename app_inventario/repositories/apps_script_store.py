# ==============================================================================
# ALMACÉN TABULAR EN GOOGLE SHEETS (Apps Script Web App)
# ==============================================================================
# El Web App expone una sola URL que acepta POST JSON:
#   {"action": "read",  "sheet": "products"}            -> {"values": [[...], ...]}
#   {"action": "write", "sheet": "products", "values": [[...]]} -> {"success": true}
#
# Cualquier respuesta no exitosa o ilegible se convierte en SyncError.
# ==============================================================================

import json
import logging
from typing import Any, Dict, List

import urllib3

from app_inventario.errors import SyncError

logger = logging.getLogger(__name__)

APPS_SCRIPT_HOST = 'script.google.com'


class AppsScriptSheetStore:
    """
    Implementación de ISheetStore contra un Web App de Apps Script.
    """

    def __init__(self, web_app_url: str, timeout: float = 30.0, http: urllib3.PoolManager = None):
        """
        Args:
            web_app_url: URL de despliegue (https://script.google.com/macros/s/.../exec)
            timeout: Timeout total por petición, en segundos
            http: PoolManager a usar (inyectable para tests)

        Raises:
            SyncError: Si la URL no apunta a Apps Script
        """
        if not web_app_url:
            raise SyncError('Falta la URL del Web App de Google Sheets')
        if APPS_SCRIPT_HOST not in web_app_url:
            raise SyncError(
                'URL de Apps Script inválida. Debe ser como: '
                'https://script.google.com/macros/s/.../exec'
            )
        self.web_app_url = web_app_url
        self.timeout = timeout
        self.http = http or urllib3.PoolManager(
            timeout=urllib3.Timeout(total=timeout),
            retries=urllib3.Retry(total=2, redirect=5, backoff_factor=0.5),
        )

    def _post(self, payload: Dict[str, Any]) -> str:
        """Envía el payload y devuelve el cuerpo de la respuesta como texto."""
        try:
            response = self.http.request(
                'POST',
                self.web_app_url,
                body=json.dumps(payload, ensure_ascii=False).encode('utf-8'),
                headers={'Content-Type': 'application/json'},
            )
        except urllib3.exceptions.HTTPError as e:
            raise SyncError(f"Error de red con Google Sheets: {e}") from e

        text = response.data.decode('utf-8', errors='replace')
        if not 200 <= response.status < 300:
            raise SyncError(f"Google Sheets respondió {response.status}: {text[:200]}")
        return text

    def read_sheet(self, name: str) -> List[List[Any]]:
        logger.debug("[SYNC] Leyendo hoja %s", name)
        text = self._post({'action': 'read', 'sheet': name})
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise SyncError(f"Respuesta no JSON de Apps Script: {text[:200]}") from e
        if not isinstance(data, dict):
            raise SyncError(f"Formato de respuesta inesperado: {text[:200]}")
        values = data.get('values') or []
        logger.debug("[SYNC] Hoja %s: %d filas", name, len(values))
        return values if isinstance(values, list) else []

    def write_sheet(self, name: str, rows: List[List[Any]]) -> None:
        logger.debug("[SYNC] Escribiendo hoja %s (%d filas)", name, len(rows))
        text = self._post({'action': 'write', 'sheet': name, 'values': rows})
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            # Algunos despliegues responden texto plano
            if 'success' not in text.lower():
                raise SyncError(f"Respuesta de escritura inesperada: {text[:200]}")
            return
        if not isinstance(data, dict) or not data.get('success'):
            raise SyncError(f"La escritura de {name} falló: {text[:200]}")
