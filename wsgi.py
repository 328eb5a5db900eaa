# ==============================================================================
# WSGI Entry Point - Para Gunicorn en producción
# ==============================================================================
# USO:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/             <- Directorio de trabajo (en sys.path automáticamente)
#   ├── wsgi.py            <- Este archivo
#   ├── pyproject.toml
#   └── app_inventario/    <- Paquete Python
#       ├── main.py
#       ├── services/
#       └── repositories/
# ==============================================================================

from app_inventario import config
from app_inventario.main import create_app

app = create_app()

if __name__ == '__main__':
    app.run(host=config.FLASK_HOST, port=config.FLASK_PORT, debug=config.FLASK_DEBUG)
