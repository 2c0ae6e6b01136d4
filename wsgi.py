# ==============================================================================
# WSGI Entry Point - Para Gunicorn/Waitress en producción
# ==============================================================================
# USO:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# ESTRUCTURA DEL PROYECTO:
#   repo_root/              <- Directorio de trabajo (en sys.path)
#   ├── wsgi.py             <- Este archivo
#   ├── pyproject.toml
#   └── ezelectronics/      <- Paquete Python
#       ├── main.py
#       ├── services/
#       └── repositories/
# ==============================================================================

from ezelectronics.main import app

if __name__ == '__main__':
    app.run(debug=True, host='127.0.0.1', port=5000)
