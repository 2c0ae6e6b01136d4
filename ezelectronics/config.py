# ==============================================================================
# CONFIGURACIÓN
# ==============================================================================
# Valores por defecto pensados para desarrollo local. En producción se
# definen con variables de entorno:
#
#   export EZ_SECRET_KEY="clave_larga_y_aleatoria"
#   export EZ_PRODUCTION_MODE=1
#   export EZ_DATA_DIR=/var/lib/ezelectronics
# ==============================================================================

import os


def _env_flag(name: str, default: bool) -> bool:
    """Lee una variable de entorno booleana ('1', 'true', 'yes', 'on')."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


BASE = os.path.dirname(os.path.abspath(__file__))

# ═══════════════════════════════════════════════════════════════════════════════
# MODO PRODUCCIÓN
# ═══════════════════════════════════════════════════════════════════════════════
PRODUCTION_MODE = _env_flag('EZ_PRODUCTION_MODE', False)

# ═══════════════════════════════════════════════════════════════════════════════
# SESIONES
# ═══════════════════════════════════════════════════════════════════════════════
_DEFAULT_SECRET = "ezelectronics_dev_secret_key_change_in_production"
SECRET_KEY = os.environ.get("EZ_SECRET_KEY") or _DEFAULT_SECRET
SECRET_KEY_FROM_ENV = bool(os.environ.get("EZ_SECRET_KEY"))

SESSION_CONFIG = {
    'SESSION_COOKIE_HTTPONLY': True,       # Protege contra XSS
    'SESSION_COOKIE_SECURE': PRODUCTION_MODE,
    'SESSION_COOKIE_SAMESITE': 'Lax',
    'PERMANENT_SESSION_LIFETIME': 86400,   # 24 horas
}

# ═══════════════════════════════════════════════════════════════════════════════
# DATOS
# ═══════════════════════════════════════════════════════════════════════════════
# Carpeta donde viven users.json, products.json y audit.json
DATA_DIR = os.environ.get('EZ_DATA_DIR') or os.path.join(BASE, 'data')

# ═══════════════════════════════════════════════════════════════════════════════
# PROFILING
# ═══════════════════════════════════════════════════════════════════════════════
ENABLE_PROFILING = _env_flag('EZ_ENABLE_PROFILING', True)
LOGS_DIR = os.environ.get('EZ_LOGS_DIR') or os.path.join(BASE, 'logs')

# Umbrales de tiempo (en milisegundos)
THRESHOLD_WARNING = int(os.environ.get('EZ_THRESHOLD_WARNING', 300))
THRESHOLD_CRITICAL = int(os.environ.get('EZ_THRESHOLD_CRITICAL', 700))

# Prefijo de todas las rutas de la API
API_PREFIX = '/ezelectronics'
