# ==============================================================================
# SISTEMA DE PROFILING INTERNO
# ==============================================================================
# Mide el tiempo de cada ruta de la API y de las funciones marcadas con
# @profile_function. Guarda logs legibles en LOGS_DIR:
#
#   performance.log     → todas las peticiones
#   slow_routes.log     → peticiones que superan los umbrales
#   slow_functions.log  → llamadas lentas a funciones perfiladas
#
# ACTIVAR/DESACTIVAR: variable de entorno EZ_ENABLE_PROFILING
# ==============================================================================

import os
import threading
import time
from collections import defaultdict
from datetime import datetime
from functools import wraps

from ezelectronics import config

ENABLE_PROFILING = config.ENABLE_PROFILING
THRESHOLD_WARNING = config.THRESHOLD_WARNING
THRESHOLD_CRITICAL = config.THRESHOLD_CRITICAL

PERFORMANCE_LOG = 'performance.log'
SLOW_ROUTES_LOG = 'slow_routes.log'
SLOW_FUNCTIONS_LOG = 'slow_functions.log'

# Nombres legibles de las rutas (para logs más humanos)
ROUTE_NAMES = {
    # Sesiones
    'POST /ezelectronics/sessions': 'Iniciar sesión',
    'DELETE /ezelectronics/sessions/current': 'Cerrar sesión',
    'GET /ezelectronics/sessions/current': 'Ver sesión actual',

    # Usuarios
    'POST /ezelectronics/users': 'Registrar usuario',
    'GET /ezelectronics/users': 'Listar usuarios',
    'GET /ezelectronics/users/roles/<role>': 'Listar usuarios por rol',
    'GET /ezelectronics/users/<username>': 'Ver usuario',
    'PATCH /ezelectronics/users/<username>': 'Actualizar usuario',
    'DELETE /ezelectronics/users/<username>': 'Eliminar usuario',
    'DELETE /ezelectronics/users': 'Eliminar usuarios no-Admin',

    # Productos
    'POST /ezelectronics/products': 'Registrar producto',
    'PATCH /ezelectronics/products/<model>': 'Registrar llegada',
    'PATCH /ezelectronics/products/<model>/sell': 'Vender producto',
    'GET /ezelectronics/products': 'Listar productos',
    'GET /ezelectronics/products/available': 'Listar productos disponibles',
    'DELETE /ezelectronics/products': 'Eliminar inventario',
    'DELETE /ezelectronics/products/<model>': 'Eliminar producto',

    # Carritos
    'GET /ezelectronics/carts': 'Ver carrito',
    'POST /ezelectronics/carts': 'Agregar al carrito',
    'PATCH /ezelectronics/carts': 'Pagar carrito',
    'GET /ezelectronics/carts/history': 'Historial de carritos',
    'DELETE /ezelectronics/carts/products/<model>': 'Quitar del carrito',
    'DELETE /ezelectronics/carts/current': 'Vaciar carrito',
    'DELETE /ezelectronics/carts': 'Eliminar carritos',
    'GET /ezelectronics/carts/all': 'Listar carritos',

    # Reseñas
    'POST /ezelectronics/reviews/<model>': 'Agregar reseña',
    'GET /ezelectronics/reviews/<model>': 'Ver reseñas',
    'DELETE /ezelectronics/reviews/<model>': 'Eliminar reseña',
    'DELETE /ezelectronics/reviews/<model>/all': 'Eliminar reseñas del producto',
    'DELETE /ezelectronics/reviews': 'Eliminar reseñas',
}


# ═══════════════════════════════════════════════════════════════════════════
# ESTADÍSTICAS DE FUNCIONES (en memoria)
# ═══════════════════════════════════════════════════════════════════════════

# Estructura: {nombre_funcion: {calls: int, total_time: float, max_time: float}}
_function_stats = defaultdict(lambda: {'calls': 0, 'total_time': 0.0, 'max_time': 0.0})
_stats_lock = threading.Lock()
_write_lock = threading.Lock()


# ═══════════════════════════════════════════════════════════════════════════
# ESCRITURA DE LOGS
# ═══════════════════════════════════════════════════════════════════════════

def _get_timestamp():
    """Obtiene timestamp legible"""
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def _log_path(filename):
    return os.path.join(config.LOGS_DIR, filename)


def _write_log(filename, content):
    """Agrega contenido a un archivo de log (thread-safe)."""
    try:
        with _write_lock:
            os.makedirs(config.LOGS_DIR, exist_ok=True)
            with open(_log_path(filename), 'a', encoding='utf-8') as f:
                f.write(content)
    except OSError as e:
        # Un disco lleno no debe tumbar la petición
        print(f"[ADVERTENCIA] No se pudo escribir {filename}: {e}")


def _get_route_name(method, path, rule=None):
    """
    Obtiene nombre legible para una ruta.
    Usa la regla de Flask (con parámetros) si está disponible.
    """
    for candidate in (path, rule):
        if candidate and f"{method} {candidate}" in ROUTE_NAMES:
            return ROUTE_NAMES[f"{method} {candidate}"]
    return f"{method} {path}"


# ═══════════════════════════════════════════════════════════════════════════
# 1️⃣ PROFILING DE RUTAS
# ═══════════════════════════════════════════════════════════════════════════

def log_route_performance(method, path, rule, time_ms, status=None, user=None):
    """
    Registra el rendimiento de una ruta en performance.log

    Args:
        method: GET, POST, etc.
        path: Ruta solicitada (/ezelectronics/products/X1/sell)
        rule: Regla de Flask (/ezelectronics/products/<model>/sell)
        time_ms: Tiempo en milisegundos
        status: Código HTTP de la respuesta
        user: Usuario que hizo la petición (opcional)
    """
    action_name = _get_route_name(method, path, rule)
    log_entry = f"""
════════════════════════════════════════
[PERFORMANCE] {_get_timestamp()}
────────────────────────────────────────
Acción: {action_name}
Usuario: {user or 'anónimo'}
Ruta: {method} {path}
Estado: {status}
Tiempo: {time_ms:.0f} ms
"""
    _write_log(PERFORMANCE_LOG, log_entry)


def log_slow_route(method, path, rule, time_ms, user=None, level='WARNING'):
    """
    Registra una ruta lenta en slow_routes.log

    Args:
        level: 'WARNING' (>= THRESHOLD_WARNING) o 'CRITICAL' (>= THRESHOLD_CRITICAL)
    """
    action_name = _get_route_name(method, path, rule)
    severity = 'LENTA' if level == 'WARNING' else 'MUY LENTA'
    threshold = THRESHOLD_WARNING if level == 'WARNING' else THRESHOLD_CRITICAL

    log_entry = f"""
[{level}] {_get_timestamp()}
────────────────────────────────────────
Ruta {severity}: {action_name}
Usuario: {user or 'anónimo'}
Detalle: {method} {path}
Tiempo: {time_ms:.0f} ms (umbral: {threshold} ms)
────────────────────────────────────────
"""
    _write_log(SLOW_ROUTES_LOG, log_entry)


def init_profiling(app):
    """
    Registra hooks before_request/after_request en una app Flask.

    Uso:
        from ezelectronics.performance_logger import init_profiling
        init_profiling(app)
    """
    if not ENABLE_PROFILING:
        return

    from flask import g, request, session

    @app.before_request
    def _start_timer():
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        if not hasattr(g, 'start_time'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000  # ms
        method = request.method
        path = request.path
        rule = str(request.url_rule) if request.url_rule else path
        user = session.get('user')

        log_route_performance(method, path, rule, elapsed, response.status_code, user)

        if elapsed >= THRESHOLD_CRITICAL:
            log_slow_route(method, path, rule, elapsed, user, 'CRITICAL')
        elif elapsed >= THRESHOLD_WARNING:
            log_slow_route(method, path, rule, elapsed, user, 'WARNING')

        return response


# ═══════════════════════════════════════════════════════════════════════════
# 2️⃣ DECORADOR PARA FUNCIONES CLAVE
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name=None):
    """
    Decorador para medir rendimiento de funciones críticas.

    Uso:
        @profile_function
        def mi_funcion():
            ...

        @profile_function(name="Vender producto")
        def sell_product():
            ...

    Registra cantidad de llamadas, tiempo promedio y tiempo máximo.
    Las excepciones de la función se propagan sin cambios.
    """
    def decorator(fn):
        if not ENABLE_PROFILING:
            return fn

        func_name = name or fn.__name__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000

                with _stats_lock:
                    stats = _function_stats[func_name]
                    stats['calls'] += 1
                    stats['total_time'] += elapsed_ms
                    if elapsed_ms > stats['max_time']:
                        stats['max_time'] = elapsed_ms

                if elapsed_ms >= THRESHOLD_WARNING:
                    _log_slow_function_call(func_name, elapsed_ms)

        return wrapper

    # Permitir uso sin paréntesis: @profile_function
    if func is not None:
        return decorator(func)
    return decorator


def _log_slow_function_call(func_name, time_ms):
    """Registra una llamada lenta a una función"""
    severity = 'CRÍTICO' if time_ms >= THRESHOLD_CRITICAL else 'LENTO'
    log_entry = f"""
[{severity}] {_get_timestamp()}
Función: {func_name}
Tiempo: {time_ms:.0f} ms
────────────────────────────────────────
"""
    _write_log(SLOW_FUNCTIONS_LOG, log_entry)


# ═══════════════════════════════════════════════════════════════════════════
# 3️⃣ REPORTES
# ═══════════════════════════════════════════════════════════════════════════

def get_function_stats():
    """
    Obtiene estadísticas de todas las funciones perfiladas.

    Returns:
        dict: {nombre: {calls, avg_time, max_time}}
    """
    with _stats_lock:
        result = {}
        for func_name, stats in _function_stats.items():
            calls = stats['calls']
            avg = stats['total_time'] / calls if calls > 0 else 0
            result[func_name] = {
                'calls': calls,
                'avg_time': round(avg, 2),
                'max_time': round(stats['max_time'], 2)
            }
        return result


def reset_stats():
    """Reinicia todas las estadísticas (útil para testing)"""
    with _stats_lock:
        _function_stats.clear()


__all__ = [
    'ENABLE_PROFILING',
    'init_profiling',
    'profile_function',
    'get_function_stats',
    'reset_stats',
]
