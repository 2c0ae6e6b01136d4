import math

from flask import Flask, request, session, jsonify, g
from functools import wraps

from ezelectronics import config

# Sistema de profiling interno
from ezelectronics.performance_logger import init_profiling

# ═══════════════════════════════════════════════════════════════════════════
# CONTENEDOR DE DEPENDENCIAS - Servicios y Repositorios
# ═══════════════════════════════════════════════════════════════════════════
# Las rutas NO contienen reglas de negocio: validan la forma de la petición
# (campos obligatorios, enums, formato de fecha) y delegan en los servicios.
# Los errores del dominio se traducen a JSON en un único errorhandler.
# ═══════════════════════════════════════════════════════════════════════════
from ezelectronics.app_container import get_container
from ezelectronics.errors import DomainError
from ezelectronics.models import Category, User, UserRole, parse_date
from ezelectronics.services import Operation, check_permission
from ezelectronics.services.inventory_rules import resolve_grouping

app = Flask(__name__)

# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN DE SESIONES
# ═══════════════════════════════════════════════════════════════════════════
if config.PRODUCTION_MODE and not config.SECRET_KEY_FROM_ENV:
    print("[ADVERTENCIA] EZ_PRODUCTION_MODE activo sin EZ_SECRET_KEY definida")
    print("[ADVERTENCIA] Define la variable de entorno para mayor seguridad")

app.secret_key = config.SECRET_KEY
app.config.update(**config.SESSION_CONFIG)

# ═══════════════════════════════════════════════════════════════════════════
# INICIALIZAR SISTEMA DE PROFILING
# ═══════════════════════════════════════════════════════════════════════════
# Mide rendimiento de rutas y funciones. Logs en config.LOGS_DIR
# Para desactivar: EZ_ENABLE_PROFILING=0
init_profiling(app)

API = config.API_PREFIX


# ═══════════════════════════════════════════════════════════════════════════
# ERRORES
# ═══════════════════════════════════════════════════════════════════════════

class RequestShapeError(DomainError):
    """La petición no tiene la forma esperada (campos, tipos, formatos)."""
    status_code = 422
    default_message = 'Petición inválida'


@app.errorhandler(DomainError)
def handle_domain_error(e):
    return {"error": e.message}, e.status_code


@app.errorhandler(500)
def handle_internal_error(e):
    original = getattr(e, "original_exception", None) or e
    print(f"[ERROR API] {type(original).__name__}: {original}")
    return {"error": "Error interno"}, 500


# ═══════════════════════════════════════════════════════════════════════════
# AUTENTICACIÓN
# ═══════════════════════════════════════════════════════════════════════════

def current_user():
    """
    Usuario de la sesión actual, reconstruido desde el repositorio.

    Si la cuenta fue eliminada después del login, la sesión se descarta.
    """
    if "actor" in g:
        return g.actor

    username = session.get("user")
    actor = None
    if username:
        data = get_container().user_repo.get_user(username)
        if data is None:
            session.clear()
        else:
            actor = User.from_dict(username, data)
    g.actor = actor
    return actor


def login_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            return {"error": "Debes iniciar sesión"}, 401
        return f(*args, **kwargs)
    return wrapper


def products_manager_required(f):
    """Solo Admin o Manager."""
    @wraps(f)
    @login_required
    def wrapper(*args, **kwargs):
        check_permission(current_user(), Operation.MANAGE_PRODUCTS)
        return f(*args, **kwargs)
    return wrapper


# ═══════════════════════════════════════════════════════════════════════════
# VALIDACIÓN DE FORMA
# ═══════════════════════════════════════════════════════════════════════════

def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise RequestShapeError("Se esperaba un objeto JSON")
    return data


def _require_str(data, field):
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise RequestShapeError(f"El campo '{field}' es obligatorio")
    return value


def _optional_str(data, field):
    value = data.get(field)
    if value is not None and not isinstance(value, str):
        raise RequestShapeError(f"El campo '{field}' debe ser texto")
    return value


def _require_positive_int(data, field):
    value = data.get(field)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise RequestShapeError(f"El campo '{field}' debe ser un entero mayor que 0")
    return value


def _require_positive_number(data, field):
    """Número finito mayor que 0 (el JSON de entrada puede traer NaN o Infinity)."""
    value = data.get(field)
    if (isinstance(value, bool) or not isinstance(value, (int, float))
            or not math.isfinite(value) or value <= 0):
        raise RequestShapeError(f"El campo '{field}' debe ser un número finito mayor que 0")
    return value


def _optional_date(data, field):
    """Fecha opcional en formato YYYY-MM-DD."""
    try:
        return parse_date(data.get(field))
    except (TypeError, ValueError):
        raise RequestShapeError(f"El campo '{field}' debe tener formato YYYY-MM-DD")


def _require_enum(value, enum_cls, field):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(item.value for item in enum_cls)
        raise RequestShapeError(f"El campo '{field}' debe ser uno de: {allowed}")


def _grouping_args():
    """Lee grouping/category/model de la query y valida la combinación."""
    grouping = request.args.get("grouping") or None
    category = request.args.get("category") or None
    model = request.args.get("model") or None
    try:
        resolve_grouping(grouping, category, model)
    except ValueError as e:
        raise RequestShapeError(str(e))
    return grouping, category, model


# ═══════════════════════════════════════════════════════════════════════════
# SESIONES
# ═══════════════════════════════════════════════════════════════════════════

@app.route(f"{API}/sessions", methods=["POST"])
def login():
    data = _json_body()
    username = _require_str(data, "username")
    password = _require_str(data, "password")

    user = get_container().user_service.authenticate(username, password)
    if user is None:
        return {"error": "Usuario o contraseña incorrecta"}, 401

    session.clear()
    session.permanent = True  # Usa PERMANENT_SESSION_LIFETIME
    session["user"] = user.username
    session["role"] = user.role.value
    return user.to_dict(), 200


@app.route(f"{API}/sessions/current", methods=["GET"])
@login_required
def get_current_session():
    return current_user().to_dict(), 200


@app.route(f"{API}/sessions/current", methods=["DELETE"])
@login_required
def logout():
    user = current_user()
    session.clear()
    get_container().user_service.logout(user.username)
    return {}, 200


# ═══════════════════════════════════════════════════════════════════════════
# USUARIOS
# ═══════════════════════════════════════════════════════════════════════════

@app.route(f"{API}/users", methods=["POST"])
def create_user():
    """Registro público de usuarios."""
    data = _json_body()
    username = _require_str(data, "username")
    name = _require_str(data, "name")
    surname = _require_str(data, "surname")
    password = _require_str(data, "password")
    role = _require_enum(data.get("role"), UserRole, "role")

    get_container().user_service.create_user(username, name, surname, password, role)
    return {}, 200


@app.route(f"{API}/users", methods=["GET"])
@login_required
def list_users():
    users = get_container().user_service.get_users(current_user())
    return jsonify([u.to_dict() for u in users])


@app.route(f"{API}/users/roles/<role>", methods=["GET"])
@login_required
def list_users_by_role(role):
    role = _require_enum(role, UserRole, "role")
    users = get_container().user_service.get_users_by_role(current_user(), role)
    return jsonify([u.to_dict() for u in users])


@app.route(f"{API}/users/<username>", methods=["GET"])
@login_required
def get_user(username):
    user = get_container().user_service.get_user_by_username(current_user(), username)
    return user.to_dict(), 200


@app.route(f"{API}/users/<username>", methods=["PATCH"])
@login_required
def update_user(username):
    data = _json_body()
    name = _require_str(data, "name")
    surname = _require_str(data, "surname")
    address = _require_str(data, "address")
    birthdate = _optional_date(data, "birthdate")

    user = get_container().user_service.update_user_info(
        current_user(), name, surname, address, birthdate, username
    )
    return user.to_dict(), 200


@app.route(f"{API}/users/<username>", methods=["DELETE"])
@login_required
def delete_user(username):
    get_container().user_service.delete_user(current_user(), username)
    return {}, 200


@app.route(f"{API}/users", methods=["DELETE"])
@login_required
def delete_all_users():
    get_container().user_service.delete_all_users(current_user())
    return {}, 200


# ═══════════════════════════════════════════════════════════════════════════
# PRODUCTOS
# ═══════════════════════════════════════════════════════════════════════════

@app.route(f"{API}/products", methods=["POST"])
@products_manager_required
def register_product():
    data = _json_body()
    model = _require_str(data, "model")
    category = _require_enum(data.get("category"), Category, "category")
    quantity = _require_positive_int(data, "quantity")
    details = _optional_str(data, "details")
    selling_price = _require_positive_number(data, "sellingPrice")
    arrival_date = _optional_date(data, "arrivalDate")

    product = get_container().product_service.register_products(
        model, category, quantity, details, selling_price, arrival_date,
        user=current_user().username
    )
    return product.to_dict(), 200


@app.route(f"{API}/products/<model>", methods=["PATCH"])
@products_manager_required
def change_product_quantity(model):
    data = _json_body()
    quantity = _require_positive_int(data, "quantity")
    change_date = _optional_date(data, "changeDate")

    new_quantity = get_container().product_service.change_product_quantity(
        model, quantity, change_date, user=current_user().username
    )
    return {"quantity": new_quantity}, 200


@app.route(f"{API}/products/<model>/sell", methods=["PATCH"])
@products_manager_required
def sell_product(model):
    data = _json_body()
    quantity = _require_positive_int(data, "quantity")
    selling_date = _optional_date(data, "sellingDate")

    new_quantity = get_container().product_service.sell_product(
        model, quantity, selling_date, user=current_user().username
    )
    return {"quantity": new_quantity}, 200


@app.route(f"{API}/products", methods=["GET"])
@products_manager_required
def list_products():
    grouping, category, model = _grouping_args()
    products = get_container().product_service.get_products(grouping, category, model)
    return jsonify([p.to_dict() for p in products])


@app.route(f"{API}/products/available", methods=["GET"])
@login_required
def list_available_products():
    check_permission(current_user(), Operation.VIEW_AVAILABLE_PRODUCTS)
    grouping, category, model = _grouping_args()
    products = get_container().product_service.get_available_products(grouping, category, model)
    return jsonify([p.to_dict() for p in products])


@app.route(f"{API}/products", methods=["DELETE"])
@products_manager_required
def delete_all_products():
    get_container().product_service.delete_all_products(user=current_user().username)
    return {}, 200


@app.route(f"{API}/products/<model>", methods=["DELETE"])
@products_manager_required
def delete_product(model):
    get_container().product_service.delete_product(model, user=current_user().username)
    return {}, 200


# ═══════════════════════════════════════════════════════════════════════════
# CARRITOS
# ═══════════════════════════════════════════════════════════════════════════

@app.route(f"{API}/carts", methods=["GET"])
@login_required
def get_cart():
    cart = get_container().cart_service.get_cart(current_user())
    return cart.to_dict(), 200


@app.route(f"{API}/carts", methods=["POST"])
@login_required
def add_to_cart():
    data = _json_body()
    model = _require_str(data, "model")
    get_container().cart_service.add_to_cart(current_user(), model)
    return {}, 200


@app.route(f"{API}/carts", methods=["PATCH"])
@login_required
def checkout_cart():
    get_container().cart_service.checkout_cart(current_user())
    return {}, 200


@app.route(f"{API}/carts/history", methods=["GET"])
@login_required
def get_cart_history():
    carts = get_container().cart_service.get_customer_carts(current_user())
    return jsonify([c.to_dict() for c in carts])


@app.route(f"{API}/carts/products/<model>", methods=["DELETE"])
@login_required
def remove_product_from_cart(model):
    get_container().cart_service.remove_product_from_cart(current_user(), model)
    return {}, 200


@app.route(f"{API}/carts/current", methods=["DELETE"])
@login_required
def clear_cart():
    get_container().cart_service.clear_cart(current_user())
    return {}, 200


@app.route(f"{API}/carts", methods=["DELETE"])
@login_required
def delete_all_carts():
    get_container().cart_service.delete_all_carts(current_user())
    return {}, 200


@app.route(f"{API}/carts/all", methods=["GET"])
@login_required
def get_all_carts():
    carts = get_container().cart_service.get_all_carts(current_user())
    return jsonify([c.to_dict() for c in carts])


# ═══════════════════════════════════════════════════════════════════════════
# RESEÑAS
# ═══════════════════════════════════════════════════════════════════════════

@app.route(f"{API}/reviews/<model>", methods=["POST"])
@login_required
def add_review(model):
    data = _json_body()
    comment = _require_str(data, "comment")

    # La puntuación (entero 1-5) la valida el servicio → 422
    get_container().review_service.add_review(current_user(), model, data.get("score"), comment)
    return {}, 200


@app.route(f"{API}/reviews/<model>", methods=["GET"])
@login_required
def get_product_reviews(model):
    reviews = get_container().review_service.get_product_reviews(current_user(), model)
    return jsonify([r.to_dict() for r in reviews])


@app.route(f"{API}/reviews/<model>", methods=["DELETE"])
@login_required
def delete_review(model):
    get_container().review_service.delete_review(current_user(), model)
    return {}, 200


@app.route(f"{API}/reviews/<model>/all", methods=["DELETE"])
@login_required
def delete_reviews_of_product(model):
    get_container().review_service.delete_reviews_of_product(current_user(), model)
    return {}, 200


@app.route(f"{API}/reviews", methods=["DELETE"])
@login_required
def delete_all_reviews():
    get_container().review_service.delete_all_reviews(current_user())
    return {}, 200


if __name__ == "__main__":
    import os
    # Desarrollo local; en producción usar WSGI (gunicorn, waitress, etc.)
    DEBUG = os.environ.get('FLASK_DEBUG', '0') == '1'
    HOST = os.environ.get('FLASK_HOST', '127.0.0.1')
    PORT = int(os.environ.get('FLASK_PORT', 5000))

    if not DEBUG:
        print(f"\n{'='*50}")
        print(f"  Servidor iniciado en http://{HOST}:{PORT}{API}")
        print(f"{'='*50}\n")

    app.run(host=HOST, port=PORT, debug=DEBUG)
