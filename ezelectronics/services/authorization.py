# ==============================================================================
# POLÍTICA DE AUTORIZACIÓN
# ==============================================================================
# Decide, para un actor autenticado y un objetivo, si la operación está
# permitida. Funciones puras: no leen repositorios ni tienen efectos.
#
# JERARQUÍA DE ROLES:
#   Admin > {Manager, Customer}
#   Manager y Customer son hermanos: ninguno administra al otro.
#
# REGLAS:
# - Ver perfil:        Admin ve a cualquiera; el resto solo a sí mismo
# - Actualizar perfil: uno mismo, o Admin (un Admin SÍ puede editar a otro Admin)
# - Eliminar usuario:  no-Admin solo a sí mismo; Admin a cualquiera que
#                      NO sea Admin (tampoco a sí mismo)
# - Listar / eliminar todos los usuarios: solo Admin
# - Gestionar productos: Admin o Manager
# - Usar el carrito y escribir reseñas: solo Customer
# - Ver / vaciar todos los carritos, borrar reseñas ajenas: Admin o Manager
# - Leer reseñas: cualquier usuario autenticado
# ==============================================================================

from enum import Enum
from typing import Callable, Dict, Optional

from ezelectronics.errors import (
    DomainError,
    UnauthorizedUserError,
    UserIsAdminError,
    UserNotAdminError,
)
from ezelectronics.models import User, UserRole


class Operation(str, Enum):
    """Operaciones sujetas a la política de autorización."""
    VIEW_PROFILE = 'view_profile'
    UPDATE_PROFILE = 'update_profile'
    DELETE_USER = 'delete_user'
    LIST_USERS = 'list_users'
    DELETE_ALL_USERS = 'delete_all_users'
    MANAGE_PRODUCTS = 'manage_products'
    VIEW_AVAILABLE_PRODUCTS = 'view_available_products'
    USE_CART = 'use_cart'
    MANAGE_CARTS = 'manage_carts'
    WRITE_REVIEW = 'write_review'
    VIEW_REVIEWS = 'view_reviews'
    MANAGE_REVIEWS = 'manage_reviews'


def _is_self(actor: User, target_username: Optional[str]) -> bool:
    return target_username is not None and actor.username == target_username


def _check_view_profile(actor: User, target_username: str, target: Optional[User]) -> None:
    if actor.is_admin() or _is_self(actor, target_username):
        return
    raise UnauthorizedUserError('No tienes permiso para ver este usuario')


def _check_update_profile(actor: User, target_username: str, target: Optional[User]) -> None:
    if actor.is_admin() or _is_self(actor, target_username):
        return
    raise UserNotAdminError('Solo un Admin puede modificar a otro usuario')


def _check_delete_user(actor: User, target_username: str, target: Optional[User]) -> None:
    """
    Regla de eliminación en dos fases.

    Sin `target` (antes de consultar el repositorio) se validan las reglas
    que dependen solo del actor. Con `target` se valida además el rol
    del usuario a eliminar.
    """
    if not actor.is_admin():
        if not _is_self(actor, target_username):
            raise UserNotAdminError('Solo un Admin puede eliminar a otro usuario')
        return

    if _is_self(actor, target_username):
        raise UserIsAdminError('Un Admin no puede eliminar su propia cuenta')

    if target is not None and target.role == UserRole.ADMIN:
        raise UserIsAdminError(f'El usuario "{target.username}" es Admin y no puede ser eliminado')


def _check_admin_only(actor: User, target_username: Optional[str], target: Optional[User]) -> None:
    if not actor.is_admin():
        raise UserNotAdminError('Operación reservada a administradores')


def _check_admin_or_manager(actor: User, target_username: Optional[str], target: Optional[User]) -> None:
    if actor.is_admin() or actor.is_manager():
        return
    raise UnauthorizedUserError('Operación reservada a Admin o Manager')


def _check_customer(actor: User, target_username: Optional[str], target: Optional[User]) -> None:
    if actor.role != UserRole.CUSTOMER:
        raise UnauthorizedUserError('Operación reservada a clientes')


def _check_authenticated(actor: User, target_username: Optional[str], target: Optional[User]) -> None:
    # Cualquier usuario autenticado; el actor ya viene verificado
    return


_RULES: Dict[Operation, Callable[[User, Optional[str], Optional[User]], None]] = {
    Operation.VIEW_PROFILE: _check_view_profile,
    Operation.UPDATE_PROFILE: _check_update_profile,
    Operation.DELETE_USER: _check_delete_user,
    Operation.LIST_USERS: _check_admin_only,
    Operation.DELETE_ALL_USERS: _check_admin_only,
    Operation.MANAGE_PRODUCTS: _check_admin_or_manager,
    Operation.VIEW_AVAILABLE_PRODUCTS: _check_authenticated,
    Operation.USE_CART: _check_customer,
    Operation.MANAGE_CARTS: _check_admin_or_manager,
    Operation.WRITE_REVIEW: _check_customer,
    Operation.VIEW_REVIEWS: _check_authenticated,
    Operation.MANAGE_REVIEWS: _check_admin_or_manager,
}


def check_permission(
    actor: User,
    operation: Operation,
    target_username: Optional[str] = None,
    target: Optional[User] = None
) -> None:
    """
    Valida que `actor` pueda ejecutar `operation` sobre el objetivo.

    Args:
        actor: Usuario autenticado que ejecuta la acción
        operation: Operación solicitada
        target_username: Username del usuario objetivo (si aplica)
        target: Snapshot del usuario objetivo, si ya fue consultado

    Raises:
        UnauthorizedUserError, UserNotAdminError, UserIsAdminError
    """
    _RULES[Operation(operation)](actor, target_username, target)


def can_act_on(
    actor: User,
    operation: Operation,
    target_username: Optional[str] = None,
    target: Optional[User] = None
) -> bool:
    """Versión booleana de `check_permission`."""
    try:
        check_permission(actor, operation, target_username, target)
    except DomainError:
        return False
    return True
