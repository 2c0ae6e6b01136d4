# ==============================================================================
# SERVICIO DE USUARIOS
# ==============================================================================
# Centraliza toda la lógica de negocio relacionada con usuarios.
#
# PREPARADO PARA SQL:
# - Este servicio NO depende del tipo de almacenamiento (JSON/SQL)
# - Solo interactúa con repositorios a través de interfaces claras
# - Toda la lógica de permisos está en authorization.py, NO en rutas
#
# GARANTÍA: si una validación falla, NO se llama a ningún método que
# modifique el repositorio.
# ==============================================================================

from datetime import date
from typing import Callable, List, Optional, Union

from werkzeug.security import check_password_hash, generate_password_hash

from ezelectronics.errors import (
    DateError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from ezelectronics.models import User, UserRole, format_date
from ezelectronics.repositories.interfaces import IUserRepository
from ezelectronics.services.audit_service import AuditService
from ezelectronics.services.authorization import Operation, check_permission


class UserService:
    """
    Servicio para gestión de usuarios.

    Responsabilidades:
    - Verificación de credenciales (login)
    - Registro, consulta, actualización y eliminación de usuarios
    - Aplicar la política de autorización antes de tocar el repositorio
    """

    def __init__(
        self,
        user_repo: IUserRepository,
        audit_service: AuditService = None,
        clock: Callable[[], date] = date.today
    ):
        """
        Args:
            user_repo: Repositorio de usuarios (JSON ahora, SQL después)
            audit_service: Servicio de auditoría (opcional)
            clock: Función que retorna la fecha de hoy
        """
        self.user_repo = user_repo
        self.audit_service = audit_service
        self.clock = clock

    def _to_user(self, username: str, data: dict) -> User:
        return User.from_dict(username, data)

    # =========================================================================
    # AUTENTICACIÓN
    # =========================================================================

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """
        Verifica credenciales.

        Returns:
            El usuario autenticado, o None si las credenciales no son válidas
        """
        password_hash = self.user_repo.get_password_hash(username)
        if not password_hash or not check_password_hash(password_hash, password):
            return None
        data = self.user_repo.get_user(username)
        if data is None:
            return None

        if self.audit_service:
            self.audit_service.log_user_login(username)
        return self._to_user(username, data)

    def logout(self, username: str) -> None:
        if self.audit_service:
            self.audit_service.log_user_logout(username)

    # =========================================================================
    # REGISTRO
    # =========================================================================

    def create_user(
        self,
        username: str,
        name: str,
        surname: str,
        password: str,
        role: Union[UserRole, str]
    ) -> bool:
        """
        Registra un nuevo usuario.

        Returns:
            True si se creó

        Raises:
            UserAlreadyExistsError: Si el username ya está en uso
            ValueError: Si el rol no es válido
        """
        role = UserRole(role)

        if self.user_repo.user_exists(username):
            raise UserAlreadyExistsError(f'El usuario "{username}" ya existe')

        data = {
            'name': name,
            'surname': surname,
            'role': role.value,
            'address': '',
            'birthdate': '',
        }
        # Una inserción concurrente puede ganar entre la consulta y el insert
        if not self.user_repo.create_user(username, generate_password_hash(password), data):
            raise UserAlreadyExistsError(f'El usuario "{username}" ya existe')

        if self.audit_service:
            self.audit_service.log_user_created(username, role.value)
        return True

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get_users(self, actor: User) -> List[User]:
        """Lista todos los usuarios (solo Admin)."""
        check_permission(actor, Operation.LIST_USERS)
        return [self._to_user(u, d) for u, d in self.user_repo.load().items()]

    def get_users_by_role(self, actor: User, role: Union[UserRole, str]) -> List[User]:
        """Lista los usuarios de un rol (solo Admin)."""
        check_permission(actor, Operation.LIST_USERS)
        role = UserRole(role)
        return [
            self._to_user(u, d)
            for u, d in self.user_repo.get_users_by_role(role.value).items()
        ]

    def get_user_by_username(self, actor: User, username: str) -> User:
        """
        Obtiene un usuario.

        Un usuario consultándose a sí mismo recibe su propio registro sin
        consultar el repositorio.

        Raises:
            UnauthorizedUserError: Si un no-Admin consulta a otro usuario
            UserNotFoundError: Si el usuario no existe
        """
        check_permission(actor, Operation.VIEW_PROFILE, username)
        if actor.username == username:
            return actor

        data = self.user_repo.get_user(username)
        if data is None:
            raise UserNotFoundError(f'El usuario "{username}" no existe')
        return self._to_user(username, data)

    # =========================================================================
    # MODIFICACIONES
    # =========================================================================

    def update_user_info(
        self,
        actor: User,
        name: str,
        surname: str,
        address: str,
        birthdate: Optional[date],
        username: str
    ) -> User:
        """
        Actualiza el perfil (nombre, apellido, dirección, nacimiento).

        Raises:
            UserNotAdminError: Si un no-Admin intenta modificar a otro usuario
            DateError: Si la fecha de nacimiento es posterior a hoy
            UserNotFoundError: Si el usuario no existe
        """
        check_permission(actor, Operation.UPDATE_PROFILE, username)

        if birthdate is not None and birthdate > self.clock():
            raise DateError('La fecha de nacimiento no puede ser posterior a hoy')

        updates = {
            'name': name,
            'surname': surname,
            'address': address,
            'birthdate': format_date(birthdate) or '',
        }
        if not self.user_repo.update_user(username, updates):
            raise UserNotFoundError(f'El usuario "{username}" no existe')

        if self.audit_service:
            self.audit_service.log_user_updated(actor.username, username, updates)

        return self._to_user(username, self.user_repo.get_user(username))

    def delete_user(self, actor: User, username: str) -> bool:
        """
        Elimina un usuario.

        VALIDACIONES (en este orden):
        1. Un no-Admin solo puede eliminarse a sí mismo
        2. Un Admin no puede eliminarse a sí mismo
        3. El usuario debe existir
        4. Un Admin no puede eliminar a otro Admin

        Returns:
            True si se eliminó
        """
        check_permission(actor, Operation.DELETE_USER, username)

        data = self.user_repo.get_user(username)
        if data is None:
            raise UserNotFoundError(f'El usuario "{username}" no existe')
        target = self._to_user(username, data)

        check_permission(actor, Operation.DELETE_USER, username, target)

        if not self.user_repo.delete_user(username):
            raise UserNotFoundError(f'El usuario "{username}" no existe')

        if self.audit_service:
            self.audit_service.log_user_deleted(actor.username, username, target.role.value)
        return True

    def delete_all_users(self, actor: User) -> bool:
        """
        Elimina todos los usuarios que no son Admin (solo Admin).

        Returns:
            True si la operación se completó
        """
        check_permission(actor, Operation.DELETE_ALL_USERS)
        removed = self.user_repo.delete_all(keep_roles=[UserRole.ADMIN.value])

        if self.audit_service:
            self.audit_service.log_users_cleared(actor.username, removed)
        return True
