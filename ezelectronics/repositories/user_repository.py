# ==============================================================================
# REPOSITORIO DE USUARIOS
# ==============================================================================
# Encapsula todo el acceso a users.json
# Los usuarios se almacenan como diccionario: {username: {datos}}
# ==============================================================================

import os
from typing import Any, Dict, Iterable, Optional

from ezelectronics.repositories.base import DictRepository


class UserRepository(DictRepository):
    """
    Repositorio para gestión de usuarios.

    Formato de datos en users.json:
    {
        "admin": {
            "password": "scrypt:...",
            "name": "Ada", "surname": "Lovelace",
            "role": "Admin", "address": "", "birthdate": ""
        }
    }

    El username es único sin distinguir mayúsculas: no pueden convivir
    "alice" y "Alice". Las búsquedas usan el username exacto.
    """

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Carpeta donde vive users.json
        """
        super().__init__(os.path.join(base_path, 'users.json'))

    def load(self) -> Dict[str, Dict[str, Any]]:
        """Carga todos los usuarios {username: datos}."""
        return self.get_all()

    def get_user(self, username: str) -> Optional[Dict[str, Any]]:
        """
        Obtiene un usuario por su nombre.

        Returns:
            Datos del usuario (incluye el hash) o None
        """
        return self.get_by_id(username)

    def user_exists(self, username: str) -> bool:
        """Verifica si existe un usuario (sin distinguir mayúsculas)."""
        wanted = username.lower()
        return any(name.lower() == wanted for name in self.load())

    def create_user(self, username: str, password_hash: str, data: Dict[str, Any]) -> bool:
        """
        Crea un nuevo usuario.

        Args:
            username: Nombre de usuario
            password_hash: Hash de la contraseña
            data: Resto de campos (name, surname, role, address, birthdate)

        Returns:
            True si se creó, False si ya existía
        """
        with self._file_lock:
            if self.user_exists(username):
                return False
            record = dict(data)
            record['password'] = password_hash
            return self.insert(username, record)

    def update_user(self, username: str, updates: Dict[str, Any]) -> bool:
        """
        Actualiza datos de un usuario.

        Returns:
            True si se actualizó, False si no existe
        """
        return self.update(username, updates)

    def delete_user(self, username: str) -> bool:
        """
        Elimina un usuario.

        Returns:
            True si se eliminó, False si no existe
        """
        return self.delete(username)

    def get_users_by_role(self, role: str) -> Dict[str, Dict[str, Any]]:
        """Obtiene los usuarios con un rol específico."""
        return {
            username: data for username, data in self.load().items()
            if data.get('role') == role
        }

    def get_password_hash(self, username: str) -> Optional[str]:
        """Obtiene el hash de contraseña de un usuario (o None)."""
        user = self.get_user(username)
        return user.get('password') if user else None

    def delete_all(self, keep_roles: Iterable[str] = ()) -> int:
        """
        Elimina todos los usuarios, salvo los que tengan un rol en `keep_roles`.

        Returns:
            Cantidad de usuarios eliminados
        """
        keep = set(keep_roles)
        with self._file_lock:
            users = self.load()
            remaining = {u: d for u, d in users.items() if d.get('role') in keep}
            self.save_all(remaining)
            return len(users) - len(remaining)
