# ==============================================================================
# INTERFACES DE REPOSITORIOS - PREPARADO PARA SQL
# ==============================================================================
#
# Contratos que todo repositorio debe cumplir. Los servicios dependen de
# estas interfaces, NO de implementaciones concretas:
#
# 1. INDEPENDENCIA DE ALMACENAMIENTO
#    - Cambiar JSON → SQL solo requiere una nueva implementación
#
# 2. TESTING
#    - Los tests usan repositorios en memoria que cumplen estos protocolos
#
# 3. CONVENCIÓN DE FALLOS
#    - "No encontrado" y "ya existe" se reportan como False/None,
#      nunca como excepción. El servicio los traduce a errores del dominio.
#    - Cualquier otro fallo (I/O, JSON corrupto) se propaga sin tocar.
#
# ==============================================================================

from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class IUserRepository(Protocol):
    """Interfaz para el repositorio de usuarios."""

    def load(self) -> Dict[str, Dict[str, Any]]:
        """Carga todos los usuarios."""
        ...

    def get_user(self, username: str) -> Optional[Dict[str, Any]]:
        """Obtiene un usuario por nombre (None si no existe)."""
        ...

    def user_exists(self, username: str) -> bool:
        ...

    def create_user(self, username: str, password_hash: str, data: Dict[str, Any]) -> bool:
        """Crea un usuario. False si ya existía."""
        ...

    def update_user(self, username: str, updates: Dict[str, Any]) -> bool:
        """Actualiza campos. False si no existe."""
        ...

    def delete_user(self, username: str) -> bool:
        """Elimina un usuario. False si no existe."""
        ...

    def get_users_by_role(self, role: str) -> Dict[str, Dict[str, Any]]:
        ...

    def get_password_hash(self, username: str) -> Optional[str]:
        ...

    def delete_all(self, keep_roles: Iterable[str] = ()) -> int:
        """Elimina todos los usuarios salvo los roles indicados."""
        ...


@runtime_checkable
class IProductRepository(Protocol):
    """Interfaz para el repositorio de productos."""

    def get_product(self, model: str) -> Optional[Dict[str, Any]]:
        """Obtiene un producto por modelo (None si no existe)."""
        ...

    def product_exists(self, model: str) -> bool:
        ...

    def create_product(self, model: str, data: Dict[str, Any]) -> bool:
        """Crea un producto. False si el modelo ya existía."""
        ...

    def adjust_quantities(
        self,
        deltas: Dict[str, int],
        stamp_when_empty: Optional[str] = None
    ) -> Optional[Dict[str, int]]:
        """Cambios relativos de cantidad, todo o nada. None si alguno no aplica."""
        ...

    def delete_product(self, model: str) -> bool:
        """Elimina un producto. False si no existe."""
        ...

    def delete_all(self) -> bool:
        ...

    def list_products(
        self,
        category: Optional[str] = None,
        model: Optional[str] = None,
        available_only: bool = False
    ) -> List[Dict[str, Any]]:
        """Lista productos con filtros opcionales."""
        ...


@runtime_checkable
class IAuditRepository(Protocol):
    """Interfaz para el repositorio de auditoría."""

    def load(self) -> List[Dict[str, Any]]:
        ...

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str = '',
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Registra un evento de auditoría."""
        ...

    def filter_by_type(self, log_type: str) -> List[Dict[str, Any]]:
        ...


@runtime_checkable
class ICartRepository(Protocol):
    """Interfaz para el repositorio de carritos."""

    def load(self) -> List[Dict[str, Any]]:
        ...

    def get_current_cart(self, username: str) -> Optional[Dict[str, Any]]:
        """Carrito sin pagar del cliente (None si no tiene)."""
        ...

    def save_current_cart(self, username: str, cart_data: Dict[str, Any]) -> None:
        ...

    def mark_paid(self, username: str, cart_data: Dict[str, Any]) -> bool:
        """Guarda el carrito actual como pagado. False si ya no existía."""
        ...

    def get_paid_carts(self, username: str) -> List[Dict[str, Any]]:
        ...

    def delete_all(self) -> bool:
        ...


@runtime_checkable
class IReviewRepository(Protocol):
    """Interfaz para el repositorio de reseñas."""

    def get_product_reviews(self, model: str) -> List[Dict[str, Any]]:
        ...

    def review_exists(self, model: str, user: str) -> bool:
        ...

    def add_review(self, model: str, user: str, data: Dict[str, Any]) -> bool:
        """Agrega una reseña. False si el usuario ya tenía una del modelo."""
        ...

    def delete_review(self, model: str, user: str) -> bool:
        """Elimina una reseña. False si no existía."""
        ...

    def delete_reviews_of_product(self, model: str) -> int:
        ...

    def delete_all(self) -> bool:
        ...
