# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Punto único para obtener repositorios y servicios ya conectados entre sí.
#
#   container = get_container()
#   container.product_service.sell_product("X1", 2)
#
# CAMBIAR DE ALMACENAMIENTO:
# Basta con una nueva clase que cumpla IUserRepository / IProductRepository
# y cambiarla aquí. Los servicios dependen de las interfaces, no de JSON.
# ==============================================================================

from typing import Optional

from ezelectronics import config

# ═══════════════════════════════════════════════════════════════════════════════
# REPOSITORIOS - Capa de persistencia (archivos JSON)
# ═══════════════════════════════════════════════════════════════════════════════
from ezelectronics.repositories import (
    AuditRepository,
    CartRepository,
    ProductRepository,
    ReviewRepository,
    UserRepository,
)

# ═══════════════════════════════════════════════════════════════════════════════
# SERVICIOS - Capa de lógica de negocio
# ═══════════════════════════════════════════════════════════════════════════════
from ezelectronics.services import (
    AuditService,
    CartService,
    ProductService,
    ReviewService,
    UserService,
)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Singleton: una única instancia de cada repositorio y servicio, creada
    la primera vez que se pide.
    """

    _instance: Optional['AppContainer'] = None

    def __new__(cls, base_path: str = None):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, base_path: str = None):
        """
        Args:
            base_path: Carpeta de los archivos JSON (por defecto config.DATA_DIR)
        """
        if self._initialized:
            return

        self._base_path = base_path or config.DATA_DIR

        self._user_repo: Optional[UserRepository] = None
        self._product_repo: Optional[ProductRepository] = None
        self._cart_repo: Optional[CartRepository] = None
        self._review_repo: Optional[ReviewRepository] = None
        self._audit_repo: Optional[AuditRepository] = None

        self._audit_service: Optional[AuditService] = None
        self._user_service: Optional[UserService] = None
        self._product_service: Optional[ProductService] = None
        self._cart_service: Optional[CartService] = None
        self._review_service: Optional[ReviewService] = None

        self._initialized = True

    @property
    def base_path(self) -> str:
        return self._base_path

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def user_repo(self) -> UserRepository:
        """Repositorio de usuarios (singleton)."""
        if self._user_repo is None:
            self._user_repo = UserRepository(self._base_path)
        return self._user_repo

    @property
    def product_repo(self) -> ProductRepository:
        """Repositorio de productos (singleton)."""
        if self._product_repo is None:
            self._product_repo = ProductRepository(self._base_path)
        return self._product_repo

    @property
    def cart_repo(self) -> CartRepository:
        if self._cart_repo is None:
            self._cart_repo = CartRepository(self._base_path)
        return self._cart_repo

    @property
    def review_repo(self) -> ReviewRepository:
        if self._review_repo is None:
            self._review_repo = ReviewRepository(self._base_path)
        return self._review_repo

    @property
    def audit_repo(self) -> AuditRepository:
        if self._audit_repo is None:
            self._audit_repo = AuditRepository(self._base_path)
        return self._audit_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def audit_service(self) -> AuditService:
        """Servicio de auditoría (singleton)."""
        if self._audit_service is None:
            self._audit_service = AuditService(self.audit_repo)
        return self._audit_service

    @property
    def user_service(self) -> UserService:
        """Servicio de usuarios (singleton)."""
        if self._user_service is None:
            self._user_service = UserService(self.user_repo, self.audit_service)
        return self._user_service

    @property
    def product_service(self) -> ProductService:
        """Servicio de productos (singleton)."""
        if self._product_service is None:
            self._product_service = ProductService(self.product_repo, self.audit_service)
        return self._product_service

    @property
    def cart_service(self) -> CartService:
        """Servicio de carritos (singleton)."""
        if self._cart_service is None:
            self._cart_service = CartService(self.cart_repo, self.product_repo, self.audit_service)
        return self._cart_service

    @property
    def review_service(self) -> ReviewService:
        """Servicio de reseñas (singleton)."""
        if self._review_service is None:
            self._review_service = ReviewService(self.review_repo, self.product_repo, self.audit_service)
        return self._review_service

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def reset(self) -> None:
        """Descarta todas las instancias creadas (se recrean al pedirlas)."""
        self._user_repo = None
        self._product_repo = None
        self._cart_repo = None
        self._review_repo = None
        self._audit_repo = None

        self._audit_service = None
        self._user_service = None
        self._product_service = None
        self._cart_service = None
        self._review_service = None

    @classmethod
    def get_instance(cls, base_path: str = None) -> 'AppContainer':
        """
        Obtiene la instancia singleton del contenedor.

        Args:
            base_path: Carpeta de datos (solo se usa en la primera llamada)
        """
        if cls._instance is None:
            return cls(base_path)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Elimina la instancia singleton (útil para tests)."""
        if cls._instance is not None:
            cls._instance.reset()
            cls._instance = None


def get_container(base_path: str = None) -> AppContainer:
    """Obtiene el contenedor de dependencias global."""
    return AppContainer.get_instance(base_path)
