# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Este módulo define las entidades del dominio usando dataclasses.
# Son independientes del mecanismo de persistencia (JSON ahora, SQL después).
# ==============================================================================

from .entities import (
    # Usuarios
    User,
    UserRole,

    # Productos
    Product,
    Category,

    # Carritos
    Cart,
    ProductInCart,

    # Reseñas
    ProductReview,

    # Auditoría
    AuditType,

    # Fechas
    parse_date,
    format_date,
)

__all__ = [
    'User',
    'UserRole',
    'Product',
    'Category',
    'Cart',
    'ProductInCart',
    'ProductReview',
    'AuditType',
    'parse_date',
    'format_date',
]
