# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso a la persistencia (actualmente JSON).
# Cuando se migre a SQL, solo hay que modificar esta capa.
#
# ESTRUCTURA:
# ├── interfaces.py          → Protocolos (contratos que usan los servicios)
# ├── base.py                → Clases base JSON (DictRepository, ListRepository)
# ├── user_repository.py     → Acceso a users.json
# ├── product_repository.py  → Acceso a products.json
# ├── cart_repository.py     → Acceso a carts.json
# ├── review_repository.py   → Acceso a reviews.json
# └── audit_repository.py    → Acceso a audit.json
# ==============================================================================

from .interfaces import (
    IUserRepository,
    IProductRepository,
    ICartRepository,
    IReviewRepository,
    IAuditRepository,
)

from .base import BaseRepository, DictRepository, ListRepository
from .user_repository import UserRepository
from .product_repository import ProductRepository
from .cart_repository import CartRepository
from .review_repository import ReviewRepository
from .audit_repository import AuditRepository

__all__ = [
    # Interfaces
    'IUserRepository',
    'IProductRepository',
    'ICartRepository',
    'IReviewRepository',
    'IAuditRepository',

    # Clases base
    'BaseRepository',
    'DictRepository',
    'ListRepository',

    # Implementaciones JSON
    'UserRepository',
    'ProductRepository',
    'CartRepository',
    'ReviewRepository',
    'AuditRepository',
]
