# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# Esta capa contiene TODA la lógica de negocio de la aplicación.
#
# PRINCIPIOS:
# 1. Las reglas (authorization, inventory_rules) son funciones puras
# 2. Los servicios consultan, validan y escriben UNA sola vez por repositorio
# 3. Las rutas solo traducen request → service → response
# 4. Los servicios NO conocen el tipo de almacenamiento (JSON/SQL)
#
# ESTRUCTURA:
# ├── authorization.py    → Quién puede actuar sobre quién
# ├── inventory_rules.py  → Cantidades, precios y fechas coherentes
# ├── user_service.py     → Usuarios, credenciales
# ├── product_service.py  → Productos, llegadas, ventas
# ├── cart_service.py     → Carrito actual, pago, historial
# ├── review_service.py   → Reseñas de productos
# └── audit_service.py    → Logs de actividad
# ==============================================================================

from ezelectronics.services.audit_service import AuditService
from ezelectronics.services.authorization import Operation, can_act_on, check_permission
from ezelectronics.services.product_service import ProductService
from ezelectronics.services.cart_service import CartService
from ezelectronics.services.review_service import ReviewService
from ezelectronics.services.user_service import UserService

__all__ = [
    'AuditService',
    'Operation',
    'can_act_on',
    'check_permission',
    'ProductService',
    'CartService',
    'ReviewService',
    'UserService',
]
