# ==============================================================================
# ERRORES DEL DOMINIO
# ==============================================================================
# Toda violación de una regla de negocio se expresa como una subclase de
# DomainError. Las rutas las capturan de forma uniforme y las traducen a
# respuestas HTTP usando `status_code`.
# ==============================================================================


class DomainError(Exception):
    """Clase base de todos los errores de negocio."""

    status_code = 500
    default_message = 'Error interno'

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ==============================================================================
# USUARIOS
# ==============================================================================

class UserNotFoundError(DomainError):
    """El usuario solicitado no existe."""
    status_code = 404
    default_message = 'Usuario no encontrado'


class UserAlreadyExistsError(DomainError):
    """Ya existe un usuario con ese username."""
    status_code = 409
    default_message = 'El usuario ya existe'


class UnauthorizedUserError(DomainError):
    """El usuario no tiene permisos sobre el recurso solicitado."""
    status_code = 401
    default_message = 'Usuario no autorizado'


class UserNotAdminError(DomainError):
    """La acción sobre otro usuario requiere rol Admin."""
    status_code = 401
    default_message = 'El usuario no es administrador'


class UserIsAdminError(DomainError):
    """Las cuentas Admin no pueden ser eliminadas (ni por sí mismas)."""
    status_code = 401
    default_message = 'El usuario es administrador y no puede ser eliminado'


# ==============================================================================
# PRODUCTOS
# ==============================================================================

class ProductNotFoundError(DomainError):
    """El modelo solicitado no existe."""
    status_code = 404
    default_message = 'Producto no encontrado'


class ProductAlreadyExistsError(DomainError):
    """Ya existe un producto con ese modelo."""
    status_code = 409
    default_message = 'El producto ya existe'


class LowProductStockError(DomainError):
    """La cantidad solicitada supera el stock disponible."""
    status_code = 409
    default_message = 'Stock insuficiente'


class EmptyProductStockError(LowProductStockError):
    """El producto no tiene unidades disponibles."""
    default_message = 'El producto no tiene stock'


class InvalidQuantityError(DomainError):
    """Las cantidades deben ser enteros mayores que 0."""
    status_code = 422
    default_message = 'La cantidad debe ser mayor que 0'


class InvalidProductDataError(DomainError):
    """Modelo vacío o precio que no es un número finito mayor que 0."""
    status_code = 422
    default_message = 'Datos de producto inválidos'


# ==============================================================================
# FECHAS
# ==============================================================================

class DateError(DomainError):
    """La fecha no respeta el orden llegada <= fecha <= hoy."""
    status_code = 400
    default_message = 'Fecha inválida'


# ==============================================================================
# CARRITOS
# ==============================================================================

class CartNotFoundError(DomainError):
    """El cliente no tiene un carrito actual (o está vacío cuando se requiere contenido)."""
    status_code = 404
    default_message = 'Carrito no encontrado'


class ProductNotInCartError(DomainError):
    status_code = 404
    default_message = 'El producto no está en el carrito'


class EmptyCartError(DomainError):
    """Se intentó pagar un carrito sin productos."""
    status_code = 400
    default_message = 'El carrito está vacío'


# ==============================================================================
# RESEÑAS
# ==============================================================================

class ExistingReviewError(DomainError):
    """El cliente ya dejó una reseña para ese modelo."""
    status_code = 409
    default_message = 'Ya existe una reseña de este usuario para el producto'


class NoReviewProductError(DomainError):
    status_code = 404
    default_message = 'No hay reseña de este usuario para el producto'


class InvalidScoreError(DomainError):
    """La puntuación debe ser un entero entre 1 y 5."""
    status_code = 422
    default_message = 'Puntuación inválida'
