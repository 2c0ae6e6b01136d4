# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio.
# Diseñadas para ser independientes del mecanismo de persistencia.
# Las fechas son fechas de calendario (sin hora) en formato YYYY-MM-DD.
# ==============================================================================

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

# Solo la forma extendida con guiones; date.fromisoformat también acepta 20240101
_DATE_RE = re.compile(r'^\d{4}-\d{2}-\d{2}$')


# ==============================================================================
# ENUMERACIONES - Roles y categorías válidas
# ==============================================================================

class UserRole(str, Enum):
    """Roles de usuario disponibles en el sistema."""
    ADMIN = "Admin"
    MANAGER = "Manager"
    CUSTOMER = "Customer"


class Category(str, Enum):
    """Categorías de producto."""
    SMARTPHONE = "Smartphone"
    LAPTOP = "Laptop"
    APPLIANCE = "Appliance"


def parse_date(value: Any) -> Optional[date]:
    """
    Convierte un valor a fecha de calendario.

    Acepta None, cadenas vacías, objetos date o cadenas 'YYYY-MM-DD'.

    Raises:
        ValueError: Si la cadena no tiene formato de fecha válido
    """
    if value is None or value == '':
        return None
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise ValueError(f'Fecha con formato inválido: {value!r} (se espera YYYY-MM-DD)')
    return date.fromisoformat(value)


def format_date(value: Optional[date]) -> Optional[str]:
    """Convierte una fecha a 'YYYY-MM-DD' (o None)."""
    return value.isoformat() if value else None


# ==============================================================================
# ENTIDADES DE USUARIO
# ==============================================================================

@dataclass
class User:
    """
    Representa un usuario del sistema.

    El hash de la contraseña vive solo en el repositorio; nunca forma
    parte de la entidad que se entrega a las rutas.

    Attributes:
        username: Identificador único del usuario
        name: Nombre
        surname: Apellido
        role: Rol del usuario (inmutable después de la creación)
        address: Dirección
        birthdate: Fecha de nacimiento (opcional)
    """
    username: str
    name: str
    surname: str
    role: UserRole = UserRole.CUSTOMER
    address: str = ''
    birthdate: Optional[date] = None

    def is_admin(self) -> bool:
        """Verifica si el usuario tiene permisos de administrador."""
        return self.role == UserRole.ADMIN

    def is_manager(self) -> bool:
        return self.role == UserRole.MANAGER

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia y respuestas JSON."""
        return {
            'username': self.username,
            'name': self.name,
            'surname': self.surname,
            'role': self.role.value if isinstance(self.role, Enum) else self.role,
            'address': self.address or '',
            'birthdate': format_date(self.birthdate) or '',
        }

    @classmethod
    def from_dict(cls, username: str, data: Dict[str, Any]) -> 'User':
        """
        Crea instancia desde diccionario.

        Raises:
            ValueError: Si el rol guardado no es un rol conocido
        """
        return cls(
            username=username,
            name=data.get('name', ''),
            surname=data.get('surname', ''),
            role=UserRole(data.get('role', UserRole.CUSTOMER.value)),
            address=data.get('address') or '',
            birthdate=parse_date(data.get('birthdate')),
        )


# ==============================================================================
# ENTIDADES DE INVENTARIO
# ==============================================================================

@dataclass
class Product:
    """
    Producto del inventario, identificado por su modelo.

    Attributes:
        model: Modelo del producto (identificador único, no vacío)
        category: Categoría (Smartphone, Laptop, Appliance)
        quantity: Unidades disponibles (nunca negativo)
        selling_price: Precio de venta por unidad (positivo)
        arrival_date: Fecha de llegada (por defecto, hoy)
        details: Detalles opcionales
        selling_date: Fecha de la venta que agotó el stock
    """
    model: str
    category: Category
    quantity: int
    selling_price: float
    arrival_date: date
    details: Optional[str] = None
    selling_date: Optional[date] = None

    @property
    def is_available(self) -> bool:
        """Un producto con stock 0 sigue existiendo, pero no está disponible."""
        return self.quantity > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para persistencia JSON."""
        return {
            'model': self.model,
            'category': self.category.value if isinstance(self.category, Enum) else self.category,
            'quantity': self.quantity,
            'details': self.details,
            'sellingPrice': self.selling_price,
            'arrivalDate': format_date(self.arrival_date),
            'sellingDate': format_date(self.selling_date),
        }

    @classmethod
    def from_dict(cls, model: str, data: Dict[str, Any]) -> 'Product':
        """Crea instancia desde diccionario (formato JSON actual)."""
        return cls(
            model=model,
            category=Category(data.get('category', Category.SMARTPHONE.value)),
            quantity=int(data.get('quantity', 0)),
            selling_price=float(data.get('sellingPrice', 0.0)),
            arrival_date=parse_date(data.get('arrivalDate')),
            details=data.get('details'),
            selling_date=parse_date(data.get('sellingDate')),
        )


# ==============================================================================
# ENTIDADES DE CARRITO
# ==============================================================================

@dataclass
class ProductInCart:
    """Línea de un carrito: precio y categoría copiados al agregar el producto."""
    model: str
    quantity: int
    category: Category
    price: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'model': self.model,
            'quantity': self.quantity,
            'category': self.category.value if isinstance(self.category, Enum) else self.category,
            'price': self.price,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProductInCart':
        return cls(
            model=data['model'],
            quantity=int(data.get('quantity', 0)),
            category=Category(data.get('category', Category.SMARTPHONE.value)),
            price=float(data.get('price', 0.0)),
        )


@dataclass
class Cart:
    """
    Carrito de un cliente.

    Cada cliente tiene como máximo un carrito sin pagar (el actual).
    Al pagarlo, pasa al historial con su fecha de pago.

    Attributes:
        customer: Username del cliente
        paid: Si el carrito ya fue pagado
        payment_date: Fecha del pago (None mientras no se pague)
        total: Suma de precio * cantidad de todas las líneas
        products: Líneas del carrito
    """
    customer: str
    paid: bool = False
    payment_date: Optional[date] = None
    total: float = 0.0
    products: List[ProductInCart] = field(default_factory=list)

    def find(self, model: str) -> Optional[ProductInCart]:
        for line in self.products:
            if line.model == model:
                return line
        return None

    def recompute_total(self) -> float:
        self.total = round(sum(line.price * line.quantity for line in self.products), 2)
        return self.total

    def to_dict(self) -> Dict[str, Any]:
        return {
            'customer': self.customer,
            'paid': self.paid,
            'paymentDate': format_date(self.payment_date),
            'total': self.total,
            'products': [line.to_dict() for line in self.products],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Cart':
        return cls(
            customer=data['customer'],
            paid=bool(data.get('paid', False)),
            payment_date=parse_date(data.get('paymentDate')),
            total=float(data.get('total', 0.0)),
            products=[ProductInCart.from_dict(p) for p in data.get('products', [])],
        )


# ==============================================================================
# ENTIDADES DE RESEÑA
# ==============================================================================

@dataclass
class ProductReview:
    """Reseña de un cliente sobre un modelo (una por cliente y modelo)."""
    model: str
    user: str
    score: int
    review_date: date
    comment: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'model': self.model,
            'user': self.user,
            'score': self.score,
            'date': format_date(self.review_date),
            'comment': self.comment,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProductReview':
        return cls(
            model=data['model'],
            user=data['user'],
            score=int(data['score']),
            review_date=parse_date(data.get('date')),
            comment=data.get('comment', ''),
        )


# ==============================================================================
# ENTIDADES DE AUDITORÍA
# ==============================================================================

class AuditType(str, Enum):
    """Tipos de eventos de auditoría."""
    USUARIO = "USUARIO"
    PRODUCTO = "PRODUCTO"
    STOCK = "STOCK"
    VENTA = "VENTA"
    SISTEMA = "SISTEMA"
    CARRITO = "CARRITO"
    RESENA = "RESEÑA"
