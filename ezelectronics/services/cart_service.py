# ==============================================================================
# SERVICIO DE CARRITO
# ==============================================================================
# Maneja el carrito de compras de cada cliente, persistido en carts.json.
#
# REGLAS:
# - Cada cliente tiene como máximo un carrito sin pagar (el actual)
# - El precio y la categoría se copian del producto al agregarlo
# - Agregar un modelo ya presente suma 1 unidad; quitarlo resta 1
# - Pagar es una venta con fecha de hoy por cada línea: se validan TODAS
#   las líneas antes de tocar el inventario
# ==============================================================================

from datetime import date
from typing import Callable, List

from ezelectronics.errors import (
    CartNotFoundError,
    EmptyCartError,
    ProductNotFoundError,
    ProductNotInCartError,
)
from ezelectronics.models import Cart, Product, ProductInCart, User, format_date
from ezelectronics.repositories.interfaces import ICartRepository, IProductRepository
from ezelectronics.services import inventory_rules
from ezelectronics.services.audit_service import AuditService
from ezelectronics.services.authorization import Operation, check_permission
from ezelectronics.services.product_service import raise_stock_conflict


class CartService:
    """
    Servicio para el carrito de compras.

    Responsabilidades:
    - Agregar y quitar productos del carrito actual
    - Pagar el carrito (descuenta el stock de cada línea)
    - Historial de carritos pagados del cliente
    - Consulta y borrado global (Admin o Manager)
    """

    def __init__(
        self,
        cart_repo: ICartRepository,
        product_repo: IProductRepository,
        audit_service: AuditService = None,
        clock: Callable[[], date] = date.today
    ):
        """
        Args:
            cart_repo: Repositorio de carritos
            product_repo: Repositorio de productos (stock y precios)
            audit_service: Servicio de auditoría (opcional)
            clock: Función que retorna la fecha de hoy
        """
        self.cart_repo = cart_repo
        self.product_repo = product_repo
        self.audit_service = audit_service
        self.clock = clock

    def _get_product(self, model: str) -> Product:
        data = self.product_repo.get_product(model)
        if data is None:
            raise ProductNotFoundError(f'El producto "{model}" no existe')
        return Product.from_dict(model, data)

    def _current(self, username: str) -> Cart:
        """Carrito actual del cliente, o uno vacío (sin guardarlo)."""
        data = self.cart_repo.get_current_cart(username)
        if data is None:
            return Cart(customer=username)
        return Cart.from_dict(data)

    def _save(self, cart: Cart) -> None:
        cart.recompute_total()
        self.cart_repo.save_current_cart(cart.customer, cart.to_dict())

    # =========================================================================
    # CARRITO ACTUAL
    # =========================================================================

    def get_cart(self, actor: User) -> Cart:
        """
        Obtiene el carrito actual del cliente.

        Un cliente sin carrito recibe uno vacío sin pagar.
        """
        check_permission(actor, Operation.USE_CART)
        return self._current(actor.username)

    def add_to_cart(self, actor: User, model: str) -> bool:
        """
        Agrega una unidad de `model` al carrito actual.

        Returns:
            True si se agregó

        Raises:
            UnauthorizedUserError: Si el actor no es Customer
            ProductNotFoundError: Si el modelo no existe
            EmptyProductStockError: Si el producto no tiene stock
        """
        check_permission(actor, Operation.USE_CART)
        product = inventory_rules.check_available(self._get_product(model))

        cart = self._current(actor.username)
        line = cart.find(model)
        if line is None:
            cart.products.append(
                ProductInCart(model, 1, product.category, product.selling_price)
            )
        else:
            line.quantity += 1
        self._save(cart)
        return True

    def remove_product_from_cart(self, actor: User, model: str) -> bool:
        """
        Quita una unidad de `model` del carrito actual.

        La línea desaparece cuando llega a 0 unidades.

        Raises:
            CartNotFoundError: Si no hay carrito actual o está vacío
            ProductNotFoundError: Si el modelo no existe
            ProductNotInCartError: Si el modelo no está en el carrito
        """
        check_permission(actor, Operation.USE_CART)
        data = self.cart_repo.get_current_cart(actor.username)
        if data is None or not data.get('products'):
            raise CartNotFoundError('No hay un carrito actual con productos')
        self._get_product(model)

        cart = Cart.from_dict(data)
        line = cart.find(model)
        if line is None:
            raise ProductNotInCartError(f'El producto "{model}" no está en el carrito')

        line.quantity -= 1
        if line.quantity == 0:
            cart.products.remove(line)
        self._save(cart)
        return True

    def clear_cart(self, actor: User) -> bool:
        """
        Vacía el carrito actual.

        Raises:
            CartNotFoundError: Si el cliente no tiene carrito actual
        """
        check_permission(actor, Operation.USE_CART)
        if self.cart_repo.get_current_cart(actor.username) is None:
            raise CartNotFoundError('No hay un carrito actual')
        self._save(Cart(customer=actor.username))
        return True

    # =========================================================================
    # PAGO
    # =========================================================================

    def checkout_cart(self, actor: User) -> bool:
        """
        Paga el carrito actual.

        VALIDACIONES (en este orden, sin escribir nada si alguna falla):
        1. El cliente tiene carrito actual
        2. El carrito tiene productos
        3. Cada modelo existe y tiene stock suficiente

        Después descuenta todo el stock en una sola escritura y guarda el
        carrito como pagado con la fecha de hoy.

        Raises:
            CartNotFoundError, EmptyCartError, ProductNotFoundError,
            EmptyProductStockError, LowProductStockError
        """
        check_permission(actor, Operation.USE_CART)
        data = self.cart_repo.get_current_cart(actor.username)
        if data is None:
            raise CartNotFoundError('No hay un carrito actual')
        cart = Cart.from_dict(data)
        if not cart.products:
            raise EmptyCartError('El carrito está vacío')

        today = self.clock()
        lines = [(self._get_product(line.model), line.quantity) for line in cart.products]
        inventory_rules.compute_checkout(lines, today)

        requested = {line.model: line.quantity for line in cart.products}
        stamp = format_date(today)
        result = self.product_repo.adjust_quantities(
            {model: -quantity for model, quantity in requested.items()},
            stamp_when_empty=stamp
        )
        if result is None:
            raise_stock_conflict(self.product_repo, requested)

        cart.paid = True
        cart.payment_date = today
        cart.recompute_total()
        if not self.cart_repo.mark_paid(actor.username, cart.to_dict()):
            raise CartNotFoundError('No hay un carrito actual')

        if self.audit_service:
            self.audit_service.log_cart_paid(actor.username, cart.total, requested, stamp)
        return True

    # =========================================================================
    # CONSULTAS Y ADMINISTRACIÓN
    # =========================================================================

    def get_customer_carts(self, actor: User) -> List[Cart]:
        """Historial de carritos pagados del cliente (sin el actual)."""
        check_permission(actor, Operation.USE_CART)
        return [Cart.from_dict(c) for c in self.cart_repo.get_paid_carts(actor.username)]

    def get_all_carts(self, actor: User) -> List[Cart]:
        """Todos los carritos, pagados o no, de todos los clientes."""
        check_permission(actor, Operation.MANAGE_CARTS)
        return [Cart.from_dict(c) for c in self.cart_repo.load()]

    def delete_all_carts(self, actor: User) -> bool:
        """Elimina todos los carritos (Admin o Manager)."""
        check_permission(actor, Operation.MANAGE_CARTS)
        result = self.cart_repo.delete_all()
        if self.audit_service:
            self.audit_service.log_carts_cleared(actor.username)
        return result
