# ==============================================================================
# SERVICIO DE PRODUCTOS
# ==============================================================================
# Orquesta las reglas de consistencia del inventario y el repositorio.
#
# FLUJO DE CADA OPERACIÓN:
#   1. Consultar el snapshot del producto (si aplica)
#   2. Aplicar las reglas de inventory_rules.py (puras)
#   3. UNA sola llamada de escritura al repositorio
#   4. Traducir el fallo del repositorio (False/None) al error del dominio
#
# Los cambios de stock son relativos (adjust_quantities): el repositorio
# recalcula sobre el valor actual bajo su lock y rechaza si quedaría negativo.
#
# La autorización (Admin/Manager) se valida en las rutas con
# authorization.py antes de llegar aquí.
# ==============================================================================

from datetime import date
from typing import Callable, Dict, List, Optional, Union

from ezelectronics.errors import (
    EmptyProductStockError,
    LowProductStockError,
    ProductAlreadyExistsError,
    ProductNotFoundError,
)
from ezelectronics.models import Category, Product, format_date
from ezelectronics.performance_logger import profile_function
from ezelectronics.repositories.interfaces import IProductRepository
from ezelectronics.services import inventory_rules
from ezelectronics.services.audit_service import AuditService


def raise_stock_conflict(product_repo: IProductRepository, requested: Dict[str, int]) -> None:
    """
    Traduce un `adjust_quantities` rechazado al error del dominio.

    Se relee el stock actual: el snapshot validado antes de escribir ya
    no coincide con lo que hay en el repositorio.

    Args:
        product_repo: Repositorio de productos
        requested: {model: unidades que se intentaron descontar}

    Raises:
        ProductNotFoundError, EmptyProductStockError, LowProductStockError
    """
    for model, quantity in requested.items():
        data = product_repo.get_product(model)
        if data is None:
            raise ProductNotFoundError(f'El producto "{model}" no existe')
        available = int(data.get('quantity', 0))
        if available == 0:
            raise EmptyProductStockError(f'El producto "{model}" no tiene stock')
        if quantity > available:
            raise LowProductStockError(
                f'Stock insuficiente para "{model}": '
                f'solicitado {quantity}, disponible {available}'
            )
    raise LowProductStockError('El stock cambió durante la operación')


class ProductService:
    """
    Servicio para gestión de inventario.

    Responsabilidades:
    - Registro de productos nuevos
    - Entradas de stock (llegadas) y ventas
    - Consultas agrupadas por categoría o modelo
    - Eliminación individual y total
    """

    def __init__(
        self,
        product_repo: IProductRepository,
        audit_service: AuditService = None,
        clock: Callable[[], date] = date.today
    ):
        """
        Args:
            product_repo: Repositorio de productos
            audit_service: Servicio de auditoría (opcional)
            clock: Función que retorna la fecha de hoy
        """
        self.product_repo = product_repo
        self.audit_service = audit_service
        self.clock = clock

    def _get_product(self, model: str) -> Product:
        data = self.product_repo.get_product(model)
        if data is None:
            raise ProductNotFoundError(f'El producto "{model}" no existe')
        return Product.from_dict(model, data)

    # =========================================================================
    # REGISTRO Y MOVIMIENTOS DE STOCK
    # =========================================================================

    @profile_function(name="Registrar producto")
    def register_products(
        self,
        model: str,
        category: Union[Category, str],
        quantity: int,
        details: Optional[str],
        selling_price: float,
        arrival_date: Optional[date] = None,
        user: str = None
    ) -> Product:
        """
        Registra un producto nuevo.

        Args:
            model: Modelo único del producto
            category: Categoría
            quantity: Unidades que llegan (> 0)
            details: Detalles opcionales
            selling_price: Precio de venta por unidad
            arrival_date: Fecha de llegada (por defecto, hoy)
            user: Usuario que registra (para auditoría)

        Returns:
            El producto creado

        Raises:
            InvalidProductDataError, ProductAlreadyExistsError,
            InvalidQuantityError, DateError
        """
        arrival = inventory_rules.check_registration(
            model,
            self.product_repo.product_exists(model),
            quantity,
            selling_price,
            arrival_date,
            self.clock()
        )

        product = Product(
            model=model,
            category=Category(category),
            quantity=quantity,
            selling_price=float(selling_price),
            arrival_date=arrival,
            details=details,
        )
        # La restricción de unicidad del repositorio resuelve las carreras
        if not self.product_repo.create_product(model, product.to_dict()):
            raise ProductAlreadyExistsError(f'El producto "{model}" ya existe')

        if self.audit_service:
            self.audit_service.log_product_registered(user, model, quantity, format_date(arrival))
        return product

    def change_product_quantity(
        self,
        model: str,
        quantity: int,
        change_date: Optional[date] = None,
        user: str = None
    ) -> int:
        """
        Registra la llegada de `quantity` unidades de un producto existente.

        Returns:
            La nueva cantidad total

        Raises:
            ProductNotFoundError, InvalidQuantityError, DateError
        """
        product = self._get_product(model)
        _, effective = inventory_rules.compute_restock(
            product, quantity, change_date, self.clock()
        )

        result = self.product_repo.adjust_quantities({model: quantity})
        if result is None:
            raise ProductNotFoundError(f'El producto "{model}" no existe')
        new_quantity = result[model]

        if self.audit_service:
            self.audit_service.log_stock_add(user, model, quantity, new_quantity, format_date(effective))
        return new_quantity

    @profile_function(name="Vender producto")
    def sell_product(
        self,
        model: str,
        quantity: int,
        selling_date: Optional[date] = None,
        user: str = None
    ) -> int:
        """
        Vende `quantity` unidades de un producto.

        Las reglas se validan sobre el snapshot; el descuento se aplica de
        forma relativa en el repositorio, que vuelve a comprobar el stock
        bajo su lock. Si la venta agota el stock, se guarda la fecha de venta.

        Returns:
            La nueva cantidad disponible

        Raises:
            ProductNotFoundError, InvalidQuantityError, DateError,
            EmptyProductStockError, LowProductStockError
        """
        product = self._get_product(model)
        _, effective = inventory_rules.compute_sale(
            product, quantity, selling_date, self.clock()
        )

        result = self.product_repo.adjust_quantities(
            {model: -quantity}, stamp_when_empty=format_date(effective)
        )
        if result is None:
            # Otra venta ganó entre la consulta y la escritura
            raise_stock_conflict(self.product_repo, {model: quantity})
        new_quantity = result[model]

        if self.audit_service:
            self.audit_service.log_sale(user, model, quantity, new_quantity, format_date(effective))
        return new_quantity

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def _list(
        self,
        grouping: Optional[str],
        category: Optional[str],
        model: Optional[str],
        available_only: bool
    ) -> List[Product]:
        category_filter, model_filter = inventory_rules.resolve_grouping(grouping, category, model)
        if model_filter is not None and not self.product_repo.product_exists(model_filter):
            raise ProductNotFoundError(f'El producto "{model_filter}" no existe')

        rows = self.product_repo.list_products(
            category=category_filter,
            model=model_filter,
            available_only=available_only
        )
        return [Product.from_dict(row['model'], row) for row in rows]

    def get_products(
        self,
        grouping: Optional[str] = None,
        category: Optional[str] = None,
        model: Optional[str] = None
    ) -> List[Product]:
        """
        Lista productos, opcionalmente agrupados por categoría o modelo.

        Raises:
            ProductNotFoundError: Si se filtra por un modelo inexistente
            ValueError: Si la combinación de parámetros no es válida
        """
        return self._list(grouping, category, model, available_only=False)

    def get_available_products(
        self,
        grouping: Optional[str] = None,
        category: Optional[str] = None,
        model: Optional[str] = None
    ) -> List[Product]:
        """Igual que `get_products`, pero solo productos con cantidad > 0."""
        return self._list(grouping, category, model, available_only=True)

    # =========================================================================
    # ELIMINACIÓN
    # =========================================================================

    def delete_product(self, model: str, user: str = None) -> bool:
        """
        Elimina un producto.

        Raises:
            ProductNotFoundError: Si el modelo no existe
        """
        if not self.product_repo.product_exists(model):
            raise ProductNotFoundError(f'El producto "{model}" no existe')
        if not self.product_repo.delete_product(model):
            raise ProductNotFoundError(f'El producto "{model}" no existe')

        if self.audit_service:
            self.audit_service.log_product_deleted(user, model)
        return True

    def delete_all_products(self, user: str = None) -> bool:
        """Elimina todo el inventario."""
        result = self.product_repo.delete_all()
        if self.audit_service:
            self.audit_service.log_products_cleared(user)
        return result
