# ==============================================================================
# REGLAS DE CONSISTENCIA DEL INVENTARIO
# ==============================================================================
# Validan que un cambio de cantidad o de fecha sobre un producto sea
# coherente ANTES de aplicarlo. Funciones puras: reciben el snapshot del
# producto y la fecha de "hoy" como argumentos, nunca leen el reloj.
#
# ORDEN DE FECHAS (ambos extremos inclusive):
#   fecha_llegada <= fecha_movimiento <= hoy
# Una fecha estrictamente futura siempre se rechaza.
# ==============================================================================

import math
from datetime import date
from typing import Dict, Iterable, Optional, Tuple

from ezelectronics.errors import (
    DateError,
    EmptyProductStockError,
    InvalidProductDataError,
    InvalidQuantityError,
    LowProductStockError,
    ProductAlreadyExistsError,
)
from ezelectronics.models import Category, Product


# Agrupaciones válidas para las consultas de productos
GROUPING_CATEGORY = 'category'
GROUPING_MODEL = 'model'
VALID_GROUPINGS = frozenset([GROUPING_CATEGORY, GROUPING_MODEL])


def validate_quantity(quantity: int) -> int:
    """
    Verifica que una cantidad sea un entero mayor que 0.

    Raises:
        InvalidQuantityError: Si no es entero o es <= 0
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantityError(f'La cantidad debe ser un entero mayor que 0 (recibido: {quantity!r})')
    return quantity


def validate_model(model: str) -> str:
    """
    Verifica que el modelo sea una cadena no vacía.

    Raises:
        InvalidProductDataError: Si el modelo está vacío o no es texto
    """
    if not isinstance(model, str) or not model.strip():
        raise InvalidProductDataError('El modelo del producto no puede estar vacío')
    return model


def validate_price(price: float) -> float:
    """
    Verifica que un precio sea un número finito mayor que 0.

    NaN e infinito se rechazan.

    Raises:
        InvalidProductDataError: Si el precio no es válido
    """
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise InvalidProductDataError(f'El precio debe ser numérico (recibido: {price!r})')
    if not math.isfinite(price) or price <= 0:
        raise InvalidProductDataError(f'El precio debe ser un número finito mayor que 0 (recibido: {price!r})')
    return float(price)


def validate_arrival_date(arrival_date: Optional[date], today: date) -> date:
    """
    Valida la fecha de llegada de un producto nuevo.

    Returns:
        La fecha recibida, o `today` si no se indicó

    Raises:
        DateError: Si la fecha es posterior a hoy
    """
    if arrival_date is None:
        return today
    if arrival_date > today:
        raise DateError(f'La fecha de llegada {arrival_date.isoformat()} es posterior a hoy')
    return arrival_date


def validate_movement_date(
    movement_date: Optional[date],
    arrival_date: date,
    today: date
) -> date:
    """
    Valida la fecha de un reabastecimiento o de una venta.

    Returns:
        La fecha recibida, o `today` si no se indicó

    Raises:
        DateError: Si la fecha es anterior a la llegada o posterior a hoy
    """
    if movement_date is None:
        return today
    if movement_date > today:
        raise DateError(f'La fecha {movement_date.isoformat()} es posterior a hoy')
    if arrival_date is not None and movement_date < arrival_date:
        raise DateError(
            f'La fecha {movement_date.isoformat()} es anterior a la llegada '
            f'del producto ({arrival_date.isoformat()})'
        )
    return movement_date


# ==============================================================================
# REGLAS POR OPERACIÓN
# ==============================================================================

def check_registration(
    model: str,
    already_exists: bool,
    quantity: int,
    selling_price: float,
    arrival_date: Optional[date],
    today: date
) -> date:
    """
    Reglas para registrar un producto nuevo.

    Orden: modelo vacío → duplicado → cantidad → precio → fecha.

    Returns:
        Fecha de llegada efectiva

    Raises:
        InvalidProductDataError, ProductAlreadyExistsError,
        InvalidQuantityError, DateError
    """
    validate_model(model)
    if already_exists:
        raise ProductAlreadyExistsError(f'El producto "{model}" ya existe')
    validate_quantity(quantity)
    validate_price(selling_price)
    return validate_arrival_date(arrival_date, today)


def compute_restock(
    product: Product,
    delta: int,
    change_date: Optional[date],
    today: date
) -> Tuple[int, date]:
    """
    Reglas para registrar nuevas llegadas de un producto existente.

    Returns:
        Tupla (nueva_cantidad, fecha_efectiva)
    """
    validate_quantity(delta)
    effective = validate_movement_date(change_date, product.arrival_date, today)
    return (product.quantity + delta, effective)


def compute_sale(
    product: Product,
    quantity: int,
    selling_date: Optional[date],
    today: date
) -> Tuple[int, date]:
    """
    Reglas para vender unidades de un producto existente.

    La cantidad nunca queda negativa. Un producto que llega a 0 sigue
    siendo un registro válido, solo deja de estar disponible.

    Returns:
        Tupla (nueva_cantidad, fecha_efectiva)

    Raises:
        InvalidQuantityError, DateError, EmptyProductStockError,
        LowProductStockError
    """
    validate_quantity(quantity)
    effective = validate_movement_date(selling_date, product.arrival_date, today)

    if product.quantity == 0:
        raise EmptyProductStockError(f'El producto "{product.model}" no tiene stock')
    if quantity > product.quantity:
        raise LowProductStockError(
            f'Stock insuficiente para "{product.model}": '
            f'solicitado {quantity}, disponible {product.quantity}'
        )
    return (product.quantity - quantity, effective)


def check_available(product: Product) -> Product:
    """
    Un producto solo puede agregarse a un carrito si tiene stock.

    Raises:
        EmptyProductStockError: Si la cantidad es 0
    """
    if not product.is_available:
        raise EmptyProductStockError(f'El producto "{product.model}" no tiene stock')
    return product


def compute_checkout(
    lines: Iterable[Tuple[Product, int]],
    today: date
) -> Dict[str, int]:
    """
    Reglas para pagar un carrito: cada línea es una venta con fecha de hoy.

    Se validan TODAS las líneas antes de devolver nada, así que un error
    en cualquiera de ellas deja el inventario intacto.

    Args:
        lines: Pares (snapshot del producto, unidades en el carrito)
        today: Fecha de hoy (fecha del pago)

    Returns:
        {model: nueva_cantidad} para cada línea

    Raises:
        EmptyProductStockError, LowProductStockError
    """
    result = {}
    for product, quantity in lines:
        new_quantity, _ = compute_sale(product, quantity, None, today)
        result[product.model] = new_quantity
    return result


def resolve_grouping(
    grouping: Optional[str],
    category: Optional[str],
    model: Optional[str]
) -> Tuple[Optional[str], Optional[str]]:
    """
    Traduce una agrupación de consulta a filtros (categoría, modelo).

    - None:       todos los productos
    - 'category': filtra por `category` (obligatoria)
    - 'model':    filtra por `model` (obligatorio, no vacío)

    Raises:
        ValueError: Si la combinación de parámetros no es válida
    """
    if grouping is None:
        if category or model:
            raise ValueError('category/model requieren grouping')
        return (None, None)
    if grouping not in VALID_GROUPINGS:
        raise ValueError(f'grouping inválido: {grouping!r}')
    if grouping == GROUPING_CATEGORY:
        if model or not category:
            raise ValueError('grouping=category requiere category y no admite model')
        return (Category(category).value, None)
    if category or not model:
        raise ValueError('grouping=model requiere model y no admite category')
    return (None, model)
