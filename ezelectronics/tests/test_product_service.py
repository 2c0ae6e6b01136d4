# -*- coding: utf-8 -*-
"""
Tests del servicio de productos: llegadas, ventas y consultas
"""
from datetime import date

import pytest

from ezelectronics.errors import (
    DateError,
    EmptyProductStockError,
    InvalidProductDataError,
    InvalidQuantityError,
    LowProductStockError,
    ProductAlreadyExistsError,
    ProductNotFoundError,
)
from ezelectronics.models import Category


@pytest.fixture
def x1(product_service):
    return product_service.register_products(
        'X1', 'Smartphone', 10, 'phone', 499.0, date(2024, 1, 1), user='carol'
    )


def test_sell_then_oversell(product_service, product_repo, x1):
    assert product_service.sell_product('X1', 4, date(2024, 1, 5)) == 6

    mutations = list(product_repo.mutations)
    with pytest.raises(LowProductStockError):
        product_service.sell_product('X1', 10)
    assert product_repo.products['X1']['quantity'] == 6
    assert product_repo.mutations == mutations


def test_register_duplicate_preserves_quantity(product_service, product_repo, x1):
    with pytest.raises(ProductAlreadyExistsError):
        product_service.register_products('X1', 'Laptop', 3, None, 10.0)
    assert product_repo.products['X1']['quantity'] == 10
    assert product_repo.mutations == [('create_product', 'X1')]


def test_register_defaults_arrival_to_today(product_service, today):
    product = product_service.register_products('L1', Category.LAPTOP, 2, None, 1200)
    assert product.arrival_date == today
    assert product.selling_price == 1200.0


def test_register_future_arrival(product_service, product_repo):
    with pytest.raises(DateError):
        product_service.register_products('L1', 'Laptop', 2, None, 1200, date(2024, 7, 1))
    assert product_repo.mutations == []


def test_register_zero_quantity(product_service, product_repo):
    with pytest.raises(InvalidQuantityError):
        product_service.register_products('L1', 'Laptop', 0, None, 1200)
    assert product_repo.mutations == []


@pytest.mark.parametrize('price', [float('nan'), float('inf'), 0, -5.0])
def test_register_invalid_price(product_service, product_repo, price):
    with pytest.raises(InvalidProductDataError):
        product_service.register_products('L1', 'Laptop', 2, None, price)
    assert product_repo.mutations == []
    assert 'L1' not in product_repo.products


def test_register_empty_model(product_service, product_repo):
    with pytest.raises(InvalidProductDataError):
        product_service.register_products('', 'Laptop', 2, None, 1200)
    assert product_repo.mutations == []


def test_register_race_reported_as_duplicate(product_service, product_repo):
    product_repo.product_exists = lambda model: False
    product_repo.products['X9'] = {'quantity': 1}
    with pytest.raises(ProductAlreadyExistsError):
        product_service.register_products('X9', 'Laptop', 1, None, 5)


# ---------------------------------------------------------------------------
# Llegadas
# ---------------------------------------------------------------------------

def test_change_quantity(product_service, product_repo, x1):
    assert product_service.change_product_quantity('X1', 5, date(2024, 2, 1)) == 15
    assert product_repo.products['X1']['quantity'] == 15
    # La fecha de llegada original no cambia
    assert product_repo.products['X1']['arrivalDate'] == '2024-01-01'


@pytest.mark.parametrize('bad', [date(2023, 12, 31), date(2024, 6, 2)])
def test_change_quantity_date_out_of_bounds(product_service, product_repo, x1, bad):
    with pytest.raises(DateError):
        product_service.change_product_quantity('X1', 5, bad)
    assert product_repo.products['X1']['quantity'] == 10


def test_change_quantity_missing_model(product_service, product_repo):
    with pytest.raises(ProductNotFoundError):
        product_service.change_product_quantity('NOPE', 5)
    assert product_repo.mutations == []


# ---------------------------------------------------------------------------
# Ventas
# ---------------------------------------------------------------------------

def test_sale_emptying_stock_records_date(product_service, product_repo, x1, today):
    assert product_service.sell_product('X1', 10) == 0
    assert product_repo.products['X1']['sellingDate'] == today.isoformat()

    with pytest.raises(EmptyProductStockError):
        product_service.sell_product('X1', 1)


def test_partial_sale_keeps_selling_date_empty(product_service, product_repo, x1):
    product_service.sell_product('X1', 1, date(2024, 3, 1))
    assert product_repo.products['X1']['sellingDate'] is None


def test_sale_date_before_arrival(product_service, product_repo, x1):
    with pytest.raises(DateError):
        product_service.sell_product('X1', 1, date(2023, 6, 1))
    assert product_repo.products['X1']['quantity'] == 10


def test_sale_missing_model(product_service):
    with pytest.raises(ProductNotFoundError):
        product_service.sell_product('NOPE', 1)


def test_sale_is_relative_to_current_stock(product_service, product_repo, x1):
    product_service.sell_product('X1', 3)
    assert product_repo.mutations[-1] == ('adjust_quantities', {'X1': -3})


def test_sale_against_stale_snapshot_keeps_stock(product_service, product_repo, x1, monkeypatch):
    # Otra venta dejó 2 unidades después de que el servicio leyera 10
    stale = dict(product_repo.products['X1'])
    product_repo.products['X1']['quantity'] = 2
    calls = []

    def get_product(model):
        calls.append(model)
        return dict(stale) if len(calls) == 1 else dict(product_repo.products[model])

    monkeypatch.setattr(product_repo, 'get_product', get_product)

    with pytest.raises(LowProductStockError) as exc:
        product_service.sell_product('X1', 5)
    assert 'disponible 2' in exc.value.message
    assert product_repo.products['X1']['quantity'] == 2


def test_sale_against_stale_snapshot_emptied(product_service, product_repo, x1, monkeypatch):
    stale = dict(product_repo.products['X1'])
    product_repo.products['X1']['quantity'] = 0
    calls = []

    def get_product(model):
        calls.append(model)
        return dict(stale) if len(calls) == 1 else dict(product_repo.products[model])

    monkeypatch.setattr(product_repo, 'get_product', get_product)

    with pytest.raises(EmptyProductStockError):
        product_service.sell_product('X1', 1)
    assert product_repo.products['X1']['quantity'] == 0


def test_sale_is_audited(product_service, audit_repo, x1):
    product_service.sell_product('X1', 10, user='carol')
    entry = audit_repo.entries[0]
    assert entry['type'] == 'VENTA'
    assert entry['user'] == 'carol'
    assert entry['message'].endswith('AGOTADO')


# ---------------------------------------------------------------------------
# Consultas
# ---------------------------------------------------------------------------

@pytest.fixture
def catalog(product_service):
    product_service.register_products('X1', 'Smartphone', 2, None, 499.0, date(2024, 1, 1))
    product_service.register_products('X2', 'Smartphone', 1, None, 299.0, date(2024, 1, 1))
    product_service.register_products('L1', 'Laptop', 3, None, 999.0, date(2024, 1, 1))
    product_service.sell_product('X2', 1)


def test_get_all_products(product_service, catalog):
    assert sorted(p.model for p in product_service.get_products()) == ['L1', 'X1', 'X2']


def test_get_products_by_category(product_service, catalog):
    products = product_service.get_products('category', 'Smartphone')
    assert sorted(p.model for p in products) == ['X1', 'X2']


def test_get_products_by_model(product_service, catalog):
    products = product_service.get_products('model', model='L1')
    assert [p.model for p in products] == ['L1']


def test_get_products_by_missing_model(product_service, catalog):
    with pytest.raises(ProductNotFoundError):
        product_service.get_products('model', model='NOPE')


def test_available_products_skip_empty(product_service, catalog):
    available = product_service.get_available_products('category', 'Smartphone')
    assert [p.model for p in available] == ['X1']


def test_available_product_by_model_empty_list(product_service, catalog):
    assert product_service.get_available_products('model', model='X2') == []


def test_invalid_grouping(product_service, catalog):
    with pytest.raises(ValueError):
        product_service.get_products('brand')


# ---------------------------------------------------------------------------
# Eliminación
# ---------------------------------------------------------------------------

def test_delete_product(product_service, product_repo, x1):
    assert product_service.delete_product('X1') is True
    assert product_repo.products == {}


def test_delete_missing_product(product_service, product_repo):
    with pytest.raises(ProductNotFoundError):
        product_service.delete_product('NOPE')
    assert product_repo.mutations == []


def test_delete_all_products(product_service, product_repo, catalog):
    assert product_service.delete_all_products() is True
    assert product_service.get_products() == []
