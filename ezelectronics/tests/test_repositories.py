# -*- coding: utf-8 -*-
"""
Tests de los repositorios JSON (sobre una carpeta temporal)
"""
import json
import os
import threading

import pytest

from ezelectronics.repositories import (
    AuditRepository,
    CartRepository,
    IAuditRepository,
    ICartRepository,
    IProductRepository,
    IReviewRepository,
    IUserRepository,
    ProductRepository,
    ReviewRepository,
    UserRepository,
)


@pytest.fixture
def users(tmp_path):
    return UserRepository(str(tmp_path))


@pytest.fixture
def products(tmp_path):
    return ProductRepository(str(tmp_path))


def test_repositories_satisfy_interfaces(tmp_path):
    assert isinstance(UserRepository(str(tmp_path)), IUserRepository)
    assert isinstance(ProductRepository(str(tmp_path)), IProductRepository)
    assert isinstance(AuditRepository(str(tmp_path)), IAuditRepository)
    assert isinstance(CartRepository(str(tmp_path)), ICartRepository)
    assert isinstance(ReviewRepository(str(tmp_path)), IReviewRepository)


def test_files_created_empty(tmp_path):
    UserRepository(str(tmp_path / 'nested'))
    with open(tmp_path / 'nested' / 'users.json', encoding='utf-8') as f:
        assert json.load(f) == {}


# ---------------------------------------------------------------------------
# Usuarios
# ---------------------------------------------------------------------------

def test_create_and_get_user(users, tmp_path):
    assert users.create_user('alice', 'hash', {'name': 'Alice', 'role': 'Customer'}) is True
    assert users.get_user('alice')['name'] == 'Alice'
    assert users.get_password_hash('alice') == 'hash'

    # Persistido en disco
    with open(tmp_path / 'users.json', encoding='utf-8') as f:
        assert 'alice' in json.load(f)


def test_duplicate_user_case_insensitive(users):
    users.create_user('alice', 'h', {'role': 'Customer'})
    assert users.user_exists('ALICE') is True
    assert users.create_user('Alice', 'h', {'role': 'Customer'}) is False


def test_lookup_is_exact(users):
    users.create_user('alice', 'h', {'role': 'Customer'})
    assert users.get_user('Alice') is None


def test_get_user_returns_copy(users):
    users.create_user('alice', 'h', {'name': 'Alice', 'role': 'Customer'})
    users.get_user('alice')['name'] = 'Changed'
    assert users.get_user('alice')['name'] == 'Alice'


def test_update_and_delete_missing_user(users):
    assert users.update_user('ghost', {'name': 'x'}) is False
    assert users.delete_user('ghost') is False


def test_delete_all_keeps_roles(users):
    users.create_user('root', 'h', {'role': 'Admin'})
    users.create_user('alice', 'h', {'role': 'Customer'})
    users.create_user('carol', 'h', {'role': 'Manager'})

    assert users.delete_all(keep_roles=['Admin']) == 2
    assert list(users.load()) == ['root']
    assert list(users.get_users_by_role('Admin')) == ['root']


# ---------------------------------------------------------------------------
# Productos
# ---------------------------------------------------------------------------

def test_product_crud(products):
    assert products.create_product('X1', {'category': 'Smartphone', 'quantity': 2}) is True
    assert products.create_product('X1', {'category': 'Laptop', 'quantity': 9}) is False
    assert products.get_product('X1')['quantity'] == 2

    assert products.delete_product('NOPE') is False
    assert products.delete_product('X1') is True
    assert products.product_exists('X1') is False


def test_list_products_filters(products):
    products.create_product('X1', {'category': 'Smartphone', 'quantity': 2})
    products.create_product('X2', {'category': 'Smartphone', 'quantity': 0})
    products.create_product('L1', {'category': 'Laptop', 'quantity': 1})

    assert len(products.list_products()) == 3
    assert {p['model'] for p in products.list_products(category='Smartphone')} == {'X1', 'X2'}
    assert [p['model'] for p in products.list_products(model='L1')] == ['L1']
    assert {p['model'] for p in products.list_products(available_only=True)} == {'X1', 'L1'}


def test_delete_all_products(products):
    products.create_product('X1', {'quantity': 1})
    assert products.delete_all() is True
    assert products.load() == {}


def test_adjust_quantities_all_or_nothing(products):
    products.create_product('X1', {'quantity': 5, 'sellingDate': None})
    products.create_product('L1', {'quantity': 1, 'sellingDate': None})

    assert products.adjust_quantities({'X1': -2, 'L1': -1}, '2024-06-01') == {'X1': 3, 'L1': 0}
    assert products.get_product('L1')['sellingDate'] == '2024-06-01'
    assert products.get_product('X1')['sellingDate'] is None

    # L1 quedaría negativo: tampoco se toca X1
    assert products.adjust_quantities({'X1': -1, 'L1': -1}) is None
    assert products.get_product('X1')['quantity'] == 3
    assert products.adjust_quantities({'NOPE': 1}) is None


def test_adjust_quantities_restock_keeps_selling_date(products):
    products.create_product('X1', {'quantity': 0, 'sellingDate': '2024-01-05'})
    assert products.adjust_quantities({'X1': 4}, '2024-06-01') == {'X1': 4}
    assert products.get_product('X1')['sellingDate'] == '2024-01-05'


def test_concurrent_sales_never_lose_a_decrement(products):
    products.create_product('X1', {'quantity': 10})
    results = []

    def sell():
        results.append(products.adjust_quantities({'X1': -1}))

    threads = [threading.Thread(target=sell) for _ in range(15)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert products.get_product('X1')['quantity'] == 0
    assert sum(1 for r in results if r is not None) == 10


def test_corrupt_file_is_not_hidden(products):
    with open(products.file_path, 'w', encoding='utf-8') as f:
        f.write('{ no es json')
    with pytest.raises(json.JSONDecodeError):
        products.load()


def test_no_temp_file_left_behind(products):
    products.create_product('X1', {'quantity': 1})
    assert not os.path.exists(products.file_path + '.tmp')


# ---------------------------------------------------------------------------
# Auditoría
# ---------------------------------------------------------------------------

def test_audit_newest_first(tmp_path):
    repo = AuditRepository(str(tmp_path))
    repo.log('STOCK', 'carol', 'primero')
    repo.log('VENTA', None, 'segundo', 'X1')

    logs = repo.load()
    assert [e['message'] for e in logs] == ['segundo', 'primero']
    assert logs[0]['user'] == 'sistema'
    assert logs[0]['related_id'] == 'X1'
    assert [e['message'] for e in repo.filter_by_type('STOCK')] == ['primero']


def test_audit_capped(tmp_path):
    repo = AuditRepository(str(tmp_path))
    repo.MAX_LOGS = 3
    for i in range(5):
        repo.log('SISTEMA', 'root', f'evento {i}')
    assert len(repo.get_all()) == 3
    assert repo.get_all()[0]['message'] == 'evento 4'


# ---------------------------------------------------------------------------
# Carritos
# ---------------------------------------------------------------------------

def test_current_cart_then_paid(tmp_path):
    carts = CartRepository(str(tmp_path))
    assert carts.get_current_cart('alice') is None

    carts.save_current_cart('alice', {'total': 10.0, 'products': [
        {'model': 'X1', 'quantity': 1, 'category': 'Smartphone', 'price': 10.0}
    ]})
    carts.save_current_cart('alice', {'total': 20.0, 'products': [
        {'model': 'X1', 'quantity': 2, 'category': 'Smartphone', 'price': 10.0}
    ]})
    assert len(carts.load()) == 1
    assert carts.get_current_cart('alice')['total'] == 20.0

    current = carts.get_current_cart('alice')
    assert carts.mark_paid('alice', dict(current, paymentDate='2024-06-01')) is True
    assert carts.get_current_cart('alice') is None
    assert [c['paymentDate'] for c in carts.get_paid_carts('alice')] == ['2024-06-01']
    assert carts.mark_paid('alice', current) is False


def test_carts_are_per_customer(tmp_path):
    carts = CartRepository(str(tmp_path))
    carts.save_current_cart('alice', {'total': 0.0, 'products': []})
    carts.save_current_cart('bob', {'total': 0.0, 'products': []})
    assert carts.get_current_cart('bob')['customer'] == 'bob'
    assert carts.get_paid_carts('alice') == []

    assert carts.delete_all() is True
    assert carts.load() == []


# ---------------------------------------------------------------------------
# Reseñas
# ---------------------------------------------------------------------------

def test_one_review_per_user_and_model(tmp_path):
    reviews = ReviewRepository(str(tmp_path))
    data = {'score': 4, 'date': '2024-06-01', 'comment': 'ok'}
    assert reviews.add_review('X1', 'alice', data) is True
    assert reviews.add_review('X1', 'alice', data) is False
    assert reviews.add_review('X1', 'bob', data) is True
    assert reviews.add_review('L1', 'alice', data) is True

    assert [r['user'] for r in reviews.get_product_reviews('X1')] == ['alice', 'bob']
    assert reviews.review_exists('L1', 'alice') is True


def test_delete_reviews(tmp_path):
    reviews = ReviewRepository(str(tmp_path))
    data = {'score': 4, 'date': '2024-06-01', 'comment': 'ok'}
    reviews.add_review('X1', 'alice', data)
    reviews.add_review('X1', 'bob', data)
    reviews.add_review('L1', 'alice', data)

    assert reviews.delete_review('X1', 'alice') is True
    assert reviews.delete_review('X1', 'alice') is False
    assert reviews.delete_reviews_of_product('X1') == 1
    assert [r['model'] for r in reviews.load()] == ['L1']
    assert reviews.delete_all() is True
    assert reviews.load() == []
