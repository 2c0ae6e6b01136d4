# -*- coding: utf-8 -*-
"""
Fixtures compartidas: repositorios en memoria que cuentan las llamadas que
modifican datos, un reloj fijo y usuarios de ejemplo.
"""
from datetime import date

import pytest

from ezelectronics import config
from ezelectronics.models import User, UserRole
from ezelectronics.services import (
    AuditService,
    CartService,
    ProductService,
    ReviewService,
    UserService,
)


TODAY = date(2024, 6, 1)


@pytest.fixture(autouse=True)
def logs_in_tmp(tmp_path, monkeypatch):
    """Los logs de profiling nunca se escriben dentro del paquete."""
    monkeypatch.setattr(config, 'LOGS_DIR', str(tmp_path / 'logs'))


# ═══════════════════════════════════════════════════════════════════════════
# REPOSITORIOS EN MEMORIA
# ═══════════════════════════════════════════════════════════════════════════

class FakeUserRepository:
    def __init__(self):
        self.users = {}
        self.mutations = []
        self.reads = 0

    def load(self):
        self.reads += 1
        return {u: dict(d) for u, d in self.users.items()}

    def get_user(self, username):
        self.reads += 1
        data = self.users.get(username)
        return dict(data) if data is not None else None

    def user_exists(self, username):
        self.reads += 1
        return any(u.lower() == username.lower() for u in self.users)

    def create_user(self, username, password_hash, data):
        self.mutations.append(('create_user', username))
        if username in self.users:
            return False
        record = dict(data)
        record['password'] = password_hash
        self.users[username] = record
        return True

    def update_user(self, username, updates):
        self.mutations.append(('update_user', username))
        if username not in self.users:
            return False
        self.users[username].update(updates)
        return True

    def delete_user(self, username):
        self.mutations.append(('delete_user', username))
        return self.users.pop(username, None) is not None

    def get_users_by_role(self, role):
        self.reads += 1
        return {u: dict(d) for u, d in self.users.items() if d.get('role') == role}

    def get_password_hash(self, username):
        self.reads += 1
        data = self.users.get(username)
        return data.get('password') if data else None

    def delete_all(self, keep_roles=()):
        self.mutations.append(('delete_all', tuple(keep_roles)))
        before = len(self.users)
        self.users = {u: d for u, d in self.users.items() if d.get('role') in keep_roles}
        return before - len(self.users)

    def seed(self, username, name, surname, role, **extra):
        record = {'name': name, 'surname': surname, 'role': role,
                  'address': '', 'birthdate': '', 'password': ''}
        record.update(extra)
        self.users[username] = record


class FakeProductRepository:
    def __init__(self):
        self.products = {}
        self.mutations = []

    def load(self):
        return {m: dict(d) for m, d in self.products.items()}

    def get_product(self, model):
        data = self.products.get(model)
        return dict(data) if data is not None else None

    def product_exists(self, model):
        return model in self.products

    def create_product(self, model, data):
        self.mutations.append(('create_product', model))
        if model in self.products:
            return False
        self.products[model] = dict(data)
        return True

    def adjust_quantities(self, deltas, stamp_when_empty=None):
        self.mutations.append(('adjust_quantities', dict(deltas)))
        result = {}
        for model, delta in deltas.items():
            if model not in self.products:
                return None
            new_quantity = self.products[model].get('quantity', 0) + delta
            if new_quantity < 0:
                return None
            result[model] = new_quantity
        for model, new_quantity in result.items():
            self.products[model]['quantity'] = new_quantity
            if new_quantity == 0 and deltas[model] < 0 and stamp_when_empty:
                self.products[model]['sellingDate'] = stamp_when_empty
        return result

    def delete_product(self, model):
        self.mutations.append(('delete_product', model))
        return self.products.pop(model, None) is not None

    def delete_all(self):
        self.mutations.append(('delete_all',))
        self.products.clear()
        return True

    def list_products(self, category=None, model=None, available_only=False):
        results = []
        for key, data in self.products.items():
            if model is not None and key != model:
                continue
            if category is not None and data.get('category') != category:
                continue
            if available_only and data.get('quantity', 0) <= 0:
                continue
            row = dict(data)
            row['model'] = key
            results.append(row)
        return results


class FakeAuditRepository:
    def __init__(self):
        self.entries = []

    def load(self):
        return list(self.entries)

    def log(self, log_type, user, message, related_id='', details=None):
        self.entries.insert(0, {
            'type': log_type,
            'user': user or 'sistema',
            'message': message,
            'related_id': related_id,
            'details': details or {},
        })

    def filter_by_type(self, log_type):
        return [e for e in self.entries if e['type'] == log_type]


class FakeCartRepository:
    def __init__(self):
        self.carts = []
        self.mutations = []

    def load(self):
        return [dict(c) for c in self.carts]

    def _current_index(self, username):
        for i, cart in enumerate(self.carts):
            if cart['customer'] == username and not cart['paid']:
                return i
        return None

    def get_current_cart(self, username):
        index = self._current_index(username)
        return dict(self.carts[index]) if index is not None else None

    def save_current_cart(self, username, cart_data):
        self.mutations.append(('save_current_cart', username))
        record = dict(cart_data, customer=username, paid=False, paymentDate=None)
        index = self._current_index(username)
        if index is None:
            self.carts.append(record)
        else:
            self.carts[index] = record

    def mark_paid(self, username, cart_data):
        self.mutations.append(('mark_paid', username))
        index = self._current_index(username)
        if index is None:
            return False
        self.carts[index] = dict(cart_data, customer=username, paid=True)
        return True

    def get_paid_carts(self, username):
        return [dict(c) for c in self.carts if c['customer'] == username and c['paid']]

    def delete_all(self):
        self.mutations.append(('delete_all',))
        self.carts = []
        return True


class FakeReviewRepository:
    def __init__(self):
        self.reviews = []
        self.mutations = []

    def get_product_reviews(self, model):
        return [dict(r) for r in self.reviews if r['model'] == model]

    def review_exists(self, model, user):
        return any(r['model'] == model and r['user'] == user for r in self.reviews)

    def add_review(self, model, user, data):
        self.mutations.append(('add_review', model, user))
        if any(r['model'] == model and r['user'] == user for r in self.reviews):
            return False
        self.reviews.append(dict(data, model=model, user=user))
        return True

    def delete_review(self, model, user):
        self.mutations.append(('delete_review', model, user))
        before = len(self.reviews)
        self.reviews = [r for r in self.reviews if not (r['model'] == model and r['user'] == user)]
        return len(self.reviews) < before

    def delete_reviews_of_product(self, model):
        self.mutations.append(('delete_reviews_of_product', model))
        before = len(self.reviews)
        self.reviews = [r for r in self.reviews if r['model'] != model]
        return before - len(self.reviews)

    def delete_all(self):
        self.mutations.append(('delete_all',))
        self.reviews = []
        return True


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def user_repo():
    repo = FakeUserRepository()
    repo.seed('alice', 'Alice', 'Rossi', 'Customer')
    repo.seed('bob', 'Bob', 'Bianchi', 'Customer')
    repo.seed('carol', 'Carol', 'Verdi', 'Manager')
    repo.seed('root', 'Root', 'Admin', 'Admin')
    repo.seed('admin2', 'Second', 'Admin', 'Admin')
    return repo


@pytest.fixture
def product_repo():
    return FakeProductRepository()


@pytest.fixture
def cart_repo():
    return FakeCartRepository()


@pytest.fixture
def review_repo():
    return FakeReviewRepository()


@pytest.fixture
def audit_repo():
    return FakeAuditRepository()


@pytest.fixture
def audit_service(audit_repo):
    return AuditService(audit_repo)


@pytest.fixture
def user_service(user_repo, audit_service):
    return UserService(user_repo, audit_service, clock=lambda: TODAY)


@pytest.fixture
def product_service(product_repo, audit_service):
    return ProductService(product_repo, audit_service, clock=lambda: TODAY)


@pytest.fixture
def cart_service(cart_repo, product_repo, audit_service):
    return CartService(cart_repo, product_repo, audit_service, clock=lambda: TODAY)


@pytest.fixture
def review_service(review_repo, product_repo, audit_service):
    return ReviewService(review_repo, product_repo, audit_service, clock=lambda: TODAY)


@pytest.fixture
def alice():
    return User('alice', 'Alice', 'Rossi', UserRole.CUSTOMER)


@pytest.fixture
def bob():
    return User('bob', 'Bob', 'Bianchi', UserRole.CUSTOMER)


@pytest.fixture
def carol():
    return User('carol', 'Carol', 'Verdi', UserRole.MANAGER)


@pytest.fixture
def root():
    return User('root', 'Root', 'Admin', UserRole.ADMIN)


@pytest.fixture
def admin2():
    return User('admin2', 'Second', 'Admin', UserRole.ADMIN)
