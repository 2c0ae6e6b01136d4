# -*- coding: utf-8 -*-
"""
Tests del servicio de auditoría
"""
from ezelectronics.models import AuditType


def test_sale_message_marks_sold_out(audit_service, audit_repo):
    audit_service.log_sale('carol', 'X1', 4, 6, '2024-01-05')
    audit_service.log_sale('carol', 'X1', 6, 0, '2024-01-06')

    sold_out, partial = audit_repo.entries
    assert sold_out['message'] == 'Venta de 6 x X1 - Stock restante: 0 - AGOTADO'
    assert partial['message'] == 'Venta de 4 x X1 - Stock restante: 6'
    assert partial['details'] == {'quantity': 4, 'new_quantity': 6, 'date': '2024-01-05'}


def test_log_accepts_enum_or_string(audit_service, audit_repo):
    audit_service.log(AuditType.SISTEMA, 'root', 'a')
    audit_service.log('SISTEMA', 'root', 'b')
    assert [e['type'] for e in audit_repo.entries] == ['SISTEMA', 'SISTEMA']


def test_get_logs_filter_and_limit(audit_service):
    audit_service.log_product_registered('carol', 'X1', 10, '2024-01-01')
    audit_service.log_stock_add('carol', 'X1', 5, 15, '2024-02-01')
    audit_service.log_product_deleted('root', 'X1')

    assert len(audit_service.get_logs()) == 3
    assert [e['type'] for e in audit_service.get_logs(limit=1)] == ['PRODUCTO']
    stock = audit_service.get_logs(AuditType.STOCK)
    assert len(stock) == 1
    assert stock[0]['message'] == 'Entrada de stock: +5 X1 - Nuevo stock: 15'


def test_cart_and_review_messages(audit_service, audit_repo):
    audit_service.log_cart_paid('alice', 1297.0, {'X1': 2, 'L1': 1}, '2024-06-01')
    audit_service.log_review_added('alice', 'X1', 5)
    audit_service.log_review_deleted('carol', 'X1', 3)

    deleted, added, paid = audit_repo.entries
    assert paid['type'] == 'CARRITO'
    assert paid['message'] == 'Carrito de alice pagado: 3 unidades - Total: 1297.00'
    assert added['message'] == 'Reseña de alice para X1: 5/5'
    assert deleted['details'] == {'count': 3}
    assert [e['type'] for e in audit_service.get_logs(AuditType.RESENA)] == ['RESEÑA', 'RESEÑA']
