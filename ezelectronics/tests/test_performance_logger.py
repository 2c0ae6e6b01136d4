# -*- coding: utf-8 -*-
"""
Tests del sistema de profiling interno
"""
import os

import pytest

from ezelectronics import config
from ezelectronics import performance_logger as perf

profiling_only = pytest.mark.skipif(
    not perf.ENABLE_PROFILING, reason='profiling desactivado (EZ_ENABLE_PROFILING=0)'
)


@pytest.fixture(autouse=True)
def clean_stats():
    perf.reset_stats()
    yield
    perf.reset_stats()


@profiling_only
def test_profile_function_counts_calls():
    @perf.profile_function(name='Sumar')
    def add(a, b):
        return a + b

    assert add(2, 3) == 5
    assert add(1, 1) == 2

    stats = perf.get_function_stats()['Sumar']
    assert stats['calls'] == 2
    assert stats['max_time'] >= stats['avg_time'] >= 0


@profiling_only
def test_profile_function_without_parentheses_keeps_exceptions():
    @perf.profile_function
    def boom():
        raise KeyError('x')

    with pytest.raises(KeyError):
        boom()
    assert boom.__name__ == 'boom'
    assert perf.get_function_stats()['boom']['calls'] == 1


def test_route_names():
    assert perf._get_route_name('PATCH', '/ezelectronics/products/X1/sell',
                                '/ezelectronics/products/<model>/sell') == 'Vender producto'
    assert perf._get_route_name('PATCH', '/ezelectronics/carts', '/ezelectronics/carts') == 'Pagar carrito'
    assert perf._get_route_name('GET', '/otra') == 'GET /otra'


def test_route_logs_written_to_logs_dir():
    perf.log_route_performance('GET', '/ezelectronics/products', '/ezelectronics/products', 12.0, 200, 'carol')
    perf.log_slow_route('GET', '/ezelectronics/products', '/ezelectronics/products', 900.0, 'carol', 'CRITICAL')

    with open(os.path.join(config.LOGS_DIR, perf.PERFORMANCE_LOG), encoding='utf-8') as f:
        content = f.read()
    assert 'Listar productos' in content
    assert 'Usuario: carol' in content

    assert os.path.exists(os.path.join(config.LOGS_DIR, perf.SLOW_ROUTES_LOG))
    assert not os.path.exists(os.path.join(config.LOGS_DIR, perf.SLOW_FUNCTIONS_LOG))
