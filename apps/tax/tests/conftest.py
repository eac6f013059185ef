"""
Fixtures comunes de los tests de IVA / IRP
"""
from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth.models import User

from apps.transactions.models import DeductionCategory, Transaction


@pytest.fixture
def test_user(db):
    """Contribuyente de prueba"""
    return User.objects.create_user(username='tester', password='pass')


@pytest.fixture
def other_user(db):
    """Otro contribuyente (aislamiento de datos)"""
    return User.objects.create_user(username='other', password='pass')


@pytest.fixture
def auth_client(client, test_user):
    """Cliente con sesión iniciada"""
    client.login(username='tester', password='pass')
    return client


@pytest.fixture
def make_transaction(test_user):
    """Crea comprobantes registrados con valores por defecto razonables"""
    def _make(**kwargs):
        values = {
            'user': test_user,
            'type': Transaction.INGRESO,
            'transaction_date': date(2024, 3, 15),
            'gross_amount': Decimal('1100000'),
            'iva_rate': 10,
        }
        values.update(kwargs)
        return Transaction.objects.create(**values)
    return _make


@pytest.fixture
def irp_salud(db):
    return DeductionCategory.objects.get(code='IRP_SALUD')


@pytest.fixture
def irp_actividad(db):
    return DeductionCategory.objects.get(code='IRP_ACTIVIDAD')


@pytest.fixture
def iva_uso_mixto(db):
    return DeductionCategory.objects.get(code='IVA_USO_MIXTO')
