"""
Fixtures comunes de los tests del libro de comprobantes
"""
from datetime import date
from decimal import Decimal

import openpyxl
import pytest
from django.contrib.auth.models import User

from apps.transactions.models import DeductionCategory, Transaction


@pytest.fixture
def test_user(db):
    """Contribuyente de prueba"""
    return User.objects.create_user(username='tester', password='pass')


@pytest.fixture
def iva_actividad(db):
    return DeductionCategory.objects.get(code='IVA_ACTIVIDAD')


@pytest.fixture
def iva_uso_mixto(db):
    return DeductionCategory.objects.get(code='IVA_USO_MIXTO')


@pytest.fixture
def irp_salud(db):
    return DeductionCategory.objects.get(code='IRP_SALUD')


@pytest.fixture
def expense(test_user):
    """Egreso sin categorías (se completa en cada test)"""
    return Transaction(
        user=test_user,
        type=Transaction.EGRESO,
        transaction_date=date(2024, 5, 10),
        gross_amount=Decimal('550000'),
        iva_rate=10,
    )


@pytest.fixture
def make_workbook(tmp_path):
    """Escribe una planilla .xlsx con encabezado + filas y devuelve la ruta"""
    def _make(header, rows, filename='compras.xlsx'):
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.append(header)
        for row in rows:
            ws.append(row)
        path = tmp_path / filename
        wb.save(path)
        return path
    return _make
