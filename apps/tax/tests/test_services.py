"""
Tests de los calculadores de IVA / IRP

Los cálculos con base de datos usan TransactionLedger; los casos de error
y de tendencia usan un libro en memoria.
"""
import logging
from datetime import date
from decimal import Decimal

import pytest

from apps.tax.models import TaxObligation
from apps.tax.services import InvalidPeriodError, IRPCalculator, IVACalculator
from apps.transactions.models import Transaction
from .stubs import FailingLedger, StubLedger, ledger_tx


@pytest.mark.django_db
class TestMonthlyIVA:
    """Liquidación mensual de IVA"""

    def test_income_and_creditable_expense(self, test_user, make_transaction):
        """Venta de 1.100.000 y compra acreditable de 550.000 al 10%"""
        make_transaction(type=Transaction.INGRESO, gross_amount=Decimal('1100000'))
        make_transaction(type=Transaction.EGRESO, gross_amount=Decimal('550000'), is_creditable_iva=True)

        result = IVACalculator().calculate_monthly_iva(test_user.id, 2024, 3)

        assert result['period'] == date(2024, 3, 1)
        assert result['debito_fiscal'] == Decimal('100000')
        assert result['credito_fiscal'] == Decimal('50000')
        assert result['saldo_iva'] == Decimal('50000')
        assert result['total_ingresos'] == Decimal('1100000')
        assert result['total_egresos'] == Decimal('550000')
        assert result['qty_ingresos'] == 1
        assert result['qty_egresos'] == 1

    def test_detail_lines(self, test_user, make_transaction):
        make_transaction(
            type=Transaction.EGRESO,
            gross_amount=Decimal('550000'),
            is_creditable_iva=True,
            document_number='001-002-0000123',
            name_counterpart='Proveedor S.A.',
        )

        result = IVACalculator().calculate_monthly_iva(test_user.id, 2024, 3)

        assert result['detalle_debito'] == []
        assert result['detalle_credito'] == [{
            'date': date(2024, 3, 15),
            'document_number': '001-002-0000123',
            'counterpart': 'Proveedor S.A.',
            'amount': Decimal('550000'),
            'iva': Decimal('50000'),
        }]

    def test_only_registered_transactions(self, test_user, make_transaction):
        """Borradores y anulados no cuentan"""
        make_transaction(gross_amount=Decimal('1100000'))
        make_transaction(gross_amount=Decimal('2200000'), status=Transaction.STATUS_DRAFT)
        make_transaction(gross_amount=Decimal('3300000'), status=Transaction.STATUS_VOIDED)

        result = IVACalculator().calculate_monthly_iva(test_user.id, 2024, 3)

        assert result['debito_fiscal'] == Decimal('100000')
        assert result['qty_ingresos'] == 1

    def test_non_creditable_expense_ignored(self, test_user, make_transaction):
        make_transaction(type=Transaction.EGRESO, gross_amount=Decimal('550000'))

        result = IVACalculator().calculate_monthly_iva(test_user.id, 2024, 3)

        assert result['credito_fiscal'] == 0
        assert result['total_egresos'] == 0
        assert result['qty_egresos'] == 0

    def test_partial_credit_category(self, test_user, make_transaction, iva_uso_mixto):
        """Uso mixto: se acredita el 50% del IVA"""
        make_transaction(
            type=Transaction.EGRESO,
            gross_amount=Decimal('1100000'),
            iva_deduction_category=iva_uso_mixto,
        )

        result = IVACalculator().calculate_monthly_iva(test_user.id, 2024, 3)

        assert result['credito_fiscal'] == Decimal('50000')

    def test_negative_saldo_is_credit_balance(self, test_user, make_transaction):
        make_transaction(type=Transaction.INGRESO, gross_amount=Decimal('110000'))
        make_transaction(type=Transaction.EGRESO, gross_amount=Decimal('1100000'), is_creditable_iva=True)

        result = IVACalculator().calculate_monthly_iva(test_user.id, 2024, 3)

        assert result['saldo_iva'] == Decimal('-90000')
        assert result['saldo_iva'] == result['debito_fiscal'] - result['credito_fiscal']

    def test_other_month_and_other_user_excluded(self, test_user, other_user, make_transaction):
        make_transaction(transaction_date=date(2024, 4, 1))
        make_transaction(transaction_date=date(2024, 2, 29))
        make_transaction(user=other_user)

        result = IVACalculator().calculate_monthly_iva(test_user.id, 2024, 3)

        assert result['debito_fiscal'] == 0
        assert result['qty_ingresos'] == 0

    def test_empty_month(self, test_user):
        result = IVACalculator().calculate_monthly_iva(test_user.id, 2024, 3)

        assert result['debito_fiscal'] == 0
        assert result['credito_fiscal'] == 0
        assert result['saldo_iva'] == 0
        assert result['detalle_debito'] == []
        assert result['detalle_credito'] == []

    @pytest.mark.parametrize("month", [0, 13])
    def test_invalid_month(self, test_user, month):
        with pytest.raises(InvalidPeriodError):
            IVACalculator().calculate_monthly_iva(test_user.id, 2024, month)


class TestIVAWithLedgerStub:
    """Calculador con libro inyectado"""

    def test_ledger_failure_propagates(self, caplog):
        calculator = IVACalculator(ledger=FailingLedger())

        with caplog.at_level(logging.ERROR, logger='apps.tax.services'):
            with pytest.raises(ConnectionError):
                calculator.calculate_monthly_iva(1, 2024, 3)

        assert 'Error al calcular IVA' in caplog.text

    def test_uses_injected_ledger(self):
        ledger = StubLedger(transactions=[
            ledger_tx(gross_amount=Decimal('1100000'), iva_amount=Decimal('100000')),
        ])
        calculator = IVACalculator(ledger=ledger)

        result = calculator.calculate_monthly_iva(7, 2024, 3)

        assert calculator.ledger is ledger
        assert ledger.calls == [('registered_transactions', 7, date(2024, 3, 1), date(2024, 3, 31))]
        assert result['debito_fiscal'] == Decimal('100000')

    def test_trend_fills_missing_months(self):
        ledger = StubLedger(monthly=[
            {'month': date(2024, 1, 1), 'debito_fiscal': Decimal('100000'), 'credito_fiscal': Decimal('40000')},
            {'month': date(2024, 3, 1), 'debito_fiscal': Decimal('0'), 'credito_fiscal': Decimal('25000')},
        ])

        trend = IVACalculator(ledger=ledger).get_iva_trend(1, months=4, today=date(2024, 3, 20))

        assert [row['period'] for row in trend] == ['2023-12', '2024-01', '2024-02', '2024-03']
        assert trend[0]['debito_fiscal'] == 0
        assert trend[1]['saldo_iva'] == Decimal('60000')
        assert trend[2] == {
            'period': '2024-02',
            'debito_fiscal': Decimal('0'),
            'credito_fiscal': Decimal('0'),
            'saldo_iva': Decimal('0'),
        }
        assert trend[3]['saldo_iva'] == Decimal('-25000')
        assert ledger.calls == [('monthly_iva_totals', 1, date(2023, 12, 1), date(2024, 3, 31))]

    def test_trend_invalid_months(self):
        with pytest.raises(InvalidPeriodError):
            IVACalculator(ledger=StubLedger()).get_iva_trend(1, months=0, today=date(2024, 3, 1))

    def test_trend_ledger_failure(self):
        with pytest.raises(ConnectionError):
            IVACalculator(ledger=FailingLedger()).get_iva_trend(1, months=3, today=date(2024, 3, 1))


@pytest.mark.django_db
class TestIVATrendDatabase:
    def test_trend_aggregates_by_month(self, test_user, make_transaction):
        make_transaction(transaction_date=date(2024, 2, 10), gross_amount=Decimal('1100000'))
        make_transaction(transaction_date=date(2024, 2, 20), gross_amount=Decimal('2200000'))
        make_transaction(
            transaction_date=date(2024, 3, 5),
            type=Transaction.EGRESO,
            gross_amount=Decimal('550000'),
            is_creditable_iva=True,
        )
        make_transaction(transaction_date=date(2024, 3, 6), status=Transaction.STATUS_VOIDED)

        trend = IVACalculator().get_iva_trend(test_user.id, months=3, today=date(2024, 3, 31))

        assert len(trend) == 3
        assert trend[0]['period'] == '2024-01'
        assert trend[0]['saldo_iva'] == 0
        assert trend[1]['debito_fiscal'] == Decimal('300000')
        assert trend[2]['credito_fiscal'] == Decimal('50000')
        assert trend[2]['saldo_iva'] == Decimal('-50000')


@pytest.mark.django_db
class TestForm120:
    def test_sections(self, test_user, make_transaction):
        make_transaction(type=Transaction.INGRESO, gross_amount=Decimal('1100000'))
        make_transaction(
            type=Transaction.EGRESO,
            gross_amount=Decimal('550000'),
            is_creditable_iva=True,
            document_number='001-001-0000042',
            name_counterpart='Librería Central',
        )

        form = IVACalculator().generate_form120_data(test_user.id, 2024, 3)

        assert form['rubro1'] == {'ventas': Decimal('1100000'), 'iva_debito': Decimal('100000')}
        assert form['rubro3']['compras'] == Decimal('550000')
        assert form['rubro3']['iva_credito'] == Decimal('50000')
        assert form['rubro3']['compras_detail'][0]['proveedor'] == 'Librería Central'
        assert form['rubro3']['compras_detail'][0]['factura'] == '001-001-0000042'
        assert form['rubro4']['saldo_a_pagar'] == Decimal('50000')
        assert form['rubro4']['saldo_a_favor'] == 0

    def test_credit_balance(self, test_user, make_transaction):
        make_transaction(type=Transaction.EGRESO, gross_amount=Decimal('550000'), is_creditable_iva=True)

        form = IVACalculator().generate_form120_data(test_user.id, 2024, 3)

        assert form['rubro4']['saldo_a_pagar'] == 0
        assert form['rubro4']['saldo_a_favor'] == Decimal('50000')


@pytest.mark.django_db
class TestAnnualIRP:
    """Liquidación anual del IRP"""

    def test_no_data(self, test_user):
        result = IRPCalculator().calculate_annual_irp(test_user.id, 2024)

        assert result['fiscal_year'] == 2024
        assert result['gross_income'] == 0
        assert result['deductible_expenses'] == 0
        assert result['net_income'] == 0
        assert result['total_tax'] == 0
        assert result['tax_to_pay'] == 0
        assert result['expenses_by_category'] == {}

    def test_net_income_and_categories(self, test_user, make_transaction, irp_salud, irp_actividad):
        """Los ingresos y gastos se toman sin IVA"""
        make_transaction(type=Transaction.INGRESO, gross_amount=Decimal('110000000'), transaction_date=date(2024, 2, 1))
        make_transaction(type=Transaction.EGRESO, gross_amount=Decimal('11000000'), irp_deduction_category=irp_salud)
        make_transaction(type=Transaction.EGRESO, gross_amount=Decimal('22000000'), irp_deduction_category=irp_actividad)
        make_transaction(type=Transaction.EGRESO, gross_amount=Decimal('5000000'), iva_rate=0, is_deductible_irp=True)
        make_transaction(type=Transaction.EGRESO, gross_amount=Decimal('9900000'))

        result = IRPCalculator().calculate_annual_irp(test_user.id, 2024)

        assert result['gross_income'] == Decimal('100000000')
        assert result['deductible_expenses'] == Decimal('35000000')
        assert result['net_income'] == Decimal('65000000')
        assert result['expenses_by_category'] == {
            'IRP_SALUD': Decimal('10000000'),
            'IRP_ACTIVIDAD': Decimal('20000000'),
            'uncategorized': Decimal('5000000'),
        }
        # 50M al 8% + 15M al 9%
        assert result['total_tax'] == Decimal('5350000')
        assert result['tax_to_pay'] == Decimal('5350000')

    def test_other_years_excluded(self, test_user, make_transaction):
        make_transaction(transaction_date=date(2023, 12, 31))
        make_transaction(transaction_date=date(2025, 1, 1))

        result = IRPCalculator().calculate_annual_irp(test_user.id, 2024)

        assert result['gross_income'] == 0

    def test_withholdings_reduce_tax_to_pay(self, test_user, make_transaction):
        make_transaction(gross_amount=Decimal('110000000'))
        TaxObligation.objects.create(
            user=test_user, tax_type='IRP', fiscal_period=date(2024, 1, 1),
            due_date=date(2025, 3, 31), withholdings_amount=Decimal('3000000'),
        )
        # otro período y otro impuesto: no cuentan
        TaxObligation.objects.create(
            user=test_user, tax_type='IRP', fiscal_period=date(2023, 1, 1),
            due_date=date(2024, 3, 31), withholdings_amount=Decimal('999999'),
        )
        TaxObligation.objects.create(
            user=test_user, tax_type='IVA', fiscal_period=date(2024, 1, 1),
            due_date=date(2024, 2, 25), withholdings_amount=Decimal('888888'),
        )

        result = IRPCalculator().calculate_annual_irp(test_user.id, 2024)

        assert result['total_tax'] == Decimal('8500000')
        assert result['withholdings'] == Decimal('3000000')
        assert result['tax_to_pay'] == Decimal('5500000')

    def test_withholdings_exceeding_tax(self, test_user, make_transaction):
        make_transaction(gross_amount=Decimal('11000000'))
        TaxObligation.objects.create(
            user=test_user, tax_type='IRP', fiscal_period=date(2024, 1, 1),
            due_date=date(2025, 3, 31), withholdings_amount=Decimal('5000000'),
        )

        result = IRPCalculator().calculate_annual_irp(test_user.id, 2024)

        assert result['tax_to_pay'] == 0

    def test_expenses_above_income(self, test_user, make_transaction, irp_actividad):
        make_transaction(gross_amount=Decimal('11000000'))
        make_transaction(type=Transaction.EGRESO, gross_amount=Decimal('22000000'), irp_deduction_category=irp_actividad)

        result = IRPCalculator().calculate_annual_irp(test_user.id, 2024)

        assert result['net_income'] == Decimal('-10000000')
        assert result['total_tax'] == 0
        assert result['tax_to_pay'] == 0

    def test_ledger_failure_propagates(self):
        with pytest.raises(ConnectionError):
            IRPCalculator(ledger=FailingLedger()).calculate_annual_irp(1, 2024)


@pytest.mark.django_db
class TestProjection:
    """Proyección del IRP al cierre"""

    def test_month_12_equals_actual(self, test_user, make_transaction, irp_salud):
        make_transaction(gross_amount=Decimal('110000000'), transaction_date=date(2024, 6, 1))
        make_transaction(type=Transaction.EGRESO, gross_amount=Decimal('11000000'), irp_deduction_category=irp_salud)

        projection = IRPCalculator().project_annual_irp(test_user.id, 2024, 12)

        assert projection['months_elapsed'] == 12
        assert projection['months_remaining'] == 0
        assert projection['projected'] == projection['actual']

    def test_month_6_doubles(self, test_user, make_transaction):
        make_transaction(gross_amount=Decimal('33000000'), transaction_date=date(2024, 1, 10))
        make_transaction(gross_amount=Decimal('33000000'), transaction_date=date(2024, 6, 30))
        # después del mes de corte: fuera de la proyección
        make_transaction(gross_amount=Decimal('99000000'), transaction_date=date(2024, 7, 1))

        projection = IRPCalculator().project_annual_irp(test_user.id, 2024, 6)

        assert projection['actual']['gross_income'] == Decimal('60000000')
        assert projection['projected']['gross_income'] == Decimal('120000000')
        assert projection['projected']['net_income'] == Decimal('120000000')
        # 50M al 8% + 70M al 9%
        assert projection['projected']['total_tax'] == Decimal('10300000')
        assert projection['months_remaining'] == 6

    def test_withholdings_not_projected(self, test_user, make_transaction):
        make_transaction(gross_amount=Decimal('11000000'), transaction_date=date(2024, 2, 1))
        TaxObligation.objects.create(
            user=test_user, tax_type='IRP', fiscal_period=date(2024, 1, 1),
            due_date=date(2025, 3, 31), withholdings_amount=Decimal('100000'),
        )

        projection = IRPCalculator().project_annual_irp(test_user.id, 2024, 3)

        assert projection['projected']['withholdings'] == Decimal('100000')

    @pytest.mark.parametrize("month", [0, 13])
    def test_invalid_month(self, test_user, month):
        with pytest.raises(InvalidPeriodError):
            IRPCalculator().project_annual_irp(test_user.id, 2024, month)


@pytest.mark.django_db
class TestForm515:
    def test_sections(self, test_user, make_transaction, irp_salud):
        profile = test_user.profile
        profile.ruc = '80000519'
        profile.dv = '8'
        profile.full_name = 'Juan Pérez'
        profile.save()

        make_transaction(gross_amount=Decimal('220000000'))
        make_transaction(type=Transaction.EGRESO, gross_amount=Decimal('22000000'), irp_deduction_category=irp_salud)

        form = IRPCalculator().generate_form515_data(test_user.id, 2024)

        assert form['seccion_I'] == {
            'ruc': '80000519', 'dv': '8', 'nombre': 'Juan Pérez', 'ejercicio_fiscal': 2024,
        }
        assert form['seccion_II']['ingresos_brutos'] == Decimal('200000000')
        assert form['seccion_III']['egresos_deducibles'] == Decimal('20000000')
        assert form['seccion_III']['detalle_por_categoria'] == {'IRP_SALUD': Decimal('20000000')}
        assert form['seccion_IV']['renta_neta'] == Decimal('180000000')
        assert form['seccion_V']['total_impuesto'] == Decimal('16000000')
        assert form['seccion_VI']['retenciones'] == 0
        assert form['seccion_VII'] == {'saldo_a_pagar': Decimal('16000000'), 'saldo_a_favor': 0}

    def test_credit_balance(self):
        ledger = StubLedger(withholdings=Decimal('500000'))

        form = IRPCalculator(ledger=ledger).generate_form515_data(1, 2024)

        assert form['seccion_I']['ruc'] == ''
        assert form['seccion_VII'] == {'saldo_a_pagar': 0, 'saldo_a_favor': Decimal('500000')}
