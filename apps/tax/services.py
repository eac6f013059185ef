"""
Servicios de cálculo tributario

Implementa la liquidación de IVA e IRP según:
- Ley 6380/2019
- Decreto 3107/2019 y modificatorias
- Decreto 3184/2019

Los calculadores no guardan estado entre llamadas: cada cálculo hace su propia
lectura del libro, por lo que una misma instancia puede atender pedidos concurrentes.
Un error de lectura se registra en el log y se propaga sin reintentos.
"""
import logging
from datetime import date

from django.utils import timezone

from apps.transactions.models import Transaction
from .declarations import build_form120, build_form515
from .ledger import TransactionLedger
from .utils import (
    ZERO,
    InvalidPeriodError,
    calculate_irp_by_tramos,
    extrapolate_to_year_end,
    last_n_months,
    month_bounds,
    validate_month,
)

logger = logging.getLogger(__name__)

UNCATEGORIZED = 'uncategorized'


class IVACalculator:
    """Liquidación mensual de IVA (débito fiscal - crédito fiscal)"""

    def __init__(self, ledger=None):
        self._ledger = ledger if ledger is not None else TransactionLedger()

    @property
    def ledger(self):
        return self._ledger

    def calculate_monthly_iva(self, user_id, year: int, month: int):
        """
        Calcula el IVA del mes

        - Ingresos: el IVA suma al débito fiscal
        - Egresos con IVA acreditable: el IVA acreditable suma al crédito fiscal
        - El resto de los egresos no afecta al IVA

        saldo_iva = débito - crédito (negativo = saldo a favor que se arrastra)
        """
        period_start, period_end = month_bounds(year, month)
        logger.info(f"Calculando IVA: user={user_id}, período={month:02d}/{year}")

        try:
            transactions = self._ledger.registered_transactions(user_id, period_start, period_end)
        except Exception as e:
            logger.error(f"Error al calcular IVA ({month:02d}/{year}): {e}")
            raise

        result = {
            'period': period_start,
            'debito_fiscal': ZERO,
            'credito_fiscal': ZERO,
            'saldo_iva': ZERO,
            'total_ingresos': ZERO,
            'total_egresos': ZERO,
            'qty_ingresos': 0,
            'qty_egresos': 0,
            'detalle_debito': [],
            'detalle_credito': [],
        }

        for tx in transactions:
            if tx.type == Transaction.INGRESO:
                result['debito_fiscal'] += tx.iva_amount
                result['total_ingresos'] += tx.gross_amount
                result['qty_ingresos'] += 1
                result['detalle_debito'].append(self._summary_line(tx, tx.iva_amount))

            elif tx.type == Transaction.EGRESO and tx.is_creditable_iva:
                result['credito_fiscal'] += tx.creditable_iva_amount
                result['total_egresos'] += tx.gross_amount
                result['qty_egresos'] += 1
                result['detalle_credito'].append(self._summary_line(tx, tx.creditable_iva_amount))

        result['saldo_iva'] = result['debito_fiscal'] - result['credito_fiscal']

        logger.info(
            f"IVA calculado: débito={result['debito_fiscal']}, "
            f"crédito={result['credito_fiscal']}, saldo={result['saldo_iva']}"
        )
        return result

    @staticmethod
    def _summary_line(tx, iva):
        return {
            'date': tx.transaction_date,
            'document_number': tx.document_number,
            'counterpart': tx.name_counterpart,
            'amount': tx.gross_amount,
            'iva': iva,
        }

    def get_iva_trend(self, user_id, months: int = 12, today: date = None):
        """
        Evolución del IVA de los últimos N meses (incluye el mes actual)

        Los meses sin movimientos aparecen con montos en cero.
        """
        today = today or timezone.localdate()
        periods = last_n_months(today, months)
        start_date = date(periods[0][0], periods[0][1], 1)
        end_date = month_bounds(*periods[-1])[1]

        try:
            rows = self._ledger.monthly_iva_totals(user_id, start_date, end_date)
        except Exception as e:
            logger.error(f"Error al obtener tendencia IVA: {e}")
            raise

        totals = {(row['month'].year, row['month'].month): row for row in rows}

        trend = []
        for year, month in periods:
            row = totals.get((year, month), {})
            debito = row.get('debito_fiscal', ZERO)
            credito = row.get('credito_fiscal', ZERO)
            trend.append({
                'period': f"{year:04d}-{month:02d}",
                'debito_fiscal': debito,
                'credito_fiscal': credito,
                'saldo_iva': debito - credito,
            })
        return trend

    def generate_form120_data(self, user_id, year: int, month: int):
        """Datos pre-cargados del Formulario 120"""
        return build_form120(self.calculate_monthly_iva(user_id, year, month))


class IRPCalculator:
    """Liquidación anual del IRP por tramos progresivos"""

    def __init__(self, ledger=None):
        self._ledger = ledger if ledger is not None else TransactionLedger()

    @property
    def ledger(self):
        return self._ledger

    def calculate_irp_by_tramos(self, net_income):
        return calculate_irp_by_tramos(net_income)

    def calculate_annual_irp(self, user_id, fiscal_year: int, through_month: int = 12):
        """
        Calcula el IRP del ejercicio

        - Ingresos brutos: suma de montos netos (sin IVA) de los ingresos
        - Gastos deducibles: suma de montos netos de egresos marcados como deducibles
        - Retenciones: obligaciones IRP cuyo período fiscal es el 1 de enero del ejercicio

        Args:
            through_month: último mes incluido (12 = ejercicio completo)
        """
        year_start = date(fiscal_year, 1, 1)
        period_end = month_bounds(fiscal_year, through_month)[1]
        logger.info(f"Calculando IRP: user={user_id}, ejercicio={fiscal_year}, hasta mes={through_month}")

        try:
            transactions = self._ledger.registered_transactions(user_id, year_start, period_end)
            withholdings = self._ledger.withholdings_total(user_id, 'IRP', year_start)
        except Exception as e:
            logger.error(f"Error al calcular IRP ({fiscal_year}): {e}")
            raise

        gross_income = ZERO
        deductible_expenses = ZERO
        expenses_by_category = {}

        for tx in transactions:
            if tx.type == Transaction.INGRESO:
                gross_income += tx.net_amount
            elif tx.type == Transaction.EGRESO and tx.is_deductible_irp:
                deductible_expenses += tx.net_amount
                category = tx.irp_deduction_category_id or UNCATEGORIZED
                expenses_by_category[category] = expenses_by_category.get(category, ZERO) + tx.net_amount

        net_income = gross_income - deductible_expenses
        tramos = calculate_irp_by_tramos(net_income)
        withholdings = withholdings or ZERO

        result = {
            'fiscal_year': fiscal_year,
            'gross_income': gross_income,
            'deductible_expenses': deductible_expenses,
            'net_income': net_income,
            **tramos,
            'withholdings': withholdings,
            'tax_to_pay': max(ZERO, tramos['total_tax'] - withholdings),
            'expenses_by_category': expenses_by_category,
        }

        logger.info(
            f"IRP calculado: renta neta={net_income}, impuesto={tramos['total_tax']}, "
            f"retenciones={withholdings}, a pagar={result['tax_to_pay']}"
        )
        return result

    def project_annual_irp(self, user_id, fiscal_year: int, current_month: int):
        """
        Proyecta el IRP al cierre del ejercicio

        Extrapola linealmente ingresos y gastos acumulados hasta current_month.
        Las retenciones NO se proyectan: se usan las registradas a la fecha.
        """
        validate_month(current_month)

        actual = self.calculate_annual_irp(user_id, fiscal_year, through_month=current_month)

        months_elapsed = current_month
        months_remaining = 12 - months_elapsed

        projected_gross = extrapolate_to_year_end(actual['gross_income'], months_elapsed, months_remaining)
        projected_expenses = extrapolate_to_year_end(actual['deductible_expenses'], months_elapsed, months_remaining)
        projected_net = projected_gross - projected_expenses
        projected_tramos = calculate_irp_by_tramos(projected_net)

        projected = {
            'fiscal_year': fiscal_year,
            'gross_income': projected_gross,
            'deductible_expenses': projected_expenses,
            'net_income': projected_net,
            **projected_tramos,
            'withholdings': actual['withholdings'],
            'tax_to_pay': max(ZERO, projected_tramos['total_tax'] - actual['withholdings']),
            'expenses_by_category': dict(actual['expenses_by_category']),
        }

        logger.info(
            f"IRP proyectado: ejercicio={fiscal_year}, meses={months_elapsed}/12, "
            f"impuesto proyectado={projected_tramos['total_tax']}"
        )

        return {
            'actual': actual,
            'projected': projected,
            'months_elapsed': months_elapsed,
            'months_remaining': months_remaining,
        }

    def generate_form515_data(self, user_id, fiscal_year: int):
        """Datos pre-cargados del Formulario 515"""
        calculation = self.calculate_annual_irp(user_id, fiscal_year)
        try:
            taxpayer = self._ledger.taxpayer(user_id)
        except Exception as e:
            logger.error(f"Error al obtener datos del contribuyente: {e}")
            raise
        return build_form515(calculation, taxpayer)
