"""
Utilidades de cálculo del IRP y períodos fiscales

Tramos del IRP (Art. 69 Ley 6380/2019), sobre la renta neta anual:
    - hasta Gs. 50.000.000                     8%
    - de Gs. 50.000.001 a Gs. 150.000.000      9%
    - más de Gs. 150.000.000                  10%

TODO: si la SET actualiza los tramos por decreto, versionar IRP_TRAMOS por ejercicio fiscal
"""
import calendar
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Tuple


ZERO = Decimal('0')
CENT = Decimal('0.01')
HUNDRED = Decimal('100')

TRAMO1_LIMIT = Decimal('50000000')
TRAMO2_LIMIT = Decimal('150000000')

# límite superior None = sin tope
IRP_TRAMOS = [
    {'name': 'tramo1', 'lower': ZERO, 'upper': TRAMO1_LIMIT, 'rate': Decimal('8')},
    {'name': 'tramo2', 'lower': TRAMO1_LIMIT, 'upper': TRAMO2_LIMIT, 'rate': Decimal('9')},
    {'name': 'tramo3', 'lower': TRAMO2_LIMIT, 'upper': None, 'rate': Decimal('10')},
]


class InvalidPeriodError(ValueError):
    """Período fiscal inválido (mes fuera de 1-12, cantidad de meses no positiva)"""


def quantize_amount(value) -> Decimal:
    """Redondeo monetario a 2 decimales (ROUND_HALF_UP)"""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_irp_by_tramos(net_income) -> Dict:
    """
    Aplica los tramos progresivos a la renta neta

    Una renta neta negativa se trata como cero: todas las bases quedan en 0.
    Las bases de los tramos suman exactamente max(renta neta, 0).

    Args:
        net_income: renta neta anual (ingresos - gastos deducibles)

    Returns:
        {
            'tramo1': {'base', 'rate', 'tax'},
            'tramo2': {...},
            'tramo3': {...},
            'total_tax': suma de impuestos por tramo,
        }
    """
    income = max(Decimal(str(net_income)), ZERO)

    result = {}
    total_tax = ZERO
    for tramo in IRP_TRAMOS:
        if income > tramo['lower']:
            top = income if tramo['upper'] is None else min(income, tramo['upper'])
            base = top - tramo['lower']
        else:
            base = ZERO

        tax = quantize_amount(base * tramo['rate'] / HUNDRED)
        result[tramo['name']] = {
            'base': base,
            'rate': tramo['rate'],
            'tax': tax,
        }
        total_tax += tax

    result['total_tax'] = total_tax
    return result


def validate_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise InvalidPeriodError(f"Mes inválido: {month} (debe estar entre 1 y 12)")


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """Primer y último día calendario del mes"""
    validate_month(month)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def last_n_months(today: date, months: int) -> List[Tuple[int, int]]:
    """
    Los últimos N meses calendario terminando en el mes de `today`, en orden ascendente

    Example:
        last_n_months(date(2024, 2, 10), 3) -> [(2023, 12), (2024, 1), (2024, 2)]
    """
    if months < 1:
        raise InvalidPeriodError(f"Cantidad de meses inválida: {months}")

    periods = []
    year, month = today.year, today.month
    for _ in range(months):
        periods.append((year, month))
        month -= 1
        if month == 0:
            year -= 1
            month = 12
    periods.reverse()
    return periods


def extrapolate_to_year_end(amount, months_elapsed: int, months_remaining: int) -> Decimal:
    """
    Proyección lineal al cierre del ejercicio

    monto + (monto / meses transcurridos) * meses restantes
    """
    if months_elapsed < 1:
        raise InvalidPeriodError("La proyección necesita al menos un mes transcurrido")
    if months_remaining == 0:
        return amount
    average = amount / Decimal(months_elapsed)
    return quantize_amount(amount + average * months_remaining)
