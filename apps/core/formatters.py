"""
Formato de montos y fechas para presentación (es-PY)

Funciones puras, sin estado: los cálculos siempre trabajan con Decimal
y el formato es responsabilidad de quien muestra el dato.
"""
from decimal import Decimal, ROUND_HALF_UP


def format_number(amount) -> str:
    """1100000 -> '1.100.000' (sin decimales, separador de miles '.')"""
    if amount is None:
        return '0'
    value = Decimal(str(amount)).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    return f"{int(value):,}".replace(',', '.')


def format_currency(amount) -> str:
    """1100000 -> 'Gs. 1.100.000'"""
    return f"Gs. {format_number(amount)}"


def format_date(value) -> str:
    """date(2024, 3, 5) -> '05/03/2024'"""
    if value is None:
        return '-'
    return value.strftime('%d/%m/%Y')


def format_period(year: int, month: int) -> str:
    """(2024, 3) -> '03/2024'"""
    return f"{month:02d}/{year}"
