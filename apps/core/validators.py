"""
Validadores compartidos (RUC, dígito verificador, códigos de categoría)

El RUC paraguayo se valida con el algoritmo módulo 11 publicado por la SET:
los dígitos se ponderan de derecha a izquierda con factores 2..11.
"""
import re

from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator


RUC_BASEMAX = 11

PHONE_VALIDATOR = RegexValidator(
    regex=r'^[0-9\-\+\(\)\s]+$',
    message='Ingrese un número de teléfono válido'
)


def calculate_ruc_dv(ruc, basemax=RUC_BASEMAX):
    """
    Calcula el dígito verificador de un RUC

    Args:
        ruc: número de RUC sin DV (solo dígitos)
        basemax: factor máximo de ponderación

    Returns:
        dígito verificador (0-9)
    """
    digits = str(ruc).strip()
    if not digits.isdigit():
        raise ValueError(f"RUC inválido: {ruc!r}")

    total = 0
    k = 2
    for char in reversed(digits):
        if k > basemax:
            k = 2
        total += int(char) * k
        k += 1

    remainder = total % 11
    return 11 - remainder if remainder > 1 else 0


def validate_ruc(value):
    """RUC: 1 a 8 dígitos"""
    if not re.fullmatch(r'\d{1,8}', str(value or '')):
        raise ValidationError('El RUC debe tener entre 1 y 8 dígitos')


def validate_dv(value):
    """DV: un solo dígito"""
    if not re.fullmatch(r'\d', str(value or '')):
        raise ValidationError('El dígito verificador debe ser un solo dígito')


def validate_ruc_pair(ruc, dv, field='dv'):
    """
    Verifica que RUC y DV vengan juntos y que el DV corresponda

    Raises:
        ValidationError con el error asociado al campo indicado
    """
    if not ruc and not dv:
        return
    if not ruc or not dv:
        raise ValidationError({field: 'RUC y dígito verificador deben cargarse juntos'})
    if not str(ruc).isdigit() or not str(dv).isdigit():
        # el formato ya lo reportan los validadores de campo
        return
    expected = calculate_ruc_dv(ruc)
    if expected != int(dv):
        raise ValidationError({field: f'Dígito verificador incorrecto para el RUC {ruc} (esperado {expected})'})


def validate_category_code(value):
    """Código de categoría: mayúsculas, dígitos y guión bajo"""
    if not re.fullmatch(r'[A-Z][A-Z0-9_]*', str(value or '')):
        raise ValidationError('El código debe usar mayúsculas, dígitos y guión bajo (ej. IRP_SALUD)')
