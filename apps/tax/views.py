"""
Consultas de IVA e IRP (JSON)

Las vistas sólo validan parámetros, llaman a los calculadores y serializan;
el usuario lo aporta la sesión (login_required).
"""
import logging

from django.contrib.auth.decorators import login_required
from django.views.decorators.http import require_GET

from apps.core.renderers import json_response
from .forms import FiscalYearForm, PeriodForm, TrendForm
from .services import IRPCalculator, IVACalculator

logger = logging.getLogger(__name__)


def _invalid(form):
    return json_response({'errors': form.errors.get_json_data()}, status=400)


@login_required
@require_GET
def iva_monthly(request, year, month):
    """IVA del mes"""
    form = PeriodForm({'year': year, 'month': month})
    if not form.is_valid():
        return _invalid(form)

    try:
        result = IVACalculator().calculate_monthly_iva(
            request.user.id, form.cleaned_data['year'], form.cleaned_data['month']
        )
    except Exception as e:
        logger.error(f"Error al calcular IVA: user={request.user.id}, {month}/{year}: {e}")
        return json_response({'error': 'Error al calcular IVA'}, status=500)

    return json_response(result)


@login_required
@require_GET
def iva_trend(request):
    """Evolución del IVA de los últimos N meses (?months=N)"""
    form = TrendForm(request.GET)
    if not form.is_valid():
        return _invalid(form)

    try:
        trend = IVACalculator().get_iva_trend(request.user.id, form.cleaned_data['months'])
    except Exception as e:
        logger.error(f"Error al obtener tendencia IVA: user={request.user.id}: {e}")
        return json_response({'error': 'Error al obtener tendencia IVA'}, status=500)

    return json_response(trend)


@login_required
@require_GET
def iva_form120(request, year, month):
    """Formulario 120 pre-cargado"""
    form = PeriodForm({'year': year, 'month': month})
    if not form.is_valid():
        return _invalid(form)

    try:
        data = IVACalculator().generate_form120_data(
            request.user.id, form.cleaned_data['year'], form.cleaned_data['month']
        )
    except Exception as e:
        logger.error(f"Error al generar Formulario 120: user={request.user.id}: {e}")
        return json_response({'error': 'Error al generar Formulario 120'}, status=500)

    return json_response(data)


@login_required
@require_GET
def irp_annual(request, year):
    """IRP del ejercicio"""
    form = FiscalYearForm({'year': year})
    if not form.is_valid():
        return _invalid(form)

    try:
        result = IRPCalculator().calculate_annual_irp(request.user.id, form.cleaned_data['year'])
    except Exception as e:
        logger.error(f"Error al calcular IRP: user={request.user.id}, {year}: {e}")
        return json_response({'error': 'Error al calcular IRP'}, status=500)

    return json_response(result)


@login_required
@require_GET
def irp_projection(request, year, month):
    """Proyección del IRP al cierre del ejercicio con datos hasta el mes indicado"""
    form = PeriodForm({'year': year, 'month': month})
    if not form.is_valid():
        return _invalid(form)

    try:
        result = IRPCalculator().project_annual_irp(
            request.user.id, form.cleaned_data['year'], form.cleaned_data['month']
        )
    except Exception as e:
        logger.error(f"Error al proyectar IRP: user={request.user.id}, {month}/{year}: {e}")
        return json_response({'error': 'Error al proyectar IRP'}, status=500)

    return json_response(result)


@login_required
@require_GET
def irp_form515(request, year):
    """Formulario 515 pre-cargado"""
    form = FiscalYearForm({'year': year})
    if not form.is_valid():
        return _invalid(form)

    try:
        data = IRPCalculator().generate_form515_data(request.user.id, form.cleaned_data['year'])
    except Exception as e:
        logger.error(f"Error al generar Formulario 515: user={request.user.id}: {e}")
        return json_response({'error': 'Error al generar Formulario 515'}, status=500)

    return json_response(data)
