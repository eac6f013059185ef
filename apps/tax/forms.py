"""
Validación de parámetros de las consultas de IVA / IRP
"""
from django import forms


class PeriodForm(forms.Form):
    """Período mensual (año + mes)"""

    year = forms.IntegerField(label='Año', min_value=1900, max_value=2100)
    month = forms.IntegerField(label='Mes', min_value=1, max_value=12)


class FiscalYearForm(forms.Form):
    """Ejercicio fiscal"""

    year = forms.IntegerField(label='Ejercicio fiscal', min_value=1900, max_value=2100)


class TrendForm(forms.Form):
    """Cantidad de meses de la tendencia (por defecto 12)"""

    months = forms.IntegerField(label='Meses', min_value=1, max_value=60, required=False)

    def clean_months(self):
        months = self.cleaned_data.get('months')
        return 12 if months is None else months
