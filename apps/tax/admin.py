from django.contrib import admin

from apps.core.formatters import format_currency
from .models import TaxObligation


@admin.register(TaxObligation)
class TaxObligationAdmin(admin.ModelAdmin):
    list_display = [
        'fiscal_period',
        'tax_type',
        'user',
        'get_calculated_tax_display',
        'get_withholdings_display',
        'due_date',
        'status',
    ]
    list_filter = ['tax_type', 'status']
    search_fields = ['user__username', 'confirmation_number']
    date_hierarchy = 'fiscal_period'
    readonly_fields = ['created_at', 'updated_at']

    @admin.display(description='Impuesto', ordering='calculated_tax')
    def get_calculated_tax_display(self, obj):
        return format_currency(obj.calculated_tax)

    @admin.display(description='Retenciones', ordering='withholdings_amount')
    def get_withholdings_display(self, obj):
        return format_currency(obj.withholdings_amount)
