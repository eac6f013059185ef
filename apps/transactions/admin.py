from django.contrib import admin
from django.utils.html import format_html

from apps.core.formatters import format_currency
from .models import DeductionCategory, Transaction


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """
    Libro de comprobantes
    """
    list_display = [
        'transaction_date',
        'get_type_display_colored',
        'get_gross_display',
        'get_iva_display',
        'name_counterpart',
        'document_number',
        'status',
        'source',
    ]

    date_hierarchy = 'transaction_date'

    list_filter = [
        'status',
        'type',
        'iva_rate',
        'is_creditable_iva',
        'is_deductible_irp',
        'source',
    ]

    search_fields = ['document_number', 'name_counterpart', 'ruc_counterpart', 'description']

    readonly_fields = ['net_amount', 'iva_amount', 'iva_deduction_percentage', 'creditable_iva_amount', 'created_at', 'updated_at']

    fieldsets = [
        ('Comprobante', {
            'fields': ('user', 'transaction_date', 'type', 'document_type', 'document_number', 'timbrado', 'cdc', 'status', 'source')
        }),
        ('Contraparte', {
            'fields': ('ruc_counterpart', 'dv_counterpart', 'name_counterpart')
        }),
        ('Montos', {
            'fields': ('gross_amount', 'iva_rate', 'net_amount', 'iva_amount')
        }),
        ('Deducciones', {
            'fields': ('iva_deduction_category', 'is_creditable_iva', 'iva_deduction_percentage', 'creditable_iva_amount',
                       'irp_deduction_category', 'is_deductible_irp')
        }),
        ('Notas', {
            'fields': ('description', 'notes', 'created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    ]

    @admin.display(description='Tipo', ordering='type')
    def get_type_display_colored(self, obj):
        if obj.type == Transaction.INGRESO:
            return format_html('<span style="color:blue; font-weight:bold;">{}</span>', 'Ingreso')
        return format_html('<span style="color:red; font-weight:bold;">{}</span>', 'Egreso')

    @admin.display(description='Monto', ordering='gross_amount')
    def get_gross_display(self, obj):
        return format_currency(obj.gross_amount)

    @admin.display(description='IVA', ordering='iva_amount')
    def get_iva_display(self, obj):
        return format_currency(obj.iva_amount)


@admin.register(DeductionCategory)
class DeductionCategoryAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'tax_type', 'iva_deduction_percentage', 'is_active']
    list_filter = ['tax_type', 'is_active']
    search_fields = ['code', 'name']
    ordering = ['tax_type', 'code']
