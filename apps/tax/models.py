"""
Obligaciones tributarias

Cada registro corresponde a una liquidación (IVA mensual o IRP anual) con su
vencimiento, estado de pago y las retenciones sufridas en el período.
Las retenciones cargadas aquí se descuentan del impuesto calculado.
"""
from decimal import Decimal

from django.contrib.auth.models import User
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum

from apps.core.models import TimeStampedModel


class TaxObligationQuerySet(models.QuerySet):
    def for_period(self, user_id, tax_type, fiscal_period):
        return self.filter(user_id=user_id, tax_type=tax_type, fiscal_period=fiscal_period)

    def withholdings_total(self, user_id, tax_type, fiscal_period):
        """Suma de retenciones del período (0 si no hay registros)"""
        total = self.for_period(user_id, tax_type, fiscal_period).aggregate(
            total=Sum('withholdings_amount')
        )['total']
        return total or Decimal('0')


class TaxObligation(TimeStampedModel):
    """Obligación tributaria (IVA mensual / IRP anual)"""

    TAX_TYPE_CHOICES = [('IVA', 'IVA'), ('IRP', 'IRP')]
    STATUS_CHOICES = [
        ('PENDING', 'Pendiente'),
        ('PAID', 'Pagada'),
        ('OVERDUE', 'Vencida'),
        ('CANCELLED', 'Cancelada'),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='tax_obligations', db_index=True)
    tax_type = models.CharField(max_length=3, choices=TAX_TYPE_CHOICES, db_index=True)
    fiscal_period = models.DateField(help_text='Primer día del mes (IVA) o del año (IRP)')
    due_date = models.DateField()

    debito_fiscal = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    credito_fiscal = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    gross_income = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    deductible_expenses = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    net_income = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    calculated_tax = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0'))
    withholdings_amount = models.DecimalField(
        max_digits=15, decimal_places=2, default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))]
    )

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='PENDING', db_index=True)
    paid_date = models.DateField(null=True, blank=True)
    payment_method = models.CharField(max_length=50, blank=True)
    confirmation_number = models.CharField(max_length=50, blank=True)
    notes = models.TextField(blank=True)

    objects = TaxObligationQuerySet.as_manager()

    class Meta:
        db_table = 'tax_obligations'
        ordering = ['-fiscal_period', 'tax_type']
        indexes = [
            models.Index(fields=['user', 'tax_type', 'fiscal_period'], name='obligation_user_period_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(withholdings_amount__gte=0),
                name='obligation_withholdings_non_negative'
            ),
        ]

    def __str__(self):
        if self.tax_type == 'IVA':
            return f"IVA {self.fiscal_period:%m/%Y} ({self.get_status_display()})"
        return f"IRP {self.fiscal_period:%Y} ({self.get_status_display()})"
