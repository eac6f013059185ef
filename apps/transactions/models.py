"""
Libro de comprobantes (ingresos/egresos)

Los montos derivados (neto, IVA, IVA acreditable) se calculan al guardar:
los calculadores de IVA/IRP sólo leen lo que quedó registrado.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP

from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.core.models import TimeStampedModel
from apps.core.validators import (
    validate_category_code,
    validate_dv,
    validate_ruc,
    validate_ruc_pair,
)

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')
HUNDRED = Decimal('100')


class DeductionCategory(TimeStampedModel):
    """Categoría de deducción (IVA: porcentaje acreditable / IRP: agrupación de gastos)"""

    TAX_TYPE_CHOICES = [('IVA', 'IVA'), ('IRP', 'IRP')]

    code = models.CharField(max_length=40, unique=True, validators=[validate_category_code])
    name = models.CharField(max_length=120)
    tax_type = models.CharField(max_length=3, choices=TAX_TYPE_CHOICES, db_index=True)
    iva_deduction_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=HUNDRED,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(HUNDRED)],
        help_text='Porcentaje del IVA que se puede acreditar (sólo categorías IVA)'
    )
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'deduction_categories'
        ordering = ['tax_type', 'code']

    def __str__(self):
        return f"[{self.tax_type}] {self.name}"


class TransactionQuerySet(models.QuerySet):
    """Filtros frecuentes del libro"""
    def income(self): return self.filter(type=Transaction.INGRESO)
    def expense(self): return self.filter(type=Transaction.EGRESO)
    def registered(self): return self.filter(status=Transaction.STATUS_REGISTERED)
    def for_user(self, user_id): return self.filter(user_id=user_id)
    def by_month(self, year, month): return self.filter(transaction_date__year=year, transaction_date__month=month)
    def by_date_range(self, start_date, end_date): return self.filter(transaction_date__gte=start_date, transaction_date__lte=end_date)


class RegisteredTransactionManager(models.Manager.from_queryset(TransactionQuerySet)):
    """Sólo comprobantes registrados (excluye borradores y anulados)"""
    def get_queryset(self): return super().get_queryset().registered()


class Transaction(TimeStampedModel):
    """Comprobante de ingreso o egreso (modelo central)"""
    INGRESO = 'INGRESO'
    EGRESO = 'EGRESO'
    TYPE_CHOICES = [(INGRESO, 'Ingreso'), (EGRESO, 'Egreso')]

    IVA_RATE_CHOICES = [(0, 'Exenta'), (5, 'IVA 5%'), (10, 'IVA 10%')]

    DOCUMENT_TYPE_CHOICES = [
        ('FACTURA', 'Factura'),
        ('FACTURA_ELECTRONICA', 'Factura electrónica'),
        ('AUTOFACTURA', 'Autofactura'),
        ('NOTA_CREDITO', 'Nota de crédito'),
        ('NOTA_DEBITO', 'Nota de débito'),
        ('TICKET', 'Ticket'),
        ('OTRO', 'Otro'),
    ]

    SOURCE_CHOICES = [('MANUAL', 'Manual'), ('SCRAPER', 'Marangatu'), ('IMPORT', 'Importación'), ('API', 'API')]

    STATUS_DRAFT = 'DRAFT'
    STATUS_REGISTERED = 'REGISTERED'
    STATUS_VOIDED = 'VOIDED'
    STATUS_CHOICES = [(STATUS_DRAFT, 'Borrador'), (STATUS_REGISTERED, 'Registrado'), (STATUS_VOIDED, 'Anulado')]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='transactions', db_index=True)
    transaction_date = models.DateField(db_index=True)
    type = models.CharField(max_length=7, choices=TYPE_CHOICES, db_index=True)

    document_type = models.CharField(max_length=20, choices=DOCUMENT_TYPE_CHOICES, default='FACTURA')
    document_number = models.CharField(max_length=20, blank=True)
    timbrado = models.CharField(max_length=8, blank=True)
    cdc = models.CharField(max_length=44, blank=True)

    ruc_counterpart = models.CharField(max_length=8, blank=True, validators=[validate_ruc])
    dv_counterpart = models.CharField(max_length=1, blank=True, validators=[validate_dv])
    name_counterpart = models.CharField(max_length=150, blank=True)

    gross_amount = models.DecimalField(max_digits=15, decimal_places=2, validators=[MinValueValidator(CENT)])
    iva_rate = models.PositiveSmallIntegerField(choices=IVA_RATE_CHOICES, default=10)
    iva_amount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0'))
    net_amount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0'))

    is_creditable_iva = models.BooleanField(default=False)
    iva_deduction_category = models.ForeignKey(
        DeductionCategory, to_field='code', on_delete=models.PROTECT, null=True, blank=True,
        related_name='iva_transactions', limit_choices_to={'tax_type': 'IVA'}
    )
    iva_deduction_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0'))
    creditable_iva_amount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0'))

    is_deductible_irp = models.BooleanField(default=False)
    irp_deduction_category = models.ForeignKey(
        DeductionCategory, to_field='code', on_delete=models.PROTECT, null=True, blank=True,
        related_name='irp_transactions', limit_choices_to={'tax_type': 'IRP'}
    )

    description = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)
    source = models.CharField(max_length=10, choices=SOURCE_CHOICES, default='MANUAL')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_REGISTERED, db_index=True)

    objects = TransactionQuerySet.as_manager()
    registered = RegisteredTransactionManager()

    class Meta:
        db_table = 'transactions'
        ordering = ['-transaction_date', '-created_at']
        indexes = [
            models.Index(fields=['user', 'transaction_date'], name='tx_user_date_idx'),
            models.Index(fields=['user', 'status', 'transaction_date'], name='tx_user_status_date_idx'),
            models.Index(fields=['user', 'type', 'transaction_date'], name='tx_user_type_date_idx'),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(gross_amount__gt=0), name='transaction_gross_amount_positive'),
        ]

    def __str__(self):
        return f"{self.get_type_display()} {self.gross_amount:,.0f} Gs. ({self.transaction_date})"

    def get_counterpart_display(self):
        if self.ruc_counterpart:
            return f"{self.name_counterpart or '(sin nombre)'} ({self.ruc_counterpart}-{self.dv_counterpart})"
        return self.name_counterpart or '(sin contraparte)'

    def _related_category(self, field_name):
        """Categoría asignada o None si el código no existe (lo reporta full_clean)"""
        try:
            return getattr(self, field_name)
        except DeductionCategory.DoesNotExist:
            return None

    def apply_tax_amounts(self):
        """
        Deriva neto, IVA e IVA acreditable a partir del monto bruto

        neto = bruto / (1 + tasa/100), IVA = bruto - neto
        El porcentaje acreditable lo define la categoría de deducción IVA.
        """
        gross = Decimal(str(self.gross_amount))
        rate = Decimal(self.iva_rate or 0)
        self.net_amount = (gross / (1 + rate / HUNDRED)).quantize(CENT, rounding=ROUND_HALF_UP)
        self.iva_amount = gross - self.net_amount

        if self.type != self.EGRESO:
            self.is_creditable_iva = False
            self.is_deductible_irp = False
            self.iva_deduction_percentage = Decimal('0')
            self.creditable_iva_amount = Decimal('0')
            return

        iva_category = self._related_category('iva_deduction_category')
        if iva_category is not None:
            self.is_creditable_iva = True
            self.iva_deduction_percentage = iva_category.iva_deduction_percentage
        elif self.is_creditable_iva:
            self.iva_deduction_percentage = HUNDRED
        else:
            self.iva_deduction_percentage = Decimal('0')

        self.creditable_iva_amount = (
            self.iva_amount * self.iva_deduction_percentage / HUNDRED
        ).quantize(CENT, rounding=ROUND_HALF_UP)

        if self._related_category('irp_deduction_category') is not None:
            self.is_deductible_irp = True

    def clean(self):
        errors = {}
        try:
            validate_ruc_pair(self.ruc_counterpart, self.dv_counterpart, field='dv_counterpart')
        except ValidationError as e:
            errors.update(e.message_dict)
        if self.type == self.INGRESO:
            if self.iva_deduction_category_id:
                errors['iva_deduction_category'] = 'Los ingresos no generan crédito fiscal'
            if self.irp_deduction_category_id:
                errors['irp_deduction_category'] = 'Los ingresos no son gastos deducibles'
        iva_category = self._related_category('iva_deduction_category')
        irp_category = self._related_category('irp_deduction_category')
        if iva_category is not None and iva_category.tax_type != 'IVA':
            errors['iva_deduction_category'] = 'Debe ser una categoría de IVA'
        if irp_category is not None and irp_category.tax_type != 'IRP':
            errors['irp_deduction_category'] = 'Debe ser una categoría de IRP'
        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        if self.gross_amount is not None:
            self.apply_tax_amounts()
        self.full_clean()
        super().save(*args, **kwargs)
        logger.debug(f"Comprobante guardado: id={self.pk}, tipo={self.type}, bruto={self.gross_amount}")
