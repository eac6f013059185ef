import apps.core.validators
import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='DeductionCategory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('code', models.CharField(max_length=40, unique=True, validators=[apps.core.validators.validate_category_code])),
                ('name', models.CharField(max_length=120)),
                ('tax_type', models.CharField(choices=[('IVA', 'IVA'), ('IRP', 'IRP')], db_index=True, max_length=3)),
                ('iva_deduction_percentage', models.DecimalField(decimal_places=2, default=Decimal('100'), help_text='Porcentaje del IVA que se puede acreditar (sólo categorías IVA)', max_digits=5, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('100'))])),
                ('description', models.TextField(blank=True)),
                ('is_active', models.BooleanField(default=True)),
            ],
            options={
                'db_table': 'deduction_categories',
                'ordering': ['tax_type', 'code'],
            },
        ),
        migrations.CreateModel(
            name='Transaction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('transaction_date', models.DateField(db_index=True)),
                ('type', models.CharField(choices=[('INGRESO', 'Ingreso'), ('EGRESO', 'Egreso')], db_index=True, max_length=7)),
                ('document_type', models.CharField(choices=[('FACTURA', 'Factura'), ('FACTURA_ELECTRONICA', 'Factura electrónica'), ('AUTOFACTURA', 'Autofactura'), ('NOTA_CREDITO', 'Nota de crédito'), ('NOTA_DEBITO', 'Nota de débito'), ('TICKET', 'Ticket'), ('OTRO', 'Otro')], default='FACTURA', max_length=20)),
                ('document_number', models.CharField(blank=True, max_length=20)),
                ('timbrado', models.CharField(blank=True, max_length=8)),
                ('cdc', models.CharField(blank=True, max_length=44)),
                ('ruc_counterpart', models.CharField(blank=True, max_length=8, validators=[apps.core.validators.validate_ruc])),
                ('dv_counterpart', models.CharField(blank=True, max_length=1, validators=[apps.core.validators.validate_dv])),
                ('name_counterpart', models.CharField(blank=True, max_length=150)),
                ('gross_amount', models.DecimalField(decimal_places=2, max_digits=15, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('iva_rate', models.PositiveSmallIntegerField(choices=[(0, 'Exenta'), (5, 'IVA 5%'), (10, 'IVA 10%')], default=10)),
                ('iva_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=15)),
                ('net_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=15)),
                ('is_creditable_iva', models.BooleanField(default=False)),
                ('iva_deduction_percentage', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=5)),
                ('creditable_iva_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=15)),
                ('is_deductible_irp', models.BooleanField(default=False)),
                ('description', models.CharField(blank=True, max_length=255)),
                ('notes', models.TextField(blank=True)),
                ('source', models.CharField(choices=[('MANUAL', 'Manual'), ('SCRAPER', 'Marangatu'), ('IMPORT', 'Importación'), ('API', 'API')], default='MANUAL', max_length=10)),
                ('status', models.CharField(choices=[('DRAFT', 'Borrador'), ('REGISTERED', 'Registrado'), ('VOIDED', 'Anulado')], db_index=True, default='REGISTERED', max_length=10)),
                ('iva_deduction_category', models.ForeignKey(blank=True, limit_choices_to={'tax_type': 'IVA'}, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='iva_transactions', to='transactions.deductioncategory', to_field='code')),
                ('irp_deduction_category', models.ForeignKey(blank=True, limit_choices_to={'tax_type': 'IRP'}, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='irp_transactions', to='transactions.deductioncategory', to_field='code')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='transactions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'transactions',
                'ordering': ['-transaction_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['user', 'transaction_date'], name='tx_user_date_idx'),
                    models.Index(fields=['user', 'status', 'transaction_date'], name='tx_user_status_date_idx'),
                    models.Index(fields=['user', 'type', 'transaction_date'], name='tx_user_type_date_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('gross_amount__gt', 0)), name='transaction_gross_amount_positive'),
                ],
            },
        ),
    ]
