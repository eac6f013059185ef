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
            name='TaxObligation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('tax_type', models.CharField(choices=[('IVA', 'IVA'), ('IRP', 'IRP')], db_index=True, max_length=3)),
                ('fiscal_period', models.DateField(help_text='Primer día del mes (IVA) o del año (IRP)')),
                ('due_date', models.DateField()),
                ('debito_fiscal', models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ('credito_fiscal', models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ('gross_income', models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ('deductible_expenses', models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ('net_income', models.DecimalField(blank=True, decimal_places=2, max_digits=15, null=True)),
                ('calculated_tax', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=15)),
                ('withholdings_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=15, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('status', models.CharField(choices=[('PENDING', 'Pendiente'), ('PAID', 'Pagada'), ('OVERDUE', 'Vencida'), ('CANCELLED', 'Cancelada')], db_index=True, default='PENDING', max_length=10)),
                ('paid_date', models.DateField(blank=True, null=True)),
                ('payment_method', models.CharField(blank=True, max_length=50)),
                ('confirmation_number', models.CharField(blank=True, max_length=50)),
                ('notes', models.TextField(blank=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tax_obligations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'tax_obligations',
                'ordering': ['-fiscal_period', 'tax_type'],
                'indexes': [
                    models.Index(fields=['user', 'tax_type', 'fiscal_period'], name='obligation_user_period_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('withholdings_amount__gte', 0)), name='obligation_withholdings_non_negative'),
                ],
            },
        ),
    ]
