from decimal import Decimal

from django.db import migrations


def seed_deduction_categories(apps, schema_editor):
    DeductionCategory = apps.get_model('transactions', 'DeductionCategory')

    iva_items = [
        ('IVA_ACTIVIDAD', 'Compras vinculadas a la actividad', Decimal('100')),
        ('IVA_USO_MIXTO', 'Bienes y servicios de uso mixto', Decimal('50')),
    ]

    irp_items = [
        ('IRP_ACTIVIDAD', 'Gastos de la actividad gravada'),
        ('IRP_SALUD', 'Salud'),
        ('IRP_EDUCACION', 'Educación y capacitación'),
        ('IRP_VIVIENDA', 'Vivienda (alquiler o cuotas)'),
        ('IRP_VESTIMENTA', 'Vestimenta'),
        ('IRP_FAMILIA', 'Gastos de familiares a cargo'),
    ]

    for code, name, percentage in iva_items:
        DeductionCategory.objects.get_or_create(
            code=code,
            defaults={
                'name': name,
                'tax_type': 'IVA',
                'iva_deduction_percentage': percentage,
            },
        )

    for code, name in irp_items:
        DeductionCategory.objects.get_or_create(
            code=code,
            defaults={
                'name': name,
                'tax_type': 'IRP',
            },
        )


def unseed_deduction_categories(apps, schema_editor):
    DeductionCategory = apps.get_model('transactions', 'DeductionCategory')
    DeductionCategory.objects.filter(code__startswith='IVA_').delete()
    DeductionCategory.objects.filter(code__startswith='IRP_').delete()


class Migration(migrations.Migration):

    dependencies = [
        ('transactions', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_deduction_categories, unseed_deduction_categories),
    ]
