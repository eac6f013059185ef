import apps.core.validators
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Profile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('ruc', models.CharField(blank=True, max_length=8, validators=[apps.core.validators.validate_ruc])),
                ('dv', models.CharField(blank=True, max_length=1, validators=[apps.core.validators.validate_dv])),
                ('full_name', models.CharField(blank=True, max_length=150)),
                ('business_name', models.CharField(blank=True, max_length=150)),
                ('phone', models.CharField(blank=True, max_length=20, validators=[django.core.validators.RegexValidator(message='Ingrese un número de teléfono válido', regex='^[0-9\\-\\+\\(\\)\\s]+$')])),
                ('address', models.CharField(blank=True, max_length=200)),
                ('activity_type', models.CharField(choices=[('SERVICIOS', 'Servicios personales'), ('COMERCIAL', 'Actividad comercial'), ('MIXTA', 'Mixta')], default='SERVICIOS', max_length=20)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='profile', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'profiles',
            },
        ),
    ]
