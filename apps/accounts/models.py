"""
Perfil del contribuyente

Extiende el User de Django con los datos de identificación tributaria
(RUC, DV, razón social) que se usan en los formularios de la SET.
"""
from django.db import models
from django.contrib.auth.models import User

from apps.core.models import TimeStampedModel
from apps.core.validators import PHONE_VALIDATOR, validate_dv, validate_ruc, validate_ruc_pair


class Profile(TimeStampedModel):
    """Perfil tributario (extensión de User)"""

    ACTIVITY_TYPE_CHOICES = [
        ('SERVICIOS', 'Servicios personales'),
        ('COMERCIAL', 'Actividad comercial'),
        ('MIXTA', 'Mixta'),
    ]

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')
    ruc = models.CharField(max_length=8, blank=True, validators=[validate_ruc])
    dv = models.CharField(max_length=1, blank=True, validators=[validate_dv])
    full_name = models.CharField(max_length=150, blank=True)
    business_name = models.CharField(max_length=150, blank=True)
    phone = models.CharField(max_length=20, blank=True, validators=[PHONE_VALIDATOR])
    address = models.CharField(max_length=200, blank=True)
    activity_type = models.CharField(max_length=20, choices=ACTIVITY_TYPE_CHOICES, default='SERVICIOS')

    class Meta:
        db_table = 'profiles'

    def __str__(self):
        return f"Perfil de {self.user.username}"

    def clean(self):
        validate_ruc_pair(self.ruc, self.dv)

    def get_ruc_display(self):
        """'80000519-8' o '-' si no está cargado"""
        if not self.ruc:
            return '-'
        return f"{self.ruc}-{self.dv}"

    def get_display_name(self):
        return self.full_name or self.business_name or self.user.get_full_name() or self.user.username
