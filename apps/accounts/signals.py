"""
Señales del perfil tributario

- Alta de User -> Profile vacío (el contribuyente completa RUC después)
- Guardado de User -> se persiste también su Profile
- Profile con RUC y sin DV -> se completa el dígito verificador
"""
import logging

from django.contrib.auth.models import User
from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

from apps.core.validators import calculate_ruc_dv

from .models import Profile

logger = logging.getLogger(__name__)


@receiver(post_save, sender=User)
def sync_user_profile(sender, instance, created, **kwargs):
    if created:
        Profile.objects.create(user=instance)
        logger.info(f"Perfil creado para user={instance.id}")
    elif hasattr(instance, 'profile'):
        instance.profile.save()


@receiver(pre_save, sender=Profile)
def fill_profile_dv(sender, instance, **kwargs):
    """RUC cargado sin DV: se calcula (módulo 11 de la SET)"""
    if instance.ruc and instance.ruc.isdigit() and not instance.dv:
        instance.dv = str(calculate_ruc_dv(instance.ruc))
