"""
Modelos abstractos comunes del proyecto

- TimeStampedModel: registro automático de creación/modificación
"""

from django.db import models


class TimeStampedModel(models.Model):
    """Fechas de creación/modificación automáticas"""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
