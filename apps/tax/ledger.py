"""
Acceso de sólo lectura al libro de comprobantes y a las retenciones

Los calculadores reciben una instancia de TransactionLedger en el constructor;
en los tests se puede inyectar cualquier objeto con los mismos métodos.
"""
from decimal import Decimal

from django.db.models import Q, Sum
from django.db.models.functions import TruncMonth

from apps.accounts.models import Profile
from apps.transactions.models import Transaction
from .models import TaxObligation


class TransactionLedger:
    """Consultas al libro (Django ORM)"""

    def registered_transactions(self, user_id, start_date, end_date):
        """
        Comprobantes registrados del usuario entre start_date y end_date (inclusive)

        Se evalúa la consulta de inmediato: cada cálculo trabaja sobre una sola lectura.
        """
        queryset = (
            Transaction.registered
            .for_user(user_id)
            .by_date_range(start_date, end_date)
            .order_by('transaction_date', 'type', 'id')
        )
        return list(queryset)

    def monthly_iva_totals(self, user_id, start_date, end_date):
        """
        Débito y crédito fiscal agrupados por mes

        Returns:
            [{'month': date(primer día), 'debito_fiscal': Decimal, 'credito_fiscal': Decimal}, ...]
        """
        rows = (
            Transaction.registered
            .for_user(user_id)
            .by_date_range(start_date, end_date)
            .annotate(month=TruncMonth('transaction_date'))
            .values('month')
            .annotate(
                debito_fiscal=Sum('iva_amount', filter=Q(type=Transaction.INGRESO)),
                credito_fiscal=Sum(
                    'creditable_iva_amount',
                    filter=Q(type=Transaction.EGRESO, is_creditable_iva=True)
                ),
            )
            .order_by('month')
        )
        return [
            {
                'month': row['month'],
                'debito_fiscal': row['debito_fiscal'] or Decimal('0'),
                'credito_fiscal': row['credito_fiscal'] or Decimal('0'),
            }
            for row in rows
        ]

    def withholdings_total(self, user_id, tax_type, fiscal_period):
        return TaxObligation.objects.withholdings_total(user_id, tax_type, fiscal_period)

    def taxpayer(self, user_id):
        """Datos de identificación para los formularios (vacíos si no hay perfil)"""
        profile = Profile.objects.select_related('user').filter(user_id=user_id).first()
        if profile is None:
            return {'ruc': '', 'dv': '', 'name': ''}
        return {
            'ruc': profile.ruc,
            'dv': profile.dv,
            'name': profile.get_display_name(),
        }
