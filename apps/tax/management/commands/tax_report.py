from django.contrib.auth.models import User
from django.core.management.base import BaseCommand, CommandError

from apps.core.formatters import format_currency, format_period
from apps.tax.services import InvalidPeriodError, IRPCalculator, IVACalculator


class Command(BaseCommand):
    help = 'Muestra la liquidación de IVA del mes, el IRP del ejercicio o su proyección'

    def add_arguments(self, parser):
        parser.add_argument('--user', required=True, help='Usuario contribuyente')
        parser.add_argument('--year', type=int, required=True, help='Ejercicio fiscal')
        parser.add_argument('--month', type=int, help='Mes (1-12); con --projection, último mes con datos')
        parser.add_argument('--projection', action='store_true', help='Proyectar el IRP al cierre del ejercicio')

    def handle(self, *args, **options):
        try:
            user = User.objects.get(username=options['user'])
        except User.DoesNotExist:
            raise CommandError(f"No existe el usuario '{options['user']}'")

        year = options['year']
        month = options['month']

        try:
            if options['projection']:
                if month is None:
                    raise CommandError('--projection requiere --month')
                self._print_projection(IRPCalculator().project_annual_irp(user.id, year, month))
            elif month is not None:
                self._print_iva(IVACalculator().calculate_monthly_iva(user.id, year, month), year, month)
            else:
                self._print_irp(IRPCalculator().calculate_annual_irp(user.id, year))
        except InvalidPeriodError as e:
            raise CommandError(str(e))

    def _line(self, label, amount):
        self.stdout.write(f"  {label:<28}{format_currency(amount):>22}")

    def _print_iva(self, result, year, month):
        self.stdout.write(self.style.MIGRATE_HEADING(f"IVA {format_period(year, month)}"))
        self._line(f"Ventas ({result['qty_ingresos']})", result['total_ingresos'])
        self._line(f"Compras ({result['qty_egresos']})", result['total_egresos'])
        self._line('Débito fiscal', result['debito_fiscal'])
        self._line('Crédito fiscal', result['credito_fiscal'])

        saldo = result['saldo_iva']
        if saldo >= 0:
            self.stdout.write(self.style.SUCCESS(f"  Saldo a pagar: {format_currency(saldo)}"))
        else:
            self.stdout.write(self.style.SUCCESS(f"  Saldo a favor: {format_currency(-saldo)}"))

    def _print_irp(self, result, title=None):
        self.stdout.write(self.style.MIGRATE_HEADING(title or f"IRP ejercicio {result['fiscal_year']}"))
        self._line('Ingresos brutos', result['gross_income'])
        self._line('Gastos deducibles', result['deductible_expenses'])
        self._line('Renta neta', result['net_income'])
        for name in ('tramo1', 'tramo2', 'tramo3'):
            tramo = result[name]
            self._line(f"{name} ({tramo['rate']}%)", tramo['tax'])
        self._line('Impuesto total', result['total_tax'])
        self._line('Retenciones', result['withholdings'])
        self.stdout.write(self.style.SUCCESS(f"  A pagar: {format_currency(result['tax_to_pay'])}"))

    def _print_projection(self, projection):
        actual = projection['actual']
        self._print_irp(
            actual,
            title=f"IRP {actual['fiscal_year']} acumulado ({projection['months_elapsed']} meses)"
        )
        self._print_irp(
            projection['projected'],
            title=f"IRP {actual['fiscal_year']} proyectado (faltan {projection['months_remaining']} meses)"
        )
