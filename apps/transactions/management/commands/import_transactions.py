from zipfile import BadZipFile

from django.contrib.auth.models import User
from django.core.management.base import BaseCommand, CommandError
from openpyxl.utils.exceptions import InvalidFileException

from apps.core.formatters import format_currency
from apps.transactions.models import DeductionCategory, Transaction
from apps.transactions.utils import process_transaction_excel


class Command(BaseCommand):
    help = 'Importa comprobantes desde una planilla Excel descargada de Marangatu'

    def add_arguments(self, parser):
        parser.add_argument('file', help='Ruta del archivo .xlsx')
        parser.add_argument('--user', required=True, help='Usuario dueño de los comprobantes')
        parser.add_argument(
            '--type',
            default=Transaction.EGRESO,
            choices=[Transaction.INGRESO, Transaction.EGRESO],
            help='Tipo de comprobante (por defecto EGRESO)'
        )
        parser.add_argument('--category', help='Código de categoría IVA para las compras (ej. IVA_ACTIVIDAD)')

    def handle(self, *args, **options):
        try:
            user = User.objects.get(username=options['user'])
        except User.DoesNotExist:
            raise CommandError(f"No existe el usuario '{options['user']}'")

        try:
            result = process_transaction_excel(
                options['file'],
                user,
                tx_type=options['type'],
                iva_category_code=options['category'],
            )
        except FileNotFoundError:
            raise CommandError(f"Archivo no encontrado: {options['file']}")
        except (InvalidFileException, BadZipFile):
            raise CommandError(f"No es una planilla .xlsx válida: {options['file']}")
        except DeductionCategory.DoesNotExist:
            raise CommandError(f"No existe la categoría IVA '{options['category']}'")
        except ValueError as e:
            raise CommandError(str(e))

        for error in result['errors']:
            self.stdout.write(self.style.WARNING(f"✗ {error}"))

        self.stdout.write(
            self.style.SUCCESS(
                f"✅ Registrados: {result['created']} ({format_currency(result['total_amount'])}), "
                f"omitidos: {result['skipped']}, con errores: {len(result['errors'])}"
            )
        )
