"""
Importación de comprobantes desde Excel (planillas descargadas de Marangatu)

Las columnas se ubican por nombre de encabezado, porque los reportes de la SET
cambian el rótulo según el tipo de consulta (compras, ventas, e-Kuatia).
"""
import logging
import re
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

import openpyxl
from django.core.exceptions import ValidationError
from django.db import transaction

from apps.core.validators import calculate_ruc_dv

from .models import DeductionCategory, Transaction

logger = logging.getLogger(__name__)

# encabezados posibles por columna
COLUMN_MAP = {
    'ruc': ['RUC', 'RUC Emisor', 'RUC Receptor', 'Ruc', 'ruc'],
    'razon_social': ['Razón Social', 'Razon Social', 'Nombre', 'razonSocial'],
    'timbrado': ['Timbrado', 'timbrado', 'Nro. Timbrado'],
    'numero': ['Número', 'Numero', 'Nro. Comprobante', 'numero', 'Nro Factura'],
    'fecha': ['Fecha', 'Fecha Emisión', 'fecha', 'Fecha Emision'],
    'tipo_comprobante': ['Tipo Comprobante', 'Tipo', 'tipo', 'tipoComprobante'],
    'total': ['Total', 'Monto Total', 'total', 'Importe Total'],
    'iva': ['IVA 10%', 'IVA', 'iva', 'Iva 10', 'IVA 10'],
}

DOCUMENT_TYPE_ALIASES = {
    'FACTURA': 'FACTURA',
    'FACTURA ELECTRONICA': 'FACTURA_ELECTRONICA',
    'FACTURA ELECTRÓNICA': 'FACTURA_ELECTRONICA',
    'AUTOFACTURA': 'AUTOFACTURA',
    'NOTA DE CREDITO': 'NOTA_CREDITO',
    'NOTA DE CRÉDITO': 'NOTA_CREDITO',
    'NOTA DE DEBITO': 'NOTA_DEBITO',
    'NOTA DE DÉBITO': 'NOTA_DEBITO',
    'TICKET': 'TICKET',
}

# base de fechas seriales de Excel (sistema 1900)
EXCEL_EPOCH = date(1899, 12, 30)

# '1100000.50': punto decimal, no separador de miles
DECIMAL_POINT_RE = re.compile(r'-?\d+\.\d{2}')


def to_decimal(value):
    """
    Convierte un monto de planilla a Decimal con 2 decimales

    Acepta números y textos en formato local ('1.100.000', '1.100.000,50', 'Gs. 550.000').
    Un único punto seguido de dos dígitos ('1100000.50') se toma como separador decimal.
    Devuelve None si el valor está vacío o no es un número.
    """
    if value is None or str(value).strip() == '':
        return None

    if isinstance(value, (int, float, Decimal)):
        raw = str(value)
    else:
        raw = re.sub(r'[^\d.,\-]', '', str(value))
        if not DECIMAL_POINT_RE.fullmatch(raw):
            raw = raw.replace('.', '').replace(',', '.')

    try:
        return Decimal(raw).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        return None


def parse_date(value):
    """Fecha de celda: datetime, date, serial de Excel, 'dd/mm/aaaa' o 'aaaa-mm-dd'"""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        return EXCEL_EPOCH + timedelta(days=int(value))

    text = str(value).strip()
    for fmt in ['%d/%m/%Y', '%Y-%m-%d', '%d-%m-%Y', '%Y/%m/%d']:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def split_ruc(value):
    """'80000519-8' -> ('80000519', '8'); '80000519' -> ('80000519', '')"""
    if value is None:
        return '', ''
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = re.sub(r'\s+', '', str(value))
    if '-' in text:
        ruc, dv = text.split('-', 1)
        return ruc, dv
    return text, ''


def infer_iva_rate(total, iva):
    """Tasa de IVA más cercana a la relación IVA / neto (0, 5 o 10)"""
    if not iva:
        return 0
    net = total - iva
    if net <= 0:
        return 10
    ratio = iva / net
    return 5 if abs(ratio - Decimal('0.05')) < abs(ratio - Decimal('0.10')) else 10


def normalize_document_type(value):
    if not value:
        return 'FACTURA'
    return DOCUMENT_TYPE_ALIASES.get(str(value).strip().upper(), 'OTRO')


def find_columns(header_row):
    """{clave: índice} para las columnas encontradas en el encabezado"""
    headers = [str(cell).strip() if cell is not None else '' for cell in header_row]
    columns = {}
    for key, aliases in COLUMN_MAP.items():
        for alias in aliases:
            if alias in headers:
                columns[key] = headers.index(alias)
                break
    return columns


def process_transaction_excel(excel_file, user, tx_type=Transaction.EGRESO, iva_category_code=None):
    """
    Lee la planilla y registra los comprobantes válidos

    Returns:
        {
            'created': cantidad registrada,
            'skipped': filas omitidas por datos incompletos,
            'errors': ['fila N: mensaje', ...],
            'total_amount': suma de montos brutos registrados,
        }
    """
    wb = openpyxl.load_workbook(excel_file, read_only=True, data_only=True)
    try:
        sheet_rows = list(wb.active.iter_rows(values_only=True))
    finally:
        wb.close()

    rows = iter(sheet_rows)
    header = next(rows, None)
    if header is None:
        return {'created': 0, 'skipped': 0, 'errors': [], 'total_amount': Decimal('0')}

    columns = find_columns(header)
    missing = [key for key in ('ruc', 'fecha', 'total') if key not in columns]
    if missing:
        raise ValueError(f"Faltan columnas obligatorias en la planilla: {', '.join(missing)}")

    category = None
    if iva_category_code:
        category = DeductionCategory.objects.get(code=iva_category_code, tax_type='IVA')

    def cell(row, key):
        index = columns.get(key)
        if index is None or index >= len(row):
            return None
        return row[index]

    to_create = []
    errors = []
    skipped = 0

    for row_number, row in enumerate(rows, start=2):
        if not any(row):
            continue

        ruc, dv = split_ruc(cell(row, 'ruc'))
        if ruc.isdigit() and not dv:
            dv = str(calculate_ruc_dv(ruc))
        transaction_date = parse_date(cell(row, 'fecha'))
        total = to_decimal(cell(row, 'total'))

        if not ruc or not transaction_date or not total or total <= 0:
            logger.info(f"Fila {row_number}: datos incompletos, se omite")
            skipped += 1
            continue

        iva = to_decimal(cell(row, 'iva')) or Decimal('0')
        tx = Transaction(
            user=user,
            type=tx_type,
            transaction_date=transaction_date,
            document_type=normalize_document_type(cell(row, 'tipo_comprobante')),
            document_number=str(cell(row, 'numero') or '').strip(),
            timbrado=str(cell(row, 'timbrado') or '').strip(),
            ruc_counterpart=ruc,
            dv_counterpart=dv,
            name_counterpart=str(cell(row, 'razon_social') or '').strip(),
            gross_amount=total,
            iva_rate=infer_iva_rate(total, iva),
            iva_deduction_category=category if tx_type == Transaction.EGRESO else None,
            source='IMPORT',
        )

        try:
            tx.apply_tax_amounts()
            tx.full_clean()
        except ValidationError as e:
            messages = '; '.join(
                f"{field}: {' '.join(msgs)}" for field, msgs in e.message_dict.items()
            )
            errors.append(f"fila {row_number}: {messages}")
            continue

        to_create.append(tx)

    with transaction.atomic():
        Transaction.objects.bulk_create(to_create)

    total_amount = sum((tx.gross_amount for tx in to_create), Decimal('0'))
    logger.info(
        f"Importación Excel: user={user.id}, registrados={len(to_create)}, "
        f"omitidos={skipped}, errores={len(errors)}"
    )

    return {
        'created': len(to_create),
        'skipped': skipped,
        'errors': errors,
        'total_amount': total_amount,
    }
