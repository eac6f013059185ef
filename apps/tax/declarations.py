"""
Datos pre-cargados de los formularios de la SET

- Formulario 120: IVA mensual
- Formulario 515: IRP anual

Sólo reorganizan el resultado de los calculadores en las secciones del
formulario; no hacen cálculos propios más allá de separar saldo a pagar / a favor.
"""
from decimal import Decimal


ZERO = Decimal('0')


def build_form120(iva_result):
    """Formulario 120 a partir del resultado de calculate_monthly_iva()"""
    saldo = iva_result['saldo_iva']
    return {
        'rubro1': {
            'ventas': iva_result['total_ingresos'],
            'iva_debito': iva_result['debito_fiscal'],
        },
        'rubro3': {
            'compras': iva_result['total_egresos'],
            'iva_credito': iva_result['credito_fiscal'],
            'compras_detail': [
                {
                    'fecha': item['date'],
                    'proveedor': item['counterpart'],
                    'factura': item['document_number'],
                    'monto': item['amount'],
                    'iva': item['iva'],
                }
                for item in iva_result['detalle_credito']
            ],
        },
        'rubro4': {
            'debito_fiscal': iva_result['debito_fiscal'],
            'credito_fiscal': iva_result['credito_fiscal'],
            'saldo_a_pagar': max(ZERO, saldo),
            'saldo_a_favor': max(ZERO, -saldo),
        },
    }


def build_form515(irp_result, taxpayer):
    """
    Formulario 515 a partir del resultado de calculate_annual_irp()

    Args:
        irp_result: resultado del cálculo anual
        taxpayer: {'ruc', 'dv', 'name'} del contribuyente
    """
    total_tax = irp_result['total_tax']
    withholdings = irp_result['withholdings']
    return {
        'seccion_I': {
            'ruc': taxpayer.get('ruc', ''),
            'dv': taxpayer.get('dv', ''),
            'nombre': taxpayer.get('name', ''),
            'ejercicio_fiscal': irp_result['fiscal_year'],
        },
        'seccion_II': {
            'ingresos_brutos': irp_result['gross_income'],
        },
        'seccion_III': {
            'egresos_deducibles': irp_result['deductible_expenses'],
            'detalle_por_categoria': irp_result['expenses_by_category'],
        },
        'seccion_IV': {
            'renta_neta': irp_result['net_income'],
        },
        'seccion_V': {
            'tramo1': irp_result['tramo1'],
            'tramo2': irp_result['tramo2'],
            'tramo3': irp_result['tramo3'],
            'total_impuesto': total_tax,
        },
        'seccion_VI': {
            'retenciones': withholdings,
        },
        'seccion_VII': {
            'saldo_a_pagar': max(ZERO, total_tax - withholdings),
            'saldo_a_favor': max(ZERO, withholdings - total_tax),
        },
    }
