"""
Respuestas JSON de la API

- Claves snake_case -> camelCase (debito_fiscal -> debitoFiscal)
- Decimal -> número (entero si no tiene parte decimal)
- Las claves que no son snake_case (códigos de categoría, 'tramo1') no se tocan
"""
import re
from decimal import Decimal

from django.core.serializers.json import DjangoJSONEncoder
from django.http import JsonResponse


SNAKE_KEY_RE = re.compile(r'^[a-z][a-zA-Z0-9]*(?:_[a-zA-Z0-9]+)+$')

# siglas que se mantienen en mayúsculas en la API
KEY_OVERRIDES = {
    'saldo_iva': 'saldoIVA',
}


def to_camel_case(key):
    if key in KEY_OVERRIDES:
        return KEY_OVERRIDES[key]
    if not isinstance(key, str) or not SNAKE_KEY_RE.match(key):
        return key
    head, *rest = key.split('_')
    return head + ''.join(part[:1].upper() + part[1:] for part in rest)


def camelize(data):
    """Convierte recursivamente las claves de dicts anidados"""
    if isinstance(data, dict):
        return {to_camel_case(key): camelize(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [camelize(item) for item in data]
    return data


class MoneyJSONEncoder(DjangoJSONEncoder):
    """Los montos viajan como números, no como strings"""

    def default(self, o):
        if isinstance(o, Decimal):
            if o == o.to_integral_value():
                return int(o)
            return float(o)
        return super().default(o)


def json_response(data, status=200):
    return JsonResponse(camelize(data), encoder=MoneyJSONEncoder, status=status, safe=False)
