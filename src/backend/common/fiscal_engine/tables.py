"""DGII rate tables and document-number formats.

All values are read-only and shared across calls.
"""

from __future__ import annotations

import re
from decimal import Decimal
from types import MappingProxyType
from typing import FrozenSet, Mapping

# Largest absolute monetary amount accepted on an invoice (15 integer digits, cents).
MAX_AMOUNT = Decimal("999999999999999.99")

# B or E followed by 10-12 digits.
NCF_PATTERN = re.compile(r"[BE][0-9]{10,12}")

NCF_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "B01": "Factura Crédito Fiscal",
        "B02": "Factura Consumidor Final",
        "B04": "Nota de Crédito",
        "B14": "Régimen Especial",
        "B15": "Gubernamental",
        "B16": "Exportación",
        "E31": "Factura Electrónica",
        "E32": "Nota Débito Electrónica",
        "E33": "Nota Crédito Electrónica",
        "E34": "Compras Electrónicas",
        "E41": "Comprobante Compras",
        "E43": "Gastos Menores",
        "E44": "Regímenes Especiales",
        "E45": "Gubernamental",
    }
)

# Keyed by retencion_isr_tipo. Kept exactly as DGII tables were supplied; types 6
# and 7 are the only non-10% rates.
ISR_RETENTION_RATES: Mapping[int, Decimal] = MappingProxyType(
    {
        1: Decimal("0.10"),  # Alquileres
        2: Decimal("0.10"),  # Honorarios profesionales
        3: Decimal("0.10"),  # Comisiones
        4: Decimal("0.10"),  # Intereses pagados a personas físicas
        5: Decimal("0.10"),  # Dividendos
        6: Decimal("0.25"),  # Premios
        7: Decimal("0.27"),  # Transferencias inmobiliarias
        8: Decimal("0.10"),  # Otros
    }
)
ISR_TIPO_MIN = 1
ISR_TIPO_MAX = 8

ISC_CATEGORIES: FrozenSet[str] = frozenset(
    {"seguros", "telecom", "alcohol", "tabaco", "vehiculos", "combustibles"}
)
ISC_CATEGORY_TELECOM = "telecom"

ITBIS_STANDARD_RATE = Decimal("0.18")
ITBIS_FREE_ZONE_RATE = Decimal("0.16")
ITBIS_FREE_ZONE_PERCENT = Decimal("16")

PROPINA_RATE = Decimal("0.10")
# Tolerance for the legal tip, relative to the expected tip.
PROPINA_TOLERANCE = Decimal("0.10")

ISC_TELECOM_RATE = Decimal("0.10")
CDT_RATE = Decimal("0.02")

# NCF prefixes recorded as purchases (606) vs. sales (607).
GASTOS_NCF_TYPES: FrozenSet[str] = frozenset({"B01", "B14", "B15"})
INGRESOS_NCF_TYPES: FrozenSet[str] = frozenset({"B02"})


def itbis_rate_for(itbis_tasa: Decimal) -> Decimal:
    if itbis_tasa == ITBIS_FREE_ZONE_PERCENT:
        return ITBIS_FREE_ZONE_RATE
    return ITBIS_STANDARD_RATE


def ncf_has_valid_format(ncf: str) -> bool:
    return NCF_PATTERN.fullmatch(ncf or "") is not None


def ncf_type_code(ncf: str) -> str:
    return ncf[:3]
