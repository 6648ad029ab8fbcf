import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import common...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from common.fiscal_engine.context import CheckContext
from common.fiscal_engine.models import ExtractedInvoice, InvoiceTaxInput


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_tax_input():
    """Clean B01 invoice: 1000 in services, 18% ITBIS, total 1180."""

    def _make(**overrides) -> InvoiceTaxInput:
        fields = {
            "monto_servicios": "1000",
            "itbis_facturado": "180",
            "itbis_tasa": 18,
            "total_factura": "1180",
        }
        fields.update(overrides)
        return InvoiceTaxInput(**fields)

    return _make


@pytest.fixture
def make_ctx(now):
    def _make(tax_input: InvoiceTaxInput, *, tolerance: Decimal = Decimal("0.05")) -> CheckContext:
        return CheckContext.build(tax_input, tolerance=tolerance, now=now)

    return _make


@pytest.fixture
def make_invoice():
    """Fully extracted invoice that earns every confidence point."""

    def _make(**overrides) -> ExtractedInvoice:
        fields = {
            "ncf": "B0100000001",
            "tipo_ncf": "B01",
            "rnc_emisor": "131047939",
            "nombre_emisor": "Tienda X",
            "fecha_factura": date(2025, 1, 10),
            "subtotal": "1000",
            "itbis": "180",
            "total": "1180",
        }
        fields.update(overrides)
        return ExtractedInvoice(**fields)

    return _make
