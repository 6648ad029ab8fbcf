import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import adapters...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

import pytest


@pytest.fixture
def make_provider_payload():
    """Provider output for a B01 invoice with string amounts and one junk item."""

    def _make(**overrides) -> dict:
        payload = {
            "ncf": "B01-00000001",
            "rncEmisor": "131-04793-9",
            "nombreEmisor": "Tienda X",
            "rncReceptor": "00112345678",
            "fechaFactura": "10/01/2025",
            "subtotal": "1,000.00",
            "itbis": 180,
            "itbisTasa": "18",
            "total": "1,180.00",
            "items": [
                {"descripcion": "Servicio", "cantidad": "1", "precioUnitario": "1,000", "montoTotal": 1000, "itbis": 180},
                "not-an-item",
            ],
        }
        payload.update(overrides)
        return payload

    return _make
