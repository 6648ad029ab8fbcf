import json
from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from common.fiscal_engine.config import EngineChecksConfig
from common.fiscal_engine.context import round2
from common.fiscal_engine.models import InvoiceTaxInput
from common.fiscal_engine.tables import MAX_AMOUNT
from common.fiscal_engine.validator import TaxValidator


def test_clean_invoice_is_valid(make_tax_input, now):
    result = TaxValidator().validate(make_tax_input(ncf="B0100000001"), now=now)
    assert result.valid is True
    assert result.needs_review is False
    assert result.errors == []
    assert result.warnings == []
    assert result.computed.model_dump() == {
        "base_gravada": 1000.0,
        "itbis_esperado": 180.0,
        "total_esperado": 1180.0,
        "monto_facturado": 1000.0,
    }


def test_all_zero_input_only_reports_missing_amounts(now):
    result = TaxValidator().validate(InvoiceTaxInput(), now=now)
    assert result.codes() == ["no_amounts"]
    assert result.valid is False
    assert result.computed.base_gravada == 0.0


@pytest.mark.parametrize(
    "overrides",
    [
        {"itbis_facturado": "999", "total_factura": "5000"},
        {"total_factura": "1", "propina_legal": "300", "cargo_911": "12"},
        {"itbis_tasa": 16, "isc_monto": "40", "total_factura": "77.5"},
        {"otros_impuestos": "1000000", "total_factura": "2"},
    ],
)
def test_zero_base_never_reports_amount_mismatches(now, overrides):
    fields = {"monto_servicios": "0", "monto_bienes": "0", "descuento": "0", "itbis_exento": "0"}
    fields.update(overrides)
    result = TaxValidator().validate(InvoiceTaxInput(**fields), now=now)
    assert "itbis_mismatch" not in result.codes()
    assert "total_mismatch" not in result.codes()


def test_computed_values_clamp_to_zero(make_tax_input, now):
    result = TaxValidator().validate(make_tax_input(descuento="1500", total_factura="0"), now=now)
    assert result.computed.base_gravada == 0.0
    assert result.computed.monto_facturado == 0.0
    assert result.computed.itbis_esperado == 0.0
    assert result.computed.total_esperado == 0.0


def test_computed_values_round_half_up(make_tax_input, now):
    result = TaxValidator().validate(
        make_tax_input(monto_servicios="100.005", itbis_facturado="18", total_factura="0"), now=now
    )
    assert result.computed.base_gravada == 100.01
    assert result.computed.itbis_esperado == 18.0


def test_findings_follow_check_order(make_tax_input, now):
    tax_input = make_tax_input(
        itbis_facturado="0",
        total_factura="5000",
        propina_legal="5",
        ncf="X1",
        itbis_retenido="10",
        descuento="0",
    )
    result = TaxValidator().validate(tax_input, now=now)
    assert [e.code for e in result.errors] == [
        "itbis_mismatch",
        "total_mismatch",
        "ncf_invalid_format",
        "missing_payment_date",
    ]
    assert [w.code for w in result.warnings] == ["propina_mismatch"]
    assert result.valid is False
    assert result.needs_review is True


def test_validation_is_idempotent(make_tax_input, now):
    tax_input = make_tax_input(itbis_facturado="250", propina_legal="5", ncf="B9900000001")
    validator = TaxValidator()
    first = json.dumps(validator.validate(tax_input, now=now).to_payload(), sort_keys=True)
    second = json.dumps(validator.validate(tax_input, now=now).to_payload(), sort_keys=True)
    assert first == second


def test_payload_shape(make_tax_input, now):
    result = TaxValidator().validate(make_tax_input(itbis_facturado="0", total_factura="1000", ncf="X1"), now=now)
    payload = result.to_payload()
    assert set(payload) == {"valid", "needs_review", "errors", "warnings", "computed"}
    itbis_error, ncf_error = payload["errors"]
    assert itbis_error == {
        "field": "itbis_facturado",
        "code": "itbis_mismatch",
        "expected": 180.0,
        "actual": 0.0,
        "message": itbis_error["message"],
    }
    assert "expected" not in ncf_error
    assert "actual" not in ncf_error


def test_valid_and_needs_review_are_derived(make_tax_input, now):
    result = TaxValidator().validate(make_tax_input(propina_legal="5"), now=now)
    assert result.valid == (len(result.errors) == 0)
    assert result.needs_review == (len(result.warnings) > 0)
    with pytest.raises((AttributeError, ValueError)):
        result.valid = False  # type: ignore[misc]


def test_tolerance_is_configurable(make_tax_input, now):
    tax_input = make_tax_input(itbis_facturado="270", total_factura="1270")
    assert "itbis_mismatch" in TaxValidator().validate(tax_input, now=now).codes()
    assert TaxValidator(tolerance=0.10).validate(tax_input, now=now).codes() == []


def test_checks_can_be_disabled(make_tax_input, now):
    cfg = EngineChecksConfig(checks={"TAX-ITBIS-CONSISTENCY": {"enabled": False}})
    validator = TaxValidator(checks_config=cfg)
    result = validator.validate(make_tax_input(itbis_facturado="0", total_factura="1000"), now=now)
    assert result.codes() == []


def test_registered_checks_run_in_order():
    assert TaxValidator().check_ids == [
        "TAX-ITBIS-CONSISTENCY",
        "TAX-TOTAL-CONSISTENCY",
        "TAX-PROPINA-CONSISTENCY",
        "TAX-TELECOM-SURCHARGES",
        "TAX-NCF-VALIDATION",
        "TAX-RETENTION-COHERENCE",
        "TAX-FIELD-COHERENCE",
    ]


def test_input_accepts_camel_case_and_is_frozen():
    tax_input = InvoiceTaxInput.model_validate(
        {"montoServicios": "1000", "itbisFacturado": 180, "totalFactura": 1180.0, "ncfVencimiento": None}
    )
    assert tax_input.monto_servicios == 1000
    assert tax_input.ncf_vencimiento == ""
    with pytest.raises(ValidationError):
        tax_input.monto_servicios = 5  # type: ignore[misc]


def test_largest_accepted_amounts_still_validate(now):
    tax_input = InvoiceTaxInput(
        monto_servicios=MAX_AMOUNT,
        monto_bienes=MAX_AMOUNT,
        itbis_facturado=MAX_AMOUNT,
        isc_monto=MAX_AMOUNT,
        total_factura=MAX_AMOUNT,
    )
    result = TaxValidator().validate(tax_input, now=now)
    assert result.computed.monto_facturado == pytest.approx(2e15)
    assert "total_mismatch" in result.codes()


@pytest.mark.parametrize("raw", ["1e27", "-1e16", "Infinity", "NaN"])
def test_oversized_or_non_finite_amounts_are_rejected_on_input(raw):
    with pytest.raises(ValidationError):
        InvoiceTaxInput(monto_servicios=raw)


def test_round2_handles_values_beyond_default_precision():
    assert round2(Decimal("1e30")) == 1e30
    assert round2(Decimal("12345678901234567890123456.785")) == pytest.approx(1.2345678901234568e25)


def test_naive_now_is_treated_as_utc(make_tax_input):
    naive_now = datetime(2025, 6, 15, 12, 0)
    expired = make_tax_input(ncf="B0100000001", ncf_vencimiento="2025-06-14")
    current = make_tax_input(ncf="B0100000001", ncf_vencimiento="2025-06-16")
    assert "ncf_expired" in TaxValidator().validate(expired, now=naive_now).codes()
    assert TaxValidator().validate(current, now=naive_now).codes() == []
