from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException

from adapters.extraction.invoice import ExtractionParseError, build_tax_input, parse_extraction
from common.fiscal_engine.assessment import assess
from common.fiscal_engine.catalog import build_catalog
from common.fiscal_engine.config import get_engine_settings
from common.fiscal_engine.models import InvoiceTaxInput
from common.fiscal_engine.scoring import ConfidenceScorer
from common.fiscal_engine.validator import TaxValidator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.post("/validate")
def validate_invoice_taxes(tax_input: InvoiceTaxInput) -> dict[str, Any]:
    validator = TaxValidator.from_settings(get_engine_settings())
    result = validator.validate(tax_input)
    return result.to_payload()


@router.post("/assess")
def assess_extraction(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    settings = get_engine_settings()
    scorer = ConfidenceScorer()
    try:
        invoice = parse_extraction(payload, scorer=scorer)
    except ExtractionParseError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    result = TaxValidator.from_settings(settings).validate(build_tax_input(invoice))
    assessment = assess(result, invoice.confidence, threshold=settings.review_confidence_threshold)
    logger.info(
        "Assessed invoice ncf=%r: status=%s confidence=%.2f",
        invoice.ncf,
        assessment.extraction_status.value,
        invoice.confidence,
    )
    return {
        "invoice": invoice.model_dump(mode="json"),
        "assessment": assessment.to_payload(),
    }


@router.get("/checks")
def list_checks() -> list[dict[str, Any]]:
    return [entry.model_dump(mode="json") for entry in build_catalog()]
