from __future__ import annotations

import json
from decimal import Decimal
from typing import Union

from .config import DEFAULT_REVIEW_CONFIDENCE_THRESHOLD
from .models import ExtractionStatus, InvoiceAssessment, ValidationResult


def extraction_status_for(
    result: ValidationResult,
    confidence: float,
    *,
    threshold: Union[Decimal, float] = DEFAULT_REVIEW_CONFIDENCE_THRESHOLD,
) -> ExtractionStatus:
    if not result.valid:
        return ExtractionStatus.ERROR
    if result.needs_review or Decimal(str(confidence)) < Decimal(str(threshold)):
        return ExtractionStatus.REVIEW
    return ExtractionStatus.VALIDATED


def review_notes_for(result: ValidationResult) -> str:
    if not result.errors and not result.warnings:
        return ""
    return json.dumps(result.to_payload(), ensure_ascii=False, sort_keys=True)


def assess(
    result: ValidationResult,
    confidence: float,
    *,
    threshold: Union[Decimal, float] = DEFAULT_REVIEW_CONFIDENCE_THRESHOLD,
) -> InvoiceAssessment:
    """Combine a validation result and a confidence score into a persisted status.

    The validation result is carried unchanged; `needs_review` on the assessment
    is true for anything other than `validated`.
    """
    status = extraction_status_for(result, confidence, threshold=threshold)
    return InvoiceAssessment(
        extraction_status=status,
        needs_review=status != ExtractionStatus.VALIDATED,
        confidence=confidence,
        validation=result,
        review_notes=review_notes_for(result),
    )
