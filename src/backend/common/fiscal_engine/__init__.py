"""Fiscal cross-validation and confidence scoring for DGII invoices.

This package intentionally contains only domain logic:
- Inputs are normalized invoice records; outputs are validation results and scores.
- No extraction providers, storage, or network calls live here.
"""

from .assessment import assess
from .context import CheckContext
from .models import (
    ExtractedInvoice,
    ExtractionStatus,
    FieldError,
    FieldWarning,
    InvoiceAssessment,
    InvoiceTaxInput,
    ValidationResult,
)
from .scoring import ConfidenceScorer
from .validator import TaxValidator

# Import built-in checks so they self-register with the global registry.
from . import checks as _builtin_checks  # noqa: F401
