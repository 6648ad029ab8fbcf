"""Extraction-quality confidence for an extracted invoice.

Score breakdown (max 1.0):

  Critical  - 0.15 each: NCF present, RNC emisor present, total > 0, ITBIS >= 0
  Important - 0.05 each: fecha factura, subtotal > 0, tipo NCF, nombre emisor
  Bonus     - 0.10 each: NCF has a valid format, total ~ subtotal + ITBIS (5%)

The ITBIS >= 0 criterion is awarded for the zero default as well, so it is
effectively always granted. Kept as-is pending product clarification.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Callable, List, Tuple

from .models import ExtractedInvoice, ScoreCriterion
from .tables import ncf_has_valid_format

CRITICAL = "critical"
IMPORTANT = "important"
BONUS = "bonus"

_MAX_SCORE = Decimal("1.0")
_TOTAL_TOLERANCE = Decimal("0.05")


def _total_matches_components(inv: ExtractedInvoice) -> bool:
    if inv.total <= 0 or inv.subtotal <= 0:
        return False
    expected = inv.subtotal + inv.itbis
    return abs(inv.total - expected) <= inv.total * _TOTAL_TOLERANCE


_Criterion = Tuple[str, str, Decimal, Callable[[ExtractedInvoice], bool]]

_CRITERIA: Tuple[_Criterion, ...] = (
    ("ncf_present", CRITICAL, Decimal("0.15"), lambda inv: bool(inv.ncf)),
    ("rnc_emisor_present", CRITICAL, Decimal("0.15"), lambda inv: bool(inv.rnc_emisor)),
    ("total_positive", CRITICAL, Decimal("0.15"), lambda inv: inv.total > 0),
    ("itbis_non_negative", CRITICAL, Decimal("0.15"), lambda inv: inv.itbis >= 0),
    ("fecha_factura_present", IMPORTANT, Decimal("0.05"), lambda inv: inv.fecha_factura is not None),
    ("subtotal_positive", IMPORTANT, Decimal("0.05"), lambda inv: inv.subtotal > 0),
    ("tipo_ncf_present", IMPORTANT, Decimal("0.05"), lambda inv: bool(inv.tipo_ncf)),
    ("nombre_emisor_present", IMPORTANT, Decimal("0.05"), lambda inv: bool(inv.nombre_emisor)),
    ("ncf_valid_format", BONUS, Decimal("0.10"), lambda inv: ncf_has_valid_format(inv.ncf)),
    ("total_matches_components", BONUS, Decimal("0.10"), _total_matches_components),
)


class ConfidenceScorer:
    def breakdown(self, invoice: ExtractedInvoice) -> List[ScoreCriterion]:
        return [
            ScoreCriterion(name=name, tier=tier, points=points, awarded=bool(test(invoice)))
            for name, tier, points, test in _CRITERIA
        ]

    def score(self, invoice: ExtractedInvoice) -> float:
        total = sum(
            (c.points for c in self.breakdown(invoice) if c.awarded),
            Decimal("0"),
        )
        return float(min(total, _MAX_SCORE))
