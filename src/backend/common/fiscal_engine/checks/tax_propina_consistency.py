from __future__ import annotations

from ..check import Check
from ..context import CheckContext, exceeds
from ..models import CheckOutcome, FieldWarning
from ..registry import register_check
from ..tables import PROPINA_RATE, PROPINA_TOLERANCE


@register_check
class TAX_PROPINA_CONSISTENCY(Check):
    check_id = "TAX-PROPINA-CONSISTENCY"
    title = "Legal tip is 10% of the billed amount"
    order = 30
    warning_codes = ["propina_mismatch"]

    def evaluate(self, ctx: CheckContext) -> CheckOutcome:
        outcome = self.outcome()
        propina = ctx.tax_input.propina_legal
        monto_facturado = ctx.amounts.monto_facturado
        if propina <= 0 or monto_facturado <= 0:
            return outcome

        # Uses its own, wider tolerance rather than ctx.tolerance.
        propina_esperada = monto_facturado * PROPINA_RATE
        if exceeds(propina, propina_esperada, propina_esperada * PROPINA_TOLERANCE):
            outcome.warnings.append(
                FieldWarning(
                    field="propina_legal",
                    code="propina_mismatch",
                    message="Propina no coincide con 10% del monto facturado",
                )
            )
        return outcome
