from __future__ import annotations

from ..check import Check
from ..context import CheckContext, exceeds, round2
from ..models import CheckOutcome, FieldError
from ..registry import register_check


@register_check
class TAX_TOTAL_CONSISTENCY(Check):
    check_id = "TAX-TOTAL-CONSISTENCY"
    title = "Invoice total matches the sum of its components"
    order = 20
    error_codes = ["total_mismatch"]

    def evaluate(self, ctx: CheckContext) -> CheckOutcome:
        outcome = self.outcome()
        total_factura = ctx.tax_input.total_factura
        if total_factura <= 0:
            return outcome
        # Without goods or services there is nothing to sum; TAX-FIELD-COHERENCE reports it.
        if ctx.tax_input.monto_servicios == 0 and ctx.tax_input.monto_bienes == 0:
            return outcome

        total_esperado = ctx.amounts.total_esperado
        if exceeds(total_factura, total_esperado, total_factura * ctx.tolerance):
            outcome.errors.append(
                FieldError(
                    field="total_factura",
                    code="total_mismatch",
                    expected=round2(total_esperado),
                    actual=round2(total_factura),
                    message="Total no coincide con suma de componentes",
                )
            )
        return outcome
