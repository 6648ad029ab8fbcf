from __future__ import annotations

from ..check import Check
from ..context import CheckContext, exceeds, round2
from ..models import CheckOutcome, FieldError
from ..registry import register_check


@register_check
class TAX_ITBIS_CONSISTENCY(Check):
    check_id = "TAX-ITBIS-CONSISTENCY"
    title = "ITBIS billed matches the statutory rate over the taxable base"
    order = 10
    error_codes = ["itbis_mismatch"]

    def evaluate(self, ctx: CheckContext) -> CheckOutcome:
        outcome = self.outcome()
        base_gravada = ctx.amounts.base_gravada
        if base_gravada <= 0:
            return outcome

        itbis_facturado = ctx.tax_input.itbis_facturado
        itbis_esperado = ctx.amounts.itbis_esperado
        if exceeds(itbis_facturado, itbis_esperado, base_gravada * ctx.tolerance):
            outcome.errors.append(
                FieldError(
                    field="itbis_facturado",
                    code="itbis_mismatch",
                    expected=round2(itbis_esperado),
                    actual=round2(itbis_facturado),
                    message="ITBIS no coincide con la tasa aplicable sobre la base gravada",
                )
            )
        return outcome
