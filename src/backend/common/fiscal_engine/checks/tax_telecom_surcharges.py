from __future__ import annotations

from ..check import Check
from ..context import CheckContext, exceeds
from ..models import CheckOutcome, FieldWarning
from ..registry import register_check
from ..tables import CDT_RATE, ISC_CATEGORY_TELECOM, ISC_TELECOM_RATE


@register_check
class TAX_TELECOM_SURCHARGES(Check):
    check_id = "TAX-TELECOM-SURCHARGES"
    title = "Telecom ISC (10%) and CDT (2%) match the taxable base"
    order = 40
    warning_codes = ["isc_telecom_mismatch", "cdt_mismatch"]

    def evaluate(self, ctx: CheckContext) -> CheckOutcome:
        outcome = self.outcome()
        base_gravada = ctx.amounts.base_gravada
        if ctx.tax_input.isc_categoria != ISC_CATEGORY_TELECOM or base_gravada <= 0:
            return outcome

        isc_esperado = base_gravada * ISC_TELECOM_RATE
        if exceeds(ctx.tax_input.isc_monto, isc_esperado, isc_esperado * ctx.tolerance):
            outcome.warnings.append(
                FieldWarning(
                    field="isc_monto",
                    code="isc_telecom_mismatch",
                    message="ISC telecom debería ser 10% de base gravada",
                )
            )

        cdt_esperado = base_gravada * CDT_RATE
        if exceeds(ctx.tax_input.cdt_monto, cdt_esperado, cdt_esperado * ctx.tolerance):
            outcome.warnings.append(
                FieldWarning(
                    field="cdt_monto",
                    code="cdt_mismatch",
                    message="CDT debería ser 2% de base gravada",
                )
            )
        return outcome
