from __future__ import annotations

from ..check import Check
from ..context import CheckContext
from ..models import CheckOutcome, FieldError, FieldWarning
from ..registry import register_check


@register_check
class TAX_FIELD_COHERENCE(Check):
    check_id = "TAX-FIELD-COHERENCE"
    title = "Amount fields are mutually coherent"
    order = 70
    error_codes = ["no_amounts"]
    warning_codes = ["itbis_exento_exceeds_base", "descuento_exceeds_subtotal"]

    def evaluate(self, ctx: CheckContext) -> CheckOutcome:
        outcome = self.outcome()
        tax_input = ctx.tax_input

        if tax_input.monto_servicios == 0 and tax_input.monto_bienes == 0:
            outcome.errors.append(
                FieldError(
                    field="monto_servicios",
                    code="no_amounts",
                    message="Debe existir monto de servicios o bienes",
                )
            )

        if tax_input.itbis_exento > 0:
            gravada = (tax_input.subtotal - tax_input.descuento) - tax_input.itbis_exento
            if gravada < 0:
                outcome.warnings.append(
                    FieldWarning(
                        field="itbis_exento",
                        code="itbis_exento_exceeds_base",
                        message="ITBIS exento excede la base imponible",
                    )
                )

        if tax_input.descuento > tax_input.subtotal:
            outcome.warnings.append(
                FieldWarning(
                    field="descuento",
                    code="descuento_exceeds_subtotal",
                    message="Descuento excede el subtotal",
                )
            )
        return outcome
