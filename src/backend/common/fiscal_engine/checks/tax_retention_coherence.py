from __future__ import annotations

from ..check import Check
from ..context import CheckContext, exceeds
from ..models import CheckOutcome, FieldError, FieldWarning
from ..registry import register_check
from ..tables import ISR_RETENTION_RATES, ISR_TIPO_MAX, ISR_TIPO_MIN


@register_check
class TAX_RETENTION_COHERENCE(Check):
    check_id = "TAX-RETENTION-COHERENCE"
    title = "Retentions carry a payment date, an ISR type and the expected ISR rate"
    order = 60
    error_codes = ["missing_payment_date", "missing_retencion_tipo"]
    warning_codes = ["isr_rate_mismatch"]

    def evaluate(self, ctx: CheckContext) -> CheckOutcome:
        outcome = self.outcome()
        tax_input = ctx.tax_input
        has_retention = tax_input.itbis_retenido > 0 or tax_input.retencion_isr_monto > 0

        if has_retention and not tax_input.fecha_pago:
            outcome.errors.append(
                FieldError(
                    field="fecha_pago",
                    code="missing_payment_date",
                    message="Fecha de pago requerida cuando hay retenciones",
                )
            )

        if tax_input.retencion_isr_monto <= 0:
            return outcome

        tipo = tax_input.retencion_isr_tipo
        if tipo < ISR_TIPO_MIN or tipo > ISR_TIPO_MAX:
            outcome.errors.append(
                FieldError(
                    field="retencion_isr_tipo",
                    code="missing_retencion_tipo",
                    message="Tipo de retención ISR requerido (1-8)",
                )
            )
            return outcome

        self._check_isr_rate(ctx, outcome)
        return outcome

    def _check_isr_rate(self, ctx: CheckContext, outcome: CheckOutcome) -> None:
        tax_input = ctx.tax_input
        rate = ISR_RETENTION_RATES.get(tax_input.retencion_isr_tipo)
        if rate is None:
            return

        base_isr = tax_input.subtotal - tax_input.descuento
        if base_isr <= 0:
            return

        expected_isr = base_isr * rate
        if exceeds(tax_input.retencion_isr_monto, expected_isr, expected_isr * ctx.tolerance):
            outcome.warnings.append(
                FieldWarning(
                    field="retencion_isr_monto",
                    code="isr_rate_mismatch",
                    message=(
                        "Retención ISR no coincide con tasa esperada para tipo "
                        f"{tax_input.retencion_isr_tipo}"
                    ),
                )
            )
