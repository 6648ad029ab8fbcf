from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from ..check import Check
from ..context import CheckContext
from ..models import CheckOutcome, FieldError, FieldWarning
from ..registry import register_check
from ..tables import NCF_TYPES, ncf_has_valid_format, ncf_type_code


@register_check
class TAX_NCF_VALIDATION(Check):
    check_id = "TAX-NCF-VALIDATION"
    title = "NCF has a valid format, a known type and is not expired"
    order = 50
    error_codes = ["ncf_invalid_format", "ncf_expired"]
    warning_codes = ["ncf_unknown_type"]

    def evaluate(self, ctx: CheckContext) -> CheckOutcome:
        outcome = self.outcome()
        ncf = ctx.tax_input.ncf
        if not ncf:
            return outcome

        if not ncf_has_valid_format(ncf):
            outcome.errors.append(
                FieldError(
                    field="ncf",
                    code="ncf_invalid_format",
                    message="NCF debe comenzar con B o E seguido de 10-12 dígitos",
                )
            )
            return outcome

        # Unknown prefixes may be new DGII types, so they only warn.
        tipo_ncf = ncf_type_code(ncf)
        if tipo_ncf not in NCF_TYPES:
            outcome.warnings.append(
                FieldWarning(
                    field="ncf",
                    code="ncf_unknown_type",
                    message=f"Tipo de NCF no reconocido: {tipo_ncf}",
                )
            )

        vencimiento = _parse_expiry(ctx.tax_input.ncf_vencimiento)
        if vencimiento is not None and vencimiento < ctx.now:
            outcome.errors.append(
                FieldError(
                    field="ncf_vencimiento",
                    code="ncf_expired",
                    message="NCF vencido",
                )
            )
        return outcome


def _parse_expiry(value: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.strptime(value.strip(), "%Y-%m-%d")
    except ValueError:
        return None
    return parsed.replace(tzinfo=timezone.utc)
