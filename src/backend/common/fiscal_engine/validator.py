from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Union

from .check import Check
from .config import DEFAULT_TOLERANCE, EngineChecksConfig, EngineSettings
from .context import CheckContext
from .models import InvoiceTaxInput, ValidationResult
from .registry import registry

logger = logging.getLogger(__name__)


class TaxValidator:
    """Cross-validates DGII invoice tax fields.

    Runs every registered check in order over a single `InvoiceTaxInput` and
    collects their errors and warnings. Never raises for well-typed input.
    """

    def __init__(
        self,
        tolerance: Union[Decimal, float, str] = DEFAULT_TOLERANCE,
        *,
        checks: Optional[Iterable[Check]] = None,
        checks_config: Optional[EngineChecksConfig] = None,
    ):
        self.tolerance = _as_decimal(tolerance)
        self._checks = list(checks) if checks is not None else registry.create_all()
        self._checks_config = checks_config or EngineChecksConfig()

    @classmethod
    def from_settings(cls, settings: EngineSettings) -> "TaxValidator":
        return cls(settings.tolerance, checks_config=settings.checks)

    @property
    def check_ids(self) -> list[str]:
        return [check.check_id for check in self._checks]

    def validate(self, tax_input: InvoiceTaxInput, *, now: Optional[datetime] = None) -> ValidationResult:
        ctx = CheckContext.build(
            tax_input,
            tolerance=self.tolerance,
            now=now,
            checks_config=self._checks_config,
        )
        result = ValidationResult(computed=ctx.amounts.to_computed())

        for check in self._checks:
            if not ctx.checks_config.is_enabled(check.check_id):
                continue
            outcome = check.evaluate(ctx)
            if outcome.has_findings:
                logger.debug(
                    "%s: errors=%s warnings=%s",
                    check.check_id,
                    [e.code for e in outcome.errors],
                    [w.code for w in outcome.warnings],
                )
            result.errors.extend(outcome.errors)
            result.warnings.extend(outcome.warnings)

        logger.info(
            "Validated invoice ncf=%r: valid=%s errors=%d warnings=%d",
            tax_input.ncf,
            result.valid,
            len(result.errors),
            len(result.warnings),
        )
        return result


def _as_decimal(value: Union[Decimal, float, str]) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
