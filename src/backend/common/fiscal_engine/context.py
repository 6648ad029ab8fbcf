from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Context, Decimal, ROUND_HALF_UP

from .config import DEFAULT_TOLERANCE, EngineChecksConfig
from .models import ComputedValues, InvoiceTaxInput
from .tables import itbis_rate_for

_ZERO = Decimal("0")
_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class ReferenceAmounts:
    base_gravada: Decimal
    monto_facturado: Decimal
    itbis_esperado: Decimal
    total_esperado: Decimal

    def to_computed(self) -> ComputedValues:
        return ComputedValues(
            base_gravada=round2(self.base_gravada),
            itbis_esperado=round2(self.itbis_esperado),
            total_esperado=round2(max(_ZERO, self.total_esperado)),
            monto_facturado=round2(max(_ZERO, self.monto_facturado)),
        )


def compute_reference_amounts(tax_input: InvoiceTaxInput) -> ReferenceAmounts:
    monto_facturado = tax_input.subtotal - tax_input.descuento
    base_gravada = max(_ZERO, monto_facturado - tax_input.itbis_exento)
    itbis_esperado = base_gravada * itbis_rate_for(tax_input.itbis_tasa)
    total_esperado = (
        monto_facturado
        + tax_input.itbis_facturado
        + tax_input.isc_monto
        + tax_input.cdt_monto
        + tax_input.cargo_911
        + tax_input.propina_legal
        + tax_input.otros_impuestos
    )
    return ReferenceAmounts(
        base_gravada=base_gravada,
        monto_facturado=monto_facturado,
        itbis_esperado=itbis_esperado,
        total_esperado=total_esperado,
    )


@dataclass(frozen=True)
class CheckContext:
    tax_input: InvoiceTaxInput
    amounts: ReferenceAmounts
    tolerance: Decimal = DEFAULT_TOLERANCE
    now: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    checks_config: EngineChecksConfig = field(default_factory=EngineChecksConfig)

    @classmethod
    def build(
        cls,
        tax_input: InvoiceTaxInput,
        *,
        tolerance: Decimal = DEFAULT_TOLERANCE,
        now: datetime | None = None,
        checks_config: EngineChecksConfig | None = None,
    ) -> "CheckContext":
        return cls(
            tax_input=tax_input,
            amounts=compute_reference_amounts(tax_input),
            tolerance=tolerance,
            now=_as_utc(now) if now is not None else datetime.now(timezone.utc),
            checks_config=checks_config or EngineChecksConfig(),
        )


def exceeds(actual: Decimal, expected: Decimal, allowed: Decimal) -> bool:
    return abs(actual - expected) > allowed


def round2(value: Decimal) -> float:
    # Precision sized to the value so quantizing never overflows the context.
    ctx = Context(prec=max(28, value.adjusted() + 3))
    return float(value.quantize(_CENTS, rounding=ROUND_HALF_UP, context=ctx))


def _as_utc(now: datetime) -> datetime:
    # Naive datetimes are taken as UTC.
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now
