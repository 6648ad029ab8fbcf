from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from .tables import MAX_AMOUNT

# Finite monetary amount no larger than MAX_AMOUNT in magnitude.
Amount = Annotated[Decimal, Field(ge=-MAX_AMOUNT, le=MAX_AMOUNT, allow_inf_nan=False)]


class ExtractionStatus(str, Enum):
    VALIDATED = "validated"
    REVIEW = "review"
    ERROR = "error"


class InvoiceTaxInput(BaseModel):
    """Normalized invoice fields consumed by the tax validator.

    Amounts default to zero and percentages are whole numbers (18, not 0.18).
    Accepts both snake_case and camelCase keys.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    # Base amounts
    monto_servicios: Amount = Decimal("0")
    monto_bienes: Amount = Decimal("0")
    descuento: Amount = Decimal("0")

    # ITBIS
    itbis_facturado: Amount = Decimal("0")
    itbis_tasa: Amount = Decimal("0")  # 18 (normal) or 16 (zona franca)
    itbis_exento: Amount = Decimal("0")
    itbis_retenido: Amount = Decimal("0")
    itbis_proporcionalidad: Amount = Decimal("0")
    itbis_costo: Amount = Decimal("0")

    # ISC
    isc_monto: Amount = Decimal("0")
    isc_categoria: str = ""

    # Other charges
    cdt_monto: Amount = Decimal("0")
    cargo_911: Amount = Decimal("0")
    propina_legal: Amount = Decimal("0")
    otros_impuestos: Amount = Decimal("0")
    monto_no_facturable: Amount = Decimal("0")

    # ISR retention
    retencion_isr_tipo: int = 0
    retencion_isr_monto: Amount = Decimal("0")

    total_factura: Amount = Decimal("0")

    ncf: str = ""
    ncf_vencimiento: str = ""  # YYYY-MM-DD

    fecha_pago: str = ""  # YYYY-MM-DD

    @field_validator("isc_categoria", "ncf", "ncf_vencimiento", "fecha_pago", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def subtotal(self) -> Decimal:
        return self.monto_servicios + self.monto_bienes


class FieldError(BaseModel):
    field: str
    code: str
    expected: Optional[float] = None
    actual: Optional[float] = None
    message: str = ""


class FieldWarning(BaseModel):
    field: str
    code: str
    message: str


class ComputedValues(BaseModel):
    base_gravada: float = 0.0
    itbis_esperado: float = 0.0
    total_esperado: float = 0.0
    monto_facturado: float = 0.0


class CheckOutcome(BaseModel):
    check_id: str
    errors: List[FieldError] = Field(default_factory=list)
    warnings: List[FieldWarning] = Field(default_factory=list)

    @property
    def has_findings(self) -> bool:
        return bool(self.errors or self.warnings)


class ValidationResult(BaseModel):
    errors: List[FieldError] = Field(default_factory=list)
    warnings: List[FieldWarning] = Field(default_factory=list)
    computed: ComputedValues = Field(default_factory=ComputedValues)

    # Derived from the finding lists; never stored.
    @computed_field  # type: ignore[prop-decorator]
    @property
    def valid(self) -> bool:
        return len(self.errors) == 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def needs_review(self) -> bool:
        return len(self.warnings) > 0

    def codes(self) -> List[str]:
        return [e.code for e in self.errors] + [w.code for w in self.warnings]

    def to_payload(self) -> Dict[str, Any]:
        # expected/actual are omitted when the check did not set them.
        return self.model_dump(mode="json", exclude_none=True)


class InvoiceItem(BaseModel):
    codigo: str = ""
    descripcion: str = ""
    cantidad: Decimal = Decimal("0")
    precio_unit: Decimal = Decimal("0")
    descuento: Decimal = Decimal("0")
    itbis: Decimal = Decimal("0")
    importe: Decimal = Decimal("0")

    @property
    def is_taxed(self) -> bool:
        return self.itbis != 0


class ExtractedInvoice(BaseModel):
    # Comprobante fiscal
    ncf: str = ""
    tipo_ncf: str = ""
    ncf_modifica: str = ""

    # Emisor / receptor
    rnc_emisor: str = ""
    nombre_emisor: str = ""
    tipo_id_emisor: str = ""
    rnc_receptor: str = ""
    nombre_receptor: str = ""
    tipo_id_receptor: str = ""

    fecha_factura: Optional[date] = None
    fecha_vencimiento: Optional[date] = None
    fecha_pago: Optional[date] = None

    subtotal: Decimal = Decimal("0")
    descuento: Decimal = Decimal("0")
    monto_servicios: Decimal = Decimal("0")
    monto_bienes: Decimal = Decimal("0")

    itbis: Decimal = Decimal("0")
    itbis_tasa: Decimal = Decimal("0")
    itbis_retenido: Decimal = Decimal("0")
    itbis_exento: Decimal = Decimal("0")
    itbis_proporcionalidad: Decimal = Decimal("0")
    itbis_costo: Decimal = Decimal("0")

    isr: Decimal = Decimal("0")
    retencion_isr_tipo: int = 0

    isc: Decimal = Decimal("0")
    isc_categoria: str = ""

    cdt_monto: Decimal = Decimal("0")
    cargo_911: Decimal = Decimal("0")
    propina: Decimal = Decimal("0")
    otros_impuestos: Decimal = Decimal("0")
    monto_no_facturable: Decimal = Decimal("0")

    total: Decimal = Decimal("0")

    forma_pago: str = ""
    tipo_bien_servicio: str = ""
    tipo_factura: str = ""

    items: List[InvoiceItem] = Field(default_factory=list)

    confidence: float = 0.0


class ScoreCriterion(BaseModel):
    name: str
    tier: str
    points: Decimal
    awarded: bool


class InvoiceAssessment(BaseModel):
    extraction_status: ExtractionStatus
    needs_review: bool
    confidence: float
    validation: ValidationResult
    review_notes: str = ""

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(mode="json", exclude={"validation"})
        payload["validation"] = self.validation.to_payload()
        return payload
