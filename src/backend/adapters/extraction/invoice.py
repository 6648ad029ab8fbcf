from __future__ import annotations

import json
import logging
from typing import Any, Optional, Union

from common.fiscal_engine.models import ExtractedInvoice, InvoiceItem, InvoiceTaxInput
from common.fiscal_engine.scoring import ConfidenceScorer
from common.fiscal_engine.tables import GASTOS_NCF_TYPES, INGRESOS_NCF_TYPES, ISC_CATEGORIES

from .coercion import (
    clean_ncf,
    clean_rnc,
    clean_text,
    coerce_amount,
    coerce_int,
    detect_tipo_id,
    parse_date,
    strip_code_fences,
)

logger = logging.getLogger(__name__)


class ExtractionParseError(ValueError):
    pass


def parse_extraction(
    raw: Union[dict[str, Any], str],
    *,
    scorer: Optional[ConfidenceScorer] = None,
) -> ExtractedInvoice:
    """Build an `ExtractedInvoice` from a provider's JSON response.

    `raw` is either the decoded object or the response text, optionally wrapped
    in Markdown code fences. Amounts go through lenient coercion; only an
    undecodable or non-object payload raises `ExtractionParseError`.
    """
    payload = _load_payload(raw)

    ncf = clean_ncf(payload.get("ncf"))
    rnc_emisor = clean_rnc(payload.get("rncEmisor"))
    rnc_receptor = clean_rnc(payload.get("rncReceptor"))

    tipo_ncf = clean_text(payload.get("tipoNcf")).upper()
    if not tipo_ncf and len(ncf) >= 3:
        tipo_ncf = ncf[:3]

    invoice = ExtractedInvoice(
        ncf=ncf,
        tipo_ncf=tipo_ncf,
        ncf_modifica=clean_ncf(payload.get("ncfModifica")),
        rnc_emisor=rnc_emisor,
        nombre_emisor=clean_text(payload.get("nombreEmisor")),
        tipo_id_emisor=clean_text(payload.get("tipoIdEmisor")) or detect_tipo_id(rnc_emisor),
        rnc_receptor=rnc_receptor,
        nombre_receptor=clean_text(payload.get("nombreReceptor")),
        tipo_id_receptor=clean_text(payload.get("tipoIdReceptor")) or detect_tipo_id(rnc_receptor),
        fecha_factura=parse_date(payload.get("fechaFactura")),
        fecha_vencimiento=parse_date(payload.get("fechaVencimiento")),
        fecha_pago=parse_date(payload.get("fechaPago")),
        subtotal=coerce_amount(payload.get("subtotal")),
        descuento=coerce_amount(payload.get("descuento")),
        monto_servicios=coerce_amount(payload.get("montoServicios")),
        monto_bienes=coerce_amount(payload.get("montoBienes")),
        itbis=coerce_amount(payload.get("itbis")),
        itbis_tasa=coerce_amount(payload.get("itbisTasa")),
        itbis_retenido=coerce_amount(payload.get("itbisRetenido")),
        itbis_exento=coerce_amount(payload.get("itbisExento")),
        itbis_proporcionalidad=coerce_amount(payload.get("itbisProporcionalidad")),
        itbis_costo=coerce_amount(payload.get("itbisCosto")),
        isr=coerce_amount(payload.get("isr")),
        retencion_isr_tipo=coerce_int(payload.get("retencionIsrTipo")),
        isc=coerce_amount(payload.get("isc")),
        isc_categoria=_isc_categoria(payload.get("iscCategoria")),
        cdt_monto=coerce_amount(payload.get("cdtMonto")),
        cargo_911=coerce_amount(payload.get("cargo911")),
        propina=coerce_amount(payload.get("propina")),
        otros_impuestos=coerce_amount(payload.get("otrosImpuestos")),
        monto_no_facturable=coerce_amount(payload.get("montoNoFacturable")),
        total=coerce_amount(payload.get("total")),
        forma_pago=clean_text(payload.get("formaPago")),
        tipo_bien_servicio=clean_text(payload.get("tipoBienServicio")),
        tipo_factura=_tipo_factura(tipo_ncf),
        items=[_parse_item(item) for item in payload.get("items") or [] if isinstance(item, dict)],
    )

    scorer = scorer or ConfidenceScorer()
    return invoice.model_copy(update={"confidence": scorer.score(invoice)})


def build_tax_input(invoice: ExtractedInvoice) -> InvoiceTaxInput:
    """Map an extracted invoice onto the validator's input record."""
    # Providers that do not split goods from services report a single subtotal.
    has_split = invoice.monto_servicios > 0 or invoice.monto_bienes > 0
    return InvoiceTaxInput(
        monto_servicios=invoice.monto_servicios if has_split else invoice.subtotal,
        monto_bienes=invoice.monto_bienes if has_split else 0,
        descuento=invoice.descuento,
        itbis_facturado=invoice.itbis,
        itbis_tasa=invoice.itbis_tasa,
        itbis_exento=invoice.itbis_exento,
        itbis_retenido=invoice.itbis_retenido,
        itbis_proporcionalidad=invoice.itbis_proporcionalidad,
        itbis_costo=invoice.itbis_costo,
        isc_monto=invoice.isc,
        isc_categoria=invoice.isc_categoria,
        cdt_monto=invoice.cdt_monto,
        cargo_911=invoice.cargo_911,
        propina_legal=invoice.propina,
        otros_impuestos=invoice.otros_impuestos,
        monto_no_facturable=invoice.monto_no_facturable,
        retencion_isr_tipo=invoice.retencion_isr_tipo,
        retencion_isr_monto=invoice.isr,
        total_factura=invoice.total,
        ncf=invoice.ncf,
        ncf_vencimiento=invoice.fecha_vencimiento.isoformat() if invoice.fecha_vencimiento else "",
        fecha_pago=invoice.fecha_pago.isoformat() if invoice.fecha_pago else "",
    )


def _load_payload(raw: Union[dict[str, Any], str]) -> dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    cleaned = strip_code_fences(raw or "")
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ExtractionParseError(f"JSON parse error: {exc} - Response: {cleaned[:200]}") from exc
    if not isinstance(payload, dict):
        raise ExtractionParseError(f"Expected a JSON object, got {type(payload).__name__}")
    return payload


def _parse_item(item: dict[str, Any]) -> InvoiceItem:
    precio = item.get("precioUnit")
    if precio in (None, ""):
        precio = item.get("precioUnitario")
    importe = item.get("importe")
    if importe in (None, ""):
        importe = item.get("montoTotal")
    return InvoiceItem(
        codigo=clean_text(item.get("codigo")),
        descripcion=clean_text(item.get("descripcion")),
        cantidad=coerce_amount(item.get("cantidad")),
        precio_unit=coerce_amount(precio),
        descuento=coerce_amount(item.get("descuento")),
        itbis=coerce_amount(item.get("itbis")),
        importe=coerce_amount(importe),
    )


def _isc_categoria(value: Any) -> str:
    categoria = clean_text(value).lower()
    if categoria and categoria not in ISC_CATEGORIES:
        logger.warning("Unknown ISC category %r; ignoring", value)
        return ""
    return categoria


def _tipo_factura(tipo_ncf: str) -> str:
    if tipo_ncf in INGRESOS_NCF_TYPES:
        return "ingresos"  # 607 - Ventas
    if tipo_ncf in GASTOS_NCF_TYPES:
        return "gastos"  # 606 - Compras
    return "gastos"
