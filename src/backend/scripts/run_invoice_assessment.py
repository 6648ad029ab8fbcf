from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


def run_assessment_from_file(path: Path):
    _ensure_backend_on_path()
    from adapters.extraction.invoice import build_tax_input, parse_extraction
    from common.fiscal_engine.assessment import assess
    from common.fiscal_engine.config import get_engine_settings
    from common.fiscal_engine.validator import TaxValidator

    settings = get_engine_settings()
    invoice = parse_extraction(path.read_text(encoding="utf-8"))
    result = TaxValidator.from_settings(settings).validate(build_tax_input(invoice))
    assessment = assess(result, invoice.confidence, threshold=settings.review_confidence_threshold)
    return invoice, assessment


def _write_markdown(invoice, assessment, out_path: Path) -> None:
    validation = assessment.validation
    computed = validation.computed
    lines = [
        f"# Invoice Assessment {invoice.ncf or '(sin NCF)'}",
        "",
        f"- Emisor: {invoice.nombre_emisor or '-'} ({invoice.rnc_emisor or '-'})",
        f"- Status: {assessment.extraction_status.value}",
        f"- Confidence: {assessment.confidence:.2f}",
        f"- Valid: {validation.valid}",
        f"- Needs review: {assessment.needs_review}",
        "",
        "## Computed",
        f"- Base gravada: {computed.base_gravada:.2f}",
        f"- ITBIS esperado: {computed.itbis_esperado:.2f}",
        f"- Total esperado: {computed.total_esperado:.2f}",
        f"- Monto facturado: {computed.monto_facturado:.2f}",
    ]
    if validation.errors:
        lines.append("")
        lines.append("## Errors")
        for err in validation.errors:
            line = f"- {err.code} ({err.field}): {err.message}"
            if err.expected is not None or err.actual is not None:
                line += f" | expected={err.expected} actual={err.actual}"
            lines.append(line)
    if validation.warnings:
        lines.append("")
        lines.append("## Warnings")
        for warn in validation.warnings:
            lines.append(f"- {warn.code} ({warn.field}): {warn.message}")
    out_path.write_text("\n".join(lines), encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Validate and score an extracted DGII invoice and write JSON/MD outputs."
    )
    parser.add_argument("input", help="Path to the provider's extraction JSON.")
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Output directory for assessment files (defaults to the input's directory).",
    )
    parser.add_argument("--verbose", action="store_true", help="Log each check's findings.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    input_path = Path(args.input).resolve()
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    output_dir.mkdir(parents=True, exist_ok=True)

    invoice, assessment = run_assessment_from_file(input_path)

    base_name = f"assessment_{invoice.ncf or input_path.stem}"
    out_json = output_dir / f"{base_name}.json"
    out_md = output_dir / f"{base_name}.md"

    out_json.write_text(
        json.dumps(
            {"invoice": invoice.model_dump(mode="json"), "assessment": assessment.to_payload()},
            indent=2,
            ensure_ascii=False,
        ),
        encoding="utf-8",
    )
    _write_markdown(invoice, assessment, out_md)

    print(f"Wrote {out_json}")
    print(f"Wrote {out_md}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
