from __future__ import annotations

import argparse
import json
from typing import Any, List

from pydantic import BaseModel, Field

from .registry import registry

# Ensure built-in checks are imported/registered when generating a catalog.
from . import checks as _builtin_checks  # noqa: F401


class CheckCatalogEntry(BaseModel):
    check_id: str
    title: str
    order: int

    error_codes: List[str] = Field(default_factory=list)
    warning_codes: List[str] = Field(default_factory=list)

    module: str
    class_name: str


def build_catalog() -> List[CheckCatalogEntry]:
    entries: List[CheckCatalogEntry] = []
    for check_cls in registry.ordered():
        entries.append(
            CheckCatalogEntry(
                check_id=check_cls.check_id,
                title=getattr(check_cls, "title", ""),
                order=getattr(check_cls, "order", 0),
                error_codes=list(getattr(check_cls, "error_codes", []) or []),
                warning_codes=list(getattr(check_cls, "warning_codes", []) or []),
                module=getattr(check_cls, "__module__", ""),
                class_name=getattr(check_cls, "__name__", ""),
            )
        )
    return entries


def _dump_json(catalog: list[dict[str, Any]]) -> str:
    return json.dumps(catalog, indent=2, sort_keys=True, ensure_ascii=False)


def _dump_yaml(catalog: list[dict[str, Any]]) -> str:
    import yaml

    return yaml.safe_dump(catalog, sort_keys=True, allow_unicode=True)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Generate a catalog of the registered tax checks.")
    parser.add_argument(
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml).",
    )
    args = parser.parse_args(argv)

    catalog = [e.model_dump(mode="json") for e in build_catalog()]
    if args.format == "json":
        print(_dump_json(catalog))
    else:
        print(_dump_yaml(catalog))


if __name__ == "__main__":
    main()
