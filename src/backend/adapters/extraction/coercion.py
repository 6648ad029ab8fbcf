"""Lenient coercion of loosely-typed extraction values.

Providers return amounts as numbers, numeric strings or comma-thousands
strings ("3,965.34"). Anything that cannot be read as a finite number, or
that exceeds MAX_AMOUNT, becomes zero, never an exception.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from common.fiscal_engine.tables import MAX_AMOUNT

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%Y/%m/%d",
    "%m/%d/%Y",
)

_CODE_FENCE = re.compile(r"```(?:json)?")


def coerce_amount(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return _ZERO
    if isinstance(value, Decimal):
        return _bounded(value, value)
    if isinstance(value, (int, float)):
        return _bounded(Decimal(str(value)), value)
    if isinstance(value, str):
        s = value.strip().replace(",", "")
        if not s:
            return _ZERO
        try:
            parsed = Decimal(s)
        except InvalidOperation:
            logger.warning("Could not coerce amount %r; using 0", value)
            return _ZERO
        return _bounded(parsed, value)
    logger.warning("Unsupported amount type %s; using 0", type(value).__name__)
    return _ZERO


def _bounded(parsed: Decimal, raw: Any) -> Decimal:
    if not parsed.is_finite():
        return _ZERO
    if abs(parsed) > MAX_AMOUNT:
        logger.warning("Amount %r exceeds %s; using 0", raw, MAX_AMOUNT)
        return _ZERO
    return parsed


def coerce_int(value: Any) -> int:
    return int(coerce_amount(value))


def parse_date(value: Any) -> date | None:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def clean_rnc(value: Any) -> str:
    return "".join(ch for ch in str(value or "") if ch in "0123456789")


def clean_ncf(value: Any) -> str:
    return "".join(ch for ch in str(value or "") if ch.isascii() and ch.isalnum()).upper()


def detect_tipo_id(rnc: str) -> str:
    cleaned = clean_rnc(rnc)
    if len(cleaned) == 9:
        return "1"  # RNC
    if len(cleaned) == 11:
        return "2"  # Cedula
    return ""


def clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def strip_code_fences(text: str) -> str:
    return _CODE_FENCE.sub("", text.strip()).strip()
