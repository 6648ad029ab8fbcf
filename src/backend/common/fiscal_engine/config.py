from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Type, TypeVar

from dotenv import load_dotenv
from pydantic import BaseModel, Field

T = TypeVar("T", bound=BaseModel)

DEFAULT_TOLERANCE = Decimal("0.05")
DEFAULT_REVIEW_CONFIDENCE_THRESHOLD = Decimal("0.85")


class CheckConfigBase(BaseModel):
    enabled: bool = True


class EngineChecksConfig(BaseModel):
    """Per-check configuration keyed by check_id.

    Checks pull their typed config via `get_check_config`.
    """

    checks: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    def get_check_config(
        self,
        check_id: str,
        model: Type[T],
        default: Optional[T] = None,
    ) -> T:
        if check_id not in self.checks:
            if default is not None:
                return default
            return model()  # type: ignore[call-arg]
        raw = self.checks.get(check_id, {})
        return model.model_validate(raw)

    def is_enabled(self, check_id: str) -> bool:
        return self.get_check_config(check_id, CheckConfigBase).enabled


class EngineSettings(BaseModel):
    # Relative deviation allowed between an extracted amount and its expectation.
    tolerance: Decimal = DEFAULT_TOLERANCE
    # Confidence below this sends a valid invoice to review.
    review_confidence_threshold: Decimal = DEFAULT_REVIEW_CONFIDENCE_THRESHOLD
    checks: EngineChecksConfig = Field(default_factory=EngineChecksConfig)


def get_engine_settings() -> EngineSettings:
    """
    Load engine settings from environment variables (and `.env`, if present).

    Reads:
      FISCAL_TOLERANCE, FISCAL_REVIEW_CONFIDENCE_THRESHOLD
    """
    load_dotenv()
    return EngineSettings(
        tolerance=_fraction_env("FISCAL_TOLERANCE", DEFAULT_TOLERANCE),
        review_confidence_threshold=_fraction_env(
            "FISCAL_REVIEW_CONFIDENCE_THRESHOLD", DEFAULT_REVIEW_CONFIDENCE_THRESHOLD
        ),
    )


def _fraction_env(name: str, default: Decimal) -> Decimal:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = Decimal(raw)
    except InvalidOperation as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if not value.is_finite() or value <= 0 or value > 1:
        raise ValueError(f"{name} must be in (0, 1], got {raw!r}")
    return value
