from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from .context import CheckContext
from .models import CheckOutcome


class Check(ABC):
    check_id: str
    title: str
    # Position in the validation sequence; only affects finding order.
    order: int
    error_codes: List[str] = []
    warning_codes: List[str] = []

    def __init__(self):
        if not getattr(self, "check_id", None):
            raise ValueError("Check must define check_id")

    def outcome(self) -> CheckOutcome:
        return CheckOutcome(check_id=self.check_id)

    @abstractmethod
    def evaluate(self, ctx: CheckContext) -> CheckOutcome:  # pragma: no cover
        raise NotImplementedError
