from __future__ import annotations

from typing import Dict, List, Type

from .check import Check


class CheckRegistry:
    """Check classes keyed by id; iteration follows each check's `order`.

    Two checks may not share an `order`, so the validation sequence (and the
    order findings are reported in) is never ambiguous.
    """

    def __init__(self):
        self._by_id: Dict[str, Type[Check]] = {}

    def register(self, check_cls: Type[Check]) -> None:
        check_id = getattr(check_cls, "check_id", None)
        if not check_id:
            raise ValueError("Check class missing check_id")
        if check_id in self._by_id:
            raise ValueError(f"Duplicate check_id registered: {check_id}")
        order = getattr(check_cls, "order", None)
        if not isinstance(order, int):
            raise ValueError(f"{check_id}: order must be an int, got {order!r}")
        for other in self._by_id.values():
            if other.order == order:
                raise ValueError(f"{check_id}: order {order} already taken by {other.check_id}")
        self._by_id[check_id] = check_cls

    def ordered(self) -> List[Type[Check]]:
        return sorted(self._by_id.values(), key=lambda cls: cls.order)

    def create_all(self) -> List[Check]:
        return [cls() for cls in self.ordered()]


registry = CheckRegistry()


def register_check(check_cls: Type[Check]) -> Type[Check]:
    registry.register(check_cls)
    return check_cls
