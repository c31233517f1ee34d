"""Deposit due at booking."""

from dataclasses import dataclass
from typing import Optional

from bounce_pricing.money import dollars_to_cents


def default_deposit(items, rules) -> int:
    """qty x deposit-per-unit summed over the cart; item prices do not matter."""
    return sum(item.qty * rules.deposit_per_unit_cents for item in items)


@dataclass(frozen=True)
class DepositOverride:
    """
    A staff-entered deposit. ``custom_cents=None`` means no override;
    0 is a real override (accept the booking with nothing due now).
    """

    custom_cents: Optional[int] = None

    @property
    def is_active(self) -> bool:
        return self.custom_cents is not None

    def apply(self, dollars_text) -> "DepositOverride":
        return DepositOverride(custom_cents=dollars_to_cents(dollars_text))

    def clear(self) -> "DepositOverride":
        return DepositOverride()

    def resolve(self, default_cents) -> int:
        return default_cents if self.custom_cents is None else self.custom_cents
