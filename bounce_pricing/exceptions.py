"""Exceptions for bounce_pricing."""


class PricingError(Exception):
    """Base exception for pricing errors."""
    pass


class PricingRulesMissingError(PricingError):
    """Raised when a computation needs pricing rules that are not loaded yet."""

    def __init__(self, message="Pricing rules are not configured"):
        super().__init__(message)


class InvalidDiscountError(PricingError):
    """Raised when a discount entry sets both or neither of amount and percentage."""

    def __init__(self, name, message):
        super().__init__(f"Discount '{name}': {message}")
        self.name = name


class WaiverReasonRequiredError(PricingError):
    """Raised when a fee is waived without a reason."""

    def __init__(self, fee):
        super().__init__(f"A reason is required to waive the {fee} fee")
        self.fee = fee
