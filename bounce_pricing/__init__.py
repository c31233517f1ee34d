from bounce_pricing.exceptions import (
    InvalidDiscountError,
    PricingError,
    PricingRulesMissingError,
    WaiverReasonRequiredError,
)
from bounce_pricing.models import (
    AutomaticFees,
    CartItem,
    CustomFee,
    EventDetails,
    FeeWaivers,
    FixedAmountDiscount,
    GeoPoint,
    LocationType,
    Mode,
    PercentageDiscount,
    PickupPreference,
    PriceBreakdown,
    PricingRules,
    Surface,
    WaivableFee,
    Waiver,
)
from bounce_pricing.pipeline import (
    build_price_breakdown,
    calculate_subtotal,
    quote_event,
    summarize_breakdown,
    summarize_persisted_order,
)
from bounce_pricing.rules import load_pricing_rules


__version__ = "0.1.0"

__all__ = [
    "AutomaticFees",
    "CartItem",
    "CustomFee",
    "EventDetails",
    "FeeWaivers",
    "FixedAmountDiscount",
    "GeoPoint",
    "InvalidDiscountError",
    "LocationType",
    "Mode",
    "PercentageDiscount",
    "PickupPreference",
    "PriceBreakdown",
    "PricingError",
    "PricingRules",
    "PricingRulesMissingError",
    "Surface",
    "WaivableFee",
    "Waiver",
    "WaiverReasonRequiredError",
    "build_price_breakdown",
    "calculate_subtotal",
    "load_pricing_rules",
    "quote_event",
    "summarize_breakdown",
    "summarize_persisted_order",
]
