"""Value objects for pricing inputs and outputs.

All of these are frozen; an edit (new price, new qty, a waiver toggle) is a
``dataclasses.replace`` that produces a new object, and every breakdown is
rebuilt from scratch from them.
"""

from dataclasses import asdict, dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Optional, Tuple, Union

from bounce_pricing.exceptions import WaiverReasonRequiredError


class Mode(str, Enum):
    DRY = "dry"
    WATER = "water"


class LocationType(str, Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"


class Surface(str, Enum):
    GRASS = "grass"
    CEMENT = "cement"


class PickupPreference(str, Enum):
    NEXT_DAY = "next_day"
    SAME_DAY = "same_day"


class WaivableFee(str, Enum):
    TAX = "tax"
    TRAVEL = "travel"
    SAME_DAY_PICKUP = "same_day_pickup"
    SURFACE = "surface"
    GENERATOR = "generator"


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float

    def __str__(self):
        return f"{self.lat},{self.lng}"


@dataclass(frozen=True)
class CartItem:
    """One rented unit line in a cart or invoice."""

    unit_id: str
    unit_price_cents: int
    qty: int = 1
    mode: Mode = Mode.DRY
    unit_name: str = ""
    is_new: bool = False

    def __post_init__(self):
        if self.qty < 1:
            raise ValueError(f"qty must be at least 1, got {self.qty}")
        object.__setattr__(self, "mode", Mode(self.mode))

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.qty


@dataclass(frozen=True)
class EventDetails:
    """Where, when and how an event is set up."""

    event_date: date
    event_end_date: Optional[date] = None
    location_type: LocationType = LocationType.RESIDENTIAL
    surface: Surface = Surface.GRASS
    can_use_stakes: bool = True
    generator_qty: int = 0
    pickup_preference: PickupPreference = PickupPreference.NEXT_DAY
    start_window: str = ""
    end_window: str = ""
    until_end_of_day: bool = False
    address_line1: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    lat: Optional[float] = None
    lng: Optional[float] = None

    def __post_init__(self):
        if self.generator_qty < 0:
            raise ValueError(f"generator_qty cannot be negative, got {self.generator_qty}")
        object.__setattr__(self, "location_type", LocationType(self.location_type))
        object.__setattr__(self, "surface", Surface(self.surface))
        object.__setattr__(self, "pickup_preference", PickupPreference(self.pickup_preference))

    def normalized(self) -> "EventDetails":
        """
        Apply the logistics constraints:
        - commercial events are always picked up the same day
        - same-day pickup means the event ends on its start date
        """
        event = self
        if event.location_type == LocationType.COMMERCIAL:
            event = replace(event, pickup_preference=PickupPreference.SAME_DAY)
        if event.pickup_preference == PickupPreference.SAME_DAY or event.event_end_date is None:
            event = replace(event, event_end_date=event.event_date)
        return event

    @property
    def num_days(self) -> int:
        end = self.event_end_date or self.event_date
        return max(1, (end - self.event_date).days + 1)

    @property
    def is_same_day_pickup(self) -> bool:
        return (
            self.pickup_preference == PickupPreference.SAME_DAY
            or self.location_type == LocationType.COMMERCIAL
        )

    @property
    def needs_sandbags(self) -> bool:
        return self.surface == Surface.CEMENT or not self.can_use_stakes

    @property
    def destination(self) -> Optional[GeoPoint]:
        if not self.lat or not self.lng:
            return None
        return GeoPoint(self.lat, self.lng)


@dataclass(frozen=True)
class ZoneOverride:
    """A ZIP code billed a flat travel fee regardless of distance."""

    zip: str
    flat_cents: int
    name: str = ""


@dataclass(frozen=True)
class SameDayFeeRule:
    """One row of the same-day pickup fee matrix."""

    units: int
    generator: bool
    subtotal_ge_cents: int
    fee_cents: int

    def matches(self, total_units, has_generator, subtotal_cents) -> bool:
        if self.units > total_units:
            return False
        if self.generator and not has_generator:
            return False
        return self.subtotal_ge_cents <= subtotal_cents


@dataclass(frozen=True)
class PricingRules:
    """Admin-configured pricing, read-only to the engine."""

    base_radius_miles: float
    per_mile_after_base_cents: int
    included_cities: Tuple[str, ...] = ()
    zone_overrides: Tuple[ZoneOverride, ...] = ()
    surface_sandbag_fee_cents: int = 0
    residential_multiplier: float = 1.0
    commercial_multiplier: float = 1.0
    same_day_pickup_fee_cents: int = 0
    same_day_matrix: Tuple[SameDayFeeRule, ...] = ()
    generator_fee_single_cents: int = 0
    generator_fee_multiple_cents: int = 0
    deposit_per_unit_cents: int = 5000
    overnight_holiday_only: bool = False
    extra_day_pct: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class FixedAmountDiscount:
    name: str
    amount_cents: int


@dataclass(frozen=True)
class PercentageDiscount:
    """Percent off the pre-discount subtotal."""

    name: str
    percentage: float


Discount = Union[FixedAmountDiscount, PercentageDiscount]


@dataclass(frozen=True)
class CustomFee:
    name: str
    amount_cents: int


@dataclass(frozen=True)
class AutomaticFees:
    """The four fees the engine derives from event logistics."""

    travel_fee_cents: int = 0
    surface_fee_cents: int = 0
    same_day_pickup_fee_cents: int = 0
    generator_fee_cents: int = 0

    @property
    def taxable_cents(self) -> int:
        # same-day pickup is charged but never taxed
        return self.travel_fee_cents + self.surface_fee_cents + self.generator_fee_cents

    @property
    def total_cents(self) -> int:
        return self.taxable_cents + self.same_day_pickup_fee_cents

    def apply_waivers(self, waivers: "FeeWaivers") -> "AutomaticFees":
        """Zero every individually waived fee; the rest pass through unchanged."""
        return AutomaticFees(
            travel_fee_cents=0 if waivers.travel.waived else self.travel_fee_cents,
            surface_fee_cents=0 if waivers.surface.waived else self.surface_fee_cents,
            same_day_pickup_fee_cents=(
                0 if waivers.same_day_pickup.waived else self.same_day_pickup_fee_cents
            ),
            generator_fee_cents=0 if waivers.generator.waived else self.generator_fee_cents,
        )


@dataclass(frozen=True)
class Waiver:
    waived: bool = False
    reason: str = ""


@dataclass(frozen=True)
class FeeWaivers:
    """Per-fee waiver flags persisted on an order."""

    tax: Waiver = field(default_factory=Waiver)
    travel: Waiver = field(default_factory=Waiver)
    same_day_pickup: Waiver = field(default_factory=Waiver)
    surface: Waiver = field(default_factory=Waiver)
    generator: Waiver = field(default_factory=Waiver)

    @classmethod
    def from_flags(cls, **flags) -> "FeeWaivers":
        """
        Build from persisted order columns, e.g.
        ``FeeWaivers.from_flags(travel_fee_waived=True, travel_fee_waive_reason="promo")``.
        Tax uses ``tax_waived`` / ``tax_waive_reason``.
        """
        waivers = {}
        for fee in WaivableFee:
            prefix = "tax" if fee == WaivableFee.TAX else f"{fee.value}_fee"
            waivers[fee.value] = Waiver(
                waived=bool(flags.get(f"{prefix}_waived") or False),
                reason=flags.get(f"{prefix}_waive_reason") or "",
            )
        return cls(**waivers)

    def get(self, fee: WaivableFee) -> Waiver:
        return getattr(self, WaivableFee(fee).value)

    def is_waived(self, fee: WaivableFee) -> bool:
        return self.get(fee).waived

    def waive(self, fee: WaivableFee, reason: str) -> "FeeWaivers":
        fee = WaivableFee(fee)
        current = self.get(fee)
        reason = (reason or "").strip()
        if not reason:
            if not current.waived:
                raise WaiverReasonRequiredError(fee.value)
            reason = current.reason
        return replace(self, **{fee.value: Waiver(waived=True, reason=reason)})

    def restore(self, fee: WaivableFee) -> "FeeWaivers":
        fee = WaivableFee(fee)
        return replace(self, **{fee.value: Waiver()})

    @property
    def any_waived(self) -> bool:
        return any(self.is_waived(fee) for fee in WaivableFee)


@dataclass(frozen=True)
class PriceBreakdown:
    """
    Everything a quote or invoice needs to charge, in cents.

    Fee fields are the effective (post-waiver) amounts; ``original_fees`` and
    ``original_tax_cents`` keep what would be owed without waivers.
    """

    subtotal_cents: int
    travel_fee_cents: int
    travel_total_miles: float
    travel_base_radius_miles: float
    travel_chargeable_miles: float
    travel_per_mile_cents: int
    travel_is_flat_fee: bool
    travel_is_included_city: bool
    travel_fee_display_name: str
    surface_fee_cents: int
    same_day_pickup_fee_cents: int
    generator_fee_cents: int
    discount_total_cents: int
    custom_fees_total_cents: int
    taxable_amount_cents: int
    tax_cents: int
    tip_cents: int
    total_cents: int
    deposit_due_cents: int
    balance_due_cents: int
    original_fees: AutomaticFees = field(default_factory=AutomaticFees)
    original_tax_cents: int = 0
    waivers: FeeWaivers = field(default_factory=FeeWaivers)

    @property
    def fees(self) -> AutomaticFees:
        return AutomaticFees(
            travel_fee_cents=self.travel_fee_cents,
            surface_fee_cents=self.surface_fee_cents,
            same_day_pickup_fee_cents=self.same_day_pickup_fee_cents,
            generator_fee_cents=self.generator_fee_cents,
        )

    def to_dict(self) -> dict:
        return asdict(self)
