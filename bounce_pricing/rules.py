"""Turn a stored pricing-rules record into a typed ``PricingRules``.

The store hands back a loosely typed row (numbers as strings, JSON blobs for
the city list, zone overrides and same-day matrix, legacy column names).
Everything past this module works with ``PricingRules`` only.
"""

from bounce_pricing.exceptions import PricingRulesMissingError
from bounce_pricing.models import PricingRules, SameDayFeeRule, ZoneOverride
from bounce_pricing.money import round_cents


DEFAULT_DEPOSIT_PER_UNIT_CENTS = 5000
DEFAULT_GENERATOR_SINGLE_CENTS = 10000
DEFAULT_GENERATOR_ADDITIONAL_CENTS = 7500


def require_rules(rules):
    """Fail fast when a computation is started before rules are loaded."""
    if rules is None:
        raise PricingRulesMissingError()
    return rules


def _number(value, default, cast=float):
    if value is None or value == "":
        return default
    return cast(value)


def _cents(value, default=0):
    return _number(value, default, cast=round_cents)


def _first_present(record, *keys):
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None


def order_same_day_matrix(rows):
    """
    Build the explicit, ordered same-day fee rule list.

    Rows are ordered most specific first: more units, then generator-required
    rows, then higher subtotal thresholds; ties keep their stored order.
    The fee aggregator takes the first row that matches.
    """
    rules = []
    for position, row in enumerate(rows or ()):
        if isinstance(row, SameDayFeeRule):
            rule = row
        else:
            rule = SameDayFeeRule(
                units=int(row.get("units") or 0),
                generator=bool(row.get("generator")),
                subtotal_ge_cents=_cents(row.get("subtotal_ge_cents")),
                fee_cents=_cents(row.get("fee_cents")),
            )
        rules.append((position, rule))

    rules.sort(key=lambda pair: (
        -pair[1].units,
        0 if pair[1].generator else 1,
        -pair[1].subtotal_ge_cents,
        pair[0],
    ))
    return tuple(rule for _, rule in rules)


def _zone_overrides(rows):
    zones = []
    for row in rows or ():
        if isinstance(row, ZoneOverride):
            zones.append(row)
            continue
        zip_code = str(row.get("zip") or "").strip()
        if not zip_code:
            continue
        zones.append(ZoneOverride(
            zip=zip_code,
            flat_cents=_cents(row.get("flat_cents")),
            name=row.get("zone_name") or row.get("name") or "",
        ))
    return tuple(zones)


def load_pricing_rules(record) -> PricingRules:
    """
    Parse a pricing-rules record (dict-like) into ``PricingRules``.

    Missing optional fields take the same defaults the admin screen shows:
    deposit $50/unit, generators $100 single / $75 each additional
    (or the legacy flat ``generator_price_cents`` when present).
    """
    if not record:
        raise PricingRulesMissingError()

    cities = _first_present(record, "included_city_list_json", "included_cities") or []

    return PricingRules(
        base_radius_miles=_number(record.get("base_radius_miles"), 0.0),
        per_mile_after_base_cents=_cents(record.get("per_mile_after_base_cents")),
        included_cities=tuple(str(city).strip() for city in cities if str(city).strip()),
        zone_overrides=_zone_overrides(
            _first_present(record, "zone_overrides_json", "zone_overrides")
        ),
        surface_sandbag_fee_cents=_cents(record.get("surface_sandbag_fee_cents")),
        residential_multiplier=_number(record.get("residential_multiplier"), 1.0),
        commercial_multiplier=_number(record.get("commercial_multiplier"), 1.0),
        same_day_pickup_fee_cents=_cents(record.get("same_day_pickup_fee_cents")),
        same_day_matrix=order_same_day_matrix(
            _first_present(record, "same_day_matrix_json", "same_day_matrix")
        ),
        generator_fee_single_cents=_cents(
            _first_present(record, "generator_fee_single_cents", "generator_price_cents"),
            DEFAULT_GENERATOR_SINGLE_CENTS,
        ),
        generator_fee_multiple_cents=_cents(
            _first_present(record, "generator_fee_multiple_cents", "generator_price_cents"),
            DEFAULT_GENERATOR_ADDITIONAL_CENTS,
        ),
        deposit_per_unit_cents=_cents(
            record.get("deposit_per_unit_cents"), DEFAULT_DEPOSIT_PER_UNIT_CENTS
        ),
        overnight_holiday_only=bool(record.get("overnight_holiday_only") or False),
        extra_day_pct=_number(record.get("extra_day_pct"), 0.0),
    )
