import logging
from datetime import date, timedelta

import streamlit as st

from bounce_pricing.adjustments import parse_discount_entry
from bounce_pricing.deposit import DepositOverride
from bounce_pricing.distance import SOURCE_FALLBACK, resolve_driving_distance
from bounce_pricing.exceptions import (
    InvalidDiscountError,
    PricingRulesMissingError,
    WaiverReasonRequiredError,
)
from bounce_pricing.models import (
    CartItem,
    CustomFee,
    EventDetails,
    FeeWaivers,
    GeoPoint,
    LocationType,
    Mode,
    PickupPreference,
    Surface,
    WaivableFee,
)
from bounce_pricing.money import dollars_to_cents
from bounce_pricing.pipeline import build_price_breakdown, summarize_breakdown
from bounce_pricing.travel import travel_fee_for_rules
from invoice_pdf import format_cents, render_invoice_pdf

# Import pricing configuration
from pricing_config import get_home_base, get_home_base_address, get_pricing_rules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

st.set_page_config(page_title="Travel Fee & Quote Calculator", layout="centered")

# Custom styling
st.markdown("""
    <style>
        body {
            background-color: #FBF8F6;
            color: #5e5e5e;
        }
        .stButton>button {
            background-color: #545A35;
            color: white;
        }
    </style>
""", unsafe_allow_html=True)


def secret_table(name):
    """A secrets table as a plain dict; missing table or secrets file gives {}"""
    try:
        return dict(st.secrets.get(name, {}))
    except FileNotFoundError:
        return {}


# API key and pricing overrides from Streamlit secrets
GOOGLE_MAPS_API_KEY = secret_table("api").get("google_maps_api_key", "")

try:
    PRICING_RULES = get_pricing_rules(secret_table("pricing_rules"))
except PricingRulesMissingError as e:
    st.error(f"Pricing rules are not configured: {e}")
    st.stop()

HOME_BASE = get_home_base(secret_table("home_base"))
HOME_BASE_ADDRESS = get_home_base_address(secret_table("home_base"))

FEE_LABELS = {
    WaivableFee.TRAVEL: "Travel fee",
    WaivableFee.SURFACE: "Surface fee",
    WaivableFee.SAME_DAY_PICKUP: "Same-day pickup fee",
    WaivableFee.GENERATOR: "Generator fee",
    WaivableFee.TAX: "Tax",
}

# Initialize session state
if "quote_shown" not in st.session_state:
    st.session_state.quote_shown = False


def reset_app():
    """Reset the entire application state"""
    for key in list(st.session_state.keys()):
        del st.session_state[key]
    st.rerun()


@st.cache_data(show_spinner=False)
def get_distance_miles(origin_lat, origin_lng, dest_lat, dest_lng):
    """Driving miles from the home base; repeated lookups for the same address are reused"""
    estimate = resolve_driving_distance(
        GeoPoint(origin_lat, origin_lng),
        GeoPoint(dest_lat, dest_lng),
        api_key=GOOGLE_MAPS_API_KEY,
    )
    return round(estimate.miles, 2), estimate.source


def collect_waivers():
    """Waiver checkboxes -> FeeWaivers. Returns None when a waiver is missing its reason."""
    waivers = FeeWaivers()
    for fee, label in FEE_LABELS.items():
        col_flag, col_reason = st.columns([1, 2])
        with col_flag:
            waived = st.checkbox(f"Waive {label}", key=f"waive_{fee.value}")
        with col_reason:
            reason = st.text_input("Reason", key=f"waive_reason_{fee.value}", label_visibility="collapsed",
                                   placeholder="Reason for waiving")
        if not waived:
            continue
        try:
            waivers = waivers.waive(fee, reason)
        except WaiverReasonRequiredError as e:
            st.error(str(e))
            return None
    return waivers


# ============================================
# MAIN APPLICATION UI
# ============================================

st.header("Step 1: Travel Fee")
st.caption(f"Home base: {HOME_BASE_ADDRESS}")
if PRICING_RULES.included_cities:
    st.caption(f"Free travel to: {', '.join(PRICING_RULES.included_cities)}")

with st.form(key="travel_form"):
    event_city = st.text_input("City", key="event_city")
    event_zip = st.text_input("Zip Code", key="event_zip")
    col_lat, col_lng = st.columns(2)
    with col_lat:
        event_lat = st.number_input("Latitude", value=0.0, format="%.6f", key="event_lat")
    with col_lng:
        event_lng = st.number_input("Longitude", value=0.0, format="%.6f", key="event_lng")

    submit_travel = st.form_submit_button("Calculate Travel Fee")

if submit_travel:
    if not event_lat or not event_lng:
        st.error("Please enter the event coordinates.")
    else:
        miles, source = get_distance_miles(HOME_BASE.lat, HOME_BASE.lng, event_lat, event_lng)
        st.session_state.quote_shown = True
        st.session_state.miles = miles
        st.session_state.distance_source = source
        st.session_state.city = event_city
        st.session_state.zip = event_zip
        st.session_state.lat = event_lat
        st.session_state.lng = event_lng

# Step 2: Show after the travel fee is calculated
if st.session_state.get("quote_shown"):
    travel = travel_fee_for_rules(
        st.session_state.miles, st.session_state.city, st.session_state.zip, PRICING_RULES
    )
    st.success(f"🚚 {travel.display_name}: {format_cents(travel.fee_cents)}")
    if st.session_state.distance_source == SOURCE_FALLBACK:
        st.warning("⚠️ Live driving distance unavailable, using a straight-line estimate.")

    st.header("Step 2: Quote Builder")

    st.subheader("Units")
    unit_count = st.number_input("Number of units", min_value=1, max_value=6, value=1, step=1)
    items = []
    for i in range(int(unit_count)):
        col_name, col_price, col_qty, col_mode = st.columns([3, 2, 1, 1])
        with col_name:
            unit_name = st.text_input("Unit", key=f"unit_name_{i}", value=f"Unit {i + 1}")
        with col_price:
            unit_price = st.number_input("Price ($)", min_value=0.0, value=150.0, step=5.0, key=f"unit_price_{i}")
        with col_qty:
            unit_qty = st.number_input("Qty", min_value=1, value=1, step=1, key=f"unit_qty_{i}")
        with col_mode:
            unit_mode = st.selectbox("Mode", [Mode.DRY.value, Mode.WATER.value], key=f"unit_mode_{i}")
        items.append(CartItem(
            unit_id=f"unit-{i + 1}",
            unit_price_cents=dollars_to_cents(f"{unit_price:.2f}"),
            qty=int(unit_qty),
            mode=unit_mode,
            unit_name=unit_name,
        ))

    st.subheader("Event")
    today = date.today()
    event_date = st.date_input("Event Date", value=today + timedelta(days=7), min_value=today)
    location_type = st.radio("Location Type", [t.value for t in LocationType], horizontal=True)
    pickup_preference = st.radio("Pickup", [p.value for p in PickupPreference], horizontal=True)
    if location_type == LocationType.COMMERCIAL.value:
        st.info("Commercial events are always picked up the same day.")
    event_end_date = st.date_input("Event End Date", value=event_date, min_value=event_date)
    surface = st.radio("Surface", [s.value for s in Surface], horizontal=True)
    can_use_stakes = st.checkbox("Stakes allowed", value=True)
    generator_qty = st.number_input("Generators", min_value=0, max_value=10, value=0, step=1)

    event = EventDetails(
        event_date=event_date,
        event_end_date=event_end_date,
        location_type=location_type,
        surface=surface,
        can_use_stakes=can_use_stakes,
        generator_qty=int(generator_qty),
        pickup_preference=pickup_preference,
        city=st.session_state.city,
        zip=st.session_state.zip,
        lat=st.session_state.lat,
        lng=st.session_state.lng,
    )

    st.subheader("Adjustments")
    discounts = []
    col_dname, col_damount, col_dpct = st.columns([2, 1, 1])
    with col_dname:
        discount_name = st.text_input("Discount name")
    with col_damount:
        discount_amount = st.number_input("Amount ($)", min_value=0.0, value=0.0, step=5.0)
    with col_dpct:
        discount_pct = st.number_input("Percent", min_value=0.0, max_value=100.0, value=0.0, step=5.0)
    if discount_name:
        try:
            discounts.append(parse_discount_entry(
                discount_name,
                amount_cents=dollars_to_cents(f"{discount_amount:.2f}"),
                percentage=discount_pct,
            ))
        except InvalidDiscountError as e:
            st.error(str(e))

    custom_fees = []
    col_fname, col_famount = st.columns([2, 1])
    with col_fname:
        custom_fee_name = st.text_input("Custom fee name")
    with col_famount:
        custom_fee_amount = st.number_input("Custom fee ($)", min_value=0.0, value=0.0, step=5.0)
    if custom_fee_name and custom_fee_amount:
        custom_fees.append(CustomFee(custom_fee_name, dollars_to_cents(f"{custom_fee_amount:.2f}")))

    tip = st.number_input("Tip ($)", min_value=0.0, value=0.0, step=5.0)
    deposit_text = st.text_input("Custom deposit ($, leave blank for the default)")
    deposit_override = DepositOverride()
    if deposit_text.strip():
        try:
            deposit_override = deposit_override.apply(deposit_text)
        except ValueError as e:
            st.error(str(e))

    st.subheader("Waivers")
    waivers = collect_waivers()

    if waivers is not None:
        breakdown = build_price_breakdown(
            items,
            event,
            st.session_state.miles,
            PRICING_RULES,
            discounts=discounts,
            custom_fees=custom_fees,
            waivers=waivers,
            deposit_override=deposit_override,
            tip_cents=dollars_to_cents(f"{tip:.2f}"),
        )
        summary = summarize_breakdown(breakdown, items, event, discounts=discounts, custom_fees=custom_fees)
        logger.info("Quote built: total %s, deposit %s", breakdown.total_cents, breakdown.deposit_due_cents)

        st.header("Step 3: Summary")
        for item in summary.items:
            st.write(f"{item.name} ({item.mode}) x{item.qty}: {format_cents(item.line_total_cents)}")
        st.write(f"**Subtotal:** {format_cents(summary.subtotal_cents)}")
        for line in summary.fees:
            if line.waived:
                st.markdown(
                    f"{line.name}: ~~{format_cents(line.original_amount_cents or 0)}~~ "
                    f"{format_cents(0)} (waived)"
                )
            else:
                st.write(f"{line.name}: {format_cents(line.amount_cents)}")
        for line in summary.discounts:
            st.write(f"Discount ({line.name}): -{format_cents(line.amount_cents)}")
        for line in summary.custom_fees:
            st.write(f"{line.name}: {format_cents(line.amount_cents)}")
        if summary.tax_waived:
            st.markdown(f"Tax (6%): ~~{format_cents(summary.original_tax_cents or 0)}~~ $0.00 (waived)")
        else:
            st.write(f"Tax (6%): {format_cents(summary.tax_cents)}")
        if summary.tip_cents:
            st.write(f"Tip: {format_cents(summary.tip_cents)}")
        st.success(f"💵 Total: {format_cents(summary.total_cents)}")
        st.write(f"Deposit due: {format_cents(summary.deposit_due_cents)}")
        st.write(f"Balance due: {format_cents(summary.balance_due_cents)}")

        customer_name = st.text_input("Customer Name")
        pdf_buffer = render_invoice_pdf(summary, customer_name=customer_name, event_date=event.event_date)
        st.download_button(
            "📥 Download Invoice PDF",
            data=pdf_buffer.getvalue(),
            file_name=f"INVOICE-{event.event_date.strftime('%m-%d-%Y')}.pdf",
            mime="application/pdf",
        )

    if st.button("🔄 Start a new quote"):
        reset_app()
