"""Smoke tests for the Streamlit calculator page."""
from pathlib import Path

from streamlit.testing.v1 import AppTest


APP_PATH = str(Path(__file__).resolve().parent.parent / "app.py")


def _app():
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.secrets["api"] = {"google_maps_api_key": ""}
    return at


class TestCalculatorPage:
    """The page renders and prices a quote end to end."""

    def test_renders_travel_form(self):
        """The first run shows the travel fee step only."""
        at = _app().run()

        assert not at.exception
        assert at.header[0].value == "Step 1: Travel Fee"
        assert len(at.header) == 1
        assert "Dearborn" in at.caption[1].value

    def test_missing_coordinates(self):
        """Submitting without coordinates shows an error."""
        at = _app().run()

        at.button[0].click().run()

        assert not at.exception
        assert "coordinates" in at.error[0].value

    def test_included_city_quote(self):
        """An included city travels free and the quote builder appears."""
        at = _app().run()
        at.text_input(key="event_city").input("Dearborn")
        at.text_input(key="event_zip").input("48124")
        at.number_input(key="event_lat").set_value(42.3223)
        at.number_input(key="event_lng").set_value(-83.1763)

        at.button[0].click().run()

        assert not at.exception
        assert "Included City: Dearborn" in at.success[0].value
        assert "$0.00" in at.success[0].value
        assert [h.value for h in at.header][:3] == [
            "Step 1: Travel Fee",
            "Step 2: Quote Builder",
            "Step 3: Summary",
        ]
