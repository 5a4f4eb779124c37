"""Declared validation checks for the flight booking component."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Probe(str, Enum):
    VISIBLE = "visible"  # present and visible
    ENABLED = "enabled"  # present, visible and enabled


@dataclass(frozen=True)
class ValidationCheck:
    """One named probe against a sub-element of the resolved component."""

    name: str
    selector: str
    probe: Probe = Probe.VISIBLE
    description: str = ""


SEARCH_BUTTON = 'button[type="submit"]'

# Order matters: results are reported in this order.
DEFAULT_CHECKS: tuple[ValidationCheck, ...] = (
    ValidationCheck(
        "trip_type_selector", '[data-em-cmp="trip-type"]', description="Trip type selector"
    ),
    ValidationCheck(
        "passengers_class_selector",
        '[data-em-cmp="passengers-class"]',
        description="Passenger and cabin class selector",
    ),
    ValidationCheck("origin_field", '[data-em-cmp="origin"]', description="Origin field"),
    ValidationCheck(
        "destination_field", '[data-em-cmp="destination"]', description="Destination field"
    ),
    ValidationCheck(
        "departure_date", '[data-em-cmp="departure-date"]', description="Departure date"
    ),
    ValidationCheck("return_date", '[data-em-cmp="return-date"]', description="Return date"),
    ValidationCheck("search_button_visible", SEARCH_BUTTON, description="Search button"),
    ValidationCheck(
        "search_button_enabled",
        SEARCH_BUTTON,
        probe=Probe.ENABLED,
        description="Search button",
    ),
)
