"""
Raw place record -> persistence-ready business record.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from afterhours.services.hours_normalizer import NormalizedWindow, normalize_place_hours
from afterhours.services.practice_areas import PracticeAreaClassifier


UNKNOWN_NAME = "Unknown Office"

# Provider option group -> {provider key: column name}
OPTION_GROUPS = {
    "paymentOptions": {
        "acceptsCreditCards": "accepts_credit_cards",
        "acceptsDebitCards": "accepts_debit_cards",
        "acceptsCashOnly": "cash_only",
        "acceptsNfc": "accepts_nfc",
    },
    "parkingOptions": {
        "freeParkingLot": "free_parking_lot",
        "paidParkingLot": "paid_parking_lot",
        "freeStreetParking": "free_street_parking",
        "valetParking": "valet_parking",
        "freeGarageParking": "free_garage_parking",
        "paidGarageParking": "paid_garage_parking",
    },
    "accessibilityOptions": {
        "wheelchairAccessibleParking": "wheelchair_accessible_parking",
        "wheelchairAccessibleEntrance": "wheelchair_accessible_entrance",
        "wheelchairAccessibleRestroom": "wheelchair_accessible_restroom",
        "wheelchairAccessibleSeating": "wheelchair_accessible_seating",
    },
}


@dataclass
class ParsedBusiness:
    source_id: str
    display_name: str
    fields: Dict[str, Any] = field(default_factory=dict)
    practice_areas: List[str] = field(default_factory=list)
    windows: List[NormalizedWindow] = field(default_factory=list)


def _text(value: Any) -> Optional[str]:
    """displayName-style {"text": ...} objects, or plain strings."""
    if isinstance(value, dict):
        return value.get("text") or None
    return value or None


def _flag(value: Any) -> Optional[bool]:
    return None if value is None else bool(value)


def parse_place(
    place: Dict[str, Any],
    classifier: PracticeAreaClassifier,
    use_regular_fallback: bool = True,
) -> ParsedBusiness:
    """
    Parse one provider record.

    Amenity flags stay None when the provider did not report them.

    Raises:
        ValueError: if the record has no place id
    """
    source_id = place.get("id")
    if not source_id:
        raise ValueError("place record has no id")

    display_name = _text(place.get("displayName")) or UNKNOWN_NAME
    type_label = _text(place.get("primaryTypeDisplayName"))
    location = place.get("location") or {}

    fields: Dict[str, Any] = {
        "display_name": display_name,
        "formatted_address": place.get("formattedAddress") or None,
        "short_address": place.get("shortFormattedAddress") or None,
        "primary_type": place.get("primaryType") or None,
        "primary_type_display_name": type_label,
        "latitude": location.get("latitude") or 0.0,
        "longitude": location.get("longitude") or 0.0,
        "google_maps_uri": place.get("googleMapsUri") or None,
        "website_uri": place.get("websiteUri") or None,
    }
    for group, mapping in OPTION_GROUPS.items():
        options = place.get(group) or {}
        for key, column in mapping.items():
            fields[column] = _flag(options.get(key))

    areas = classifier.classify(display_name)

    return ParsedBusiness(
        source_id=source_id,
        display_name=display_name,
        fields=fields,
        practice_areas=classifier.ordered(areas),
        windows=normalize_place_hours(place, use_regular_fallback=use_regular_fallback),
    )
