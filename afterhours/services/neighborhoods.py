"""
Heuristic neighborhood extraction from free-text addresses.

There is no geocoding boundary lookup here: a neighborhood is guessed from
the address string, then from the ZIP table, then falls back to a
city-wide bucket. Mismatches are an accepted approximation.
"""
import re
from typing import Mapping, Optional

from afterhours.data.neighborhoods import CITYWIDE_LABEL, ZIP_NEIGHBORHOODS


STATE_CODES = frozenset({
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "DC", "FL", "GA", "HI", "ID", "IL",
    "IN", "IA", "KS", "KY", "LA", "ME", "MD", "MA", "MI", "MN", "MS", "MO", "MT", "NE",
    "NV", "NH", "NJ", "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC", "SD",
    "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
})

STATE_NAMES = frozenset({
    "alabama", "alaska", "arizona", "arkansas", "california", "colorado", "connecticut",
    "delaware", "district of columbia", "florida", "georgia", "hawaii", "idaho", "illinois",
    "indiana", "iowa", "kansas", "kentucky", "louisiana", "maine", "maryland",
    "massachusetts", "michigan", "minnesota", "mississippi", "missouri", "montana",
    "nebraska", "nevada", "new hampshire", "new jersey", "new mexico", "new york",
    "north carolina", "north dakota", "ohio", "oklahoma", "oregon", "pennsylvania",
    "rhode island", "south carolina", "south dakota", "tennessee", "texas", "utah",
    "vermont", "virginia", "washington", "west virginia", "wisconsin", "wyoming",
})

COUNTRY_NAMES = frozenset({"usa", "us", "united states", "united states of america"})

ZIP_RE = re.compile(r"\b(\d{5})(?:-\d{4})?\b")
BARE_ZIP_RE = re.compile(r"^\d{5}(?:-\d{4})?$")
STATE_ZIP_RE = re.compile(r"^([A-Za-z]{2})\s+\d{5}(?:-\d{4})?$")
UNIT_RE = re.compile(r"^(suite|ste\.?|unit|apt\.?|floor|fl\.?|room|rm\.?|#)\s*\S*", re.IGNORECASE)
STREET_NUMBER_RE = re.compile(r"^\d+\s")


def _is_location_noise(segment: str, city_name: Optional[str]) -> bool:
    """True for segments that are a ZIP, state, country, unit or the city itself."""
    lowered = segment.lower()
    if BARE_ZIP_RE.match(segment) or STATE_ZIP_RE.match(segment):
        return True
    if segment.upper() in STATE_CODES or lowered in STATE_NAMES:
        return True
    if lowered in COUNTRY_NAMES:
        return True
    if UNIT_RE.match(segment) or STREET_NUMBER_RE.match(segment):
        return True
    if city_name and lowered == city_name.lower():
        return True
    return False


def zip_code(address: Optional[str]) -> Optional[str]:
    """Last 5-digit ZIP in an address, if any."""
    if not address:
        return None
    matches = ZIP_RE.findall(address)
    return matches[-1] if matches else None


def neighborhood_from_zip(zip5: Optional[str],
                          table: Mapping[str, str] = ZIP_NEIGHBORHOODS) -> Optional[str]:
    """Longest-prefix lookup of a ZIP in the neighborhood table."""
    if not zip5:
        return None
    for length in range(len(zip5), 0, -1):
        name = table.get(zip5[:length])
        if name:
            return name
    return None


def extract_neighborhood(
    address: Optional[str],
    city_name: Optional[str] = None,
    table: Mapping[str, str] = ZIP_NEIGHBORHOODS,
) -> str:
    """
    Guess a neighborhood for an address.

    Order of preference:
        1. A middle comma-separated segment that is not a ZIP, state,
           country, suite/unit, street line or the city name.
        2. The ZIP code's longest prefix match in ``table``.
        3. The city name, or "Citywide" when the city is unknown.

    Examples:
        >>> extract_neighborhood("123 Main St, Hillcrest, San Diego, CA 92103", "San Diego")
        'Hillcrest'
        >>> extract_neighborhood("600 B St, San Diego, CA 92101", "San Diego")
        'Downtown'
    """
    if address:
        segments = [s.strip() for s in address.split(",") if s.strip()]
        # First segment is the street line, so only middle segments qualify
        for segment in segments[1:-1]:
            if not _is_location_noise(segment, city_name):
                return segment

        name = neighborhood_from_zip(zip_code(address), table)
        if name:
            return name

    return city_name or CITYWIDE_LABEL
