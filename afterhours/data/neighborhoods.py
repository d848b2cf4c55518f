"""
ZIP code -> neighborhood lookup used when an address carries no usable
neighborhood segment. Keys are ZIP prefixes; the longest matching prefix
wins, so a full 5-digit entry can refine a broader 3-digit one.
"""
from types import MappingProxyType
from typing import Mapping


ZIP_NEIGHBORHOODS: Mapping[str, str] = MappingProxyType({
    # San Diego
    "92101": "Downtown",
    "92103": "Hillcrest",
    "92104": "North Park",
    "92108": "Mission Valley",
    "92109": "Pacific Beach",
    "92037": "La Jolla",
    "92122": "University City",
    "92123": "Kearny Mesa",
    "92128": "Rancho Bernardo",
    # Los Angeles
    "90012": "Downtown",
    "90017": "Downtown",
    "90071": "Downtown",
    "90028": "Hollywood",
    "90036": "Mid-Wilshire",
    "90010": "Koreatown",
    "90067": "Century City",
    "91403": "Sherman Oaks",
    "91436": "Encino",
    # San Francisco
    "94102": "Civic Center",
    "94103": "SoMa",
    "94104": "Financial District",
    "94105": "Financial District",
    "94108": "Union Square",
    "94111": "Financial District",
    "94110": "Mission District",
    # New York
    "10004": "Financial District",
    "10005": "Financial District",
    "10006": "Financial District",
    "10007": "Tribeca",
    "10013": "Tribeca",
    "10017": "Midtown East",
    "10018": "Midtown",
    "10022": "Midtown East",
    "10036": "Midtown",
    "112": "Brooklyn",
    "113": "Queens",
    "104": "Bronx",
    "103": "Staten Island",
    # Chicago
    "60601": "The Loop",
    "60602": "The Loop",
    "60603": "The Loop",
    "60604": "The Loop",
    "60606": "West Loop",
    "60611": "Streeterville",
    "60654": "River North",
    # Houston
    "77002": "Downtown",
    "77019": "River Oaks",
    "77027": "Greenway Plaza",
    "77056": "Galleria",
    "77098": "Upper Kirby",
})

CITYWIDE_LABEL = "Citywide"
