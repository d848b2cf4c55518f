"""
Static city reference table.

Population drives the refresh fetch strategy; coordinates are the centre
point for nearby searches. Treated as read-only reference data.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class CityData:
    slug: str
    name: str
    state_code: str
    state_name: str
    state_slug: str
    latitude: float
    longitude: float
    population: int
    timezone: str

    @property
    def label(self) -> str:
        return f"{self.name}, {self.state_code}"


CITIES: Tuple[CityData, ...] = (
    CityData("new-york-ny", "New York", "NY", "New York", "new-york", 40.7128, -74.0060, 8_336_817, "America/New_York"),
    CityData("los-angeles-ca", "Los Angeles", "CA", "California", "california", 34.0522, -118.2437, 3_979_576, "America/Los_Angeles"),
    CityData("chicago-il", "Chicago", "IL", "Illinois", "illinois", 41.8781, -87.6298, 2_693_976, "America/Chicago"),
    CityData("houston-tx", "Houston", "TX", "Texas", "texas", 29.7604, -95.3698, 2_320_268, "America/Chicago"),
    CityData("phoenix-az", "Phoenix", "AZ", "Arizona", "arizona", 33.4484, -112.0740, 1_680_992, "America/Phoenix"),
    CityData("philadelphia-pa", "Philadelphia", "PA", "Pennsylvania", "pennsylvania", 39.9526, -75.1652, 1_603_797, "America/New_York"),
    CityData("san-antonio-tx", "San Antonio", "TX", "Texas", "texas", 29.4241, -98.4936, 1_547_253, "America/Chicago"),
    CityData("san-diego-ca", "San Diego", "CA", "California", "california", 32.7157, -117.1611, 1_423_851, "America/Los_Angeles"),
    CityData("dallas-tx", "Dallas", "TX", "Texas", "texas", 32.7767, -96.7970, 1_343_573, "America/Chicago"),
    CityData("austin-tx", "Austin", "TX", "Texas", "texas", 30.2672, -97.7431, 978_908, "America/Chicago"),
    CityData("jacksonville-fl", "Jacksonville", "FL", "Florida", "florida", 30.3322, -81.6557, 949_611, "America/New_York"),
    CityData("san-jose-ca", "San Jose", "CA", "California", "california", 37.3382, -121.8863, 1_013_240, "America/Los_Angeles"),
    CityData("fort-worth-tx", "Fort Worth", "TX", "Texas", "texas", 32.7555, -97.3308, 918_915, "America/Chicago"),
    CityData("columbus-oh", "Columbus", "OH", "Ohio", "ohio", 39.9612, -82.9988, 905_748, "America/New_York"),
    CityData("indianapolis-in", "Indianapolis", "IN", "Indiana", "indiana", 39.7684, -86.1581, 887_642, "America/Indiana/Indianapolis"),
    CityData("charlotte-nc", "Charlotte", "NC", "North Carolina", "north-carolina", 35.2271, -80.8431, 874_579, "America/New_York"),
    CityData("san-francisco-ca", "San Francisco", "CA", "California", "california", 37.7749, -122.4194, 873_965, "America/Los_Angeles"),
    CityData("seattle-wa", "Seattle", "WA", "Washington", "washington", 47.6062, -122.3321, 737_015, "America/Los_Angeles"),
    CityData("denver-co", "Denver", "CO", "Colorado", "colorado", 39.7392, -104.9903, 715_522, "America/Denver"),
    CityData("washington-dc", "Washington", "DC", "District of Columbia", "district-of-columbia", 38.9072, -77.0369, 689_545, "America/New_York"),
    CityData("nashville-tn", "Nashville", "TN", "Tennessee", "tennessee", 36.1627, -86.7816, 689_447, "America/Chicago"),
    CityData("oklahoma-city-ok", "Oklahoma City", "OK", "Oklahoma", "oklahoma", 35.4676, -97.5164, 681_054, "America/Chicago"),
    CityData("el-paso-tx", "El Paso", "TX", "Texas", "texas", 31.7619, -106.4850, 678_815, "America/Denver"),
    CityData("portland-or", "Portland", "OR", "Oregon", "oregon", 45.5152, -122.6784, 652_503, "America/Los_Angeles"),
    CityData("las-vegas-nv", "Las Vegas", "NV", "Nevada", "nevada", 36.1699, -115.1398, 641_903, "America/Los_Angeles"),
    CityData("memphis-tn", "Memphis", "TN", "Tennessee", "tennessee", 35.1495, -90.0490, 633_104, "America/Chicago"),
    CityData("louisville-ky", "Louisville", "KY", "Kentucky", "kentucky", 38.2527, -85.7585, 633_045, "America/Kentucky/Louisville"),
    CityData("baltimore-md", "Baltimore", "MD", "Maryland", "maryland", 39.2904, -76.6122, 585_708, "America/New_York"),
    CityData("milwaukee-wi", "Milwaukee", "WI", "Wisconsin", "wisconsin", 43.0389, -87.9065, 577_222, "America/Chicago"),
    CityData("albuquerque-nm", "Albuquerque", "NM", "New Mexico", "new-mexico", 35.0844, -106.6504, 564_559, "America/Denver"),
    CityData("tucson-az", "Tucson", "AZ", "Arizona", "arizona", 32.2226, -110.9747, 542_629, "America/Phoenix"),
    CityData("fresno-ca", "Fresno", "CA", "California", "california", 36.7378, -119.7871, 542_107, "America/Los_Angeles"),
    CityData("sacramento-ca", "Sacramento", "CA", "California", "california", 38.5816, -121.4944, 524_943, "America/Los_Angeles"),
    CityData("mesa-az", "Mesa", "AZ", "Arizona", "arizona", 33.4152, -111.8315, 504_258, "America/Phoenix"),
    CityData("kansas-city-mo", "Kansas City", "MO", "Missouri", "missouri", 39.0997, -94.5786, 508_090, "America/Chicago"),
    CityData("atlanta-ga", "Atlanta", "GA", "Georgia", "georgia", 33.7490, -84.3880, 498_715, "America/New_York"),
    CityData("omaha-ne", "Omaha", "NE", "Nebraska", "nebraska", 41.2565, -95.9345, 486_051, "America/Chicago"),
    CityData("colorado-springs-co", "Colorado Springs", "CO", "Colorado", "colorado", 38.8339, -104.8214, 478_221, "America/Denver"),
    CityData("raleigh-nc", "Raleigh", "NC", "North Carolina", "north-carolina", 35.7796, -78.6382, 474_069, "America/New_York"),
    CityData("miami-fl", "Miami", "FL", "Florida", "florida", 25.7617, -80.1918, 467_963, "America/New_York"),
    CityData("tampa-fl", "Tampa", "FL", "Florida", "florida", 27.9506, -82.4572, 384_959, "America/New_York"),
    CityData("minneapolis-mn", "Minneapolis", "MN", "Minnesota", "minnesota", 44.9778, -93.2650, 429_954, "America/Chicago"),
    CityData("new-orleans-la", "New Orleans", "LA", "Louisiana", "louisiana", 29.9511, -90.0715, 383_997, "America/Chicago"),
    CityData("cleveland-oh", "Cleveland", "OH", "Ohio", "ohio", 41.4993, -81.6944, 372_624, "America/New_York"),
    CityData("tulsa-ok", "Tulsa", "OK", "Oklahoma", "oklahoma", 36.1540, -95.9928, 413_066, "America/Chicago"),
    CityData("honolulu-hi", "Honolulu", "HI", "Hawaii", "hawaii", 21.3069, -157.8583, 350_964, "Pacific/Honolulu"),
    CityData("pittsburgh-pa", "Pittsburgh", "PA", "Pennsylvania", "pennsylvania", 40.4406, -79.9959, 302_971, "America/New_York"),
    CityData("st-louis-mo", "St. Louis", "MO", "Missouri", "missouri", 38.6270, -90.1994, 301_578, "America/Chicago"),
    CityData("detroit-mi", "Detroit", "MI", "Michigan", "michigan", 42.3314, -83.0458, 639_111, "America/Detroit"),
    CityData("boston-ma", "Boston", "MA", "Massachusetts", "massachusetts", 42.3601, -71.0589, 675_647, "America/New_York"),
)

CITIES_BY_SLUG: Mapping[str, CityData] = MappingProxyType({c.slug: c for c in CITIES})


def get_city_by_slug(slug: str) -> Optional[CityData]:
    return CITIES_BY_SLUG.get(slug)


def get_cities_by_state(state_slug: str) -> List[CityData]:
    return [c for c in CITIES if c.state_slug == state_slug]
