"""
SQLAlchemy models for the directory.
"""
# Geography
from afterhours.models.city import City

# Listings
from afterhours.models.business import Business
from afterhours.models.hour_window import HourWindow


__all__ = [
    "City",
    "Business",
    "HourWindow",
]
