"""
Business (directory entry) model.

Amenity flags are tri-state: True / False / None, where None means the
place-data provider did not report the attribute at all.
"""
from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey, JSON, func, Index
from sqlalchemy.orm import relationship

from afterhours.db.base import Base


PAYMENT_FIELDS = (
    "accepts_credit_cards",
    "accepts_debit_cards",
    "cash_only",
    "accepts_nfc",
)

PARKING_FIELDS = (
    "free_parking_lot",
    "paid_parking_lot",
    "free_street_parking",
    "valet_parking",
    "free_garage_parking",
    "paid_garage_parking",
)

ACCESSIBILITY_FIELDS = (
    "wheelchair_accessible_parking",
    "wheelchair_accessible_entrance",
    "wheelchair_accessible_restroom",
    "wheelchair_accessible_seating",
)

AMENITY_FIELDS = PAYMENT_FIELDS + PARKING_FIELDS + ACCESSIBILITY_FIELDS

FREE_PARKING_FIELDS = ("free_parking_lot", "free_street_parking", "free_garage_parking")


class Business(Base):
    __tablename__ = "businesses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    source_id = Column(String(255), nullable=False, unique=True)
    city_id = Column(Integer, ForeignKey("cities.id", ondelete="CASCADE"), nullable=False)
    display_name = Column(String(255), nullable=False)
    formatted_address = Column(String(500), nullable=True)
    short_address = Column(String(255), nullable=True)
    primary_type = Column(String(100), nullable=True)
    primary_type_display_name = Column(String(100), nullable=True)
    latitude = Column(Float, nullable=False, default=0.0)
    longitude = Column(Float, nullable=False, default=0.0)
    google_maps_uri = Column(String(500), nullable=True)
    website_uri = Column(String(500), nullable=True)

    # Payment options
    accepts_credit_cards = Column(Boolean, nullable=True)
    accepts_debit_cards = Column(Boolean, nullable=True)
    cash_only = Column(Boolean, nullable=True)
    accepts_nfc = Column(Boolean, nullable=True)

    # Parking options
    free_parking_lot = Column(Boolean, nullable=True)
    paid_parking_lot = Column(Boolean, nullable=True)
    free_street_parking = Column(Boolean, nullable=True)
    valet_parking = Column(Boolean, nullable=True)
    free_garage_parking = Column(Boolean, nullable=True)
    paid_garage_parking = Column(Boolean, nullable=True)

    # Accessibility options
    wheelchair_accessible_parking = Column(Boolean, nullable=True)
    wheelchair_accessible_entrance = Column(Boolean, nullable=True)
    wheelchair_accessible_restroom = Column(Boolean, nullable=True)
    wheelchair_accessible_seating = Column(Boolean, nullable=True)

    practice_areas = Column(JSON, nullable=False, default=lambda: ["general"])
    last_refreshed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    city = relationship("City", back_populates="businesses")
    hour_windows = relationship(
        "HourWindow",
        back_populates="business",
        cascade="all, delete-orphan",
        order_by="HourWindow.id",
    )

    __table_args__ = (
        Index('idx_businesses_city_refresh', 'city_id', 'last_refreshed_at'),
    )
