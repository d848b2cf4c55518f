"""
Hour window model.

HourWindow: one same-day open/close span for a business (e.g., "Monday:
17:00-20:00 consultation hours"). Windows that crossed midnight upstream
are split into one row per day before they get here.
"""
from sqlalchemy import Column, String, Integer, ForeignKey, Index
from sqlalchemy.orm import relationship

from afterhours.db.base import Base


class HourWindow(Base):
    """
    A single-day secondary-hours window.
    day_of_week is Sunday-first (0=Sunday, 6=Saturday).
    """
    __tablename__ = "hour_windows"

    id = Column(Integer, primary_key=True, autoincrement=True)
    business_id = Column(Integer, ForeignKey("businesses.id", ondelete="CASCADE"), nullable=False)
    category = Column(String(100), nullable=False)  # Free text from upstream, e.g. "CONSULTATION"
    day_of_week = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday
    open_hour = Column(Integer, nullable=False)
    open_minute = Column(Integer, nullable=False, default=0)
    close_hour = Column(Integer, nullable=False)
    close_minute = Column(Integer, nullable=False, default=0)

    business = relationship("Business", back_populates="hour_windows")

    __table_args__ = (
        Index('idx_hour_windows_business_day', 'business_id', 'day_of_week'),
    )
