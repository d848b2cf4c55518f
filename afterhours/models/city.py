from sqlalchemy import Column, Integer, String, Float, DateTime, func
from sqlalchemy.orm import relationship
from afterhours.db.base import Base

class City(Base):
    __tablename__ = "cities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slug = Column(String(100), nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=False)
    state_code = Column(String(2), nullable=False)
    state_name = Column(String(100), nullable=False)
    state_slug = Column(String(100), nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    population = Column(Integer, nullable=False, default=0)
    timezone = Column(String(50), nullable=False, server_default='America/New_York')
    created_at = Column(DateTime, server_default=func.now())

    businesses = relationship(
        "Business",
        back_populates="city",
        cascade="all, delete-orphan",
        order_by="Business.display_name",
    )

    @property
    def label(self) -> str:
        """Display form used in progress events, e.g. "San Diego, CA"."""
        return f"{self.name}, {self.state_code}"
