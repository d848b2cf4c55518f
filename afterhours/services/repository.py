"""
Persistence for cities, businesses and hour windows.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from afterhours.core.clock import utcnow
from afterhours.data.cities import CityData
from afterhours.models.business import Business
from afterhours.models.city import City
from afterhours.models.hour_window import HourWindow
from afterhours.services.place_parser import ParsedBusiness

logger = logging.getLogger(__name__)


class BusinessRepository:
    """
    Upsert-by-source-id storage for directory businesses.

    Each upsert commits on its own; a failed one must be rolled back by the
    caller before continuing with the next record.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_city(self, slug: str) -> Optional[City]:
        return self.db.execute(select(City).where(City.slug == slug)).scalar_one_or_none()

    def ensure_city(self, data: CityData) -> City:
        """Get the City row for a reference entry, creating it on first use."""
        city = self.get_city(data.slug)
        if city is not None:
            return city

        city = City(
            slug=data.slug,
            name=data.name,
            state_code=data.state_code,
            state_name=data.state_name,
            state_slug=data.state_slug,
            latitude=data.latitude,
            longitude=data.longitude,
            population=data.population,
            timezone=data.timezone,
        )
        self.db.add(city)
        self.db.commit()
        self.db.refresh(city)
        logger.info("Created city %s", data.slug)
        return city

    def all_cities(self) -> List[City]:
        return list(self.db.execute(select(City).order_by(City.name)).scalars())

    def cities_in_state(self, state_slug: str) -> List[City]:
        stmt = select(City).where(City.state_slug == state_slug).order_by(City.name)
        return list(self.db.execute(stmt).scalars())

    def latest_refresh(self, city_id: int) -> Optional[datetime]:
        """Most recent last_refreshed_at among a city's businesses."""
        return self.db.execute(
            select(func.max(Business.last_refreshed_at)).where(Business.city_id == city_id)
        ).scalar()

    def count_businesses(self, city_id: int) -> int:
        return self.db.execute(
            select(func.count(Business.id)).where(Business.city_id == city_id)
        ).scalar() or 0

    def count_with_hours(self, city_id: int) -> int:
        """Businesses in the city that have at least one hour window."""
        return self.db.execute(
            select(func.count(func.distinct(HourWindow.business_id)))
            .join(Business, Business.id == HourWindow.business_id)
            .where(Business.city_id == city_id)
        ).scalar() or 0

    def city_counts(self) -> Dict[int, Tuple[int, int, Optional[datetime]]]:
        """{city_id: (business count, with-hours count, latest refresh)} for all cities."""
        totals = self.db.execute(
            select(Business.city_id, func.count(Business.id), func.max(Business.last_refreshed_at))
            .group_by(Business.city_id)
        ).all()
        with_hours = dict(self.db.execute(
            select(Business.city_id, func.count(func.distinct(HourWindow.business_id)))
            .join(HourWindow, HourWindow.business_id == Business.id)
            .group_by(Business.city_id)
        ).all())
        return {
            city_id: (count, with_hours.get(city_id, 0), latest)
            for city_id, count, latest in totals
        }

    def get_by_source_id(self, source_id: str) -> Optional[Business]:
        return self.db.execute(
            select(Business).where(Business.source_id == source_id)
        ).scalar_one_or_none()

    def upsert(self, city: City, parsed: ParsedBusiness, refreshed_at: Optional[datetime] = None) -> bool:
        """
        Create or fully replace a business and its hour windows.

        Existing windows are deleted and the parsed set inserted; nothing is
        merged.

        Returns:
            True if the business was created, False if it was updated.
        """
        refreshed_at = refreshed_at or utcnow()
        business = self.get_by_source_id(parsed.source_id)
        created = business is None

        if created:
            business = Business(source_id=parsed.source_id)
            self.db.add(business)

        for column, value in parsed.fields.items():
            setattr(business, column, value)
        business.city_id = city.id
        business.practice_areas = list(parsed.practice_areas)
        business.last_refreshed_at = refreshed_at

        if not created:
            self.db.query(HourWindow).filter(HourWindow.business_id == business.id).delete(
                synchronize_session=False
            )
            self.db.expire(business, ["hour_windows"])

        self.db.flush()
        self.db.add_all(
            HourWindow(business_id=business.id, **window.to_record())
            for window in parsed.windows
        )
        self.db.commit()
        return created

    def rollback(self) -> None:
        self.db.rollback()

    def listings(self, city_id: int) -> List[Business]:
        """A city's businesses ordered by name, hour windows eager-loaded."""
        stmt = (
            select(Business)
            .where(Business.city_id == city_id)
            .options(selectinload(Business.hour_windows))
            .order_by(Business.display_name)
        )
        return list(self.db.execute(stmt).scalars())
