"""
SQLAlchemy ORM models.

Tables
------
* ``stations`` -- fuel retail points with one nullable price per fuel

Indexes
-------
* **B-Tree** on ``(lat, lon)`` for the viewport range query.
* **B-Tree** on ``city`` for search.
"""

from sqlalchemy import Column, DateTime, Float, Index, String, Text, func

from .database import Base
from fuelmap.domain.entities import Station


class StationModel(Base):
    __tablename__ = "stations"

    # Identifier from the government feed, kept as-is
    id = Column(String(36), primary_key=True)
    name = Column(Text, nullable=False)
    address = Column(Text, nullable=False)
    city = Column(Text, nullable=False)
    postal_code = Column(String(10), nullable=True)

    lat = Column(Float, nullable=False)
    lon = Column(Float, nullable=False)

    # EUR / litre, NULL = no data
    price_diesel = Column(Float, nullable=True)
    price_sp95 = Column(Float, nullable=True)
    price_sp98 = Column(Float, nullable=True)
    price_e10 = Column(Float, nullable=True)
    price_e85 = Column(Float, nullable=True)
    price_lpg = Column(Float, nullable=True)

    last_updated = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_stations_lat_lon", "lat", "lon"),
        Index("idx_stations_city", "city"),
    )

    def to_entity(self) -> Station:
        return Station(
            id=self.id,
            name=self.name,
            address=self.address,
            city=self.city,
            postal_code=self.postal_code,
            lat=self.lat,
            lon=self.lon,
            price_diesel=self.price_diesel,
            price_sp95=self.price_sp95,
            price_sp98=self.price_sp98,
            price_e10=self.price_e10,
            price_e85=self.price_e85,
            price_lpg=self.price_lpg,
            last_updated=self.last_updated,
        )
