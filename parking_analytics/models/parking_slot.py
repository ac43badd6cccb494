"""
Parking slot table.
One row per physical bay; the registered row count is the lot capacity used
as the denominator for occupancy-rate and peak calculations.
"""

from sqlalchemy import Column, Integer, String, DateTime, Float
from parking_analytics.database import Base


class ParkingSlot(Base):
    __tablename__ = "parking_slots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slot_number = Column(Integer, unique=True, nullable=False, index=True)
    status = Column(String(20), default="available", nullable=False)  # available | occupied | reserved | maintenance
    section = Column(String(50))
    last_detected_distance = Column(Float)   # cm, from the bay sensor
    last_updated = Column(DateTime)

    def __repr__(self):
        return f"<ParkingSlot {self.slot_number} status={self.status}>"
