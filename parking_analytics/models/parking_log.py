"""
Parking log table — one row per vehicle stay in a slot.
exit_time stays NULL while the vehicle is still parked.
Timestamps are naive wall-clock values in settings.TIMEZONE.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from parking_analytics.database import Base


class ParkingLog(Base):
    __tablename__ = "parking_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slot_id = Column(Integer, ForeignKey("parking_slots.id"), nullable=False, index=True)
    license_plate = Column(String(20), nullable=False)
    vehicle_type = Column(String(20))          # car | motorcycle | truck | other
    entry_time = Column(DateTime, nullable=False, index=True)
    exit_time = Column(DateTime, index=True)   # NULL = still parked
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<ParkingLog {self.id} slot={self.slot_id} plate={self.license_plate}>"
