# Parking Analytics — Database Models
# Import all models here for SQLAlchemy discovery

from parking_analytics.models.parking_slot import ParkingSlot   # noqa
from parking_analytics.models.parking_log import ParkingLog     # noqa
