# Louage — Database Models
# Import all models here for SQLAlchemy discovery

from louage.models.fleet_settings import FleetSettings   # noqa
from louage.models.vehicle import Vehicle                # noqa
from louage.models.driver import DriverAccount           # noqa
from louage.models.passenger import Passenger, Direction # noqa
from louage.models.seat_leg import SeatLeg               # noqa
from louage.models.trip import Trip                      # noqa
