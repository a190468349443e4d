# Import all models to ensure they are registered with SQLAlchemy
from shared.models.users import Users
from .parking_spots import ParkingSpot
from .bookings import Booking
from .parking_slips import ParkingSlip
