from .car_service import CarService
from .rental_service import RentalService
from .user_service import UserService

__all__ = [
    "RentalService",
    "CarService",
    "UserService",
]
