from dataclasses import dataclass, asdict

from app.exceptions import SchemaValidationError
from app.utils.constants import RentalStatus, PaymentStatus
from app.utils.validators import is_blank


@dataclass
class Rental:
    """
    Schema for a booking. Dates are ISO-8601 UTC strings; total_price is fixed
    at creation and never recomputed.
    """
    user_id: str
    car_id: str
    start_date: str
    end_date: str
    total_price: float
    pickup_location: str
    dropoff_location: str
    additional_requests: str = ""
    status: str = RentalStatus.PENDING
    payment_status: str = PaymentStatus.PENDING

    def validate(self) -> "Rental":
        errors = []
        if is_blank(self.user_id):
            errors.append("Rental must belong to a user")
        if is_blank(self.car_id):
            errors.append("Rental must reference a car")
        if is_blank(self.start_date):
            errors.append("Please add start date")
        if is_blank(self.end_date):
            errors.append("Please add end date")
        if self.total_price is None or self.total_price < 0:
            errors.append("Please add total price")
        if not isinstance(self.pickup_location, str) or is_blank(self.pickup_location):
            errors.append("Please add pickup location")
        if not isinstance(self.dropoff_location, str) or is_blank(self.dropoff_location):
            errors.append("Please add dropoff location")
        if not isinstance(self.additional_requests, str):
            errors.append("Additional requests must be text")
        if self.status not in RentalStatus.ALL:
            errors.append(f"`{self.status}` is not a valid rental status")
        if self.payment_status not in PaymentStatus.ALL:
            errors.append(f"`{self.payment_status}` is not a valid payment status")
        if errors:
            raise SchemaValidationError(errors)
        return self

    def to_doc(self) -> dict:
        return asdict(self)
