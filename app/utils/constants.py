# app/utils/constants.py

"""
Global constants for roles and statuses.
These constants are imported by both models and services.
"""

# Date format accepted for date-only input (start/end of a rental)
DATE_FMT = "%Y-%m-%d"


class Role:
    CUSTOMER = "customer"
    ADMIN = "admin"

    ALL = (CUSTOMER, ADMIN)


class RentalStatus:
    PENDING = "pending"
    CONFIRMED = "confirmed"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    ALL = (PENDING, CONFIRMED, ACTIVE, COMPLETED, CANCELLED)

    # Rentals in these states no longer hold the car.
    CLOSED = frozenset({COMPLETED, CANCELLED})

    # Statuses from which the car is handed back.
    RELEASING = CLOSED

    TRANSITIONS = {
        PENDING: frozenset({CONFIRMED, CANCELLED}),
        CONFIRMED: frozenset({ACTIVE, CANCELLED}),
        ACTIVE: frozenset({COMPLETED}),
        COMPLETED: frozenset(),
        CANCELLED: frozenset(),
    }

    @classmethod
    def can_transition(cls, current: str, new: str) -> bool:
        return new in cls.TRANSITIONS.get(current, ())


class PaymentStatus:
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"

    ALL = (PENDING, PAID, REFUNDED)


# --- Misc ---
MIN_PASSWORD_LENGTH = 6
MIN_CAR_YEAR = 1886
MAX_CAR_YEAR = 2100
