"""Rental-related service layer utilities."""

import logging
from typing import Optional

from app.exceptions import (
    CarNotFoundError,
    CarUnavailableError,
    InvalidInputError,
    InvalidStateError,
    RentalNotFoundError,
    UnauthorizedError,
)
from app.models.rental import Rental
from app.models.store import Store, check_id
from app.services.common import _store, populate_rental, require_fields
from app.utils.constants import RentalStatus, PaymentStatus
from app.utils.dates import parse_datetime, to_iso, duration_days, overlaps
from app.utils.security import can_access

logger = logging.getLogger(__name__)

MSG_CAR_UNAVAILABLE = "Car is currently not available for rental"
MSG_AVAILABLE = "Car is available for the selected dates"
MSG_BOOKED = "Car is not available for the selected dates"


def _parse_range(start, end):
    d1 = parse_datetime(start)
    d2 = parse_datetime(end)
    return d1, d2


def _active_overlap(st: Store, car_id: str, start, end) -> Optional[dict]:
    """First rental of this car that still holds it and overlaps [start, end] (inclusive)."""
    for r in st.rentals_for_car(car_id):
        if r.get("status") in RentalStatus.CLOSED:
            continue
        if overlaps(parse_datetime(r["start_date"]), parse_datetime(r["end_date"]), start, end):
            return r
    return None


def _text(field: str, value, required: bool = True) -> str:
    """Trimmed text input; non-string values are rejected before any store work."""
    if value is None and not required:
        return ""
    if not isinstance(value, str):
        raise InvalidInputError(f"{field} must be text")
    return value.strip()


def _load_rental(st: Store, rental_id: str) -> dict:
    if not rental_id:
        raise RentalNotFoundError()
    r = st.get_rental(rental_id)
    if r is None:
        raise RentalNotFoundError()
    return r


class RentalService:
    """
    Booking lifecycle: create, availability check, status and payment updates,
    cancellation and listings. Every operation that touches both a rental and
    its car runs inside one store transaction.
    """

    @staticmethod
    def create_rental(
            customer_id: str,
            car_id: str,
            start_date,
            end_date,
            pickup_location: str,
            dropoff_location: str,
            additional_requests: str = "",
            store: Optional[Store] = None,
    ) -> dict:
        """
        Book a car for [start_date, end_date].

        Fails with CarNotFoundError if the car does not exist, CarUnavailableError
        if it is flagged unavailable or an active rental overlaps, and
        InvalidInputError if start_date >= end_date.

        Returns the new rental joined with its car.
        """
        require_fields(
            {"car_id": car_id, "start_date": start_date, "end_date": end_date,
             "pickup_location": pickup_location, "dropoff_location": dropoff_location},
            "car_id", "start_date", "end_date", "pickup_location", "dropoff_location",
        )
        pickup = _text("pickup_location", pickup_location)
        dropoff = _text("dropoff_location", dropoff_location)
        notes = _text("additional_requests", additional_requests, required=False)
        st = store or _store()

        with st.transaction():
            car = st.get_car(car_id)
            if car is None:
                raise CarNotFoundError()
            car_id = car["car_id"]

            if not car.get("available"):
                raise CarUnavailableError()

            start, end = _parse_range(start_date, end_date)
            if start >= end:
                raise InvalidInputError("End date must be after start date")

            days = duration_days(start, end)
            total = days * float(car["price_per_day"])

            clash = _active_overlap(st, car_id, start, end)
            if clash is not None:
                logger.debug("Rental %s blocks car %s", clash["rental_id"], car_id)
                raise CarUnavailableError(MSG_BOOKED)

            rental = Rental(
                user_id=str(customer_id),
                car_id=car_id,
                start_date=to_iso(start),
                end_date=to_iso(end),
                total_price=total,
                pickup_location=pickup,
                dropoff_location=dropoff,
                additional_requests=notes,
            ).validate()
            doc = st.create_rental(rental.to_doc())

            # set available=false where available=true
            if not st.set_car_availability(car_id, False, expected=True):
                raise CarUnavailableError()

        logger.info("Rental %s created: car=%s user=%s days=%d total=%.2f",
                    doc["rental_id"], car_id, customer_id, days, total)
        return populate_rental(doc, st)

    @staticmethod
    def check_availability(car_id: str, start_date, end_date, store: Optional[Store] = None):
        """
        Read-only check; does not reserve anything.

        Returns:
            (available: bool, message: str)
        """
        if not car_id or not start_date or not end_date:
            raise InvalidInputError("Please provide car_id, start_date and end_date")
        st = store or _store()

        car = st.get_car(car_id)
        if car is None:
            raise CarNotFoundError()
        if not car.get("available"):
            return False, MSG_CAR_UNAVAILABLE

        start, end = _parse_range(start_date, end_date)
        if _active_overlap(st, car["car_id"], start, end) is not None:
            return False, MSG_BOOKED
        return True, MSG_AVAILABLE

    @staticmethod
    def update_status(rental_id: str, status: str, store: Optional[Store] = None) -> dict:
        """
        Admin status change. Accepts any of the five statuses regardless of the
        current one; closing statuses hand the car back (skipped if the car is gone).
        """
        if status not in RentalStatus.ALL:
            raise InvalidInputError("Invalid status value")
        st = store or _store()

        with st.transaction():
            r = _load_rental(st, rental_id)
            if status in RentalStatus.RELEASING:
                if not st.set_car_availability(r["car_id"], True):
                    logger.warning("Car %s of rental %s no longer exists", r["car_id"], r["rental_id"])
            r = st.update_rental(r["rental_id"], {"status": status})

        logger.info("Rental %s status -> %s", r["rental_id"], status)
        return populate_rental(r, st)

    @staticmethod
    def update_payment_status(rental_id: str, payment_status: str, store: Optional[Store] = None) -> dict:
        if payment_status not in PaymentStatus.ALL:
            raise InvalidInputError("Invalid payment status value")
        st = store or _store()

        r = _load_rental(st, rental_id)
        r = st.update_rental(r["rental_id"], {"payment_status": payment_status})
        logger.info("Rental %s payment -> %s", r["rental_id"], payment_status)
        return populate_rental(r, st)

    @staticmethod
    def cancel_rental(rental_id: str, requester: dict, store: Optional[Store] = None) -> dict:
        """
        Cancel by the owner or an admin.
        - Only pending/confirmed rentals can be cancelled
        - The car is handed back (skipped if the car is gone)
        """
        st = store or _store()

        with st.transaction():
            r = _load_rental(st, rental_id)

            if not can_access(requester, r.get("user_id")):
                raise UnauthorizedError("Not authorized to cancel this rental")

            current = r.get("status")
            if not RentalStatus.can_transition(current, RentalStatus.CANCELLED):
                raise InvalidStateError(f"Cannot cancel rental with status: {current}")

            if not st.set_car_availability(r["car_id"], True):
                logger.warning("Car %s of rental %s no longer exists", r["car_id"], r["rental_id"])
            r = st.update_rental(r["rental_id"], {"status": RentalStatus.CANCELLED})

        logger.info("Rental %s cancelled by %s", r["rental_id"], requester.get("user_id"))
        return populate_rental(r, st)

    @staticmethod
    def get_rental(rental_id: str, requester: dict, store: Optional[Store] = None) -> dict:
        st = store or _store()
        r = _load_rental(st, rental_id)
        if not can_access(requester, r.get("user_id")):
            raise UnauthorizedError("Not authorized to access this rental")
        return populate_rental(r, st, with_user=True)

    @staticmethod
    def list_rentals(store: Optional[Store] = None) -> list[dict]:
        """Admin scope: every rental with car and user projection, newest first."""
        st = store or _store()
        out = [populate_rental(r, st, with_user=True) for r in st.all_rentals()]
        out.sort(key=lambda x: x.get("created_at") or "", reverse=True)
        return out

    @staticmethod
    def rentals_for_user(user_id: str, store: Optional[Store] = None) -> list[dict]:
        """Self scope: this user's rentals with car attached, newest first."""
        st = store or _store()
        out = [populate_rental(r, st) for r in st.rentals_for_user(check_id(user_id))]
        out.sort(key=lambda x: x.get("created_at") or "", reverse=True)
        return out
