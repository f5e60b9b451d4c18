from __future__ import annotations

import logging
from typing import Optional

from app.exceptions import CarNotFoundError, InvalidStateError
from app.models.car import Car, EDITABLE_FIELDS
from app.models.store import Store
from app.services.common import _lc, _store, pick
from app.utils.constants import RentalStatus
from app.utils.validators import to_bool, to_float_safe

logger = logging.getLogger(__name__)


class CarService:
    """Car catalogue: search, create, update, delete."""

    @staticmethod
    def search_cars(make=None, model=None, category=None, available=None,
                    min_price=None, max_price=None, *, store: Optional[Store] = None):
        """
        Filter cars; every criterion is optional.
        - make/model: case-insensitive substring
        - category: exact match
        - available: exact match (bool or 'true'/'false')
        - min_price/max_price: inclusive bounds on price_per_day (invalid values ignored)
        """
        # 1. Resolve data source
        st = store or _store()
        res = st.all_cars()

        # 2. Make/model filters (case-insensitive, partial match)
        if make:
            kw = _lc(make).strip()
            res = [c for c in res if kw in _lc(c.get("make"))]
        if model:
            kw = _lc(model).strip()
            res = [c for c in res if kw in _lc(c.get("model"))]

        # 3. Exact filters
        if category:
            res = [c for c in res if c.get("category") == category]
        flag = to_bool(available)
        if flag is not None:
            res = [c for c in res if bool(c.get("available")) == flag]

        # 4. Price range filter
        min_val = to_float_safe(min_price)
        max_val = to_float_safe(max_price)
        if min_val is not None:
            res = [c for c in res if float(c.get("price_per_day") or 0) >= min_val]
        if max_val is not None:
            res = [c for c in res if float(c.get("price_per_day") or 0) <= max_val]

        return res

    @staticmethod
    def all_cars(store: Optional[Store] = None):
        st = store or _store()
        return st.all_cars()

    @staticmethod
    def get_car(car_id: str, store: Optional[Store] = None) -> dict:
        """Return a car dict by ID or raise CarNotFoundError."""
        st = store or _store()
        car = st.get_car(car_id)
        if car is None:
            raise CarNotFoundError()
        return car

    @staticmethod
    def create_car(payload: dict, store: Optional[Store] = None) -> dict:
        st = store or _store()
        fields = pick(payload, EDITABLE_FIELDS + ("available",))
        car = Car.from_payload(fields)
        doc = st.create_car(car.to_doc())
        logger.info("Car %s created (%s %s)", doc["car_id"], doc["make"], doc["model"])
        return doc

    @staticmethod
    def update_car(car_id: str, payload: dict, store: Optional[Store] = None) -> dict:
        """
        Update whitelisted fields and re-validate the merged document.
        The availability flag is owned by the rental lifecycle and is not editable here.
        """
        st = store or _store()
        with st.transaction():
            current = CarService.get_car(car_id, store=st)
            merged = dict(current)
            merged.update(pick(payload, EDITABLE_FIELDS))
            car = Car.from_payload(merged)
            updates = car.to_doc()
            updates.pop("available")
            doc = st.update_car(current["car_id"], updates)
        return doc

    @staticmethod
    def delete_car(car_id: str, store: Optional[Store] = None) -> None:
        """
        Delete a car if and only if:
        - the car exists,
        - no active (non-cancelled, non-completed) rental references it.
        """
        st = store or _store()
        with st.transaction():
            car = CarService.get_car(car_id, store=st)
            for r in st.rentals_for_car(car["car_id"]):
                if r.get("status") not in RentalStatus.CLOSED:
                    raise InvalidStateError("Cannot delete: active rentals exist")
            st.delete_car(car["car_id"])
        logger.info("Car %s deleted", car["car_id"])
