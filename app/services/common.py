"""Shared service helpers."""

from typing import Optional

from app.exceptions import InvalidInputError
from app.models.store import Store
from app.models.user import user_projection
from app.utils.validators import is_blank


def _store() -> Store:
    """Get the singleton store instance."""
    return Store.instance()


def _lc(s):
    """Safe lowercase for case-insensitive compare."""
    return (s or "").lower()


def require_fields(payload: dict, *names: str) -> None:
    """Raise InvalidInputError naming every missing or blank field."""
    missing = [n for n in names if is_blank(payload.get(n))]
    if missing:
        raise InvalidInputError(f"Please provide {', '.join(missing)}")


def pick(payload: Optional[dict], allowed) -> dict:
    """Whitelist: keep only `allowed` keys that are present in payload."""
    payload = payload or {}
    return {k: payload[k] for k in allowed if k in payload}


# -------- joined views --------
def populate_rental(r: dict, store: Store, with_user: bool = False) -> dict:
    """Return a copy of a rental with its car (and optionally user projection) attached."""
    out = dict(r)
    car = store.cars.get(r.get("car_id"))
    out["car"] = dict(car) if car else None
    if with_user:
        out["user"] = user_projection(store.users.get(r.get("user_id")))
    return out
