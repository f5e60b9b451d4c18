from functools import wraps

from flask import session, g

from app.exceptions import UnauthorizedError, InvalidIdError
from app.models.store import Store
from app.models.user import public_user


def current_user():
    """Return the logged-in user (without private fields) or None."""
    uid = session.get("uid")
    if not uid:
        return None
    try:
        user = Store.instance().get_user(uid)
    except InvalidIdError:
        return None
    return public_user(user) if user else None


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        user = current_user()
        if user is None:
            session.clear()
            raise UnauthorizedError("Not authorized to access this route")
        g.user = user
        return fn(*args, **kwargs)

    return wrapper


def role_required(*roles):
    """Use under @login_required."""

    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            role = g.user.get("role")
            if role not in roles:
                raise UnauthorizedError(f"User role {role} is not authorized to access this route")
            return fn(*args, **kwargs)

        return wrapper

    return deco
