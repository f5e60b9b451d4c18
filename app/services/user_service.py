from __future__ import annotations

import logging
from typing import Optional

from app.exceptions import InvalidInputError, UnauthorizedError, UserNotFoundError
from app.models.store import Store
from app.models.user import User, PROFILE_FIELDS, ADMIN_FIELDS, CLEARABLE_FIELDS, public_user
from app.services.common import _store, pick, require_fields
from app.utils.constants import Role, MIN_PASSWORD_LENGTH
from app.utils.security import generate_hash, check_hash

logger = logging.getLogger(__name__)


def _check_password(password) -> None:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInputError(f"Password must have at least {MIN_PASSWORD_LENGTH} characters")


class UserService:
    """Accounts: registration, login, profile self-service and admin management."""

    @staticmethod
    def register(payload: dict, role: str = Role.CUSTOMER, store: Optional[Store] = None) -> dict:
        """Create an account; public registration always yields a customer."""
        st = store or _store()
        require_fields(payload, "name", "email", "password")
        _check_password(payload["password"])

        fields = pick(payload, PROFILE_FIELDS)
        fields["role"] = role
        fields["password_hash"] = generate_hash(payload["password"])
        user = User.from_payload(fields)
        doc = st.create_user(user.to_doc())
        logger.info("User %s registered as %s", doc["user_id"], role)
        return public_user(doc)

    @staticmethod
    def authenticate(email: str, password: str, store: Optional[Store] = None) -> dict:
        if not email or not password:
            raise InvalidInputError("Please provide email and password")
        st = store or _store()
        user = st.find_user_by_email(email)
        if not user or not check_hash(password, user.get("password_hash")):
            raise UnauthorizedError("Invalid credentials")
        return public_user(user)

    @staticmethod
    def ensure_admin(email: str, password: str, store: Optional[Store] = None) -> None:
        """Create a default admin when the store has none."""
        st = store or _store()
        if st.has_admin() or st.find_user_by_email(email):
            return
        UserService.register({"name": "Administrator", "email": email, "password": password},
                             role=Role.ADMIN, store=st)

    @staticmethod
    def list_users(store: Optional[Store] = None) -> list[dict]:
        st = store or _store()
        return [public_user(u) for u in st.all_users()]

    @staticmethod
    def get_user(user_id: str, store: Optional[Store] = None) -> dict:
        st = store or _store()
        user = st.get_user(user_id)
        if user is None:
            raise UserNotFoundError()
        return public_user(user)

    @staticmethod
    def _apply(user_id: str, payload: dict, allowed, st: Store) -> dict:
        with st.transaction():
            current = st.get_user(user_id)
            if current is None:
                raise UserNotFoundError()

            # Missing values leave the field untouched; "" clears optional fields only
            changes = {k: v for k, v in pick(payload, allowed).items()
                       if v is not None and (v != "" or k in CLEARABLE_FIELDS)}
            merged = dict(current)
            merged.update(changes)

            new_password = (payload or {}).get("new_password")
            if new_password:
                _check_password(new_password)
                merged["password_hash"] = generate_hash(new_password)

            updates = User.from_payload(merged).to_doc()
            return public_user(st.update_user(current["user_id"], updates))

    @staticmethod
    def update_profile(user_id: str, payload: dict, store: Optional[Store] = None) -> dict:
        """Self-service: name/email/phone/address and an optional new_password."""
        st = store or _store()
        return UserService._apply(user_id, payload, PROFILE_FIELDS, st)

    @staticmethod
    def admin_update_user(user_id: str, payload: dict, store: Optional[Store] = None) -> dict:
        """Admin: profile fields plus role."""
        st = store or _store()
        payload = dict(payload or {})
        payload.pop("new_password", None)
        return UserService._apply(user_id, payload, ADMIN_FIELDS, st)

    @staticmethod
    def delete_user(user_id: str, store: Optional[Store] = None) -> None:
        st = store or _store()
        if not st.delete_user(user_id):
            raise UserNotFoundError()
        logger.info("User %s deleted", user_id)
