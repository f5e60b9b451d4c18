from dataclasses import dataclass, asdict

from app.exceptions import SchemaValidationError
from app.utils.constants import Role
from app.utils.validators import is_blank, is_valid_email, is_valid_phone

# Fields a user may change on their own profile; admins may also change `role`.
PROFILE_FIELDS = ("name", "email", "phone_number", "address")
ADMIN_FIELDS = PROFILE_FIELDS + ("role",)
# An explicit empty string clears these; blank required fields keep their value.
CLEARABLE_FIELDS = ("phone_number", "address")

# Never leaves the store through the API.
PRIVATE_FIELDS = ("password_hash",)


@dataclass
class User:
    """Account schema. The password is stored only as a salted hash."""
    name: str
    email: str
    password_hash: str
    phone_number: str = ""
    address: str = ""
    role: str = Role.CUSTOMER

    @classmethod
    def from_payload(cls, payload: dict) -> "User":
        errors = []
        name = payload.get("name")
        if is_blank(name) or not isinstance(name, str):
            errors.append("Please provide a name")
        email = payload.get("email")
        if not is_valid_email(email):
            errors.append("Please provide a valid email")
        phone = payload.get("phone_number") or ""
        if phone and not is_valid_phone(phone):
            errors.append("Please provide a valid phone number")
        address = payload.get("address") or ""
        if not isinstance(address, str):
            errors.append("Address must be text")
        role = payload.get("role") or Role.CUSTOMER
        if role not in Role.ALL:
            errors.append(f"`{role}` is not a valid role")
        if is_blank(payload.get("password_hash")):
            errors.append("Please provide a password")
        if errors:
            raise SchemaValidationError(errors)

        return cls(
            name=name.strip(),
            email=email.strip().lower(),
            password_hash=payload["password_hash"],
            phone_number=phone.strip(),
            address=address.strip(),
            role=role,
        )

    def to_doc(self) -> dict:
        return asdict(self)


def public_user(doc: dict) -> dict:
    """Copy of a stored user without private fields."""
    return {k: v for k, v in doc.items() if k not in PRIVATE_FIELDS}


def user_projection(doc) -> dict | None:
    """Minimal user view attached to rentals."""
    if not doc:
        return None
    return {
        "user_id": doc.get("user_id"),
        "name": doc.get("name"),
        "email": doc.get("email"),
        "phone_number": doc.get("phone_number"),
    }
