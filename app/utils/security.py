from werkzeug.security import generate_password_hash, check_password_hash

from app.utils.constants import Role


def generate_hash(password: str) -> str:
    """Salted PBKDF2 hash; the salt is embedded in the returned string."""
    return generate_password_hash(password, method="pbkdf2:sha256", salt_length=16)


def check_hash(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    return check_password_hash(hashed, password)


def is_admin(requester) -> bool:
    return bool(requester) and requester.get("role") == Role.ADMIN


def can_access(requester, owner_id) -> bool:
    """Allow the owner of a resource, or any admin."""
    if not requester:
        return False
    if is_admin(requester):
        return True
    return str(requester.get("user_id")) == str(owner_id)
