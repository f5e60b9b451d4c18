"""User directory: registration, authentication, profile and admin updates."""
import pytest

from app.exceptions import (
    DuplicateKeyError,
    InvalidInputError,
    SchemaValidationError,
    UnauthorizedError,
    UserNotFoundError,
)
from app.services.user_service import UserService
from app.utils.security import check_hash

MISSING_ID = "5d6c1d5e-8a3b-4e55-9f8b-0c8e8b1f9a11"


def test_register_creates_customer_with_hashed_password(store):
    user = UserService.register({
        "name": "Carl", "email": "Carl@Example.com", "password": "pw12345",
        "phone_number": "+250788123456", "address": "Kigali", "role": "admin",
    })
    assert user["role"] == "customer"
    assert user["email"] == "carl@example.com"
    assert "password_hash" not in user

    stored = store.users[user["user_id"]]
    assert stored["password_hash"] != "pw12345"
    assert check_hash("pw12345", stored["password_hash"])


def test_register_duplicate_email_case_insensitive(customer):
    with pytest.raises(DuplicateKeyError):
        UserService.register({"name": "Other", "email": "ALICE@example.com", "password": "pw12345"})


def test_register_requires_fields(store):
    with pytest.raises(InvalidInputError):
        UserService.register({"name": "NoMail", "password": "pw12345"})


def test_register_rejects_short_password(store):
    with pytest.raises(InvalidInputError):
        UserService.register({"name": "Dan", "email": "dan@example.com", "password": "123"})


def test_register_rejects_bad_email_and_phone(store):
    with pytest.raises(SchemaValidationError) as exc:
        UserService.register({"name": "Eve", "email": "not-an-email", "password": "pw12345",
                              "phone_number": "12"})
    assert len(exc.value.errors) == 2


def test_authenticate(customer):
    user = UserService.authenticate("alice@example.com", "secret1")
    assert user["user_id"] == customer["user_id"]
    with pytest.raises(UnauthorizedError):
        UserService.authenticate("alice@example.com", "wrong")
    with pytest.raises(UnauthorizedError):
        UserService.authenticate("nobody@example.com", "secret1")


def test_default_admin_exists(admin):
    assert admin["role"] == "admin"


def test_list_users_hides_password(customer):
    users = UserService.list_users()
    assert len(users) == 2
    assert all("password_hash" not in u for u in users)


def test_get_user(customer):
    assert UserService.get_user(customer["user_id"])["name"] == "Alice"
    with pytest.raises(UserNotFoundError):
        UserService.get_user(MISSING_ID)


def test_update_profile_fields_and_password(customer):
    updated = UserService.update_profile(customer["user_id"], {
        "name": "Alice B", "phone_number": "0788123456", "address": "Musanze",
        "role": "admin", "new_password": "newpass1",
    })
    assert updated["name"] == "Alice B"
    assert updated["phone_number"] == "0788123456"
    assert updated["role"] == "customer"

    assert UserService.authenticate("alice@example.com", "newpass1")
    with pytest.raises(UnauthorizedError):
        UserService.authenticate("alice@example.com", "secret1")


def test_update_profile_blank_values_keep_current(customer):
    updated = UserService.update_profile(customer["user_id"], {"name": "", "email": None})
    assert updated["name"] == "Alice"
    assert updated["email"] == "alice@example.com"


def test_update_profile_email_clash(customer, other_customer):
    with pytest.raises(DuplicateKeyError):
        UserService.update_profile(customer["user_id"], {"email": "bob@example.com"})


def test_admin_update_role(customer):
    updated = UserService.admin_update_user(customer["user_id"], {"role": "admin"})
    assert updated["role"] == "admin"
    with pytest.raises(SchemaValidationError):
        UserService.admin_update_user(customer["user_id"], {"role": "superuser"})


def test_admin_update_missing_user(store):
    with pytest.raises(UserNotFoundError):
        UserService.admin_update_user(MISSING_ID, {"name": "x"})


def test_delete_user(store, customer):
    UserService.delete_user(customer["user_id"])
    assert customer["user_id"] not in store.users
    with pytest.raises(UserNotFoundError):
        UserService.delete_user(customer["user_id"])


def test_update_profile_empty_string_clears_optional_fields(customer):
    UserService.update_profile(customer["user_id"], {"phone_number": "0788123456", "address": "Musanze"})

    updated = UserService.update_profile(customer["user_id"], {"phone_number": "", "address": ""})

    assert updated["phone_number"] == ""
    assert updated["address"] == ""
    assert updated["name"] == "Alice"
    assert UserService.get_user(customer["user_id"])["phone_number"] == ""
