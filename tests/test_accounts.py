"""Account registration, login and profile maintenance."""

import pytest

from salesboard.core.errors import Conflict, NotFound, ValidationError
from salesboard.models import User
from salesboard.services import accounts
from salesboard.services.passwords import verify_password

FORM = {
    "id_number": "12345678",
    "phone_number": "0712345678",
    "name": "Jane Wanjiru",
    "password": "secret123",
    "confirm_password": "secret123",
}


def test_register_stores_normalised_phone_and_hashed_password(store):
    user = accounts.register(store, FORM)

    assert user.phone_number == "+254712345678"
    assert user.is_admin is False
    assert user.password_hash != "secret123"
    assert verify_password("secret123", user.password_hash)
    assert "password_hash" not in accounts.user_to_dict(user)


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"id_number": "87654321"}, accounts.PHONE_TAKEN),
        ({"phone_number": "+254798765432"}, accounts.ID_NUMBER_TAKEN),
    ],
)
def test_duplicate_registration_conflicts_without_writing(store, overrides, message):
    accounts.register(store, FORM)

    with pytest.raises(Conflict) as excinfo:
        accounts.register(store, {**FORM, **overrides})

    assert excinfo.value.message == message
    assert len(store.select(User)) == 1


def test_login_with_correct_password(store):
    registered = accounts.register(store, FORM)
    user = accounts.login(store, {"phone_number": "+254712345678", "password": "secret123"})
    assert user.id == registered.id


def test_login_unknown_phone(store):
    with pytest.raises(NotFound) as excinfo:
        accounts.login(store, {"phone_number": "0799999999", "password": "secret123"})
    assert excinfo.value.message == accounts.PHONE_UNKNOWN


def test_login_wrong_password(store):
    accounts.register(store, FORM)
    with pytest.raises(ValidationError) as excinfo:
        accounts.login(store, {"phone_number": "0712345678", "password": "wrong-pass"})
    assert excinfo.value.errors == {"general": accounts.BAD_CREDENTIALS}
    assert excinfo.value.message == accounts.BAD_CREDENTIALS


def test_update_name(store, make_user):
    user = make_user(name="Old Name")
    updated = accounts.update_name(store, user.id, {"name": "  New Name  "})
    assert updated.name == "New Name"

    with pytest.raises(ValidationError):
        accounts.update_name(store, user.id, {"name": "x" * 51})


def test_change_password(store, make_user):
    user = make_user(password="secret123")
    form = {
        "current_password": "secret123",
        "new_password": "better-secret",
        "confirm_password": "better-secret",
    }
    accounts.change_password(store, user.id, form)

    refreshed = accounts.get_user(store, user.id)
    assert verify_password("better-secret", refreshed.password_hash)
    assert not verify_password("secret123", refreshed.password_hash)


def test_change_password_rejects_wrong_current_password(store, make_user):
    user = make_user(password="secret123")
    with pytest.raises(ValidationError) as excinfo:
        accounts.change_password(
            store,
            user.id,
            {
                "current_password": "not-it-123",
                "new_password": "better-secret",
                "confirm_password": "better-secret",
            },
        )
    assert excinfo.value.errors == {"current_password": "Current password is incorrect"}


def test_list_agents_is_alphabetical(store, make_user):
    make_user(name="Zawadi")
    make_user(name="Amani")
    make_user(name="Otieno")
    assert [agent["name"] for agent in accounts.list_agents(store)] == [
        "Amani",
        "Otieno",
        "Zawadi",
    ]


def _bootstrap(store, **overrides):
    options = {
        "name": "Administrator",
        "phone_number": "0700000000",
        "id_number": "99999999",
        "password": "admin-pass",
    }
    options.update(overrides)
    return accounts.ensure_super_user(store, **options)


def test_super_user_upsert_creates_then_refreshes(store):
    created = _bootstrap(store)
    assert created.is_admin is True
    assert created.phone_number == "+254700000000"

    refreshed = _bootstrap(store, name="Head Office", password="rotated-pass")

    assert refreshed.id == created.id
    assert refreshed.name == "Head Office"
    assert len(store.select(User)) == 1
    assert verify_password("rotated-pass", refreshed.password_hash)


def test_super_user_upsert_promotes_existing_account(store, make_user):
    agent = make_user(phone_number="+254700000000")
    admin = _bootstrap(store)
    assert admin.id == agent.id
    assert admin.is_admin is True


def test_super_user_upsert_without_native_support(store, monkeypatch):
    monkeypatch.setattr(store, "_dialect", lambda: "mssql")
    created = _bootstrap(store)
    refreshed = _bootstrap(store, name="Fallback Admin")
    assert refreshed.id == created.id
    assert refreshed.name == "Fallback Admin"
    assert len(store.select(User)) == 1


def test_super_user_id_number_taken_by_another_account(store, make_user, caplog):
    agent = make_user(id_number="99999999")

    with caplog.at_level("ERROR", logger="salesboard.services.accounts"):
        with pytest.raises(Conflict) as excinfo:
            _bootstrap(store)

    assert "99999999" in str(excinfo.value)
    assert "99999999" in caplog.text
    assert agent.phone_number in caplog.text
    assert store.first(User, {"id_number": "99999999"}).is_admin is False
