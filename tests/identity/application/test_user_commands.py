"""Application tests for user registration, profile and role commands."""

import json

import pytest
from identity.user.profile import ChangeRole, UpdateProfile
from identity.user.queries import count_users, list_admins, list_users
from identity.user.registration import RegisterUser
from identity.user.user import User
from protean import current_domain
from protean.exceptions import ValidationError


def _register(uid, email):
    return current_domain.process(
        RegisterUser(user_id=uid, email=email, display_name=email.split("@")[0]),
        asynchronous=False,
    )


class TestRegisterUser:
    def test_register_returns_uid(self):
        assert _register("uid-001", "rahul@example.com") == "uid-001"

        user = current_domain.repository_for(User).get("uid-001")
        assert user.email == "rahul@example.com"
        assert user.role == "user"

    def test_registering_twice_is_rejected(self):
        _register("uid-001", "rahul@example.com")
        with pytest.raises(ValidationError) as exc:
            _register("uid-001", "other@example.com")
        assert "user_id" in exc.value.messages


class TestUpdateProfile:
    def test_update_profile_with_address(self):
        _register("uid-001", "rahul@example.com")
        address = {
            "full_name": "Rahul Sharma",
            "phone": "9876543210",
            "pincode": "400001",
            "address_line": "12 Marine Drive",
            "city": "Mumbai",
            "state": "Maharashtra",
        }
        current_domain.process(
            UpdateProfile(user_id="uid-001", phone="9876543210", address=json.dumps(address)),
            asynchronous=False,
        )

        user = current_domain.repository_for(User).get("uid-001")
        assert user.phone == "9876543210"
        assert user.address.pincode == "400001"
        assert user.display_name == "rahul"


class TestChangeRole:
    def test_promote_and_list_admins(self):
        _register("uid-001", "rahul@example.com")
        _register("uid-002", "anil@example.com")

        current_domain.process(ChangeRole(user_id="uid-002", role="admin"), asynchronous=False)

        admins = list_admins()
        assert [a.id for a in admins] == ["uid-002"]

    def test_users_listed_by_email(self):
        _register("uid-001", "rahul@example.com")
        _register("uid-002", "anil@example.com")

        assert [u.email for u in list_users()] == ["anil@example.com", "rahul@example.com"]
        assert count_users() == 2

    def test_every_user_is_listed(self):
        for i in range(105):
            _register(f"uid-{i:03d}", f"player{i:03d}@example.com")

        users = list_users()
        assert len(users) == 105
        assert users[-1].email == "player104@example.com"
        assert count_users() == 105
