"""User aggregate — the storefront's record of an authenticated account.

The aggregate id is the uid issued by the hosted auth service, so the same
identifier flows through carts and orders without a lookup table.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String, ValueObject

from identity.domain import identity

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


class UserRole(Enum):
    USER = "user"
    ADMIN = "admin"


@identity.value_object(part_of="User")
class DeliveryAddress:
    """The address a user ships to by default.

    Replaced wholesale on every profile update.
    """

    full_name: String(max_length=100)
    phone: String(max_length=20)
    pincode: String(max_length=10)
    address_line: String(max_length=255)
    city: String(max_length=100)
    state: String(max_length=100)

    @invariant.post
    def pincode_must_be_numeric(self):
        if self.pincode and not self.pincode.isdigit():
            raise ValidationError({"pincode": ["Pincode must contain only digits"]})


@identity.aggregate
class User:
    email: String(required=True, max_length=254)
    role: String(choices=UserRole, default=UserRole.USER.value)
    display_name: String(max_length=100)
    phone: String(max_length=20)
    address: ValueObject(DeliveryAddress)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def email_must_look_like_an_address(self):
        if self.email and "@" not in self.email:
            raise ValidationError({"email": ["Invalid email address"]})

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN.value

    @classmethod
    def register(cls, uid, email, display_name=None):
        from identity.user.events import UserRegistered

        now = datetime.now(UTC)
        user = cls(
            id=uid,
            email=email,
            display_name=display_name,
            role=UserRole.USER.value,
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                email=email,
                display_name=display_name,
                registered_at=now,
            )
        )
        return user

    def update_profile(self, display_name=_UNSET, phone=_UNSET, address=_UNSET):
        """Partial profile update; fields left unset keep their value."""
        from identity.user.events import ProfileUpdated

        if display_name is not _UNSET:
            self.display_name = display_name
        if phone is not _UNSET:
            self.phone = phone
        if address is not _UNSET:
            self.address = DeliveryAddress(**address) if address else None

        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProfileUpdated(
                user_id=str(self.id),
                display_name=self.display_name,
                phone=self.phone,
            )
        )

    def change_role(self, role):
        from identity.user.events import RoleChanged

        try:
            new_role = UserRole(role)
        except ValueError:
            raise ValidationError({"role": [f"Unknown role {role}"]}) from None
        if new_role.value == self.role:
            raise ValidationError({"role": [f"User already has role {new_role.value}"]})

        previous = self.role
        self.role = new_role.value
        self.updated_at = datetime.now(UTC)
        self.raise_(
            RoleChanged(
                user_id=str(self.id),
                previous_role=previous,
                new_role=new_role.value,
            )
        )
