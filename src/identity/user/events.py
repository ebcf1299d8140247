"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from identity.domain import identity


@identity.event(part_of="User")
class UserRegistered:
    """A uid from the auth service got its storefront profile."""

    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True)
    display_name: String()
    registered_at: DateTime(required=True)


@identity.event(part_of="User")
class ProfileUpdated:
    __version__ = 1

    user_id: Identifier(required=True)
    display_name: String()
    phone: String()


@identity.event(part_of="User")
class RoleChanged:
    """A user was granted or stripped of back-office access."""

    __version__ = 1

    user_id: Identifier(required=True)
    previous_role: String(required=True)
    new_role: String(required=True)
