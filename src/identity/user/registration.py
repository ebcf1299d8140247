"""User registration — command and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.user.user import User


@identity.command(part_of="User")
class RegisterUser:
    """Create the storefront profile for a uid issued by the auth service."""

    user_id: String(required=True, max_length=128)
    email: String(required=True, max_length=254)
    display_name: String(max_length=100)


@identity.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        try:
            repo.get(command.user_id)
        except ObjectNotFoundError:
            pass
        else:
            raise ValidationError({"user_id": ["User is already registered"]})

        user = User.register(
            uid=command.user_id,
            email=command.email,
            display_name=command.display_name,
        )
        repo.add(user)
        return str(user.id)
