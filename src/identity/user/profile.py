"""User profile and role management — commands and handler."""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.user.user import User


@identity.command(part_of="User")
class UpdateProfile:
    user_id: Identifier(required=True)
    display_name: String(max_length=100)
    phone: String(max_length=20)
    address: Text()  # JSON: {full_name, phone, pincode, address_line, city, state}


@identity.command(part_of="User")
class ChangeRole:
    """Grant or revoke admin access."""

    user_id: Identifier(required=True)
    role: String(required=True, max_length=20)


@identity.command_handler(part_of=User)
class ManageUserHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        changes = {}
        if command.display_name is not None:
            changes["display_name"] = command.display_name
        if command.phone is not None:
            changes["phone"] = command.phone
        if command.address is not None:
            changes["address"] = json.loads(command.address) if isinstance(command.address, str) else command.address

        user.update_profile(**changes)
        repo.add(user)

    @handle(ChangeRole)
    def change_role(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.change_role(command.role)
        repo.add(user)
