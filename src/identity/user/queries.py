"""Read helpers over the User repository."""

from protean.utils.globals import current_domain

from identity.user.user import User, UserRole
from shared.queries import fetch_all


def list_users(role=None):
    query = current_domain.repository_for(User)._dao.query
    if role:
        query = query.filter(role=role)
    return sorted(fetch_all(query), key=lambda u: u.email)


def list_admins():
    return list_users(role=UserRole.ADMIN.value)


def count_users():
    return current_domain.repository_for(User)._dao.query.all().total
