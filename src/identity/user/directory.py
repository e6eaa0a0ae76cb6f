"""Read access to registered users."""

from protean.utils.globals import current_domain

from identity.user.user import User

PAGE_SIZE = 100


def list_users():
    """Every registered user, oldest first."""
    dao = current_domain.repository_for(User)._dao
    users = []
    offset = 0
    while True:
        page = dao.query.order_by("registered_at").offset(offset).limit(PAGE_SIZE).all()
        users.extend(page.items)
        if len(page.items) < PAGE_SIZE:
            return users
        offset += PAGE_SIZE
