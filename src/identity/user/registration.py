"""User registration: command and handler.

Registering an email that is already known returns the existing user
instead of failing.
"""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from identity.domain import identity, logger
from identity.user.user import User, normalize_email


@identity.command(part_of="User")
class RegisterUser:
    email: String(required=True, max_length=254)
    name: String(max_length=100)
    photo_url: String(max_length=500)


@identity.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)

        existing = repo._dao.query.filter(email=normalize_email(command.email)).all().items
        if existing:
            return {"user_id": str(existing[0].id), "created": False}

        user = User.register(email=command.email, name=command.name, photo_url=command.photo_url)
        repo.add(user)
        logger.info("User registered", user_id=str(user.id), email=user.email)
        return {"user_id": str(user.id), "created": True}
