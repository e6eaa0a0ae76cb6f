"""User aggregate: a person known to the marketplace by email."""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from identity.domain import identity
from identity.user.events import UserRegistered


def normalize_email(email):
    return (email or "").strip().lower()


@identity.aggregate
class User:
    """A producer or buyer. Email is the natural key."""

    email: String(required=True, max_length=254, unique=True)
    name: String(max_length=100)
    photo_url: String(max_length=500)
    registered_at: DateTime()

    @invariant.post
    def email_must_be_well_formed(self):
        local_part, _, domain_part = (self.email or "").partition("@")
        if not local_part or "." not in domain_part or " " in self.email:
            raise ValidationError({"email": [f"Invalid email address: {self.email!r}"]})

    @classmethod
    def register(cls, email, name=None, photo_url=None):
        now = datetime.now(UTC)
        user = cls(
            email=normalize_email(email),
            name=name,
            photo_url=photo_url,
            registered_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                email=user.email,
                name=name,
                registered_at=now,
            )
        )
        return user
