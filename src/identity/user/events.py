"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from identity.domain import identity


@identity.event(part_of="User")
class UserRegistered:
    """A person registered on the marketplace."""

    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True)
    name: String()
    registered_at: DateTime(required=True)
