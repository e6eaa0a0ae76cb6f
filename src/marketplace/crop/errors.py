"""Error kinds raised by the interest workflow.

Recoverable errors carry a messages dict, like every Protean exception, so the
HTTP layer can render them uniformly. ``StoreConflict`` never leaves the
workflow: it is retried and, once attempts run out, surfaces as
``Unavailable``.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class InvalidInput(ValidationError):
    """A request field is missing or malformed."""


class NotFound(ObjectNotFoundError):
    """The crop, or the interest within its ledger, does not exist."""

    def __init__(self, messages):
        self.messages = messages
        super().__init__(messages)


class DuplicateInterest(ValidationError):
    """The buyer already has an interest in this crop's ledger."""


class AlreadyDecided(ValidationError):
    """The interest was already accepted or rejected."""


class InsufficientQuantity(ValidationError):
    """Accepting would exceed the crop's remaining quantity."""


class StoreConflict(Exception):
    """A guarded write lost a race with a concurrent mutation."""


class Unavailable(Exception):
    """The crop stayed contended through every write attempt."""

    def __init__(self, crop_id, attempts):
        self.crop_id = crop_id
        self.attempts = attempts
        super().__init__(f"Crop {crop_id} is busy; gave up after {attempts} attempts")
