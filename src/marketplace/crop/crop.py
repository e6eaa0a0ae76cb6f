"""Crop aggregate (CQRS), the core of the marketplace domain.

A Crop is a producer's listing of a harvested good. It owns the interest
ledger: every buyer request to purchase part of the crop is an Interest
entity embedded in the aggregate, kept in submission order.

Interest State Machine:
    PENDING → ACCEPTED | REJECTED
    ACCEPTED, REJECTED → (terminal)

Accepting an interest draws the crop's quantity down by the interest's
quantity. Under the default CLAMP policy the quantity floors at zero; under
REJECT the acceptance is refused when stock would go negative.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Integer,
    String,
    Text,
    ValueObject,
)

from marketplace.crop.errors import (
    AlreadyDecided,
    DuplicateInterest,
    InsufficientQuantity,
    InvalidInput,
    NotFound,
)
from marketplace.crop.events import (
    CropDelisted,
    CropDetailsUpdated,
    CropListed,
    InterestAccepted,
    InterestRejected,
    InterestSubmitted,
)
from marketplace.domain import marketplace


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class CropStatus(Enum):
    LISTED = "listed"
    DELISTED = "delisted"


class InterestStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class OvercommitPolicy(Enum):
    """What acceptance does when the interest exceeds the remaining stock."""

    CLAMP = "clamp"
    REJECT = "reject"


_DECISIONS = {InterestStatus.ACCEPTED, InterestStatus.REJECTED}


def normalize_email(email):
    return (email or "").strip().lower()


def parse_decision(decision):
    """Return the InterestStatus for an accept/reject decision."""
    try:
        status = InterestStatus(decision.value if isinstance(decision, Enum) else decision)
    except ValueError:
        status = None
    if status not in _DECISIONS:
        raise InvalidInput({"status": [f"Decision must be 'accepted' or 'rejected', got {decision!r}"]})
    return status


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@marketplace.value_object(part_of="Crop")
class Owner:
    """The producer selling the crop."""

    owner_name = String(required=True, max_length=100)
    owner_email = String(required=True, max_length=254)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@marketplace.entity(part_of="Crop")
class Interest:
    """A buyer's request to purchase part of a crop.

    ``sequence`` records the position in the ledger, assigned when the
    interest is appended.
    """

    user_email = String(required=True, max_length=254)
    user_name = String(max_length=100)
    quantity = Float(required=True, min_value=0.0)
    message = Text()
    status = String(choices=InterestStatus, default=InterestStatus.PENDING.value)
    sequence = Integer(min_value=1)
    submitted_at = DateTime(required=True)
    decided_at = DateTime()

    @property
    def is_pending(self):
        return InterestStatus(self.status) == InterestStatus.PENDING


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Crop:
    """A harvested good listed for sale, with its ledger of buyer interests."""

    name = String(required=True, max_length=200)
    image = String(max_length=500)
    location = String(max_length=200)
    price_per_unit = Float(min_value=0.0)
    quantity = Float(required=True, min_value=0.0)
    owner = ValueObject(Owner, required=True)
    interests = HasMany(Interest)
    status = String(choices=CropStatus, default=CropStatus.LISTED.value)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def one_interest_per_buyer(self):
        emails = [normalize_email(i.user_email) for i in self.interests]
        if len(emails) != len(set(emails)):
            raise ValidationError({"interests": ["A buyer can register only one interest per crop"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def list_for_sale(
        cls,
        name,
        quantity,
        owner_name,
        owner_email,
        image=None,
        location=None,
        price_per_unit=None,
    ):
        """List a new crop with an empty interest ledger."""
        now = datetime.now(UTC)

        crop = cls(
            name=name,
            image=image,
            location=location,
            price_per_unit=price_per_unit,
            quantity=quantity,
            owner=Owner(owner_name=owner_name, owner_email=normalize_email(owner_email)),
            status=CropStatus.LISTED.value,
            created_at=now,
            updated_at=now,
        )

        crop.raise_(
            CropListed(
                crop_id=str(crop.id),
                name=name,
                quantity=quantity,
                price_per_unit=price_per_unit,
                owner_name=owner_name,
                owner_email=crop.owner.owner_email,
                listed_at=now,
            )
        )

        return crop

    # -------------------------------------------------------------------
    # Ledger queries
    # -------------------------------------------------------------------
    @property
    def is_listed(self):
        return CropStatus(self.status) == CropStatus.LISTED

    def ledger(self):
        """Interests in submission order."""
        return sorted(self.interests or [], key=lambda i: i.sequence or 0)

    def interest_for(self, interest_id):
        return next(
            (i for i in (self.interests or []) if str(i.id) == str(interest_id)),
            None,
        )

    def interest_from(self, user_email):
        email = normalize_email(user_email)
        return next(
            (i for i in (self.interests or []) if normalize_email(i.user_email) == email),
            None,
        )

    # -------------------------------------------------------------------
    # Owner edits
    # -------------------------------------------------------------------
    def update_details(self, name=None, image=None, location=None, price_per_unit=None, quantity=None):
        """Apply an owner edit. Fields left as None keep their value."""
        now = datetime.now(UTC)
        previous_quantity = self.quantity

        with atomic_change(self):
            if name is not None:
                self.name = name
            if image is not None:
                self.image = image
            if location is not None:
                self.location = location
            if price_per_unit is not None:
                self.price_per_unit = price_per_unit
            if quantity is not None:
                self.quantity = quantity
            self.updated_at = now

        self.raise_(
            CropDetailsUpdated(
                crop_id=str(self.id),
                name=self.name,
                image=self.image,
                location=self.location,
                price_per_unit=self.price_per_unit,
                previous_quantity=previous_quantity,
                quantity=self.quantity,
                updated_at=now,
            )
        )

    def delist(self):
        """Withdraw the crop from the marketplace."""
        if not self.is_listed:
            raise ValidationError({"status": ["Crop is already delisted"]})

        now = datetime.now(UTC)
        self.status = CropStatus.DELISTED.value
        self.updated_at = now

        self.raise_(CropDelisted(crop_id=str(self.id), delisted_at=now))

    # -------------------------------------------------------------------
    # Interest submission
    # -------------------------------------------------------------------
    @staticmethod
    def new_interest(user_email, quantity, message=None, user_name=None):
        """Build a pending interest without attaching it to a ledger."""
        email = normalize_email(user_email)
        if "@" not in email:
            raise InvalidInput({"user_email": ["A valid email is required"]})
        if quantity is None or quantity <= 0:
            raise InvalidInput({"quantity": ["Quantity must be positive"]})

        return Interest(
            id=str(uuid4()),
            user_email=email,
            user_name=user_name,
            quantity=quantity,
            message=message,
            status=InterestStatus.PENDING.value,
            submitted_at=datetime.now(UTC),
        )

    def add_interest(self, interest):
        """Append a pending interest to the ledger. One per buyer."""
        if self.interest_from(interest.user_email) is not None:
            raise DuplicateInterest({"user_email": ["You have already sent interest for this crop"]})

        interest.sequence = max((i.sequence or 0 for i in self.interests or []), default=0) + 1
        self.add_interests(interest)
        self.updated_at = interest.submitted_at

        self.raise_(
            InterestSubmitted(
                crop_id=str(self.id),
                interest_id=str(interest.id),
                user_email=interest.user_email,
                user_name=interest.user_name,
                quantity=interest.quantity,
                message=interest.message,
                submitted_at=interest.submitted_at,
            )
        )
        return interest

    def submit_interest(self, user_email, quantity, message=None, user_name=None):
        """Register a buyer's interest in this crop."""
        return self.add_interest(self.new_interest(user_email, quantity, message=message, user_name=user_name))

    # -------------------------------------------------------------------
    # Decisions
    # -------------------------------------------------------------------
    def _pending_interest(self, interest_id):
        interest = self.interest_for(interest_id)
        if interest is None:
            raise NotFound({"interest_id": ["Interest not found"]})
        if not interest.is_pending:
            raise AlreadyDecided({"status": [f"Interest already {interest.status}"]})
        return interest

    def quantity_after(self, interest_id, decision, policy=OvercommitPolicy.CLAMP):
        """Compute the crop quantity that deciding ``interest_id`` would leave.

        Validates the decision against the ledger without changing anything.
        """
        interest = self._pending_interest(interest_id)
        status = parse_decision(decision)

        if status == InterestStatus.REJECTED:
            return self.quantity

        remaining = self.quantity - interest.quantity
        if remaining < 0 and OvercommitPolicy(policy) == OvercommitPolicy.REJECT:
            raise InsufficientQuantity(
                {"quantity": [f"Insufficient stock: {self.quantity} available, {interest.quantity} requested"]}
            )
        return max(remaining, 0)

    def record_decision(self, interest_id, decision, new_quantity):
        """Flip the interest's status and set the crop quantity as one change."""
        interest = self._pending_interest(interest_id)
        status = parse_decision(decision)

        now = datetime.now(UTC)
        previous_quantity = self.quantity

        with atomic_change(self):
            interest.status = status.value
            interest.decided_at = now
            self.quantity = new_quantity
            self.updated_at = now

        if status == InterestStatus.ACCEPTED:
            self.raise_(
                InterestAccepted(
                    crop_id=str(self.id),
                    interest_id=str(interest.id),
                    user_email=interest.user_email,
                    quantity=interest.quantity,
                    previous_crop_quantity=previous_quantity,
                    new_crop_quantity=new_quantity,
                    accepted_at=now,
                )
            )
        else:
            self.raise_(
                InterestRejected(
                    crop_id=str(self.id),
                    interest_id=str(interest.id),
                    user_email=interest.user_email,
                    quantity=interest.quantity,
                    rejected_at=now,
                )
            )

    def decide_interest(self, interest_id, decision, policy=OvercommitPolicy.CLAMP):
        """Accept or reject a pending interest."""
        new_quantity = self.quantity_after(interest_id, decision, policy)
        self.record_decision(interest_id, decision, new_quantity)
