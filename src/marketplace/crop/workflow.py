"""Interest workflow: submit, decide and list buyer interests.

Every mutation follows the same cycle: read a snapshot of the crop through
the Catalog Store, validate against the snapshot, then issue one guarded
atomic write. A write that loses a race reports CONFLICT; the workflow
re-reads and tries again, up to ``max_write_attempts`` times, before giving
up with ``Unavailable``. Re-reading also classifies the loss: a buyer whose
concurrent submission landed first gets ``DuplicateInterest``, and an entry
decided concurrently gets ``AlreadyDecided``.
"""

from dataclasses import asdict, dataclass
from datetime import datetime

from marketplace.config import WorkflowSettings
from marketplace.crop.crop import Crop, InterestStatus, normalize_email, parse_decision
from marketplace.crop.errors import (
    DuplicateInterest,
    InvalidInput,
    NotFound,
    StoreConflict,
    Unavailable,
)
from marketplace.store.port import WriteOutcome
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class InterestView:
    """An interest entry joined with the crop it was placed on."""

    interest_id: str
    user_email: str
    user_name: str | None
    quantity: float
    message: str | None
    status: str
    submitted_at: datetime | None
    decided_at: datetime | None
    crop_id: str
    crop_name: str
    image: str | None
    location: str | None
    price_per_unit: float | None
    owner_name: str | None
    owner_email: str | None

    @classmethod
    def of(cls, crop, interest) -> "InterestView":
        owner = crop.owner
        return cls(
            interest_id=str(interest.id),
            user_email=interest.user_email,
            user_name=interest.user_name,
            quantity=interest.quantity,
            message=interest.message,
            status=interest.status,
            submitted_at=interest.submitted_at,
            decided_at=interest.decided_at,
            crop_id=str(crop.id),
            crop_name=crop.name,
            image=crop.image,
            location=crop.location,
            price_per_unit=crop.price_per_unit,
            owner_name=owner.owner_name if owner else None,
            owner_email=owner.owner_email if owner else None,
        )

    def to_dict(self) -> dict:
        return asdict(self)


class InterestWorkflow:
    def __init__(self, store, settings: WorkflowSettings | None = None):
        self.store = store
        self.settings = settings if settings is not None else WorkflowSettings.from_env()

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _require_crop(self, crop_id):
        if not crop_id:
            raise InvalidInput({"crop_id": ["Crop id is required"]})
        crop = self.store.find_crop_by_id(crop_id)
        if crop is None:
            raise NotFound({"crop_id": [f"Crop {crop_id} not found"]})
        return crop

    def _check(self, outcome, crop_id):
        if outcome == WriteOutcome.SUCCESS:
            return
        if outcome == WriteOutcome.NOT_FOUND:
            raise NotFound({"crop_id": [f"Crop {crop_id} not found"]})
        raise StoreConflict(f"Concurrent write on crop {crop_id}")

    def _with_retries(self, crop_id, action, attempt):
        attempts = self.settings.max_write_attempts
        for number in range(1, attempts + 1):
            try:
                return attempt()
            except StoreConflict:
                logger.warning(
                    "Write conflict, retrying",
                    action=action,
                    crop_id=str(crop_id),
                    attempt=number,
                    max_attempts=attempts,
                )

        logger.error(
            "Write attempts exhausted",
            action=action,
            crop_id=str(crop_id),
            attempts=attempts,
        )
        raise Unavailable(crop_id, attempts)

    # -------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------
    def submit_interest(self, crop_id, user_email, quantity, message=None, user_name=None):
        """Append a pending interest for ``user_email`` to the crop's ledger.

        Quantity is not compared to the remaining stock; a crop may be
        oversubscribed and the owner decides which interests to honour.
        """
        interest = Crop.new_interest(user_email, quantity, message=message, user_name=user_name)

        def attempt():
            crop = self._require_crop(crop_id)
            if crop.interest_from(interest.user_email) is not None:
                raise DuplicateInterest({"user_email": ["You have already sent interest for this crop"]})
            self._check(self.store.atomic_append_interest(crop_id, interest), crop_id)
            return interest

        submitted = self._with_retries(crop_id, "submit_interest", attempt)
        logger.info(
            "Interest submitted",
            crop_id=str(crop_id),
            interest_id=str(submitted.id),
            user_email=submitted.user_email,
            quantity=submitted.quantity,
        )
        return submitted

    def decide_interest(self, crop_id, interest_id, decision):
        """Accept or reject a pending interest.

        The status flip and the quantity change land in one guarded write.
        The guard pins both the entry's status and the crop quantity the
        decision was computed from.
        """
        status = parse_decision(decision)
        policy = self.settings.overcommit_policy

        def attempt():
            crop = self._require_crop(crop_id)
            new_quantity = crop.quantity_after(interest_id, status, policy)
            outcome = self.store.atomic_update_interest_status_and_quantity(
                crop_id,
                interest_id,
                new_status=status,
                new_quantity=new_quantity,
                expected_current_status=InterestStatus.PENDING,
                expected_quantity=crop.quantity,
            )
            self._check(outcome, crop_id)
            return crop.quantity, new_quantity

        previous_quantity, new_quantity = self._with_retries(crop_id, "decide_interest", attempt)
        logger.info(
            "Interest decided",
            crop_id=str(crop_id),
            interest_id=str(interest_id),
            decision=status.value,
            previous_quantity=previous_quantity,
            new_quantity=new_quantity,
            policy=policy.value,
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def list_interests_for_crop(self, crop_id) -> list[InterestView]:
        """Owner-facing view of one crop's ledger, in submission order."""
        crop = self._require_crop(crop_id)
        return [InterestView.of(crop, interest) for interest in crop.ledger()]

    def list_interests_for_user(self, user_email) -> list[InterestView]:
        """Buyer-facing view of every interest ``user_email`` has placed."""
        email = normalize_email(user_email)
        if not email:
            raise InvalidInput({"user_email": ["User email is required"]})

        views = []
        for crop in self.store.find_crops():
            interest = crop.interest_from(email)
            if interest is not None:
                views.append(InterestView.of(crop, interest))
        return views
