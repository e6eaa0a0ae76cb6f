"""Crop catalog: listing, browsing and owner edits."""

from marketplace.crop.crop import Crop, normalize_email
from marketplace.crop.errors import InvalidInput, NotFound
from marketplace.crop.listing import ListCrop
from marketplace.store.port import WriteOutcome
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)

EDITABLE_FIELDS = ("name", "image", "location", "price_per_unit", "quantity")


class CropCatalog:
    LATEST_LIMIT = 6

    def __init__(self, store):
        self.store = store

    def list_crop(
        self,
        name,
        quantity,
        owner_name,
        owner_email,
        image=None,
        location=None,
        price_per_unit=None,
    ) -> str:
        """List a new crop and return its id."""
        command = ListCrop(
            name=name,
            quantity=quantity,
            owner_name=owner_name,
            owner_email=owner_email,
            image=image,
            location=location,
            price_per_unit=price_per_unit,
        )
        crop = Crop.list_for_sale(
            name=command.name,
            quantity=command.quantity,
            owner_name=command.owner_name,
            owner_email=command.owner_email,
            image=command.image,
            location=command.location,
            price_per_unit=command.price_per_unit,
        )
        self.store.add_crop(crop)

        crop_id = str(crop.id)
        logger.info("Crop listed", crop_id=crop_id, owner_email=crop.owner.owner_email)
        return crop_id

    def get(self, crop_id):
        crop = self.store.find_crop_by_id(crop_id)
        if crop is None:
            raise NotFound({"crop_id": [f"Crop {crop_id} not found"]})
        return crop

    def search(self, term=None):
        """Listed crops whose name contains ``term``, ignoring case."""
        crops = self.store.find_crops()
        if not term:
            return crops
        needle = term.strip().lower()
        return [crop for crop in crops if needle in (crop.name or "").lower()]

    def latest(self, limit=LATEST_LIMIT):
        crops = sorted(self.store.find_crops(), key=lambda c: c.created_at, reverse=True)
        return crops[:limit]

    def owned_by(self, owner_email):
        email = normalize_email(owner_email)
        return [crop for crop in self.store.find_crops() if crop.owner.owner_email == email]

    def update(self, crop_id, **changes):
        """Apply an owner edit. ``None`` values are ignored."""
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise InvalidInput({field: ["Field cannot be edited"] for field in sorted(unknown)})
        changes = {field: value for field, value in changes.items() if value is not None}
        if not changes:
            raise InvalidInput({"crop": ["No changes supplied"]})

        outcome = self.store.atomic_update_crop(crop_id, changes)
        if outcome == WriteOutcome.NOT_FOUND:
            raise NotFound({"crop_id": [f"Crop {crop_id} not found"]})

        logger.info("Crop updated", crop_id=str(crop_id), fields=sorted(changes))
        return self.get(crop_id)

    def delist(self, crop_id):
        outcome = self.store.atomic_delist_crop(crop_id)
        if outcome == WriteOutcome.NOT_FOUND:
            raise NotFound({"crop_id": [f"Crop {crop_id} not found"]})
        logger.info("Crop delisted", crop_id=str(crop_id))
