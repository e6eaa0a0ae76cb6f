"""Domain events for the Crop aggregate.

All events are versioned, immutable facts representing state changes.
"""

from protean.fields import DateTime, Float, Identifier, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Crop")
class CropListed:
    """A producer listed a crop for sale."""

    __version__ = 1

    crop_id = Identifier(required=True)
    name = String(required=True)
    quantity = Float(required=True)
    price_per_unit = Float()
    owner_name = String(required=True)
    owner_email = String(required=True)
    listed_at = DateTime(required=True)


@marketplace.event(part_of="Crop")
class CropDetailsUpdated:
    """The owner edited a crop's descriptive attributes or stock."""

    __version__ = 1

    crop_id = Identifier(required=True)
    name = String(required=True)
    image = String()
    location = String()
    price_per_unit = Float()
    previous_quantity = Float(required=True)
    quantity = Float(required=True)
    updated_at = DateTime(required=True)


@marketplace.event(part_of="Crop")
class CropDelisted:
    """The owner withdrew a crop from the marketplace."""

    __version__ = 1

    crop_id = Identifier(required=True)
    delisted_at = DateTime(required=True)


@marketplace.event(part_of="Crop")
class InterestSubmitted:
    """A buyer registered interest in a quantity of a crop."""

    __version__ = 1

    crop_id = Identifier(required=True)
    interest_id = Identifier(required=True)
    user_email = String(required=True)
    user_name = String()
    quantity = Float(required=True)
    message = Text()
    submitted_at = DateTime(required=True)


@marketplace.event(part_of="Crop")
class InterestAccepted:
    """The owner accepted an interest; stock was drawn down."""

    __version__ = 1

    crop_id = Identifier(required=True)
    interest_id = Identifier(required=True)
    user_email = String(required=True)
    quantity = Float(required=True)
    previous_crop_quantity = Float(required=True)
    new_crop_quantity = Float(required=True)
    accepted_at = DateTime(required=True)


@marketplace.event(part_of="Crop")
class InterestRejected:
    """The owner rejected an interest."""

    __version__ = 1

    crop_id = Identifier(required=True)
    interest_id = Identifier(required=True)
    user_email = String(required=True)
    quantity = Float(required=True)
    rejected_at = DateTime(required=True)
