"""Crop listing command.

The catalog validates incoming listings through ``ListCrop`` and persists the
new aggregate through its Catalog Store, so a swapped-in store sees every
crop it is later asked about.
"""

from protean.fields import Float, String

from marketplace.domain import marketplace


@marketplace.command(part_of="Crop")
class ListCrop:
    name: String(required=True, max_length=200)
    quantity: Float(required=True, min_value=0.0)
    owner_name: String(required=True, max_length=100)
    owner_email: String(required=True, max_length=254)
    image: String(max_length=500)
    location: String(max_length=200)
    price_per_unit: Float(min_value=0.0)
