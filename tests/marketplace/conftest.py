import os

import pytest


@pytest.fixture(scope="session")
def _marketplace_domain(request):
    """Initialize the marketplace domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from marketplace.domain import marketplace

    marketplace.init()
    return marketplace


@pytest.fixture(autouse=True)
def run_around_tests(_marketplace_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _marketplace_domain.domain_context()
    ctx.push()

    yield

    from marketplace.store import reset_store
    from protean import current_domain

    reset_store()

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture()
def store(_marketplace_domain):
    from marketplace.store.repository_adapter import RepositoryCatalogStore

    return RepositoryCatalogStore(_marketplace_domain)


@pytest.fixture()
def listed_crop(store):
    """Persist a crop with 100 units and an empty ledger."""
    from marketplace.crop.crop import Crop

    def _list(quantity=100.0, name="Basmati Rice", owner_email="farmer@example.com", **kwargs):
        crop = Crop.list_for_sale(
            name=name,
            quantity=quantity,
            owner_name=kwargs.pop("owner_name", "Ravi Kumar"),
            owner_email=owner_email,
            location=kwargs.pop("location", "Karnal"),
            price_per_unit=kwargs.pop("price_per_unit", 42.0),
            **kwargs,
        )
        store.add_crop(crop)
        return str(crop.id)

    return _list
