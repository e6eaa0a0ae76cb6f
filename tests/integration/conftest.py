"""Fixtures for cross-domain tests that drive the full application.

Requests go through the app's domain-context middleware, so no context is
pushed here; both domains are reset after every test.
"""

import os

import pytest


@pytest.fixture(scope="session")
def _app(request):
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from app import app

    return app


@pytest.fixture()
def client(_app):
    from fastapi.testclient import TestClient

    return TestClient(_app)


@pytest.fixture(autouse=True)
def run_around_tests():
    yield

    from identity.domain import identity
    from marketplace.domain import marketplace
    from marketplace.store import reset_store

    reset_store()
    for domain in (identity, marketplace):
        with domain.domain_context():
            for _, provider in domain.providers.items():
                provider._data_reset()
            domain.event_store.store._data_reset()
