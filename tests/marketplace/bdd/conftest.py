"""Shared BDD fixtures and step definitions for the Marketplace domain."""

import pytest
from marketplace.config import WorkflowSettings
from marketplace.crop.crop import OvercommitPolicy
from marketplace.crop.workflow import InterestWorkflow
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then


@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


@pytest.fixture()
def settings():
    """Mutable holder so a Given step can switch the stock policy."""
    return {"policy": OvercommitPolicy.CLAMP}


@pytest.fixture()
def workflow_for(store, settings):
    def _build():
        return InterestWorkflow(store, WorkflowSettings(overcommit_policy=settings["policy"]))

    return _build


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("a crop with quantity {quantity:g}"), target_fixture="crop_id")
def crop_with_quantity(listed_crop, quantity):
    return listed_crop(quantity=float(quantity))


@given(
    parsers.cfparse('a crop with quantity {quantity:g} under the "{policy}" policy'),
    target_fixture="crop_id",
)
def crop_with_policy(listed_crop, settings, quantity, policy):
    settings["policy"] = OvercommitPolicy(policy)
    return listed_crop(quantity=float(quantity))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the crop quantity is {quantity:g}"))
def crop_quantity_is(store, crop_id, quantity):
    assert store.find_crop_by_id(crop_id).quantity == float(quantity)


@then(parsers.cfparse('the interest from "{email}" is "{status}"'))
def interest_status_is(store, crop_id, email, status):
    assert store.find_crop_by_id(crop_id).interest_from(email).status == status


@then(parsers.cfparse('the operation fails with "{error_name}"'))
def operation_fails_with(error, error_name):
    assert error["exc"] is not None
    assert isinstance(error["exc"], ValidationError)
    assert type(error["exc"]).__name__ == error_name


@then(parsers.cfparse("the ledger holds {count:d} interest"))
def ledger_holds(store, crop_id, count):
    assert len(store.find_crop_by_id(crop_id).interests) == count
