"""Integration tests for Marketplace API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from marketplace.api import account_router, crop_router, register_error_handlers
from marketplace.store import get_store
from marketplace.store.port import WriteOutcome


@pytest.fixture()
def app():
    app = FastAPI()
    app.include_router(crop_router)
    app.include_router(account_router)
    register_error_handlers(app)
    return app


@pytest.fixture()
def client(app):
    return TestClient(app)


def _list_crop(client, **overrides):
    defaults = {
        "name": "Basmati Rice",
        "quantity": 100,
        "owner_name": "Ravi Kumar",
        "owner_email": "farmer@example.com",
        "location": "Karnal",
        "price_per_unit": 42.0,
        "image": "https://cdn.example.com/rice.jpg",
    }
    defaults.update(overrides)
    response = client.post("/crops", json=defaults)
    assert response.status_code == 201
    return response.json()["crop_id"]


def _submit(client, crop_id, **overrides):
    defaults = {"user_email": "buyer@example.com", "user_name": "Meera", "quantity": 30}
    defaults.update(overrides)
    return client.post(f"/crops/{crop_id}/interests", json=defaults)


class TestCropAPI:
    def test_list_and_fetch(self, client):
        crop_id = _list_crop(client)

        response = client.get(f"/crops/{crop_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Basmati Rice"
        assert body["quantity"] == 100
        assert body["owner_email"] == "farmer@example.com"
        assert body["status"] == "listed"

    def test_unknown_crop_404(self, client):
        response = client.get("/crops/no-such-crop")
        assert response.status_code == 404
        assert response.json() == {"error": {"crop_id": ["Crop no-such-crop not found"]}}

    def test_search(self, client):
        _list_crop(client, name="Basmati Rice")
        _list_crop(client, name="Wheat")

        response = client.get("/crops", params={"search": "rice"})

        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == ["Basmati Rice"]

    def test_latest(self, client):
        for n in range(7):
            _list_crop(client, name=f"Crop {n}")

        response = client.get("/crops/latest")

        assert response.status_code == 200
        assert len(response.json()) == 6

    def test_my_crops(self, client):
        _list_crop(client, owner_email="ravi@example.com")
        _list_crop(client, owner_email="asha@example.com")

        response = client.get("/my-crops/ravi@example.com")

        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_patch(self, client):
        crop_id = _list_crop(client)

        response = client.patch(f"/crops/{crop_id}", json={"quantity": 80, "price_per_unit": 40})

        assert response.status_code == 200
        assert response.json()["quantity"] == 80
        assert response.json()["price_per_unit"] == 40

    def test_delete_delists(self, client):
        crop_id = _list_crop(client)

        assert client.delete(f"/crops/{crop_id}").status_code == 200
        assert client.get(f"/crops/{crop_id}").status_code == 404
        assert client.delete(f"/crops/{crop_id}").status_code == 404

    def test_missing_field_is_400(self, client):
        response = client.post("/crops", json={"name": "Rice"})
        assert response.status_code == 400
        assert "quantity" in response.json()["error"]


class TestInterestAPI:
    def test_submit_returns_201(self, client):
        crop_id = _list_crop(client)

        response = _submit(client, crop_id)

        assert response.status_code == 201
        assert response.json()["status"] == "pending"
        assert response.json()["interest_id"]

    def test_duplicate_is_400(self, client):
        crop_id = _list_crop(client)
        _submit(client, crop_id)

        response = _submit(client, crop_id, quantity=5)

        assert response.status_code == 400
        assert len(client.get(f"/crops/{crop_id}/interests").json()) == 1

    def test_submit_to_unknown_crop_is_404(self, client):
        assert _submit(client, "no-such-crop").status_code == 404

    def test_non_numeric_quantity_is_400(self, client):
        crop_id = _list_crop(client)
        response = _submit(client, crop_id, quantity="lots")
        assert response.status_code == 400

    def test_zero_quantity_is_400(self, client):
        crop_id = _list_crop(client)
        assert _submit(client, crop_id, quantity=0).status_code == 400

    def test_accept_draws_down_quantity(self, client):
        crop_id = _list_crop(client, quantity=100)
        interest_id = _submit(client, crop_id, quantity=30).json()["interest_id"]

        response = client.put(f"/crops/{crop_id}/interests/{interest_id}", json={"status": "accepted"})

        assert response.status_code == 200
        assert client.get(f"/crops/{crop_id}").json()["quantity"] == 70
        (entry,) = client.get(f"/crops/{crop_id}/interests").json()
        assert entry["status"] == "accepted"

    def test_second_decision_is_400(self, client):
        crop_id = _list_crop(client)
        interest_id = _submit(client, crop_id).json()["interest_id"]
        client.put(f"/crops/{crop_id}/interests/{interest_id}", json={"status": "rejected"})

        response = client.put(f"/crops/{crop_id}/interests/{interest_id}", json={"status": "accepted"})

        assert response.status_code == 400
        assert client.get(f"/crops/{crop_id}").json()["quantity"] == 100

    def test_bad_decision_is_400(self, client):
        crop_id = _list_crop(client)
        interest_id = _submit(client, crop_id).json()["interest_id"]

        response = client.put(f"/crops/{crop_id}/interests/{interest_id}", json={"status": "maybe"})

        assert response.status_code == 400
        assert "status" in response.json()["error"]
        assert client.get(f"/crops/{crop_id}/interests").json()[0]["status"] == "pending"

    def test_unknown_interest_is_404(self, client):
        crop_id = _list_crop(client)
        response = client.put(f"/crops/{crop_id}/interests/missing", json={"status": "accepted"})
        assert response.status_code == 404
        assert response.json() == {"error": {"interest_id": ["Interest not found"]}}

    def test_buyer_views(self, client):
        rice = _list_crop(client, name="Rice")
        wheat = _list_crop(client, name="Wheat")
        _submit(client, rice)
        _submit(client, wheat)

        by_path = client.get("/my-interests/buyer@example.com")
        by_query = client.get("/interests", params={"user_email": "buyer@example.com"})

        assert by_path.status_code == 200
        assert sorted(i["crop_name"] for i in by_path.json()) == ["Rice", "Wheat"]
        assert len(by_query.json()) == 2
        assert by_path.json()[0]["owner_email"] == "farmer@example.com"


class _AlwaysConflictingStore:
    def __init__(self, inner):
        self.inner = inner

    def find_crop_by_id(self, crop_id):
        return self.inner.find_crop_by_id(crop_id)

    def atomic_append_interest(self, crop_id, interest):
        return WriteOutcome.CONFLICT


class TestUnavailable:
    def test_exhausted_retries_is_503(self, app, client):
        crop_id = _list_crop(client)
        contended = _AlwaysConflictingStore(get_store())
        app.dependency_overrides[get_store] = lambda: contended

        response = _submit(client, crop_id)

        assert response.status_code == 503
        assert response.headers["Retry-After"] == "1"
        assert "error" in response.json()


class _ListingRecorder:
    def __init__(self, inner):
        self.inner = inner
        self.added = []

    def add_crop(self, crop):
        self.added.append(str(crop.id))
        self.inner.add_crop(crop)

    def find_crop_by_id(self, crop_id):
        return self.inner.find_crop_by_id(crop_id)


class TestInjectedStore:
    def test_new_listing_goes_to_the_injected_store(self, app, client):
        recorder = _ListingRecorder(get_store())
        app.dependency_overrides[get_store] = lambda: recorder

        crop_id = _list_crop(client)

        assert recorder.added == [crop_id]
        assert client.get(f"/crops/{crop_id}").json()["name"] == "Basmati Rice"
