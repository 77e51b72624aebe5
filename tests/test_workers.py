"""
Tests for the service catalogue and worker discovery, profiles and ratings.
"""

from datetime import timedelta

import pytest

from app.core import security
from app.db.db_models import utcnow
from app.api.endpoints.workers import apply_rating
from app.models.worker import WorkerProfile
from conftest import API, register, login


# =============================================================================
# Service catalogue
# =============================================================================

class TestServices:

    def test_default_catalogue(self, client):
        response = client.get(f"{API}/services/")

        assert response.status_code == 200
        services = response.json()
        assert len(services) == 10
        assert services[0] == {
            "id": "plumber",
            "name": "Plumber",
            "icon": "wrench",
            "description": "Pipe repairs, leaks, installations",
        }
        ids = [s["id"] for s in services]
        assert "gas-repair" in ids and "appliance-repair" in ids

    def test_catalogue_is_stable_across_reads(self, client):
        first = client.get(f"{API}/services/").json()
        second = client.get(f"{API}/services/").json()
        assert first == second


# =============================================================================
# Discovery
# =============================================================================

class TestWorkerDiscovery:

    def test_workers_by_service_path(self, client, worker):
        response = client.get(f"{API}/workers/service/plumber")

        assert response.status_code == 200
        emails = [w["email"] for w in response.json()]
        assert emails == ["ravi.plumber@example.com", "kiran.plumber@example.com"]

    def test_workers_by_occupation_query(self, client):
        response = client.get(f"{API}/workers/", params={"occupation": "electrician"})

        assert response.status_code == 200
        assert [w["name"] for w in response.json()] == ["Sita Rao"]

    def test_workers_by_service_type_query(self, client):
        response = client.get(f"{API}/workers/", params={"service_type": "carpenter"})
        assert [w["name"] for w in response.json()] == ["Amit Sharma"]

    def test_unknown_service_returns_empty_list(self, client):
        response = client.get(f"{API}/workers/service/astronaut")
        assert response.status_code == 200
        assert response.json() == []

    def test_worker_with_several_services_found_under_each(self, client):
        register(
            client, "multi@example.com", role="worker",
            service_types=["painter", "cleaner"],
        )

        painters = client.get(f"{API}/workers/service/painter").json()
        cleaners = client.get(f"{API}/workers/service/cleaner").json()
        assert [w["email"] for w in painters] == ["multi@example.com"]
        assert [w["email"] for w in cleaners] == ["multi@example.com"]

    def test_worker_listing_hides_password(self, client):
        worker = client.get(f"{API}/workers/service/plumber").json()[0]
        assert "password" not in worker
        assert "password_hash" not in worker

    def test_filtered_listing_ignores_stale_token(self, client, worker):
        worker_id, _ = worker
        token = security.create_access_token(
            worker_id, role="worker", email="kiran.plumber@example.com",
            expires_delta=timedelta(minutes=-1),
        )
        response = client.get(
            f"{API}/workers/",
            params={"service_type": "plumber"},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 200
        assert worker_id in [w["id"] for w in response.json()]

    def test_unfiltered_listing_with_stale_token_is_rejected(self, client):
        response = client.get(f"{API}/workers/", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_unfiltered_listing_requires_login(self, client):
        response = client.get(f"{API}/workers/")
        assert response.status_code == 401

    def test_unfiltered_listing_requires_admin(self, client, customer_headers):
        response = client.get(f"{API}/workers/", headers=customer_headers)
        assert response.status_code == 403

    def test_admin_lists_all_workers(self, client, admin_headers, worker):
        response = client.get(f"{API}/workers/", headers=admin_headers)

        assert response.status_code == 200
        assert len(response.json()) == 4

    def test_missing_worker(self, client):
        response = client.get(f"{API}/workers/nobody")
        assert response.status_code == 404


# =============================================================================
# Worker profile management
# =============================================================================

class TestWorkerProfile:

    def test_worker_updates_own_profile(self, client, worker):
        worker_id, headers = worker
        response = client.put(
            f"{API}/workers/me",
            json={
                "bio": "Leak detection specialist",
                "hourly_rate": 700,
                "service_types": ["plumber", "gas-repair"],
                "previous_works": ["Bathroom refit, Kondapur"],
            },
            headers=headers,
        )

        assert response.status_code == 200
        profile = client.get(f"{API}/workers/{worker_id}").json()
        assert profile["bio"] == "Leak detection specialist"
        assert profile["hourly_rate"] == 700
        assert profile["advance_payment"] == 250
        assert profile["service_types"] == ["plumber", "gas-repair"]
        assert profile["previous_works"] == ["Bathroom refit, Kondapur"]

        gas = client.get(f"{API}/workers/service/gas-repair").json()
        assert [w["id"] for w in gas] == [worker_id]

    def test_worker_cannot_clear_services(self, client, worker):
        _, headers = worker
        response = client.put(f"{API}/workers/me", json={"service_types": []}, headers=headers)
        assert response.status_code == 400

    def test_customer_cannot_use_worker_profile_endpoint(self, client, customer_headers):
        response = client.put(f"{API}/workers/me", json={"bio": "x"}, headers=customer_headers)
        assert response.status_code == 403

    def test_admin_verifies_worker(self, client, admin_headers, worker):
        worker_id, _ = worker
        response = client.put(
            f"{API}/workers/{worker_id}/verify", json={"verified": True}, headers=admin_headers
        )

        assert response.status_code == 200
        assert client.get(f"{API}/workers/{worker_id}").json()["verified"] is True

    def test_only_admin_verifies(self, client, worker):
        worker_id, headers = worker
        response = client.put(f"{API}/workers/{worker_id}/verify", json={}, headers=headers)
        assert response.status_code == 403


# =============================================================================
# Ratings
# =============================================================================

class TestRatings:

    def test_rating_updates_running_average(self, client, customer_headers, worker):
        worker_id, _ = worker
        register(client, "second@example.com")
        other_headers = login(client, "second@example.com")

        first = client.post(
            f"{API}/workers/{worker_id}/rating",
            json={"rating": 5, "review": "Fixed it in 20 minutes"},
            headers=customer_headers,
        )
        assert first.status_code == 200
        assert first.json()["rating"] == 5
        assert first.json()["total_ratings"] == 1

        second = client.post(
            f"{API}/workers/{worker_id}/rating", json={"rating": 2}, headers=other_headers
        )
        assert second.status_code == 200

        profile = client.get(f"{API}/workers/{worker_id}").json()
        assert profile["rating"] == pytest.approx(3.5)
        assert profile["total_ratings"] == 2
        assert [r["rating"] for r in profile["reviews"]] == [5, 2]
        assert profile["reviews"][0]["review"] == "Fixed it in 20 minutes"

    @pytest.mark.parametrize("value", [0, 6])
    def test_rating_out_of_range(self, client, customer_headers, worker, value):
        worker_id, _ = worker
        response = client.post(
            f"{API}/workers/{worker_id}/rating", json={"rating": value}, headers=customer_headers
        )
        assert response.status_code == 422

    def test_worker_cannot_rate_self(self, client, worker):
        worker_id, headers = worker
        response = client.post(
            f"{API}/workers/{worker_id}/rating", json={"rating": 5}, headers=headers
        )
        assert response.status_code == 400

    def test_rating_missing_worker(self, client, customer_headers):
        response = client.post(
            f"{API}/workers/nobody/rating", json={"rating": 4}, headers=customer_headers
        )
        assert response.status_code == 404

    def test_rating_requires_login(self, client, worker):
        worker_id, _ = worker
        response = client.post(f"{API}/workers/{worker_id}/rating", json={"rating": 4})
        assert response.status_code == 401


class TestApplyRating:
    """The running-average arithmetic on its own."""

    def _worker(self, rating=0.0, total=0):
        return WorkerProfile(
            id="w1", user_id="w1", name="W", email="w@example.com",
            hourly_rate=500, advance_payment=200, available_times="9 AM - 6 PM",
            rating=rating, total_ratings=total, created_at=utcnow(),
        )

    def test_first_rating(self):
        worker = apply_rating(self._worker(), "u1", 4, None)
        assert worker.rating == 4
        assert worker.total_ratings == 1
        assert len(worker.reviews) == 1

    def test_average_with_history(self):
        worker = apply_rating(self._worker(rating=4.0, total=3), "u1", 2, "late")
        assert worker.rating == pytest.approx(3.5)
        assert worker.total_ratings == 4
        assert worker.reviews[-1].review == "late"

    def test_input_profile_is_untouched(self):
        profile = self._worker()
        apply_rating(profile, "u1", 5, None)
        assert profile.total_ratings == 0
        assert profile.reviews == []
