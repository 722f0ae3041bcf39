"""
End-to-end tests over the HTTP API.

Covers:
- The buyer/seller engagement flow from listing to completion
- Verified-seller gating for listings and pitches
- The daily pitch quota across UTC midnight
- Read idempotence and price round-trips
- Uploads, ratings, admin views and the error envelope
- Marketplace rules taken from the app's own settings
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest


def create_request(client, seller_id: int, price_cents: int = 8000, title: str = "Custom CLI") -> dict:
    resp = client.post(
        "/api/requests",
        json={
            "seller_id": seller_id,
            "title": title,
            "description": "Parse nginx logs into CSV",
            "price_cents": price_cents,
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def patch_status(client, request_id: int, status: str):
    return client.patch(f"/api/requests/{request_id}", json={"status": status})


PROJECT = {
    "title": "Log parser",
    "description": "A fast log parser",
    "price_cents": 5000,
    "project_type": "cli",
    "language_tags": ["python"],
}


class TestEngagementFlow:
    def test_full_flow(self, client, register, login, verified_seller):
        buyer = register("alice", email="alice@x.com")
        seller = verified_seller("sam")
        assert seller["verification_status"] == "verified"

        resp = client.post("/api/projects", json=PROJECT)
        assert resp.status_code == 201
        assert resp.json()["price_cents"] == 5000
        assert resp.json()["seller_id"] == seller["id"]

        login("alice")
        request = create_request(client, seller["id"], 8000)
        other = create_request(client, seller["id"], 1200, title="Something else")
        assert request["status"] == "pending"
        assert request["buyer_id"] == buyer["id"]

        login("sam")
        resp = patch_status(client, request["id"], "accepted")
        assert resp.status_code == 200
        assert resp.json()["status"] == "accepted"

        # Uploading against a request that is still pending is refused
        resp = client.post(
            "/api/uploads",
            json={"request_id": other["id"], "file_name": "out.zip", "file_path_ref": "s3://b/out.zip"},
        )
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "REQUEST_NOT_ACCEPTED"

        resp = client.post(
            "/api/uploads",
            json={"request_id": request["id"], "file_name": "cli.zip", "file_path_ref": "s3://b/cli.zip"},
        )
        assert resp.status_code == 201
        upload = resp.json()
        assert upload["status"] == "pending"
        assert upload["buyer_id"] == buyer["id"]

        login("alice")
        resp = client.get(f"/api/uploads/{request['id']}")
        assert [u["id"] for u in resp.json()] == [upload["id"]]
        assert client.get(f"/api/uploads/{other['id']}").json() == []

        resp = patch_status(client, request["id"], "completed")
        assert resp.status_code == 200
        assert resp.json()["status"] == "completed"

        login("sam")
        totals = client.get(f"/api/users/{seller['id']}/totals").json()
        assert totals["total_earned_cents"] == 8000
        assert totals["commission_cents"] == 800
        assert totals["net_earnings_cents"] == 7200

    def test_completed_request_is_frozen(self, client, register, login, verified_seller):
        register("alice")
        seller = verified_seller("sam")
        login("alice")
        request = create_request(client, seller["id"])
        login("sam")
        patch_status(client, request["id"], "accepted")
        login("alice")
        patch_status(client, request["id"], "completed")

        for status in ("pending", "accepted", "rejected"):
            resp = patch_status(client, request["id"], status)
            assert resp.status_code == 403
            assert resp.json()["error"]["code"] == "INVALID_TRANSITION"
        assert client.get(f"/api/requests/{request['id']}").json()["status"] == "completed"

    def test_buyer_cannot_accept_own_request(self, client, register, login, verified_seller):
        register("alice")
        seller = verified_seller("sam")
        login("alice")
        request = create_request(client, seller["id"])
        resp = patch_status(client, request["id"], "accepted")
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "INVALID_TRANSITION"

    def test_requests_are_private(self, client, register, login, verified_seller):
        register("alice")
        seller = verified_seller("sam")
        login("alice")
        request = create_request(client, seller["id"])
        register("eve")
        assert client.get(f"/api/requests/{request['id']}").status_code == 403
        assert client.get("/api/requests").json() == []
        assert client.get(f"/api/requests?sellerId={seller['id']}").status_code == 403


class TestVerifiedSellerGate:
    def test_unverified_seller_cannot_list(self, client, register):
        seller = register("newbie", role="seller")
        resp = client.post("/api/projects", json=PROJECT)
        assert resp.status_code == 403
        body = resp.json()["error"]
        assert body["code"] == "SELLER_NOT_VERIFIED"
        assert body["status"] == 403
        assert client.get(f"/api/projects?sellerId={seller['id']}").json() == []

    def test_buyer_cannot_list(self, client, register):
        register("alice")
        resp = client.post("/api/projects", json=PROJECT)
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "NOT_SELLER"

    def test_price_below_minimum_is_400(self, client, verified_seller):
        verified_seller("sam")
        resp = client.post("/api/projects", json={**PROJECT, "price_cents": 99})
        assert resp.status_code == 400
        error = resp.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"][0]["field"] == "price_cents"

    def test_sellers_directory(self, client, register, verified_seller):
        register("alice")
        register("newbie", role="both")
        verified_seller("sam")
        everyone = client.get("/api/sellers").json()
        assert [u["username"] for u in everyone] == ["newbie", "sam"]
        verified = client.get("/api/sellers?status=verified").json()
        assert [u["username"] for u in verified] == ["sam"]


class TestPitchQuotaOverHttp:
    def test_five_then_quota_then_midnight(self, client, clock, register, login, verified_seller):
        buyers = [register(f"buyer{i}") for i in range(6)]
        verified_seller("sam")
        clock.set(datetime(2026, 3, 10, 22, 0, tzinfo=timezone.utc))

        for buyer in buyers[:5]:
            resp = client.post("/api/pitches", json={"buyer_id": buyer["id"], "message": "I can help"})
            assert resp.status_code == 201, resp.text

        resp = client.post("/api/pitches", json={"buyer_id": buyers[5]["id"], "message": "I can help"})
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "QUOTA_EXCEEDED"
        assert len(client.get("/api/pitches").json()) == 5

        clock.set(datetime(2026, 3, 11, 0, 0, 1, tzinfo=timezone.utc))
        resp = client.post("/api/pitches", json={"buyer_id": buyers[5]["id"], "message": "I can help"})
        assert resp.status_code == 201

        login("buyer5")
        pitches = client.get("/api/pitches").json()
        assert len(pitches) == 1
        assert pitches[0]["buyer_id"] == buyers[5]["id"]

    def test_unverified_seller_cannot_pitch(self, client, register):
        buyer = register("alice")
        register("newbie", role="seller")
        resp = client.post("/api/pitches", json={"buyer_id": buyer["id"], "message": "Hi"})
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "SELLER_NOT_VERIFIED"


class TestReads:
    def test_get_user_is_idempotent(self, client, register):
        user = register("alice")
        first = client.get(f"/api/users/{user['id']}")
        second = client.get(f"/api/users/{user['id']}")
        assert first.status_code == 200
        assert first.content == second.content
        assert "password_hash" not in first.json()

    def test_get_user_requires_session(self, client, register):
        user = register("alice")
        client.post("/api/logout")
        assert client.get(f"/api/users/{user['id']}").status_code == 401

    def test_missing_user_is_404(self, client, register):
        register("alice")
        resp = client.get("/api/users/999")
        assert resp.status_code == 404
        assert resp.json() == {
            "error": {"code": "NOT_FOUND", "message": "User 999 not found", "status": 404}
        }

    def test_project_price_round_trip(self, client, verified_seller):
        seller = verified_seller("sam")
        created = client.post("/api/projects", json={**PROJECT, "price_cents": 1500}).json()

        single = client.get(f"/api/projects/{created['id']}").json()
        listed = client.get(f"/api/projects?sellerId={seller['id']}").json()
        assert single["price_cents"] == 1500
        assert [p["price_cents"] for p in listed] == [1500]

    def test_projects_are_public(self, client, verified_seller):
        verified_seller("sam")
        client.post("/api/projects", json=PROJECT)
        client.post("/api/logout")
        assert len(client.get("/api/projects").json()) == 1


class TestProfiles:
    def test_update_own_profile(self, client, register):
        user = register("alice")
        resp = client.patch(f"/api/users/{user['id']}", json={"display_name": "Alice A.", "role": "both"})
        assert resp.status_code == 200
        assert resp.json()["display_name"] == "Alice A."
        assert resp.json()["role"] == "both"
        assert resp.json()["verification_status"] == "active"

    def test_cannot_update_other_user(self, client, register):
        alice = register("alice")
        register("bob")
        resp = client.patch(f"/api/users/{alice['id']}", json={"display_name": "Hacked"})
        assert resp.status_code == 403

    def test_registering_as_admin_is_refused(self, client):
        resp = client.post(
            "/api/register",
            json={
                "username": "mallory",
                "email": "mallory@example.com",
                "password": "password123",
                "display_name": "Mallory",
                "role": "admin",
            },
        )
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "ADMIN_ROLE_FORBIDDEN"

    def test_duplicate_username_is_400(self, client, register):
        register("alice")
        client.post("/api/logout")
        resp = client.post(
            "/api/register",
            json={
                "username": "alice",
                "email": "alice2@example.com",
                "password": "password123",
                "display_name": "Alice",
            },
        )
        assert resp.status_code == 400
        assert resp.json()["error"]["message"] == "Username already exists"


class TestRatings:
    def _completed_engagement(self, client, register, login, verified_seller):
        buyer = register("alice")
        seller = verified_seller("sam")
        login("alice")
        request = create_request(client, seller["id"])
        login("sam")
        patch_status(client, request["id"], "accepted")
        login("alice")
        return buyer, seller, request

    def test_rate_completed_request(self, client, register, login, verified_seller):
        buyer, seller, request = self._completed_engagement(client, register, login, verified_seller)
        payload = {"seller_id": seller["id"], "request_id": request["id"], "rating_value": 5, "review": "Great"}

        resp = client.post("/api/ratings", json=payload)
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "ENGAGEMENT_NOT_COMPLETED"

        patch_status(client, request["id"], "completed")
        resp = client.post("/api/ratings", json=payload)
        assert resp.status_code == 201
        assert resp.json()["buyer_id"] == buyer["id"]

        resp = client.post("/api/ratings", json=payload)
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "CONFLICT"

        client.post("/api/logout")
        ratings = client.get(f"/api/ratings/{seller['id']}").json()
        assert [r["rating_value"] for r in ratings] == [5]

    def test_rating_value_range(self, client, register, verified_seller):
        seller = verified_seller("sam")
        register("alice")
        resp = client.post("/api/ratings", json={"seller_id": seller["id"], "rating_value": 6})
        assert resp.status_code == 400

    def test_buyer_cannot_be_rated(self, client, register):
        bob = register("bob")
        register("alice")
        resp = client.post("/api/ratings", json={"seller_id": bob["id"], "rating_value": 1})
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "TARGET_NOT_SELLER"

        client.post("/api/logout")
        assert client.get(f"/api/ratings/{bob['id']}").json() == []


class TestAdmin:
    def test_admin_views(self, client, register, login_admin):
        register("alice")
        seller = register("sam", role="seller")

        resp = client.get("/api/admin/users")
        assert resp.status_code == 403
        resp = client.patch(f"/api/admin/users/{seller['id']}/verify")
        assert resp.status_code == 403

        login_admin()
        users = client.get("/api/admin/users").json()
        assert [u["username"] for u in users] == ["admin", "alice", "sam"]

        stats = client.get("/api/admin/stats").json()
        assert stats["total_users"] == 3
        assert stats["sellers_awaiting_verification"] == 1
        assert stats["verified_sellers"] == 0

        resp = client.patch(f"/api/admin/users/{seller['id']}/verify")
        assert resp.json()["verification_status"] == "verified"
        assert client.get("/api/admin/stats").json()["verified_sellers"] == 1

    def test_verify_buyer_is_refused(self, client, register, login_admin):
        buyer = register("alice")
        login_admin()
        resp = client.patch(f"/api/admin/users/{buyer['id']}/verify")
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "TARGET_NOT_SELLER"


class TestAppSettings:
    """Marketplace rules come from the settings the app was created with."""

    @pytest.fixture
    def settings(self, settings):
        return settings.model_copy(update={"pitch_daily_limit": 2, "commission_percent": 20})

    def test_pitch_limit(self, client, register, verified_seller):
        buyers = [register(f"buyer{i}") for i in range(3)]
        verified_seller("sam")

        for buyer in buyers[:2]:
            resp = client.post("/api/pitches", json={"buyer_id": buyer["id"], "message": "Hi"})
            assert resp.status_code == 201, resp.text

        resp = client.post("/api/pitches", json={"buyer_id": buyers[2]["id"], "message": "Hi"})
        assert resp.status_code == 403
        error = resp.json()["error"]
        assert error["code"] == "QUOTA_EXCEEDED"
        assert error["details"]["limit"] == 2

    def test_commission_percent(self, client, register, login, login_admin, verified_seller):
        register("alice")
        seller = verified_seller("sam")
        login("alice")
        request = create_request(client, seller["id"], price_cents=1000)
        login("sam")
        assert patch_status(client, request["id"], "accepted").status_code == 200
        login("alice")
        assert patch_status(client, request["id"], "completed").status_code == 200

        login("sam")
        totals = client.get(f"/api/users/{seller['id']}/totals").json()
        assert totals["commission_cents"] == 200
        assert totals["net_earnings_cents"] == 800

        login_admin()
        assert client.get("/api/admin/stats").json()["commission_revenue_cents"] == 200
