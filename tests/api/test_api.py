"""
HTTP-level tests: routing, authentication and the error envelope.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from fitsocial.core.security import security_manager
from fitsocial.database import get_db
from fitsocial.main import create_app


def _auth(subject, name=None, role="user"):
    token = security_manager.create_access_token(
        subject, email=f"{subject}@example.com", name=name, role=role
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(db_session):
    app = create_app()

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest.mark.integration
class TestAPI:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["cache"]["connected"] is False
        assert "X-Request-ID" in response.headers

    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        response = await client.get("/api/v1/users/me")

        assert response.status_code in (401, 403)

    @pytest.mark.asyncio
    async def test_invalid_token(self, client):
        response = await client.get(
            "/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_first_request_provisions_user(self, client):
        headers = _auth("auth0|jane", name="Jane Doe")

        first = await client.get("/api/v1/users/me", headers=headers)
        second = await client.get("/api/v1/users/me", headers=headers)

        assert first.status_code == 200
        body = first.json()
        assert body["username"] == "janedoe"
        assert body["kind"] is None
        assert body["profile"] is None
        assert second.json()["id"] == body["id"]

    @pytest.mark.asyncio
    async def test_onboarding(self, client):
        response = await client.post(
            "/api/v1/users/me/onboarding",
            headers=_auth("auth0|jane", name="Jane Doe"),
            json={
                "profile": {"kind": "individual", "affiliation": "Ironworks"},
                "bio": "Early riser",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["kind"] == "individual"
        assert body["onboarding_complete"] is True
        assert body["bio"] == "Early riser"

    @pytest.mark.asyncio
    async def test_error_envelope(self, client):
        headers = _auth("auth0|jane", name="Jane Doe")
        me = (await client.get("/api/v1/users/me", headers=headers)).json()

        response = await client.post(f"/api/v1/social/follow/{me['id']}", headers=headers)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "SelfFollowError"
        assert body["message"] == "Cannot follow yourself"
        assert body["details"] == {}
        assert body["request_id"] == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_follow_flow(self, client):
        jane = _auth("auth0|jane", name="Jane Doe")
        john = _auth("auth0|john", name="John Roe")
        john_id = (await client.get("/api/v1/users/me", headers=john)).json()["id"]

        followed = await client.post(f"/api/v1/social/follow/{john_id}", headers=jane)
        duplicate = await client.post(f"/api/v1/social/follow/{john_id}", headers=jane)
        missing = await client.post("/api/v1/social/follow/9999", headers=jane)

        assert followed.status_code == 201
        assert followed.json() == {"success": True, "following": True}
        assert duplicate.status_code == 409
        assert duplicate.json()["error"] == "AlreadyFollowingError"
        assert missing.status_code == 404

        john_after = (await client.get("/api/v1/users/me", headers=john)).json()
        assert john_after["follower_count"] == 1

    @pytest.mark.asyncio
    async def test_manual_adjustment_needs_admin(self, client):
        response = await client.post(
            "/api/v1/activity",
            headers=_auth("auth0|jane", name="Jane Doe"),
            json={"kind": "manual_adjustment", "points": 500},
        )

        assert response.status_code == 403
        assert response.json()["error"] == "AuthorizationError"

    @pytest.mark.asyncio
    async def test_activity_moves_leaderboard(self, client):
        headers = _auth("auth0|jane", name="Jane Doe")
        await client.post(
            "/api/v1/users/me/onboarding",
            headers=headers,
            json={"profile": {"kind": "individual"}},
        )

        recorded = await client.post(
            "/api/v1/activity",
            headers=headers,
            json={"kind": "workout_posted", "points": 15},
        )
        board = await client.get("/api/v1/leaderboard?limit=5", headers=headers)

        assert recorded.status_code == 201
        assert board.status_code == 200
        entries = board.json()["entries"]
        assert entries[0]["user"]["username"] == "janedoe"
        assert entries[0]["activity_score"] == 15

    @pytest.mark.asyncio
    async def test_unknown_activity_kind(self, client):
        response = await client.post(
            "/api/v1/activity",
            headers=_auth("auth0|jane", name="Jane Doe"),
            json={"kind": "napping", "points": 5},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidActivityKindError"

    @pytest.mark.asyncio
    async def test_logged_workout_moves_leaderboard(self, client):
        headers = _auth("auth0|jane", name="Jane Doe")
        await client.post(
            "/api/v1/users/me/onboarding",
            headers=headers,
            json={"profile": {"kind": "individual"}},
        )

        logged = await client.post(
            "/api/v1/workouts",
            headers=headers,
            json={
                "resistance_details": [
                    {"exercise": "squat", "sets": 2, "reps": [5, 5], "weight": [100, 100]}
                ]
            },
        )
        history = await client.get("/api/v1/workouts/me", headers=headers)
        board = await client.get("/api/v1/leaderboard?limit=5", headers=headers)

        assert logged.status_code == 201
        assert logged.json()["score"] == 100
        assert [item["id"] for item in history.json()] == [logged.json()["workout_id"]]
        assert board.json()["entries"][0]["activity_score"] == 100

    @pytest.mark.asyncio
    async def test_empty_workout_rejected(self, client):
        response = await client.post(
            "/api/v1/workouts", headers=_auth("auth0|jane", name="Jane Doe"), json={}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "EmptyWorkoutError"

    @pytest.mark.asyncio
    async def test_search_by_kind(self, client):
        jane = _auth("auth0|jane", name="Jane Doe")
        await client.post(
            "/api/v1/users/me/onboarding",
            headers=jane,
            json={"profile": {"kind": "individual"}},
        )
        gym = _auth("auth0|janes-gym", name="Janes Gym")
        await client.post(
            "/api/v1/users/me/onboarding", headers=gym, json={"profile": {"kind": "gym"}}
        )

        everyone = await client.get("/api/v1/users/search?q=jane", headers=jane)
        gyms = await client.get("/api/v1/users/search?q=jane&kind=gym", headers=jane)

        assert {user["username"] for user in everyone.json()} == {"janedoe", "janesgym"}
        assert [user["username"] for user in gyms.json()] == ["janesgym"]
