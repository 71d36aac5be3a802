"""
API tests for the bearer-token gate and the profile endpoints.
"""

import pytest
from datetime import timedelta

from fastapi import status
from jose import jwt

from app.config import settings
from app.core.auth import create_reset_token, issue_token


class TestBearerGate:
    """Every rejection from the gate is the same 403."""

    INVALID = {"message": "Invalid token."}

    @pytest.mark.asyncio
    async def test_no_authorization_header(self, test_client):
        response = await test_client.get("/profile")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == self.INVALID

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "header",
        ["", "Bearer", "Bearer ", "Bearer invalid.token", "Basic dXNlcjpwYXNz", "Token abc"],
    )
    async def test_malformed_header(self, test_client, header):
        response = await test_client.get("/profile", headers={"Authorization": header})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == self.INVALID

    @pytest.mark.asyncio
    async def test_expired_token(self, test_client, test_user):
        token = issue_token({"user": {"id": test_user.id}}, timedelta(minutes=-1))

        response = await test_client.get("/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == self.INVALID

    @pytest.mark.asyncio
    async def test_token_without_expiry(self, test_client, test_user):
        """Test that a correctly signed token lacking exp is refused."""
        token = jwt.encode(
            {"user": {"id": test_user.id}},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )

        response = await test_client.get("/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == self.INVALID

    @pytest.mark.asyncio
    async def test_wrong_secret(self, test_client, test_user):
        token = jwt.encode({"user": {"id": test_user.id}}, "other-secret", algorithm="HS256")

        response = await test_client.get("/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_user_deleted_after_issuance(self, test_client):
        """Test that a valid token for a missing user looks like any bad token."""
        token = issue_token({"user": {"id": "deleted-user"}}, timedelta(minutes=5))

        response = await test_client.get("/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == self.INVALID

    @pytest.mark.asyncio
    async def test_reset_token_is_not_a_session(self, test_client, test_user):
        token = create_reset_token(test_user.email)

        response = await test_client.get("/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == self.INVALID

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, path",
        [
            ("GET", "/profile"),
            ("PATCH", "/update-profile"),
            ("GET", "/posts"),
            ("POST", "/posts"),
            ("GET", "/posts/bookmarked"),
            ("PUT", "/posts/123/toggle-bookmark"),
            ("GET", "/products"),
            ("GET", "/products/pen"),
        ],
    )
    async def test_protected_endpoints(self, test_client, method, path):
        response = await test_client.request(method, path, json={})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == self.INVALID

    @pytest.mark.asyncio
    async def test_gate_reads_current_user_row(self, test_client, test_user, db_session):
        """Test that the gate loads the user, not the token's snapshot."""
        token = issue_token(
            {"user": {"id": test_user.id, "first_name": "Stale"}}, timedelta(minutes=5)
        )

        response = await test_client.get("/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.json()["user"]["first_name"] == test_user.first_name


class TestProfileEndpoint:
    """Tests for GET /profile."""

    @pytest.mark.asyncio
    async def test_get_profile(self, test_client, test_user, auth_headers):
        response = await test_client.get("/profile", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "message": "Successfully fetched.",
            "user": {
                "id": test_user.id,
                "first_name": "Test",
                "last_name": "User",
                "email": "test@example.com",
                "avatar": None,
            },
        }


class TestUpdateProfileEndpoint:
    """Tests for PATCH /update-profile."""

    @pytest.mark.asyncio
    async def test_partial_update(self, test_client, test_user, auth_headers, mock_dashx):
        response = await test_client.patch(
            "/update-profile", headers=auth_headers, json={"first_name": "New"}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["message"] == "Profile updated."
        assert data["user"]["first_name"] == "New"
        assert data["user"]["last_name"] == "User"
        assert data["user"]["email"] == "test@example.com"

        mock_dashx.identify.assert_awaited_once_with(
            test_user.id,
            {"firstName": "New", "lastName": "User", "email": "test@example.com"},
        )

    @pytest.mark.asyncio
    async def test_empty_string_is_a_value(self, test_client, auth_headers):
        """Test that an empty string is written, not treated as absent."""
        response = await test_client.patch(
            "/update-profile", headers=auth_headers, json={"last_name": ""}
        )

        assert response.json()["user"]["last_name"] == ""

    @pytest.mark.asyncio
    async def test_set_and_clear_avatar(self, test_client, auth_headers):
        set_response = await test_client.patch(
            "/update-profile", headers=auth_headers, json={"avatar": "https://cdn.test/a.png"}
        )
        keep_response = await test_client.patch(
            "/update-profile", headers=auth_headers, json={"first_name": "Still"}
        )
        clear_response = await test_client.patch(
            "/update-profile", headers=auth_headers, json={"avatar": None}
        )

        assert set_response.json()["user"]["avatar"] == "https://cdn.test/a.png"
        assert keep_response.json()["user"]["avatar"] == "https://cdn.test/a.png"
        assert clear_response.json()["user"]["avatar"] is None

    @pytest.mark.asyncio
    async def test_null_name_rejected(self, test_client, auth_headers):
        response = await test_client.patch(
            "/update-profile", headers=auth_headers, json={"first_name": None}
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "first_name" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_empty_body_changes_nothing(self, test_client, auth_headers, mock_dashx):
        response = await test_client.patch("/update-profile", headers=auth_headers, json={})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"]["first_name"] == "Test"
        mock_dashx.identify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_change_email(self, test_client, auth_headers):
        response = await test_client.patch(
            "/update-profile", headers=auth_headers, json={"email": "fresh@example.com"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"]["email"] == "fresh@example.com"

    @pytest.mark.asyncio
    async def test_same_email_is_not_a_conflict(self, test_client, test_user, auth_headers):
        response = await test_client.patch(
            "/update-profile", headers=auth_headers, json={"email": test_user.email}
        )

        assert response.status_code == status.HTTP_200_OK

    @pytest.mark.asyncio
    async def test_email_taken(self, test_client, other_user, auth_headers):
        response = await test_client.patch(
            "/update-profile", headers=auth_headers, json={"email": other_user.email}
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json() == {"message": "Email already exists."}
