"""
Realty CRM API - Route Tests
==============================

What:  HTTP-level tests for /api/v1/clients, /api/v1/transactions and health.
How:   httpx AsyncClient over ASGITransport. Gate tests replace the DB session
       with a mock and assert it was never used; end-to-end tests run against
       a real SQLite schema (the `database` fixture).

What we test:
    ✅ Gate order: 401 before 403 before 400, none of them touching the DB
    ✅ Error bodies and the WWW-Authenticate header
    ✅ Create → get round trip with userId taken from the token
    ✅ Owner isolation: other users get 404, lists only show own rows
    ✅ Pagination envelope and ordering by last update
    ✅ Partial update, 204 delete, repeatable GETs
    ✅ Health and readiness, request ID propagation, 500 bodies
"""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError

from app.database import get_db_session
from app.exceptions import DatabaseError
from app.main import app
from app.services.client_service import client_service

CLIENT_BODY = {
    "type": "buyer",
    "firstName": "Ana",
    "lastName": "Reyes",
    "email": "ana@example.com",
    "leadScore": "40",
    "preferences": {"bedrooms": 3, "neighbourhoods": ["Eastside", "Mueller"]},
}


def bearer(make_token, sub, roles):
    return {"Authorization": f"Bearer {make_token(sub=sub, roles=roles)}"}


@pytest_asyncio.fixture
async def mock_session_override(mock_db_session):
    """Route every get_db_session dependency to the mock session."""

    async def _session():
        yield mock_db_session

    app.dependency_overrides[get_db_session] = _session
    yield mock_db_session
    app.dependency_overrides.pop(get_db_session, None)


# ══════════════════════════════════════════════════════════════════════════
# Gates
# ══════════════════════════════════════════════════════════════════════════

class TestGates:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, path",
        [
            ("GET", "/api/v1/clients"),
            ("POST", "/api/v1/clients"),
            ("GET", f"/api/v1/clients/{uuid.uuid4()}"),
            ("PUT", f"/api/v1/clients/{uuid.uuid4()}"),
            ("DELETE", f"/api/v1/clients/{uuid.uuid4()}"),
            ("GET", "/api/v1/transactions"),
            ("POST", "/api/v1/transactions"),
            ("DELETE", f"/api/v1/transactions/{uuid.uuid4()}"),
        ],
    )
    async def test_missing_token_is_401(self, test_client, mock_session_override, method, path):
        response = await test_client.request(method, path, json={})

        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized"}
        assert response.headers["WWW-Authenticate"] == "Bearer"
        mock_session_override.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_token_is_401(self, test_client, mock_session_override):
        response = await test_client.get(
            "/api/v1/clients", headers={"Authorization": "Bearer not.a.token"}
        )
        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized"}

    @pytest.mark.asyncio
    async def test_non_bearer_scheme_is_401(self, test_client, mock_session_override):
        response = await test_client.get(
            "/api/v1/clients", headers={"Authorization": "Basic YWdlbnQ6c2VjcmV0"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_unauthenticated_invalid_body_is_401_not_400(
        self, test_client, mock_session_override
    ):
        response = await test_client.post("/api/v1/clients", json={"email": "nope"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_wrong_role_is_403_before_validation(
        self, test_client, mock_session_override, viewer_headers
    ):
        response = await test_client.post(
            "/api/v1/clients", json={"email": "nope"}, headers=viewer_headers
        )

        assert response.status_code == 403
        assert response.json() == {"message": "Forbidden"}
        mock_session_override.execute.assert_not_awaited()
        mock_session_override.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_agent_cannot_delete(self, test_client, mock_session_override, agent_headers):
        response = await test_client.delete(
            f"/api/v1/clients/{uuid.uuid4()}", headers=agent_headers
        )
        assert response.status_code == 403
        mock_session_override.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_viewer_can_read(self, test_client, mock_session_override, viewer_headers):
        page_result = MagicMock()
        page_result.scalars.return_value.all.return_value = []
        count_result = MagicMock()
        count_result.scalar.return_value = 0
        mock_session_override.execute = AsyncMock(side_effect=[page_result, count_result])

        response = await test_client.get("/api/v1/clients", headers=viewer_headers)

        assert response.status_code == 200
        assert response.json() == {"data": [], "meta": {"total": 0, "page": 1, "limit": 25}}

    @pytest.mark.asyncio
    async def test_invalid_body_is_400_with_details(
        self, test_client, mock_session_override, agent_headers
    ):
        response = await test_client.post(
            "/api/v1/clients",
            json={"type": "buyer", "email": "not-an-email", "leadScore": -1},
            headers=agent_headers,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        fields = {d["field"] for d in body["details"]}
        assert {"firstName", "lastName", "email", "leadScore"} <= fields
        mock_session_override.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_malformed_json_is_400(self, test_client, mock_session_override, agent_headers):
        response = await test_client.post(
            "/api/v1/clients",
            content=b"{not json",
            headers={**agent_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "body"

    @pytest.mark.asyncio
    async def test_empty_body_on_create_reports_missing_fields(
        self, test_client, mock_session_override, agent_headers
    ):
        response = await test_client.post("/api/v1/clients", headers=agent_headers)
        assert response.status_code == 400
        assert {d["type"] for d in response.json()["details"]} == {"missing"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["page=0", "limit=0", "page=abc", "limit=-3"])
    async def test_invalid_query_is_400(
        self, test_client, mock_session_override, agent_headers, query
    ):
        response = await test_client.get(f"/api/v1/transactions?{query}", headers=agent_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Query validation failed"
        mock_session_override.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_transaction_price_as_number_is_400(
        self, test_client, mock_session_override, agent_headers
    ):
        response = await test_client.post(
            "/api/v1/transactions",
            json={"transactionType": "sale", "listPrice": 425000},
            headers=agent_headers,
        )
        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "listPrice"

    @pytest.mark.asyncio
    async def test_price_that_would_be_rounded_is_400(
        self, test_client, mock_session_override, agent_headers
    ):
        response = await test_client.post(
            "/api/v1/transactions",
            json={"transactionType": "sale", "listPrice": "1.005", "finalPrice": "1e20"},
            headers=agent_headers,
        )

        assert response.status_code == 400
        assert {d["field"] for d in response.json()["details"]} == {"listPrice", "finalPrice"}
        mock_session_override.add.assert_not_called()
        mock_session_override.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_text_wider_than_column_is_400(
        self, test_client, mock_session_override, agent_headers
    ):
        response = await test_client.put(
            f"/api/v1/clients/{uuid.uuid4()}",
            json={"firstName": "x" * 150, "leadScore": 2**40},
            headers=agent_headers,
        )

        assert response.status_code == 400
        assert {d["field"] for d in response.json()["details"]} == {"firstName", "leadScore"}
        mock_session_override.execute.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["page=10000000000000000000", "limit=101"])
    async def test_oversized_paging_is_400(
        self, test_client, mock_session_override, agent_headers, query
    ):
        response = await test_client.get(f"/api/v1/clients?{query}", headers=agent_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Query validation failed"
        mock_session_override.execute.assert_not_awaited()


# ══════════════════════════════════════════════════════════════════════════
# Error Mapping
# ══════════════════════════════════════════════════════════════════════════

class TestErrorMapping:

    @pytest.mark.asyncio
    async def test_database_error_is_generic_500(
        self, test_client, mock_session_override, agent_headers
    ):
        with patch.object(
            client_service,
            "get_record",
            AsyncMock(side_effect=DatabaseError(context={"error_type": "OperationalError"})),
        ):
            response = await test_client.get(
                f"/api/v1/clients/{uuid.uuid4()}", headers=agent_headers
            )

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

    @pytest.mark.asyncio
    async def test_unexpected_error_is_generic_500(
        self, test_client, mock_session_override, agent_headers
    ):
        with patch.object(
            client_service, "get_record", AsyncMock(side_effect=RuntimeError("boom at line 12"))
        ):
            response = await test_client.get(
                f"/api/v1/clients/{uuid.uuid4()}", headers=agent_headers
            )

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        assert "boom" not in response.text

    @pytest.mark.asyncio
    async def test_malformed_id_is_404(self, test_client, mock_session_override, agent_headers):
        response = await test_client.get("/api/v1/clients/12345", headers=agent_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Client not found"}
        mock_session_override.execute.assert_not_awaited()


# ══════════════════════════════════════════════════════════════════════════
# End-to-End (SQLite)
# ══════════════════════════════════════════════════════════════════════════

class TestClientsEndToEnd:

    @pytest.mark.asyncio
    async def test_create_then_get(self, test_client, database, agent_headers):
        created = await test_client.post("/api/v1/clients", json=CLIENT_BODY, headers=agent_headers)

        assert created.status_code == 201
        body = created.json()
        assert body["userId"] == "agent-1"
        assert body["firstName"] == "Ana"
        assert body["leadScore"] == 40
        assert body["preferences"] == CLIENT_BODY["preferences"]
        assert {"id", "createdAt", "updatedAt"} <= set(body)

        fetched = await test_client.get(f"/api/v1/clients/{body['id']}", headers=agent_headers)
        assert fetched.status_code == 200
        assert fetched.json()["id"] == body["id"]
        assert fetched.json()["email"] == "ana@example.com"

    @pytest.mark.asyncio
    async def test_repeated_gets_are_identical(self, test_client, database, agent_headers):
        created = await test_client.post("/api/v1/clients", json=CLIENT_BODY, headers=agent_headers)
        path = f"/api/v1/clients/{created.json()['id']}"

        first = await test_client.get(path, headers=agent_headers)
        second = await test_client.get(path, headers=agent_headers)

        assert first.content == second.content

    @pytest.mark.asyncio
    async def test_payload_cannot_choose_owner(self, test_client, database, agent_headers):
        created = await test_client.post(
            "/api/v1/clients",
            json={**CLIENT_BODY, "userId": "someone-else", "favouriteColour": "teal"},
            headers=agent_headers,
        )

        assert created.status_code == 201
        assert created.json()["userId"] == "agent-1"
        assert "favouriteColour" not in created.json()

    @pytest.mark.asyncio
    async def test_other_users_rows_are_invisible(self, test_client, database, make_token):
        owner = bearer(make_token, "agent-1", ["agent"])
        intruder = bearer(make_token, "agent-2", ["agent", "admin"])

        created = await test_client.post("/api/v1/clients", json=CLIENT_BODY, headers=owner)
        path = f"/api/v1/clients/{created.json()['id']}"

        for method, kwargs in [
            ("GET", {}),
            ("PUT", {"json": {"stage": "stolen"}}),
            ("DELETE", {}),
        ]:
            response = await test_client.request(method, path, headers=intruder, **kwargs)
            assert response.status_code == 404
            assert response.json() == {"error": "Client not found"}

        listing = await test_client.get("/api/v1/clients", headers=intruder)
        assert listing.json()["meta"]["total"] == 0

        still_there = await test_client.get(path, headers=owner)
        assert still_there.json()["stage"] is None

    @pytest.mark.asyncio
    async def test_pagination_envelope(self, test_client, database, agent_headers):
        for name in ["Ana", "Bo", "Cy"]:
            await test_client.post(
                "/api/v1/clients", json={**CLIENT_BODY, "firstName": name}, headers=agent_headers
            )

        first = await test_client.get("/api/v1/clients?page=1&limit=2", headers=agent_headers)
        second = await test_client.get("/api/v1/clients?page=2&limit=2", headers=agent_headers)
        beyond = await test_client.get("/api/v1/clients?page=5&limit=2", headers=agent_headers)

        assert first.status_code == 200
        assert len(first.json()["data"]) == 2
        assert first.json()["meta"] == {"total": 3, "page": 1, "limit": 2}
        assert len(second.json()["data"]) == 1
        assert second.json()["meta"] == {"total": 3, "page": 2, "limit": 2}
        assert beyond.json() == {"data": [], "meta": {"total": 3, "page": 5, "limit": 2}}

        ids = {c["id"] for c in first.json()["data"] + second.json()["data"]}
        assert len(ids) == 3

    @pytest.mark.asyncio
    async def test_recently_updated_listed_first(self, test_client, database, agent_headers):
        oldest = await test_client.post(
            "/api/v1/clients", json={**CLIENT_BODY, "firstName": "Old"}, headers=agent_headers
        )
        await test_client.post(
            "/api/v1/clients", json={**CLIENT_BODY, "firstName": "New"}, headers=agent_headers
        )

        await test_client.put(
            f"/api/v1/clients/{oldest.json()['id']}",
            json={"stage": "touring"},
            headers=agent_headers,
        )
        listing = await test_client.get("/api/v1/clients", headers=agent_headers)

        assert [c["firstName"] for c in listing.json()["data"]] == ["Old", "New"]

    @pytest.mark.asyncio
    async def test_partial_update(self, test_client, database, agent_headers):
        created = (
            await test_client.post("/api/v1/clients", json=CLIENT_BODY, headers=agent_headers)
        ).json()
        path = f"/api/v1/clients/{created['id']}"

        updated = await test_client.put(
            path, json={"leadScore": "75", "stage": "qualified"}, headers=agent_headers
        )

        assert updated.status_code == 200
        body = updated.json()
        assert body["leadScore"] == 75
        assert body["stage"] == "qualified"
        assert body["firstName"] == "Ana"
        assert body["createdAt"] == created["createdAt"]

    @pytest.mark.asyncio
    async def test_update_null_required_field_is_400(self, test_client, database, agent_headers):
        created = (
            await test_client.post("/api/v1/clients", json=CLIENT_BODY, headers=agent_headers)
        ).json()

        response = await test_client.put(
            f"/api/v1/clients/{created['id']}", json={"firstName": None}, headers=agent_headers
        )

        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "firstName"

    @pytest.mark.asyncio
    async def test_admin_delete(self, test_client, database, admin_headers):
        created = (
            await test_client.post("/api/v1/clients", json=CLIENT_BODY, headers=admin_headers)
        ).json()
        path = f"/api/v1/clients/{created['id']}"

        deleted = await test_client.delete(path, headers=admin_headers)
        assert deleted.status_code == 204
        assert deleted.content == b""

        gone = await test_client.get(path, headers=admin_headers)
        assert gone.status_code == 404

        again = await test_client.delete(path, headers=admin_headers)
        assert again.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_id_is_404(self, test_client, database, agent_headers):
        response = await test_client.get(f"/api/v1/clients/{uuid.uuid4()}", headers=agent_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Client not found"}


class TestTransactionsEndToEnd:

    @pytest.mark.asyncio
    async def test_create_then_get(self, test_client, database, agent_headers):
        buyer_id = str(uuid.uuid4())
        created = await test_client.post(
            "/api/v1/transactions",
            json={
                "transactionType": "purchase",
                "propertyAddress": {"street": "12 Elm St", "city": "Austin"},
                "listPrice": "425000.00",
                "contractDate": "2026-03-01",
                "buyerClientId": buyer_id,
                "status": "under_contract",
            },
            headers=agent_headers,
        )

        assert created.status_code == 201
        body = created.json()
        assert body["userId"] == "agent-1"
        assert body["listPrice"] == "425000.00"
        assert body["contractDate"] == "2026-03-01"
        assert body["buyerClientId"] == buyer_id
        assert body["propertyAddress"]["city"] == "Austin"

        fetched = await test_client.get(f"/api/v1/transactions/{body['id']}", headers=agent_headers)
        assert fetched.json() == body

    @pytest.mark.asyncio
    async def test_invalid_client_reference_is_400(self, test_client, database, agent_headers):
        response = await test_client.post(
            "/api/v1/transactions",
            json={"transactionType": "sale", "sellerClientId": "client-42"},
            headers=agent_headers,
        )
        assert response.status_code == 400
        assert response.json()["details"][0]["field"] == "sellerClientId"

    @pytest.mark.asyncio
    async def test_missing_transaction_is_404(self, test_client, database, agent_headers):
        response = await test_client.get(
            f"/api/v1/transactions/{uuid.uuid4()}", headers=agent_headers
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Transaction not found"}

    @pytest.mark.asyncio
    async def test_update_and_delete(self, test_client, database, make_token):
        headers = bearer(make_token, "broker-1", ["agent", "admin"])
        created = (
            await test_client.post(
                "/api/v1/transactions", json={"transactionType": "sale"}, headers=headers
            )
        ).json()
        path = f"/api/v1/transactions/{created['id']}"

        updated = await test_client.put(
            path, json={"finalPrice": "390000.50", "closingDate": "2026-05-30"}, headers=headers
        )
        assert updated.status_code == 200
        assert updated.json()["finalPrice"] == "390000.50"
        assert updated.json()["transactionType"] == "sale"

        assert (await test_client.delete(path, headers=headers)).status_code == 204
        assert (await test_client.get(path, headers=headers)).status_code == 404


# ══════════════════════════════════════════════════════════════════════════
# Health & Request ID
# ══════════════════════════════════════════════════════════════════════════

class TestHealth:

    @pytest.mark.asyncio
    async def test_liveness(self, test_client):
        response = await test_client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_readiness_with_database(self, test_client, database):
        response = await test_client.get("/api/v1/health/ready")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "database": "connected"}

    @pytest.mark.asyncio
    async def test_readiness_without_database(self, test_client):
        broken_engine = MagicMock()
        broken_engine.connect.side_effect = OperationalError(
            "SELECT 1", {}, Exception("connection refused")
        )
        with patch("app.routes.health.engine", broken_engine):
            response = await test_client.get("/api/v1/health/ready")

        assert response.status_code == 503
        assert response.json() == {"status": "unavailable", "database": "disconnected"}


class TestRequestID:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, test_client):
        response = await test_client.get("/api/v1/health")
        assert len(response.headers["X-Request-ID"]) == 12

    @pytest.mark.asyncio
    async def test_client_value_is_echoed(self, test_client):
        response = await test_client.get("/api/v1/health", headers={"X-Request-ID": "trace-abc-123"})
        assert response.headers["X-Request-ID"] == "trace-abc-123"

    @pytest.mark.asyncio
    async def test_oversized_value_is_replaced(self, test_client):
        response = await test_client.get("/api/v1/health", headers={"X-Request-ID": "x" * 200})
        assert response.headers["X-Request-ID"] != "x" * 200
