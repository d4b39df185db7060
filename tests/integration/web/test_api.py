"""
Web API 통합 테스트

httpx ASGITransport로 FastAPI 앱 호출.
임시 settings.yaml의 DB 경로 사용, 오늘 날짜는 고정.
"""

from datetime import date
from pathlib import Path
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.config.loader import get_settings
from web.app import app
from web.dependencies import get_clock, reset_closing_lock

TODAY = date(2024, 6, 4)


@pytest_asyncio.fixture
async def client(temp_settings_file: Path) -> AsyncGenerator[httpx.AsyncClient, None]:
    """계좌 2개가 등록된 API 클라이언트"""
    settings = get_settings(temp_settings_file)

    # ASGITransport는 lifespan을 실행하지 않으므로 직접 초기화
    async with SQLiteAdapter(settings.db_path) as db:
        await init_schema(db)

    app.dependency_overrides[get_clock] = lambda: (lambda: TODAY)
    reset_closing_lock()

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        for account_id, name, balance in (
            ("acc-a", "Itaú 0001", "1000"),
            ("acc-b", "Bradesco 0002", "500"),
        ):
            response = await ac.post(
                "/api/accounts",
                json={
                    "account_id": account_id,
                    "company_id": "company-1",
                    "name": name,
                    "opening_balance": balance,
                },
            )
            assert response.status_code == 201
        yield ac

    app.dependency_overrides.clear()
    reset_closing_lock()


async def _move(client: httpx.AsyncClient, day: str, kind: str, amount: str) -> dict:
    response = await client.post(
        "/api/movements",
        json={
            "account_id": "acc-a",
            "movement_date": day,
            "kind": kind,
            "amount": amount,
        },
    )
    assert response.status_code == 201
    return response.json()


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["environment"] == "development"


class TestAccounts:

    @pytest.mark.asyncio
    async def test_list_and_duplicate(self, client: httpx.AsyncClient) -> None:
        response = await client.get("/api/accounts")
        assert [a["account_id"] for a in response.json()] == ["acc-a", "acc-b"]

        duplicate = await client.post(
            "/api/accounts",
            json={"account_id": "acc-a", "company_id": "company-1", "name": "dup"},
        )
        assert duplicate.status_code == 409

    @pytest.mark.asyncio
    async def test_invalid_opening_balance(self, client: httpx.AsyncClient) -> None:
        response = await client.post(
            "/api/accounts",
            json={
                "account_id": "acc-c",
                "company_id": "company-1",
                "name": "C",
                "opening_balance": "abc",
            },
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_statement(self, client: httpx.AsyncClient) -> None:
        """누적 잔액 거래내역"""
        await _move(client, "2024-05-31", "ENTRADA", "100")
        await _move(client, "2024-06-01", "ENTRADA", "300")
        await _move(client, "2024-06-02", "SAIDA", "50.25")

        response = await client.get(
            "/api/accounts/acc-a/statement",
            params={"date_from": "2024-06-01", "date_to": "2024-06-03"},
        )
        body = response.json()

        assert response.status_code == 200
        assert body["opening_balance"] == "1100"
        assert [e["balance"] for e in body["entries"]] == ["1400", "1349.75"]
        assert body["closing_balance"] == "1349.75"

    @pytest.mark.asyncio
    async def test_statement_errors(self, client: httpx.AsyncClient) -> None:
        missing = await client.get("/api/accounts/missing/statement")
        reversed_range = await client.get(
            "/api/accounts/acc-a/statement",
            params={"date_from": "2024-06-03", "date_to": "2024-06-01"},
        )

        assert missing.status_code == 404
        assert reversed_range.status_code == 400

    @pytest.mark.asyncio
    async def test_statement_from_minimum_date(self, client: httpx.AsyncClient) -> None:
        """전일이 없는 최소 날짜는 400"""
        response = await client.get(
            "/api/accounts/acc-a/statement",
            params={"date_from": "0001-01-01", "date_to": "2024-06-04"},
        )

        assert response.status_code == 400


class TestMovements:

    @pytest.mark.asyncio
    async def test_crud(self, client: httpx.AsyncClient) -> None:
        created = await _move(client, "2024-06-03", "ENTRADA", "10")
        movement_id = created["movement_id"]

        updated = await client.put(
            f"/api/movements/{movement_id}", json={"amount": "12.50"}
        )
        assert updated.status_code == 200
        assert updated.json()["amount"] == "12.50"

        listed = await client.get("/api/movements", params={"account_id": "acc-a"})
        assert [m["movement_id"] for m in listed.json()] == [movement_id]

        deleted = await client.delete(f"/api/movements/{movement_id}")
        assert deleted.status_code == 204
        assert (await client.get(f"/api/movements/{movement_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_amount(self, client: httpx.AsyncClient) -> None:
        """0 이하 금액은 검증 실패"""
        response = await client.post(
            "/api/movements",
            json={
                "account_id": "acc-a",
                "movement_date": "2024-06-03",
                "kind": "SAIDA",
                "amount": "0",
            },
        )

        assert response.status_code == 400
        assert response.json()["detail"]["violation"] == "INVALID_MOVEMENT"

    @pytest.mark.asyncio
    async def test_locked_period(self, client: httpx.AsyncClient) -> None:
        """마감된 날짜의 입출금 등록 거부"""
        await client.post("/api/closings", json={"closing_date": "2024-06-02"})

        response = await client.post(
            "/api/movements",
            json={
                "account_id": "acc-a",
                "movement_date": "2024-06-01",
                "kind": "ENTRADA",
                "amount": "10",
            },
        )

        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["violation"] == "PERIOD_LOCKED"
        assert detail["last_closed"] == "2024-06-02"


class TestTransfers:

    @pytest.mark.asyncio
    async def test_transfer_lifecycle(self, client: httpx.AsyncClient) -> None:
        created = await client.post(
            "/api/transfers",
            json={
                "source_account_id": "acc-a",
                "destination_account_id": "acc-b",
                "transfer_date": "2024-06-03",
                "amount": "200",
            },
        )
        assert created.status_code == 201
        body = created.json()
        assert {leg["account_id"] for leg in body["legs"]} == {"acc-a", "acc-b"}

        fetched = await client.get(f"/api/transfers/{body['transfer_id']}")
        assert fetched.status_code == 200

        deleted = await client.delete(f"/api/transfers/{body['transfer_id']}")
        assert deleted.status_code == 204
        assert (await client.get(f"/api/transfers/{body['transfer_id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_same_account_rejected(self, client: httpx.AsyncClient) -> None:
        response = await client.post(
            "/api/transfers",
            json={
                "source_account_id": "acc-a",
                "destination_account_id": "acc-a",
                "transfer_date": "2024-06-03",
                "amount": "200",
            },
        )

        assert response.status_code == 400


class TestClosings:

    @pytest.mark.asyncio
    async def test_close_list_reopen(self, client: httpx.AsyncClient) -> None:
        await _move(client, "2024-06-01", "ENTRADA", "300")

        closed = await client.post(
            "/api/closings", json={"closing_date": "2024-06-01", "actor_id": "user-1"}
        )
        assert closed.status_code == 201
        assert closed.json()["accounts_closed"] == 2

        listed = (await client.get("/api/closings")).json()
        assert listed["closing_date"] == "2024-06-01"
        assert {i["account_id"]: i["final_balance"] for i in listed["items"]} == {
            "acc-a": "1300",
            "acc-b": "500",
        }

        reopened = await client.post(
            "/api/closings/reopen", json={"closing_date": "2024-06-01"}
        )
        assert reopened.status_code == 200
        assert reopened.json()["records_reopened"] == 2

        audit = (await client.get("/api/closings/audit")).json()
        assert audit["is_consistent"] is True

    @pytest.mark.asyncio
    async def test_validation_errors(self, client: httpx.AsyncClient) -> None:
        future = await client.post("/api/closings", json={"closing_date": "2024-06-05"})
        too_old = await client.post("/api/closings", json={"closing_date": "2024-05-31"})
        not_closed = await client.post(
            "/api/closings/reopen", json={"closing_date": "2024-06-01"}
        )

        assert future.status_code == 400
        assert future.json()["detail"]["violation"] == "FUTURE_DATE"
        assert too_old.json()["detail"]["violation"] == "OUTSIDE_WINDOW"
        assert not_closed.json()["detail"]["violation"] == "NOT_CLOSED"

    @pytest.mark.asyncio
    async def test_out_of_order(self, client: httpx.AsyncClient) -> None:
        await client.post("/api/closings", json={"closing_date": "2024-06-03"})

        response = await client.post("/api/closings", json={"closing_date": "2024-06-02"})

        assert response.status_code == 400
        assert response.json()["detail"]["violation"] == "OUT_OF_ORDER"
