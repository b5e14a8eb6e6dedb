from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import delete, func, select

from finance_tracker.core.database import get_async_session
from finance_tracker.main import app
from finance_tracker.models.category import Category, DEFAULT_CATEGORY_NAME
from finance_tracker.models.transaction import Transaction, TransactionType
from finance_tracker.models.user_profile import UserProfile

PASSWORD = "Secret!1a"


@pytest_asyncio.fixture
async def client(session_maker):
    async def override_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def register_and_login(client: AsyncClient, email: str) -> dict:
    response = await client.post(
        "/api/auth/register",
        json={"email": email, "password": PASSWORD, "display_name": email.split("@")[0]},
    )
    assert response.status_code == 201, response.text
    response = await client.post(
        "/api/auth/jwt/login", data={"username": email, "password": PASSWORD}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest_asyncio.fixture
async def alice(client):
    return await register_and_login(client, "alice@tracker.dev")


@pytest_asyncio.fixture
async def bob(client):
    return await register_and_login(client, "bob@tracker.dev")


async def test_endpoints_require_authentication(client) -> None:
    assert (await client.get("/api/category")).status_code == 401
    assert (await client.get("/api/transaction")).status_code == 401


async def test_health(client) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_registration_provisions_default_category_and_profile(client, alice) -> None:
    categories = (await client.get("/api/category", headers=alice)).json()
    assert categories == [
        {"id": categories[0]["id"], "name": DEFAULT_CATEGORY_NAME, "type": "Neutral", "transaction_count": 0}
    ]

    profile = (await client.get("/api/users/me", headers=alice)).json()
    assert profile["email"] == "alice@tracker.dev"
    assert profile["display_name"] == "alice"


async def test_weak_password_is_rejected(client) -> None:
    response = await client.post(
        "/api/auth/register",
        json={"email": "weak@tracker.dev", "password": "password", "display_name": "weak"},
    )
    assert response.status_code == 400

    response = await client.post(
        "/api/auth/register",
        json={"email": "short@tracker.dev", "password": "Ab!", "display_name": "short"},
    )
    assert response.status_code == 400
    assert response.json()["detail"]["reason"] == "Password must be 6 to 20 characters"


async def test_salary_retype_scenario(client, alice) -> None:
    default_id = (await client.get("/api/category", headers=alice)).json()[0]["id"]

    response = await client.post("/api/category", json={"name": "Salary", "type": "Income"}, headers=alice)
    assert response.status_code == 201
    salary = response.json()
    assert salary["transaction_count"] == 0

    response = await client.post(
        "/api/transaction",
        json={"amount": "1500.00", "date": "2025-01-31T09:00:00Z", "type": "Income", "category_id": salary["id"]},
        headers=alice,
    )
    assert response.status_code == 201
    t1 = response.json()
    assert t1["category_name"] == "Salary"
    assert Decimal(t1["amount"]) == Decimal("1500.00")

    response = await client.put(
        f"/api/category/{salary['id']}", json={"name": "Salary", "type": "Expense"}, headers=alice
    )
    assert response.status_code == 204

    moved = (await client.get(f"/api/transaction/{t1['id']}", headers=alice)).json()
    assert moved["category_id"] == default_id
    assert moved["category_name"] == DEFAULT_CATEGORY_NAME


async def test_default_category_is_protected(client, alice) -> None:
    default_id = (await client.get("/api/category", headers=alice)).json()[0]["id"]

    response = await client.put(
        f"/api/category/{default_id}", json={"name": "Other", "type": "Income"}, headers=alice
    )
    assert response.status_code == 400
    assert (await client.delete(f"/api/category/{default_id}", headers=alice)).status_code == 400


async def test_reserved_name_is_rejected(client, alice) -> None:
    response = await client.post(
        "/api/category", json={"name": DEFAULT_CATEGORY_NAME, "type": "Neutral"}, headers=alice
    )
    assert response.status_code == 422


async def test_type_mismatch_is_a_bad_request(client, alice) -> None:
    salary = (await client.post("/api/category", json={"name": "Salary", "type": "Income"}, headers=alice)).json()

    response = await client.post(
        "/api/transaction",
        json={"amount": "20", "date": "2025-01-31T09:00:00Z", "type": "Expense", "category_id": salary["id"]},
        headers=alice,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Category type does not match transaction type."
    assert (await client.get("/api/transaction", headers=alice)).json() == []


async def test_delete_category_twice(client, alice) -> None:
    food = (await client.post("/api/category", json={"name": "Food", "type": "Expense"}, headers=alice)).json()

    assert (await client.delete(f"/api/category/{food['id']}", headers=alice)).status_code == 204
    assert (await client.delete(f"/api/category/{food['id']}", headers=alice)).status_code == 404


async def test_category_transactions_endpoint_clamps_take(client, alice) -> None:
    food = (await client.post("/api/category", json={"name": "Food", "type": "Expense"}, headers=alice)).json()
    for day in ("01", "02", "03"):
        await client.post(
            "/api/transaction",
            json={"amount": "4.50", "date": f"2025-04-{day}T08:00:00Z", "type": "Expense", "category_id": food["id"]},
            headers=alice,
        )

    response = await client.get(f"/api/category/{food['id']}/transactions?skip=0&take=0", headers=alice)
    assert response.status_code == 200
    assert [t["date"][:10] for t in response.json()] == ["2025-04-01"]

    response = await client.get(f"/api/category/{food['id']}", headers=alice)
    assert response.json()["transaction_count"] == 3


async def test_other_users_data_is_invisible(client, alice, bob) -> None:
    food = (await client.post("/api/category", json={"name": "Food", "type": "Expense"}, headers=alice)).json()
    tx = (await client.post(
        "/api/transaction",
        json={"amount": "4.50", "date": "2025-04-01T08:00:00Z", "type": "Expense", "category_id": food["id"]},
        headers=alice,
    )).json()

    assert (await client.get(f"/api/category/{food['id']}", headers=bob)).status_code == 404
    assert (await client.get(f"/api/category/{food['id']}/transactions", headers=bob)).status_code == 404
    assert (await client.get(f"/api/transaction/{tx['id']}", headers=bob)).status_code == 404
    assert (await client.delete(f"/api/transaction/{tx['id']}", headers=bob)).status_code == 404

    response = await client.post(
        "/api/transaction",
        json={"amount": "1", "date": "2025-04-01T08:00:00Z", "type": "Expense", "category_id": food["id"]},
        headers=bob,
    )
    assert response.status_code == 400


async def test_update_transaction_endpoint(client, alice) -> None:
    rent = (await client.post("/api/category", json={"name": "Rent", "type": "Expense"}, headers=alice)).json()
    tx = (await client.post(
        "/api/transaction",
        json={"amount": "10", "date": "2025-04-01T08:00:00Z", "type": "Expense"},
        headers=alice,
    )).json()

    response = await client.put(
        f"/api/transaction/{tx['id']}",
        json={"amount": "950.00", "date": "2025-04-02T08:00:00+02:00", "type": "Expense", "category_id": rent["id"]},
        headers=alice,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["category_name"] == "Rent"
    assert body["date"].startswith("2025-04-02T06:00:00")


async def test_account_deletion_removes_everything(client, alice, session_maker) -> None:
    food = (await client.post("/api/category", json={"name": "Food", "type": "Expense"}, headers=alice)).json()
    await client.post(
        "/api/transaction",
        json={"amount": "4.50", "date": "2025-04-01T08:00:00Z", "type": "Expense", "category_id": food["id"]},
        headers=alice,
    )

    assert (await client.delete("/api/users/me", headers=alice)).status_code == 204
    assert (await client.get("/api/category", headers=alice)).status_code == 401

    async with session_maker() as session:
        assert (await session.execute(select(func.count(Category.id)))).scalar_one() == 0
        assert (await session.execute(select(func.count(Transaction.id)))).scalar_one() == 0


async def test_login_restores_missing_default_category(client, session_maker) -> None:
    await register_and_login(client, "carol@tracker.dev")
    async with session_maker() as session:
        await session.execute(delete(Category).where(Category.is_default.is_(True)))
        await session.execute(delete(UserProfile))
        await session.commit()

    response = await client.post(
        "/api/auth/jwt/login", data={"username": "carol@tracker.dev", "password": PASSWORD}
    )
    assert response.status_code == 200
    headers = {"Authorization": f"Bearer {response.json()['access_token']}"}

    categories = (await client.get("/api/category", headers=headers)).json()
    assert [(c["name"], c["type"]) for c in categories] == [(DEFAULT_CATEGORY_NAME, "Neutral")]
    profile = (await client.get("/api/users/me", headers=headers)).json()
    assert profile["display_name"] == "carol"


async def test_category_transactions_endpoint_caps_take(client, alice, session_maker) -> None:
    food = (await client.post("/api/category", json={"name": "Food", "type": "Expense"}, headers=alice)).json()
    async with session_maker() as session:
        category = await session.get(Category, food["id"])
        session.add_all([
            Transaction(
                user_id=category.user_id,
                amount=Decimal("1.00"),
                date=datetime(2025, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=i),
                type=TransactionType.Expense,
                category=category,
            )
            for i in range(201)
        ])
        await session.commit()

    response = await client.get(f"/api/category/{food['id']}/transactions?take=500", headers=alice)

    assert response.status_code == 200
    assert len(response.json()) == 200
