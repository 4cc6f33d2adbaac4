import os
import tempfile
from decimal import Decimal
from pathlib import Path

# settings are read at import time , so the environment has to be in place before nextchapter is imported
_DB_FILE = Path(tempfile.gettempdir()) / f"nextchapter_test_{os.getpid()}.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_FILE}"
os.environ["JWT_SECRET"] = "test-jwt-secret-0123456789"
os.environ["RZPAY_KEY"] = "rzp_test_key"
os.environ["RZPAY_SECRET"] = "rzp_test_secret"
os.environ["CACHE_ENABLED"] = "false"
os.environ["ADMIN_USER_ID"] = "user_admin"
os.environ["ENV"] = "dev"

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
from sqlmodel import SQLModel

from nextchapter.auth.utils import create_access_token
from nextchapter.db.connection import async_engine, async_session
from nextchapter.main import app
from nextchapter.payments import services as payment_services
from nextchapter.payments.services import payment_signature
from nextchapter.schema.full_schema import Book

url_prefix = "/api/v1"
ADMIN_ID = "user_admin"


@pytest.fixture(autouse=True)
async def setup_db():
    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield
    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await async_engine.dispose()


@pytest.fixture
async def db_session():
    async with async_session() as session:
        yield session


@pytest.fixture
async def ac_client():
    async with LifespanManager(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac


def auth_headers(user_id: str, email: str = None) -> dict:
    token = create_access_token(user_id, email=email or f"{user_id}@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers():
    return auth_headers("user_1")


@pytest.fixture
def other_user_headers():
    return auth_headers("user_2")


@pytest.fixture
def admin_headers():
    return auth_headers(ADMIN_ID)


@pytest.fixture
def seed_book():
    async def _seed(**fields) -> int:
        values = {
            "title": "The Left Hand of Darkness",
            "authors": ["Ursula K. Le Guin"],
            "price": Decimal("500.00"),
            "discount": 10,
            "stock": 20,
            "category": "Fiction",
        }
        values.update(fields)
        async with async_session() as session:
            book = Book(**values)
            session.add(book)
            await session.commit()
            return book.id
    return _seed


@pytest.fixture
def fake_gateway(monkeypatch):
    """Stands in for the razorpay orders api , records every call."""
    calls = []

    async def _create_psp_order(amount_paise, currency, receipt, notes=None, timeout=None):
        calls.append({"amount": amount_paise, "currency": currency, "receipt": receipt, "notes": notes})
        return {"id": f"order_test_{len(calls)}", "amount": amount_paise, "currency": currency,
                "receipt": receipt, "status": "created"}

    monkeypatch.setattr(payment_services, "create_psp_order", _create_psp_order)
    return calls


def signed_verify_body(gateway_order_id: str, gateway_payment_id: str = "pay_test_1") -> dict:
    return {
        "gatewayOrderId": gateway_order_id,
        "gatewayPaymentId": gateway_payment_id,
        "signature": payment_signature(gateway_order_id, gateway_payment_id),
    }


@pytest.fixture
def place_paid_order(ac_client, fake_gateway):
    """Cart -> create-order -> verify for the given headers , returns the internal order id."""
    async def _place(headers: dict, lines, amount="900", address="221B Baker Street"):
        for book_id, quantity in lines:
            r = await ac_client.post(f"{url_prefix}/cart/add", json={"book_id": book_id, "quantity": quantity},
                                     headers=headers)
            assert r.status_code in (200, 201), r.text

        r = await ac_client.post(f"{url_prefix}/payment/create-order",
                                 json={"amount": amount, "shippingAddress": address}, headers=headers)
        assert r.status_code == 200, r.text
        gateway_order_id = r.json()["orderId"]

        r = await ac_client.post(f"{url_prefix}/payment/verify",
                                 json=signed_verify_body(gateway_order_id, f"pay_{gateway_order_id}"),
                                 headers=headers)
        assert r.status_code == 200, r.text
        return r.json()["orderId"]
    return _place


@pytest.fixture
def set_delivery_status(ac_client, admin_headers):
    async def _set(order_id: int, new_status: str):
        r = await ac_client.post(f"{url_prefix}/admin/orders/update-status",
                                 json={"orderId": order_id, "newStatus": new_status}, headers=admin_headers)
        return r
    return _set
