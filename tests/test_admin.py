from decimal import Decimal

import pytest

from conftest import ADMIN_ID, auth_headers, url_prefix
from nextchapter.db.connection import async_session
from nextchapter.schema.full_schema import Users
from nextchapter.seed_scripts.seed_admin import grant_admin


@pytest.mark.asyncio
async def test_admin_routes_reject_regular_users(ac_client, user_headers):
    for path in ("/admin/dashboard", "/admin/orders", "/admin/users"):
        resp = await ac_client.get(f"{url_prefix}{path}", headers=user_headers)
        assert resp.status_code == 401, path
        assert resp.json()["error"] == "Not authorized as admin"


@pytest.mark.asyncio
async def test_dashboard_metrics(ac_client, admin_headers, user_headers, seed_book, place_paid_order,
                                 set_delivery_status):
    dune = await seed_book(title="Dune", category="Science Fiction", stock=0, total_sold=7)
    emma = await seed_book(title="Emma", category="Classics", stock=12, total_sold=3)

    delivered = await place_paid_order(user_headers, [(dune, 1)], amount="450")
    cancelled = await place_paid_order(user_headers, [(emma, 2)], amount="900")
    await place_paid_order(user_headers, [(emma, 1)], amount="450")
    assert (await set_delivery_status(delivered, "Delivered")).status_code == 200
    assert (await set_delivery_status(cancelled, "Cancelled")).status_code == 200

    resp = await ac_client.get(f"{url_prefix}/admin/dashboard", headers=admin_headers)
    assert resp.status_code == 200, resp.text
    m = resp.json()

    # the admin and the buyer were provisioned by the auth middleware
    assert m["totalUsers"] == 2
    assert m["activeUsers"] == 2
    assert m["blockedUsers"] == 0
    assert m["totalPayments"] == 3
    assert m["totalRevenue"] == 1800.0
    assert m["monthlyRevenue"] == 1800.0
    assert m["totalOrders"] == 3
    assert m["deliveredOrders"] == 1
    assert m["pendingOrders"] == 1
    assert m["cancelledOrders"] == 1
    assert m["totalBooks"] == 2
    assert m["totalSold"] == 10
    assert m["totalStock"] == 12
    assert m["outOfStock"] == 1
    assert m["totalCategories"] == 2


@pytest.mark.asyncio
async def test_admin_order_listing_totals_and_pagination(ac_client, admin_headers, user_headers, seed_book,
                                                         place_paid_order):
    book_id = await seed_book(price=Decimal("500.00"), discount=10)
    await place_paid_order(user_headers, [(book_id, 2)])
    await place_paid_order(user_headers, [(book_id, 1)])

    resp = await ac_client.get(f"{url_prefix}/admin/orders", params={"page": 1, "limit": 1}, headers=admin_headers)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["total"] == 2
    assert len(body["orders"]) == 1

    resp = await ac_client.get(f"{url_prefix}/admin/orders", params={"limit": 10}, headers=admin_headers)
    amounts = sorted(o["total_amount"] for o in resp.json()["orders"])
    assert amounts == [450.0, 900.0]


@pytest.mark.asyncio
async def test_disabling_a_user_blocks_their_requests(ac_client, admin_headers, user_headers):
    assert (await ac_client.get(f"{url_prefix}/cart", headers=user_headers)).status_code == 200

    resp = await ac_client.post(f"{url_prefix}/admin/users/update-status", headers=admin_headers,
                                json={"userId": "user_1", "isDisabled": True})
    assert resp.status_code == 200, resp.text
    assert resp.json()["user"]["status"] == "blocked"

    resp = await ac_client.get(f"{url_prefix}/cart", headers=user_headers)
    assert resp.status_code == 403
    assert resp.json()["code"] == "USER_DISABLED"

    resp = await ac_client.post(f"{url_prefix}/admin/users/update-status", headers=admin_headers,
                                json={"userId": "user_1", "isDisabled": False})
    assert resp.json()["message"] == "User enabled successfully"
    assert (await ac_client.get(f"{url_prefix}/cart", headers=user_headers)).status_code == 200


@pytest.mark.asyncio
async def test_user_listing_and_profile(ac_client, admin_headers, user_headers, seed_book, place_paid_order):
    book_id = await seed_book(price=Decimal("200.00"), discount=0)
    await place_paid_order(user_headers, [(book_id, 3)], amount="600")

    resp = await ac_client.get(f"{url_prefix}/admin/users", headers=admin_headers)
    assert resp.status_code == 200
    ids = {u["id"] for u in resp.json()["users"]}
    assert ids == {ADMIN_ID, "user_1"}

    resp = await ac_client.get(f"{url_prefix}/admin/users/user_1", headers=admin_headers)
    assert resp.status_code == 200, resp.text
    profile = resp.json()
    assert profile["userInfo"]["email"] == "user_1@example.com"
    assert profile["totalSpent"] == 600.0
    assert profile["orders"][0]["items"][0]["subtotal"] == 600.0

    resp = await ac_client.get(f"{url_prefix}/admin/users/nobody", headers=admin_headers)
    assert resp.status_code == 404

    resp = await ac_client.post(f"{url_prefix}/admin/users/update-status", headers=admin_headers,
                                json={"userId": "nobody", "isDisabled": True})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_admin_role_grants_access(ac_client, db_session):
    db_session.add(Users(id="staff_1", email="staff@example.com", role="admin"))
    await db_session.commit()

    resp = await ac_client.get(f"{url_prefix}/admin/dashboard", headers=auth_headers("staff_1"))
    assert resp.status_code == 200, resp.text


@pytest.mark.asyncio
async def test_seed_script_grants_admin_role(ac_client, db_session):
    await grant_admin(async_session, "ops_lead", email="ops@example.com")
    resp = await ac_client.get(f"{url_prefix}/admin/users", headers=auth_headers("ops_lead"))
    assert resp.status_code == 200, resp.text

    user = await db_session.get(Users, "ops_lead")
    assert user.role == "admin"
