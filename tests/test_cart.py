from decimal import Decimal

import pytest

from conftest import url_prefix


@pytest.mark.asyncio
async def test_cart_requires_auth(ac_client):
    resp = await ac_client.get(f"{url_prefix}/cart")
    assert resp.status_code == 401
    assert resp.json()["code"] == "INVALID_AUTH"


@pytest.mark.asyncio
async def test_add_snapshots_book_then_increments(ac_client, user_headers, seed_book):
    book_id = await seed_book(title="Dune", price=Decimal("349.50"), discount=15)

    resp = await ac_client.post(f"{url_prefix}/cart/add", json={"book_id": book_id, "quantity": 2}, headers=user_headers)
    assert resp.status_code == 201, resp.text
    line = resp.json()
    assert line["title"] == "Dune"
    assert line["original_price"] == 349.5
    assert line["discount"] == 15
    assert line["quantity"] == 2

    resp = await ac_client.post(f"{url_prefix}/cart/add", json={"book_id": book_id}, headers=user_headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["quantity"] == 3

    resp = await ac_client.get(f"{url_prefix}/cart", headers=user_headers)
    assert resp.status_code == 200
    assert [(l["book_id"], l["quantity"]) for l in resp.json()] == [(book_id, 3)]


@pytest.mark.asyncio
async def test_add_unknown_book_is_not_found(ac_client, user_headers):
    resp = await ac_client.post(f"{url_prefix}/cart/add", json={"book_id": 4242, "quantity": 1}, headers=user_headers)
    assert resp.status_code == 404, resp.text


@pytest.mark.asyncio
async def test_add_rejects_non_positive_quantity(ac_client, user_headers, seed_book):
    book_id = await seed_book()
    resp = await ac_client.post(f"{url_prefix}/cart/add", json={"book_id": book_id, "quantity": 0}, headers=user_headers)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_update_and_remove(ac_client, user_headers, seed_book):
    book_id = await seed_book()
    await ac_client.post(f"{url_prefix}/cart/add", json={"book_id": book_id, "quantity": 1}, headers=user_headers)

    resp = await ac_client.put(f"{url_prefix}/cart/update", json={"book_id": book_id, "quantity": 5}, headers=user_headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["quantity"] == 5

    resp = await ac_client.request("DELETE", f"{url_prefix}/cart/remove", json={"book_id": book_id}, headers=user_headers)
    assert resp.status_code == 200, resp.text

    resp = await ac_client.request("DELETE", f"{url_prefix}/cart/remove", json={"book_id": book_id}, headers=user_headers)
    assert resp.status_code == 404

    resp = await ac_client.put(f"{url_prefix}/cart/update", json={"book_id": book_id, "quantity": 2}, headers=user_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_carts_are_per_user(ac_client, user_headers, other_user_headers, seed_book):
    book_id = await seed_book()
    await ac_client.post(f"{url_prefix}/cart/add", json={"book_id": book_id, "quantity": 1}, headers=user_headers)

    resp = await ac_client.get(f"{url_prefix}/cart", headers=other_user_headers)
    assert resp.json() == []
