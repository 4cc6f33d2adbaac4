import pytest

from conftest import url_prefix


@pytest.mark.asyncio
async def test_wishlist_add_list_remove(ac_client, user_headers, seed_book):
    book_id = await seed_book(title="Middlemarch")

    resp = await ac_client.post(f"{url_prefix}/wishlist/add", json={"book_id": book_id}, headers=user_headers)
    assert resp.status_code == 201, resp.text

    resp = await ac_client.post(f"{url_prefix}/wishlist/add", json={"book_id": book_id}, headers=user_headers)
    assert resp.status_code == 409
    assert resp.json()["error"] == "Book already in wishlist"

    resp = await ac_client.get(f"{url_prefix}/wishlist", headers=user_headers)
    assert [b["title"] for b in resp.json()] == ["Middlemarch"]

    resp = await ac_client.get(f"{url_prefix}/wishlist/exists", params={"book_id": book_id}, headers=user_headers)
    assert resp.json() == {"exists": True}

    resp = await ac_client.request("DELETE", f"{url_prefix}/wishlist/remove", json={"book_id": book_id},
                                   headers=user_headers)
    assert resp.status_code == 200

    resp = await ac_client.get(f"{url_prefix}/wishlist/exists", params={"book_id": book_id}, headers=user_headers)
    assert resp.json() == {"exists": False}


@pytest.mark.asyncio
async def test_wishlist_missing_book_and_entry(ac_client, user_headers):
    resp = await ac_client.post(f"{url_prefix}/wishlist/add", json={"book_id": 999}, headers=user_headers)
    assert resp.status_code == 404

    resp = await ac_client.request("DELETE", f"{url_prefix}/wishlist/remove", json={"book_id": 999},
                                   headers=user_headers)
    assert resp.status_code == 404
