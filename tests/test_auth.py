import json
import logging

import pytest

from conftest import url_prefix
from nextchapter.auth.utils import create_access_token, decode_token
from nextchapter.common.logging_setup import JSONFormatter, sanitize_message_text
from nextchapter.schema.full_schema import Users


def test_decode_token_round_trip_and_rejections():
    token = create_access_token("user_9", email="nine@example.com", role_hint="reader")
    claims = decode_token(token)
    assert claims["sub"] == "user_9"
    assert claims["email"] == "nine@example.com"

    assert decode_token(token + "x") is None
    assert decode_token(create_access_token("user_9", expires_dur=-1)) is None


@pytest.mark.asyncio
async def test_protected_routes_reject_bad_tokens(ac_client):
    resp = await ac_client.get(f"{url_prefix}/orders", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    body = resp.json()
    assert body["code"] == "INVALID_AUTH"
    assert body["request_id"]

    expired = create_access_token("user_1", expires_dur=-5)
    resp = await ac_client.get(f"{url_prefix}/orders", headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_first_request_provisions_user(ac_client, user_headers, db_session):
    resp = await ac_client.get(f"{url_prefix}/cart", headers=user_headers)
    assert resp.status_code == 200

    user = await db_session.get(Users, "user_1")
    assert user.email == "user_1@example.com"
    assert user.role == "user"
    assert user.last_seen_at is not None


def test_sanitize_message_redacts_secrets():
    out = sanitize_message_text('signature=abc123 password: hunter2 {"token": "xyz"}')
    assert "abc123" not in out
    assert "hunter2" not in out
    assert "xyz" not in out


def test_json_formatter_redacts_sensitive_extras():
    record = logging.LogRecord("nextchapter.payments", logging.INFO, __file__, 1, "payment.verify.success", None, None)
    record.signature = "deadbeef"
    record.order_id = 7
    data = json.loads(JSONFormatter().format(record))
    assert data["message"] == "payment.verify.success"
    assert data["signature"] == "[REDACTED]"
    assert data["order_id"] == 7
