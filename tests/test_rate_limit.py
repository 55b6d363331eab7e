"""Tests for the Redis fixed-window rate limiters."""

from datetime import timedelta

import pytest
from starlette.requests import Request

from payportal.exceptions import RateLimitException
from payportal.security.rate_limit import RateLimiter


def make_request(host: str = "10.0.0.1") -> Request:
    return Request({"type": "http", "method": "GET", "path": "/", "headers": [], "client": (host, 5000)})


async def test_limiter_allows_up_to_limit(fake_redis):
    limiter = RateLimiter("unit", limit=3, window=timedelta(minutes=1))

    for _ in range(3):
        await limiter(make_request(), fake_redis)

    with pytest.raises(RateLimitException) as exc_info:
        await limiter(make_request(), fake_redis)

    assert exc_info.value.status_code == 429
    assert 0 < int(exc_info.value.headers["Retry-After"]) <= 60


async def test_limiter_counts_clients_separately(fake_redis):
    limiter = RateLimiter("unit", limit=1, window=timedelta(minutes=1))

    await limiter(make_request("10.0.0.1"), fake_redis)
    await limiter(make_request("10.0.0.2"), fake_redis)

    with pytest.raises(RateLimitException):
        await limiter(make_request("10.0.0.1"), fake_redis)


async def test_window_key_expires_with_window(fake_redis):
    limiter = RateLimiter("unit", limit=5, window=timedelta(minutes=15))

    await limiter(make_request(), fake_redis)

    assert await fake_redis.ttl("ratelimit:unit:10.0.0.1") == 900
    assert await fake_redis.get("ratelimit:unit:10.0.0.1") == "1"


async def test_later_hits_keep_window_expiry(fake_redis):
    limiter = RateLimiter("unit", limit=5, window=timedelta(minutes=15))
    await fake_redis.set("ratelimit:unit:10.0.0.1", 2, ex=30)

    await limiter(make_request(), fake_redis)

    assert await fake_redis.get("ratelimit:unit:10.0.0.1") == "3"
    assert 0 < await fake_redis.ttl("ratelimit:unit:10.0.0.1") <= 30


async def test_login_endpoint_is_limited(client, customer):
    payload = {"fullName": "Jane Doe", "accountNumber": "1234567890", "password": "wrong-pass"}

    statuses = [(await client.post("/api/v1/auth/login", json=payload)).status_code for _ in range(7)]

    assert statuses[:5] == [401] * 5
    assert statuses[5:] == [429, 429]


async def test_rate_limited_response_shape(client, customer):
    payload = {"fullName": "Jane Doe", "accountNumber": "1234567890", "password": "wrong-pass"}
    for _ in range(5):
        await client.post("/api/v1/auth/login", json=payload)

    response = await client.post("/api/v1/auth/login", json=payload)

    assert response.status_code == 429
    assert response.json() == {
        "success": False,
        "message": "Too many login attempts from this IP, please try again after 15 minutes",
    }
    assert "Retry-After" in response.headers


async def test_staff_login_shares_the_login_window(client, employee):
    customer_payload = {"fullName": "Jane Doe", "accountNumber": "1234567890", "password": "wrong-pass"}
    for _ in range(5):
        await client.post("/api/v1/auth/login", json=customer_payload)

    response = await client.post(
        "/api/v1/employee/auth/login",
        json={"username": "clerk_1", "password": "Passw0rd"},
    )

    assert response.status_code == 429


async def test_register_endpoint_is_limited(client):
    statuses = []
    for index in range(4):
        response = await client.post(
            "/api/v1/auth/register",
            json={"fullName": "Jane Doe", "accountNumber": f"555000000{index}", "password": "secret123"},
        )
        statuses.append(response.status_code)

    assert statuses == [201, 201, 201, 429]
