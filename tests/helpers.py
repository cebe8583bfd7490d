# tests/helpers.py
#
# Создание данных через API, общее для нескольких наборов тестов.

from httpx import AsyncClient


async def create_member(client: AsyncClient, name: str, phone: str, channel: str) -> dict:
    response = await client.post("/api/v1/members", json={"name": name, "phone": phone, "channel": channel})
    body = response.json()
    assert body["code"] == 200, body
    return body["data"]


async def create_order(client: AsyncClient, member_id: int, amount_cents: int, source: str, status: str = "paid") -> dict:
    response = await client.post(
        "/api/v1/orders",
        json={"memberId": member_id, "amountCents": amount_cents, "status": status, "source": source},
    )
    body = response.json()
    assert body["code"] == 200, body
    return body["data"]


async def login(client: AsyncClient, user_name: str, password: str = "123456") -> dict:
    response = await client.post("/api/auth/login", json={"userName": user_name, "password": password})
    return response.json()
