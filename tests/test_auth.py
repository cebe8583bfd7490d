# tests/test_auth.py

import pytest
from httpx import AsyncClient

from app.schemas.auth import MenuMeta, MenuRoute
from app.services.auth import filter_menu_routes_by_roles, paginate
from tests.helpers import login

def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _menu_names(routes: list[dict]) -> list[str]:
    names = []
    for route in routes:
        names.append(route["name"])
        names.extend(_menu_names(route.get("children") or []))
    return names


async def test_user_info_requires_token(client: AsyncClient):
    response = await client.get("/api/user/info")
    assert response.status_code == 200
    assert response.json()["code"] == 401


async def test_login_rejects_bad_credentials(client: AsyncClient):
    assert (await login(client, "Super", "wrong-password"))["code"] == 401
    assert (await login(client, "Nobody"))["code"] == 401
    missing = await login(client, "", "")
    assert missing["code"] == 400


async def test_login_and_user_info(client: AsyncClient):
    body = await login(client, "super")
    assert body["code"] == 200
    token = body["data"]["token"]
    assert token.startswith("token-super-")
    assert body["data"]["refreshToken"].startswith("refresh-")

    # Токен принимается и без префикса Bearer
    info = (await client.get("/api/user/info", headers={"Authorization": token})).json()
    assert info["code"] == 200
    assert info["data"]["userName"] == "Super"
    assert "campaign:create" in info["data"]["buttons"]
    assert "report:export" in info["data"]["buttons"]

    admin_token = (await login(client, "Admin"))["data"]["token"]
    admin_info = (await client.get("/api/user/info", headers=_auth(admin_token))).json()["data"]
    assert admin_info["roles"] == ["R_ADMIN"]
    assert "member:create" in admin_info["buttons"]
    assert "report:export" not in admin_info["buttons"]


async def test_expired_session_is_rejected(client: AsyncClient, app_state):
    app_state.sessions.ttl_seconds = -1
    token = (await login(client, "Super"))["data"]["token"]

    response = await client.get("/api/user/info", headers=_auth(token))
    assert response.json()["code"] == 401


async def test_logout_removes_session(client: AsyncClient):
    token = (await login(client, "User"))["data"]["token"]

    logout = (await client.post("/api/auth/logout", headers=_auth(token))).json()
    assert logout["code"] == 200

    assert (await client.get("/api/user/info", headers=_auth(token))).json()["code"] == 401
    assert (await client.post("/api/auth/logout", headers=_auth(token))).json()["code"] == 401


async def test_user_and_role_lists_are_paginated(client: AsyncClient):
    headers = _auth((await login(client, "Super"))["data"]["token"])

    users = (await client.get("/api/user/list", params={"current": "1", "size": "2"}, headers=headers)).json()["data"]
    assert users["total"] == 3
    assert users["current"] == 1
    assert users["size"] == 2
    assert [u["userName"] for u in users["records"]] == ["Super", "Admin"]

    last_page = (await client.get("/api/user/list", params={"current": "2", "size": "2"}, headers=headers)).json()
    assert [u["userName"] for u in last_page["data"]["records"]] == ["User"]

    # Значения вне диапазона прижимаются к границам
    roles = (await client.get("/api/role/list", params={"current": "0", "size": "500"}, headers=headers)).json()["data"]
    assert roles["current"] == 1
    assert roles["size"] == 200
    assert [r["roleCode"] for r in roles["records"]] == ["R_SUPER", "R_ADMIN", "R_USER"]

    beyond = (await client.get("/api/role/list", params={"current": "5"}, headers=headers)).json()["data"]
    assert beyond["records"] == []
    assert beyond["total"] == 3

    assert (await client.get("/api/role/list")).json()["code"] == 401


async def test_menus_are_filtered_by_role(client: AsyncClient):
    super_headers = _auth((await login(client, "Super"))["data"]["token"])
    super_menus = (await client.get("/api/v3/system/menus", headers=super_headers)).json()["data"]
    assert "Menus" in _menu_names(super_menus)
    assert "Role" in _menu_names(super_menus)

    admin_headers = _auth((await login(client, "Admin"))["data"]["token"])
    admin_names = _menu_names((await client.get("/api/v3/system/menus", headers=admin_headers)).json()["data"])
    assert "User" in admin_names
    assert "Role" not in admin_names
    assert "Menus" not in admin_names

    user_headers = _auth((await login(client, "User"))["data"]["token"])
    user_menus = (await client.get("/api/v3/system/menus", headers=user_headers)).json()["data"]
    assert [m["name"] for m in user_menus] == ["Operations"]
    hub = user_menus[0]["children"][0]
    assert hub["meta"]["authList"][0] == {"title": "新增会员", "authMark": "member:create"}
    # Незаданные поля меню не попадают в ответ
    assert "isHide" not in hub["meta"]


def test_filter_drops_parent_without_visible_children():
    routes = [
        MenuRoute(
            path="/open",
            name="Open",
            meta=MenuMeta(title="open"),
            children=[MenuRoute(path="secret", name="Secret", meta=MenuMeta(title="secret", roles=["R_SUPER"]))],
        ),
        MenuRoute(
            path="/locked",
            name="Locked",
            meta=MenuMeta(title="locked", roles=["R_SUPER"]),
            children=[MenuRoute(path="child", name="Child", meta=MenuMeta(title="child"))],
        ),
        MenuRoute(path="/plain", name="Plain", meta=MenuMeta(title="plain")),
    ]

    assert [r.name for r in filter_menu_routes_by_roles(routes, ["R_USER"])] == ["Plain"]
    assert [r.name for r in filter_menu_routes_by_roles(routes, ["R_SUPER"])] == ["Open", "Locked", "Plain"]
    # Исходное дерево не изменяется
    assert routes[0].children[0].name == "Secret"


def test_paginate_bounds():
    assert paginate([1, 2, 3], 1, 2) == [1, 2]
    assert paginate([1, 2, 3], 2, 2) == [3]
    assert paginate([1, 2, 3], 3, 2) == []
