# app/services/auth.py
#
# ЗАГЛУШКА авторизации для SPA-админки: фиксированный пароль, статичные
# пользователи/роли/меню и токены в памяти процесса. Это не хранилище
# учетных данных и не должно им становиться.

import logging
import threading
import time
from dataclasses import dataclass
from typing import List, Sequence, TypeVar

from app.core.errors import ApiError
from app.schemas.auth import (
    AuthMark,
    LoginToken,
    MenuMeta,
    MenuRoute,
    RoleListItem,
    SessionUser,
    UserListItem,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

MOCK_PASSWORD = "123456"
DEFAULT_SESSION_TTL_SECONDS = 60 * 60 * 24

# --- Статичные пользователи ---

_MOCK_USERS = {
    "super": SessionUser(
        user_id=1,
        user_name="Super",
        email="super@merchant.local",
        roles=["R_SUPER"],
        buttons=["member:create", "order:create", "campaign:create", "followup:view", "report:export"],
    ),
    "admin": SessionUser(
        user_id=2,
        user_name="Admin",
        email="admin@merchant.local",
        roles=["R_ADMIN"],
        buttons=["member:create", "order:create", "followup:view"],
    ),
    "user": SessionUser(
        user_id=3,
        user_name="User",
        email="user@merchant.local",
        roles=["R_USER"],
        buttons=["followup:view"],
    ),
}

_CREATED_AT = "2026-02-01 10:00:00"

USER_LIST: List[UserListItem] = [
    UserListItem(
        id=user.user_id,
        status="1",
        user_name=user.user_name,
        user_gender="1",
        nick_name=user.user_name,
        user_phone=phone,
        user_email=user.email,
        user_roles=list(user.roles),
        create_by="system",
        create_time=_CREATED_AT,
        update_by="system",
        update_time=_CREATED_AT,
    )
    for user, phone in (
        (_MOCK_USERS["super"], "13800001111"),
        (_MOCK_USERS["admin"], "13800002222"),
        (_MOCK_USERS["user"], "13800003333"),
    )
]

ROLE_LIST: List[RoleListItem] = [
    RoleListItem(role_id=1, role_name="Super Admin", role_code="R_SUPER",
                 description="Full access", enabled=True, create_time=_CREATED_AT),
    RoleListItem(role_id=2, role_name="Admin", role_code="R_ADMIN",
                 description="Operations access without export", enabled=True, create_time=_CREATED_AT),
    RoleListItem(role_id=3, role_name="User", role_code="R_USER",
                 description="Read-only business access", enabled=True, create_time=_CREATED_AT),
]


def resolve_user(user_name: str) -> SessionUser | None:
    user = _MOCK_USERS.get(user_name.strip().lower())
    if user is None:
        return None
    return user.model_copy(deep=True)


# --- Хранилище сессий ---

@dataclass
class _SessionEntry:
    user: SessionUser
    expires_at: float


class MockSessionStore:
    """
    Токен -> пользователь с фиксированным временем жизни.
    Одна эксклюзивная блокировка (не reader/writer) на весь словарь.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_SESSION_TTL_SECONDS):
        self.ttl_seconds = ttl_seconds
        self._lock = threading.Lock()
        self._sessions: dict[str, _SessionEntry] = {}

    def save(self, token: str, user: SessionUser) -> None:
        with self._lock:
            self._sessions[token] = _SessionEntry(user=user, expires_at=time.time() + self.ttl_seconds)

    def get(self, token: str) -> SessionUser | None:
        with self._lock:
            entry = self._sessions.get(token)
            if entry is None:
                return None
            if time.time() >= entry.expires_at:
                del self._sessions[token]
                return None
            return entry.user

    def remove(self, token: str) -> bool:
        with self._lock:
            return self._sessions.pop(token, None) is not None


def parse_auth_token(raw: str | None) -> str:
    """Принимает и "Bearer <token>", и просто токен."""
    raw = (raw or "").strip()
    if raw.lower().startswith("bearer "):
        return raw[7:].strip()
    return raw


def login(store: MockSessionStore, user_name: str, password: str) -> LoginToken:
    user_name = user_name.strip()
    password = password.strip()
    if not user_name or not password:
        raise ApiError(400, "userName and password are required")
    if password != MOCK_PASSWORD:
        raise ApiError(401, "invalid credentials")

    user = resolve_user(user_name)
    if user is None:
        raise ApiError(401, "invalid credentials")

    nanos = time.time_ns()
    token = f"token-{user.user_name.lower()}-{nanos}"
    store.save(token, user)
    logger.info(f"Mock user '{user.user_name}' logged in.")
    return LoginToken(token=token, refresh_token=f"refresh-{nanos}")


def paginate(items: Sequence[T], current: int, size: int) -> List[T]:
    start = (current - 1) * size
    if start >= len(items):
        return []
    return list(items[start:start + size])


# --- Меню ---

def has_role_access(required_roles: List[str] | None, user_roles: List[str]) -> bool:
    if not required_roles:
        return True
    return any(role in user_roles for role in required_roles)


def filter_menu_routes_by_roles(routes: List[MenuRoute], roles: List[str]) -> List[MenuRoute]:
    """
    Оставляет только доступные роли пункты меню.
    Потомки недоступного родителя не рассматриваются вовсе;
    родитель, у которого не осталось потомков, тоже убирается.
    """
    filtered = []
    for route in routes:
        if not has_role_access(route.meta.roles, roles):
            continue
        current = route.model_copy()
        if route.children:
            current.children = filter_menu_routes_by_roles(route.children, roles)
            if not current.children:
                continue
        filtered.append(current)
    return filtered


def base_system_menus() -> List[MenuRoute]:
    return [
        MenuRoute(
            path="/dashboard",
            name="Dashboard",
            component="/index/index",
            meta=MenuMeta(title="仪表盘", icon="ri:dashboard-3-line", roles=["R_SUPER", "R_ADMIN"]),
            children=[
                MenuRoute(
                    path="analysis",
                    name="Analysis",
                    component="/dashboard/analysis",
                    meta=MenuMeta(title="分析页", icon="ri:line-chart-line", keep_alive=True,
                                  roles=["R_SUPER", "R_ADMIN"]),
                ),
            ],
        ),
        MenuRoute(
            path="/operations",
            name="Operations",
            component="/index/index",
            meta=MenuMeta(title="商家运营", icon="ri:store-2-line", roles=["R_SUPER", "R_ADMIN", "R_USER"]),
            children=[
                MenuRoute(
                    path="hub",
                    name="MerchantOpsHub",
                    component="/operations/hub",
                    meta=MenuMeta(
                        title="运营台",
                        icon="ri:line-chart-line",
                        roles=["R_SUPER", "R_ADMIN", "R_USER"],
                        auth_list=[
                            AuthMark(title="新增会员", auth_mark="member:create"),
                            AuthMark(title="新增订单", auth_mark="order:create"),
                            AuthMark(title="新增活动", auth_mark="campaign:create"),
                            AuthMark(title="查看跟进名单", auth_mark="followup:view"),
                            AuthMark(title="导出归因报表", auth_mark="report:export"),
                        ],
                    ),
                ),
            ],
        ),
        MenuRoute(
            path="/system",
            name="System",
            component="/index/index",
            meta=MenuMeta(title="系统管理", icon="ri:user-3-line", roles=["R_SUPER", "R_ADMIN"]),
            children=[
                MenuRoute(
                    path="user",
                    name="User",
                    component="/system/user",
                    meta=MenuMeta(title="用户管理", icon="ri:user-line", keep_alive=True,
                                  roles=["R_SUPER", "R_ADMIN"]),
                ),
                MenuRoute(
                    path="role",
                    name="Role",
                    component="/system/role",
                    meta=MenuMeta(title="角色管理", icon="ri:user-settings-line", keep_alive=True,
                                  roles=["R_SUPER"]),
                ),
                MenuRoute(
                    path="user-center",
                    name="UserCenter",
                    component="/system/user-center",
                    meta=MenuMeta(title="个人中心", icon="ri:user-line", is_hide=True, is_hide_tab=True,
                                  keep_alive=True, roles=["R_SUPER", "R_ADMIN"]),
                ),
                MenuRoute(
                    path="menu",
                    name="Menus",
                    component="/system/menu",
                    meta=MenuMeta(
                        title="菜单管理",
                        icon="ri:menu-line",
                        keep_alive=True,
                        roles=["R_SUPER"],
                        auth_list=[
                            AuthMark(title="新增", auth_mark="add"),
                            AuthMark(title="编辑", auth_mark="edit"),
                            AuthMark(title="删除", auth_mark="delete"),
                        ],
                    ),
                ),
            ],
        ),
    ]
