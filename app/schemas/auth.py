# app/schemas/auth.py

from typing import List

from app.schemas.common import CamelModel


class LoginRequest(CamelModel):
    user_name: str = ""
    password: str = ""


class LoginToken(CamelModel):
    token: str
    refresh_token: str


class SessionUser(CamelModel):
    """То, что фронтенд получает из /api/user/info."""
    user_id: int
    user_name: str
    email: str
    avatar: str = ""
    roles: List[str]
    buttons: List[str]


class UserListItem(CamelModel):
    id: int
    avatar: str = ""
    status: str
    user_name: str
    user_gender: str
    nick_name: str
    user_phone: str
    user_email: str
    user_roles: List[str]
    create_by: str
    create_time: str
    update_by: str
    update_time: str


class RoleListItem(CamelModel):
    role_id: int
    role_name: str
    role_code: str
    description: str
    enabled: bool
    create_time: str


class AuthMark(CamelModel):
    title: str
    auth_mark: str


class MenuMeta(CamelModel):
    # None-поля не попадают в ответ (фронтенд ждет их отсутствия)
    title: str
    icon: str | None = None
    keep_alive: bool | None = None
    is_hide: bool | None = None
    is_hide_tab: bool | None = None
    roles: List[str] | None = None
    auth_list: List[AuthMark] | None = None


class MenuRoute(CamelModel):
    path: str
    name: str | None = None
    component: str | None = None
    meta: MenuMeta
    children: List["MenuRoute"] | None = None
