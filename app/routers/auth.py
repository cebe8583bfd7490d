# app/routers/auth.py
#
# Эндпоинты mock-авторизации для SPA-админки (пути без /api/v1).

import logging
from typing import List

from fastapi import APIRouter, Depends, Query

from app.core.errors import ApiError
from app.dependencies import get_bearer_token, get_current_session_user, get_session_store
from app.schemas.auth import LoginRequest, LoginToken, MenuRoute, RoleListItem, SessionUser, UserListItem
from app.schemas.common import ApiResponse, PaginatedData
from app.services import auth as auth_service
from app.services.auth import MockSessionStore
from app.utils.params import clamp_int

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api")


def get_paging(
    current: str | None = Query(None, description="Номер страницы, 1..1000"),
    size: str | None = Query(None, description="Размер страницы, 1..200"),
) -> tuple[int, int]:
    return clamp_int(current, 1, 1, 1000), clamp_int(size, 10, 1, 200)


@router.post("/auth/login", response_model=ApiResponse[LoginToken])
async def login(
    payload: LoginRequest,
    sessions: MockSessionStore = Depends(get_session_store),
):
    token = auth_service.login(sessions, payload.user_name, payload.password)
    return ApiResponse(data=token)


@router.post("/auth/logout", response_model=ApiResponse[dict])
async def logout(
    token: str = Depends(get_bearer_token),
    sessions: MockSessionStore = Depends(get_session_store),
):
    """Удаляет сессию текущего токена. Неизвестный токен -> 401."""
    if not token or not sessions.remove(token):
        raise ApiError(401, "unauthorized")
    logger.info("Mock session closed.")
    return ApiResponse(data={})


@router.get("/user/info", response_model=ApiResponse[SessionUser])
async def get_user_info(user: SessionUser = Depends(get_current_session_user)):
    return ApiResponse(data=user)


@router.get("/user/list", response_model=ApiResponse[PaginatedData[UserListItem]])
async def list_users(
    paging: tuple[int, int] = Depends(get_paging),
    user: SessionUser = Depends(get_current_session_user),
):
    current, size = paging
    records = auth_service.paginate(auth_service.USER_LIST, current, size)
    return ApiResponse(data=PaginatedData(
        records=records, current=current, size=size, total=len(auth_service.USER_LIST),
    ))


@router.get("/role/list", response_model=ApiResponse[PaginatedData[RoleListItem]])
async def list_roles(
    paging: tuple[int, int] = Depends(get_paging),
    user: SessionUser = Depends(get_current_session_user),
):
    current, size = paging
    records = auth_service.paginate(auth_service.ROLE_LIST, current, size)
    return ApiResponse(data=PaginatedData(
        records=records, current=current, size=size, total=len(auth_service.ROLE_LIST),
    ))


@router.get(
    "/v3/system/menus",
    response_model=ApiResponse[List[MenuRoute]],
    response_model_exclude_none=True,
)
async def get_system_menus(user: SessionUser = Depends(get_current_session_user)):
    """Дерево меню, отфильтрованное по ролям пользователя."""
    menus = auth_service.filter_menu_routes_by_roles(auth_service.base_system_menus(), user.roles)
    return ApiResponse(data=menus)
