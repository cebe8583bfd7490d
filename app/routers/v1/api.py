# app/routers/v1/api.py

from fastapi import APIRouter

from app.routers.v1.endpoints import campaigns, members, orders, reports

# Создаем главный роутер для API версии v1
# Все пути, подключенные к нему, будут иметь префикс /api/v1
api_router = APIRouter(prefix="/api/v1")

api_router.include_router(members.router, tags=["Members"])
api_router.include_router(orders.router, tags=["Orders"])
api_router.include_router(campaigns.router, tags=["Campaigns"])
api_router.include_router(reports.router, tags=["Reports"])
