from fastapi import APIRouter

from goal_tracker.api.v1.routes import goals, transactions, notification

api_router = APIRouter()

api_router.include_router(goals.router)
api_router.include_router(transactions.router)
api_router.include_router(notification.router)
