from fastapi import APIRouter

from app.api.v1.routes import auth, incomes, expenses, categories, dashboard

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(incomes.router)
api_router.include_router(expenses.router)
api_router.include_router(categories.router)
api_router.include_router(dashboard.router)
