from fastapi import APIRouter

from .endpoints import auth, users, mcqs, mock_tests, subscription, discussions, health

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(mcqs.router, prefix="/mcqs", tags=["mcqs"])
api_router.include_router(mock_tests.router, prefix="/mock-tests", tags=["mock-tests"])
api_router.include_router(subscription.router, prefix="/subscription", tags=["subscription"])
api_router.include_router(discussions.router, prefix="/discussions", tags=["discussions"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
