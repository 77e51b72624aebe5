from fastapi import APIRouter
from app.api.endpoints import auth, users, services, workers, requests, dashboard

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(services.router, prefix="/services", tags=["services"])
api_router.include_router(workers.router, prefix="/workers", tags=["workers"])
api_router.include_router(requests.router, prefix="/requests", tags=["requests"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])

@api_router.get("/health")
def health_check():
    return {"status": "ok"}
