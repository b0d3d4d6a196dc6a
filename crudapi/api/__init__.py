from fastapi import APIRouter

from crudapi.interfaces.http.routers import auth, bots, health, users


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
    router.include_router(users.router, prefix="/v1/users", tags=["Users"])
    router.include_router(bots.router, prefix="/v1/bots", tags=["Bots"])
    router.include_router(health.router, prefix="/health", tags=["Health"])
    return router


__all__ = [
    "create_api_router",
]
