"""API routes, mounted under API_PREFIX."""

from fastapi import APIRouter

from calcsaas.api import auth, calculate, debug, health, history


def build_router(include_debug: bool = False) -> APIRouter:
    router = APIRouter()
    router.include_router(health.router, prefix="/health", tags=["health"])
    router.include_router(auth.router, tags=["auth"])
    router.include_router(calculate.router, prefix="/calculate", tags=["calculate"])
    router.include_router(history.router, prefix="/history", tags=["history"])
    if include_debug:
        router.include_router(debug.router, prefix="/debug", tags=["debug"])
    return router
