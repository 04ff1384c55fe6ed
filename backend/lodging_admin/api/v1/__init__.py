"""Versioned API router."""

from fastapi import APIRouter

from . import auth, health, imports, inns, metrics, reservations

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(inns.router, prefix="/inns", tags=["inns"])
router.include_router(
    reservations.router, prefix="/reservations", tags=["reservations"]
)
router.include_router(imports.router, prefix="/imports", tags=["imports"])
router.include_router(metrics.router, prefix="/metrics", tags=["metrics"])
