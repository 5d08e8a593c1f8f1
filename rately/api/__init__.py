"""API routes."""

from fastapi import APIRouter

from rately.api import admin, auth, stores

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
router.include_router(stores.router, prefix="/stores", tags=["stores"])
