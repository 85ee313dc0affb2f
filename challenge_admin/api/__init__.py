from fastapi import APIRouter

from challenge_admin.api.admin import router as admin_router

router = APIRouter()
router.include_router(admin_router)

__all__ = ["router"]
