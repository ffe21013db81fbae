from fastapi import APIRouter

from address_validation.api.validation import router as validation_router

router = APIRouter(prefix="/api")
router.include_router(validation_router)
