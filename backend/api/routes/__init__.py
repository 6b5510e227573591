"""API Routes."""

from fastapi import APIRouter

from .admin_content import router as admin_content_router
from .auth import router as auth_router
from .billing import router as billing_router
from .catalogue import router as catalogue_router
from .coding_categories import router as coding_categories_router
from .coding_questions import router as coding_questions_router
from .health import router as health_router
from .projects import router as projects_router
from .questions import router as questions_router
from .system_design import router as system_design_router

# Create main API router
api_router = APIRouter()

api_router.include_router(health_router, tags=["Health"])
api_router.include_router(auth_router)
api_router.include_router(billing_router)
api_router.include_router(catalogue_router)
api_router.include_router(questions_router)
api_router.include_router(coding_categories_router)
api_router.include_router(coding_questions_router)
api_router.include_router(system_design_router)
api_router.include_router(projects_router)
api_router.include_router(admin_content_router)
