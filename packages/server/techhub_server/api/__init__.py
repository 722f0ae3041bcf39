"""
API router.

All marketplace endpoints are mounted under /api.
"""

from fastapi import APIRouter
from . import admin, auth, pitches, projects, ratings, requests, uploads, users

router = APIRouter()

router.include_router(auth.router, tags=["Authentication"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(users.sellers_router, prefix="/sellers", tags=["Users"])
router.include_router(projects.router, prefix="/projects", tags=["Projects"])
router.include_router(requests.router, prefix="/requests", tags=["Requests"])
router.include_router(pitches.router, prefix="/pitches", tags=["Pitches"])
router.include_router(ratings.router, prefix="/ratings", tags=["Ratings"])
router.include_router(uploads.router, prefix="/uploads", tags=["Uploads"])
router.include_router(admin.router, prefix="/admin", tags=["Admin"])
