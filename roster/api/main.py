"""API router setup."""
from fastapi import APIRouter

from roster.api.routes import students

api_router = APIRouter()
api_router.include_router(students.router)
