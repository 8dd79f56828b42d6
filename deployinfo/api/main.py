"""API router setup."""
from fastapi import APIRouter

from deployinfo.api.routes import ops

api_router = APIRouter()
api_router.include_router(ops.router)
