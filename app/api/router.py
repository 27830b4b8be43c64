"""
Main API router for the application

This module contains the main API router for the application. It includes the
routes generating the social card images.
"""
from fastapi import APIRouter

from app.api.routes import og


api_router = APIRouter()
api_router.include_router(og.router, prefix="/og", tags=["OG"])

tags_metadata = [
    {
        "name": "OG",
        "description": "The **Open Graph** card images used by link previews are generated here.",
    },
]
