"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.
"""

from fastapi import APIRouter

from .endpoints import pets

router = APIRouter()

router.include_router(pets.router, prefix="/pets", tags=["pets"])
