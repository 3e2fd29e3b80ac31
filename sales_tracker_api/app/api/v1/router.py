"""
Top-level router for version 1 of the API.

Aggregates the domain routers.  The application mounts this router
under ``/api`` (not ``/api/v1``) because existing dashboard and form
integrations call the unversioned paths.
"""

from fastapi import APIRouter

from .endpoints import auth, entries, forms

router = APIRouter()

router.include_router(auth.router, tags=["auth"])
router.include_router(entries.router, tags=["entries"])
router.include_router(forms.router, tags=["forms"])
