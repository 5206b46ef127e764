"""
Aggregate API routes.

Convention: Use "" (not "/") for the root path of a segment (e.g. @router.get(""), @router.post(""))
so the route is /opportunities not /opportunities/. This avoids 307 redirects when the
request arrives without a trailing slash.
"""

from fastapi import APIRouter

from opportunity_api.api.endpoints import notes, opportunities, steps

api_router = APIRouter()

api_router.include_router(opportunities.router, prefix="")
api_router.include_router(notes.router, prefix="")
api_router.include_router(steps.router, prefix="")
