"""
Health endpoint for API v1.

Returns a static payload with the project name and version so load
balancers and operators can check the service is up.
"""

from typing import Any, Dict

from fastapi import APIRouter

from estoque_api.app.core.config import settings

router = APIRouter()


@router.get("/", response_model=Dict[str, Any])
async def get_health() -> Dict[str, Any]:
    return {"status": "ok", "project": settings.project_name, "version": settings.api_version}
