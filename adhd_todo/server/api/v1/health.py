"""
Health and version endpoints.

Unauthenticated probes for load balancers and deploy checks. They sit at the
application root, outside the ``/api/v1`` prefix.
"""

from fastapi import APIRouter

from adhd_todo.server.core.constant import VERSION

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Report that the API process is up.",
    response_description="Status object.",
)
async def health_check():
    """Liveness probe. Does not touch the database."""
    return {"status": "ok"}


@router.get(
    "/version",
    summary="Get Version",
    description="Report the application version and API schema version.",
    response_description="Version object.",
)
async def version():
    return {"version": VERSION, "schema_version": "v1"}
