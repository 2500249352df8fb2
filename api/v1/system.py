"""
System endpoints.

Health checks and system status.
"""

from fastapi import APIRouter

from ..deps import ServicesDep

router = APIRouter()


@router.get("/status")
async def get_status(services: ServicesDep):
    """
    Health check endpoint.

    Also reports how many users are registered.
    """
    return {
        "status": "healthy",
        "service": "accounts-api",
        "users": len(services.context.users.list_users())
    }
