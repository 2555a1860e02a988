"""
Runtime configuration for the browser page (served elsewhere)
"""

from fastapi import APIRouter, Depends

from taskboard.context import ServiceContext, get_context

router = APIRouter(tags=["client"])


@router.get("/config")
async def client_config(context: ServiceContext = Depends(get_context)):
    """Where the page should send its task calls; "" means same origin"""
    return {"apiUrl": context.settings.API_URL or ""}
