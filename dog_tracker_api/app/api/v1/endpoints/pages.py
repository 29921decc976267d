"""
Top-level page routes.

``/page4`` is the historical address of the dog list page and is
served outside the versioned API prefix.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from dog_tracker_api.app.api.deps import get_dog_service
from dog_tracker_api.app.api.v1.endpoints.dogs import render_dog_page
from dog_tracker_api.app.services.dog_service import DogService

router = APIRouter()


@router.get("/page4", response_model=None)
async def page4(request: Request, service: DogService = Depends(get_dog_service)) -> Response:
    """Render the dog list page."""
    return await render_dog_page(request, service)
