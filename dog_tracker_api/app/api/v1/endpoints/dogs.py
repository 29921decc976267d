"""
Dog endpoints for API v1.

These routes list dogs, render the dog list page, look a dog up by
name, create dogs and search for a dog (which ages it by one year).

Failures are reported as JSON bodies:

* a missing ``dogsName`` or ``breed`` on create is a 400 with
  ``{"error": ...}``;
* a missing ``name`` on the lookup routes, or a search for an unknown
  dog, is a normal 200 with ``{"error": ...}``;
* store failures are a 200 with ``{"err": <store message>}``.

The list page follows ``settings.page_error_mode`` when the store
fails: ``json`` returns ``{"err": ...}``, ``html`` renders the error
page with status 500.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response
from fastapi.templating import Jinja2Templates

from dog_tracker_api.app.api.deps import get_dog_service
from dog_tracker_api.app.core.config import settings
from dog_tracker_api.app.schemas.dog import DogRead
from dog_tracker_api.app.services.dog_service import DogService, DogValidationError
from dog_tracker_api.app.services.dog_store import DogStoreError

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[3] / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter()


def _store_error_response(exc: DogStoreError) -> JSONResponse:
    logger.error("Dog store error: %s", exc)
    return JSONResponse({"err": str(exc)})


async def _read_payload(request: Request) -> Dict[str, Any]:
    """Return the request body as a dict, accepting JSON or form data."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except ValueError:
            logger.warning("Ignoring malformed JSON body on dog create")
            return {}
        return data if isinstance(data, dict) else {}
    form = await request.form()
    return dict(form)


async def render_dog_page(request: Request, service: DogService) -> Response:
    """Render the dog list page, or report the store failure."""
    try:
        dogs = await service.list_dogs()
    except DogStoreError as exc:
        if settings.page_error_mode == "html":
            logger.error("Dog store error while rendering page: %s", exc)
            return templates.TemplateResponse(
                request,
                "error.html",
                {"title": settings.project_name, "error": str(exc)},
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return _store_error_response(exc)
    return templates.TemplateResponse(
        request,
        "dogs.html",
        {"title": settings.project_name, "dogs": dogs},
    )


@router.get("/", response_model=None)
async def list_dogs(service: DogService = Depends(get_dog_service)) -> Any:
    """Return every dog as a JSON array."""
    try:
        dogs = await service.list_dogs()
    except DogStoreError as exc:
        return _store_error_response(exc)
    return jsonable_encoder(dogs)


@router.get("/page", response_model=None)
async def dog_page(request: Request, service: DogService = Depends(get_dog_service)) -> Response:
    """Render the HTML page listing every dog."""
    return await render_dog_page(request, service)


@router.get("/find", response_model=None)
async def find_dog(
    name: Optional[str] = Query(None),
    service: DogService = Depends(get_dog_service),
) -> Any:
    """Return the first dog with the given name, or ``null`` if there is none."""
    try:
        dog = await service.find_by_name(name)
    except DogValidationError as exc:
        logger.warning("Rejected dog lookup: %s", exc)
        return JSONResponse({"error": str(exc)})
    except DogStoreError as exc:
        return _store_error_response(exc)
    return JSONResponse(jsonable_encoder(dog))


@router.post("/", response_model=None)
async def create_dog(request: Request, service: DogService = Depends(get_dog_service)) -> Any:
    """Create a dog from ``dogsName``, ``breed`` and an optional ``age``.

    Accepts a form-encoded or JSON body.  Returns the stored
    ``{name, breed, age}``.
    """
    payload = await _read_payload(request)
    try:
        dog = await service.create_dog(
            payload.get("dogsName"),
            payload.get("breed"),
            payload.get("age"),
        )
    except DogValidationError as exc:
        logger.warning("Rejected dog create: %s", exc)
        return JSONResponse({"error": str(exc)}, status_code=status.HTTP_400_BAD_REQUEST)
    except DogStoreError as exc:
        return _store_error_response(exc)
    return dog


@router.get("/search", response_model=None)
async def search_dog(
    name: Optional[str] = Query(None),
    service: DogService = Depends(get_dog_service),
) -> Any:
    """Find a dog by name and increase its age by one.

    Searching for a dog that does not exist is not an error; the
    response carries an explanatory message instead.
    """
    try:
        dog = await service.search_and_age(name)
    except DogValidationError as exc:
        logger.warning("Rejected dog search: %s", exc)
        return JSONResponse({"error": str(exc)})
    except DogStoreError as exc:
        return _store_error_response(exc)
    if dog is None:
        return JSONResponse({"error": "That dog does not exist"})
    return dog


@router.get("/last", response_model=DogRead)
async def last_dog(service: DogService = Depends(get_dog_service)) -> DogRead:
    """Return the last dog created or aged by a search."""
    return service.get_last_touched()
