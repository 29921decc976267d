"""Dependency helpers shared by the API routers."""

from fastapi import Request

from dog_tracker_api.app.services.dog_service import DogService


def get_dog_service(request: Request) -> DogService:
    """Return the ``DogService`` built by ``create_app``."""
    return request.app.state.dog_service
