"""FastAPI dependencies that hand out the application's services."""

from fastapi import Request

from ...services.auth_service import AuthService
from ...services.trip_service import TripService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_trip_service(request: Request) -> TripService:
    return request.app.state.trip_service
