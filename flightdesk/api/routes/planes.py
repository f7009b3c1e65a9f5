"""Read-only fleet endpoints."""

from fastapi import APIRouter, Depends

from ..dependencies import ServiceContainer, dump, get_services, ok

router = APIRouter(prefix="/planes", tags=["planes"])


@router.get("")
def list_planes(services: ServiceContainer = Depends(get_services)):
    return ok(dump(services.management.list_planes()))


@router.get("/{plane_id}")
def get_plane(plane_id: int, services: ServiceContainer = Depends(get_services)):
    return ok(dump(services.management.get_plane(plane_id)))
