"""
Report endpoints. Report bodies use camelCase keys.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query

from ..dependencies import ServiceContainer, dump, get_services, ok

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/general")
def general_report(services: ServiceContainer = Depends(get_services)):
    return ok(dump(services.reports.general_report()))


@router.get("/sales")
def sales_report(
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    services: ServiceContainer = Depends(get_services),
):
    return ok(dump(services.reports.sales_report(start_date, end_date)))


@router.get("/flight-load")
def flight_load_report(
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    services: ServiceContainer = Depends(get_services),
):
    return ok(dump(services.reports.load_report(start_date, end_date)))
