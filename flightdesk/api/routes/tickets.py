"""
Ticket endpoints: sell, cancel and the ticket listings.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from ...models.ticket import TicketCreateModel
from ..dependencies import ServiceContainer, dump, get_services, ok

router = APIRouter(prefix="/tickets", tags=["tickets"])


@router.get("/date-range")
def tickets_by_flight_date(
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    services: ServiceContainer = Depends(get_services),
):
    return ok(dump(services.booking.list_tickets_by_flight_date(start_date, end_date)))


@router.get("/sales-by-counter")
def sales_by_counter(
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    services: ServiceContainer = Depends(get_services),
):
    report = services.reports.sales_report(start_date, end_date)
    return ok(dump(report.sales_by_counter))


@router.get("/flight/{flight_number}")
def tickets_for_flight(flight_number: str, services: ServiceContainer = Depends(get_services)):
    return ok(dump(services.booking.list_tickets_for_flight(flight_number)))


@router.get("")
def list_tickets(services: ServiceContainer = Depends(get_services)):
    return ok(dump(services.booking.list_tickets()))


@router.post("", status_code=status.HTTP_201_CREATED)
def sell_ticket(payload: TicketCreateModel, services: ServiceContainer = Depends(get_services)):
    return ok(dump(services.booking.sell(payload)))


@router.get("/{ticket_id}")
def get_ticket(ticket_id: int, services: ServiceContainer = Depends(get_services)):
    return ok(dump(services.booking.get_ticket(ticket_id)))


@router.delete("/{ticket_id}")
def cancel_ticket(ticket_id: int, services: ServiceContainer = Depends(get_services)):
    services.booking.cancel_ticket(ticket_id)
    return ok(message="Ticket deleted successfully")
