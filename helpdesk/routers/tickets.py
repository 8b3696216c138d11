# helpdesk/routers/tickets.py
from typing import Awaitable, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from helpdesk.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from helpdesk.dependencies import get_ticket_service
from helpdesk.schemas.response import ApiResponse
from helpdesk.schemas.ticket import (
    MessageCreate,
    TicketCreate,
    TicketStatus,
    TicketType,
    TicketUpdate,
)
from helpdesk.services.ticket_service import TicketService
from helpdesk.utils.logging_config import logger

router = APIRouter(prefix="/tickets", tags=["Tickets"])


# -----------------------------
# Helper: run a service call and turn its envelope into the HTTP response
# -----------------------------
async def respond(call: Awaitable[ApiResponse], failure_message: str) -> JSONResponse:
    try:
        envelope = await call
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(failure_message)
        envelope = ApiResponse.error_response(
            failure_message, str(e), status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=jsonable_encoder(envelope),
        )

    return JSONResponse(
        status_code=envelope.statusCode, content=jsonable_encoder(envelope)
    )


# -----------------------------
# LIST Tickets (filters + pagination)
# -----------------------------
@router.get("/")
async def list_tickets(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    ticket_status: Optional[TicketStatus] = Query(None, alias="status"),
    ticket_type: Optional[TicketType] = Query(None, alias="type"),
    service: TicketService = Depends(get_ticket_service),
):
    return await respond(
        service.list_tickets(
            page=page, limit=limit, ticket_status=ticket_status, ticket_type=ticket_type
        ),
        "Unexpected error occurred while fetching tickets",
    )


# -----------------------------
# SEARCH Tickets
# -----------------------------
@router.get("/search")
async def search_tickets(
    search_text: str = Query("", alias="searchText"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    service: TicketService = Depends(get_ticket_service),
):
    return await respond(
        service.search_tickets(search_text=search_text, page=page, limit=limit),
        "Unexpected error occurred while searching tickets",
    )


# -----------------------------
# CREATE Ticket
# -----------------------------
@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_ticket(
    data: TicketCreate,
    service: TicketService = Depends(get_ticket_service),
):
    return await respond(
        service.create_ticket(data),
        "Unexpected error occurred while creating ticket",
    )


# -----------------------------
# GET Ticket Detail
# -----------------------------
@router.get("/{ticket_id}")
async def get_ticket_detail(
    ticket_id: str,
    service: TicketService = Depends(get_ticket_service),
):
    return await respond(
        service.get_ticket(ticket_id),
        f"Unexpected error occurred while fetching ticket {ticket_id}",
    )


# -----------------------------
# UPDATE Ticket
# -----------------------------
@router.put("/{ticket_id}")
async def update_ticket(
    ticket_id: str,
    data: TicketUpdate,
    service: TicketService = Depends(get_ticket_service),
):
    return await respond(
        service.update_ticket(ticket_id, data),
        f"Unexpected error occurred while updating ticket {ticket_id}",
    )


# -----------------------------
# ADD Message to Ticket
# -----------------------------
@router.post("/{ticket_id}/messages", status_code=status.HTTP_201_CREATED)
async def add_message(
    ticket_id: str,
    message: MessageCreate,
    service: TicketService = Depends(get_ticket_service),
):
    return await respond(
        service.add_message(ticket_id, message),
        f"Unexpected error occurred while adding message to ticket {ticket_id}",
    )


# -----------------------------
# DELETE Ticket
# -----------------------------
@router.delete("/{ticket_id}")
async def delete_ticket(
    ticket_id: str,
    service: TicketService = Depends(get_ticket_service),
):
    return await respond(
        service.delete_ticket(ticket_id),
        f"Unexpected error occurred while deleting ticket {ticket_id}",
    )
