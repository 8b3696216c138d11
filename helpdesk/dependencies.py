# helpdesk/dependencies.py
from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from helpdesk.services.ticket_service import TicketService


async def get_db(request: Request) -> AsyncIOMotorDatabase:
    # Set up once in the application lifespan
    return request.app.state.db


async def get_ticket_service(db: AsyncIOMotorDatabase = Depends(get_db)) -> TicketService:
    return TicketService(db)
