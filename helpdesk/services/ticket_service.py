import re
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from helpdesk.db import CUSTOMERS, TICKETS
from helpdesk.schemas.response import ApiResponse
from helpdesk.schemas.ticket import (
    MessageCreate,
    TicketCreate,
    TicketStatus,
    TicketType,
    TicketUpdate,
)
from helpdesk.utils.logging_config import logger

DUPLICATE_TICKET = "DUPLICATE_TICKET"
TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
INVALID_ID = "INVALID_ID"

# Left join onto the owning customer, keeping tickets whose customer is gone
CUSTOMER_LOOKUP = [
    {
        "$lookup": {
            "from": CUSTOMERS,
            "let": {"userId": "$userId"},
            "pipeline": [
                {"$match": {"$expr": {"$eq": ["$_id", "$$userId"]}}},
                {"$project": {"_id": 1, "fullName": 1, "email": 1}},
            ],
            "as": "customer",
        }
    },
    {"$unwind": {"path": "$customer", "preserveNullAndEmptyArrays": True}},
]

SEARCH_FIELDS = (
    "ticketId",
    "ticketType",
    "ticketStatus",
    "messages.comments",
    "customer.fullName",
    "customer.email",
)


# -----------------------------
# Helper: Convert ObjectId to string (recursive for nested dicts/lists)
# -----------------------------
def serialize_document(document):
    if document is None:
        return None

    def serialize(obj):
        if isinstance(obj, dict):
            return {k: serialize(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [serialize(i) for i in obj]
        elif isinstance(obj, ObjectId):
            return str(obj)
        else:
            return obj

    return serialize(document)


def _utcnow() -> datetime:
    # BSON dates keep milliseconds only
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def _build_message(message: MessageCreate, created_at: datetime) -> dict:
    return {
        "_id": ObjectId(),
        "comments": message.comments,
        "commentBy": message.commentBy,
        "createdAt": created_at,
    }


def _internal_error(message: str, error: Exception) -> HTTPException:
    logger.exception("%s: %s", message, error)
    envelope = ApiResponse.error_response(
        message, str(error), status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=jsonable_encoder(envelope),
    )


def _not_found(ticket_id: str) -> ApiResponse:
    logger.info("Ticket %s not found", ticket_id)
    return ApiResponse.error_response(
        f"Ticket with ID {ticket_id} not found",
        TICKET_NOT_FOUND,
        status.HTTP_404_NOT_FOUND,
    )


def _invalid_id() -> ApiResponse:
    return ApiResponse.error_response("Invalid ticket ID format", INVALID_ID)


def _duplicate() -> ApiResponse:
    return ApiResponse.error_response(
        "Ticket with this ID already exists",
        DUPLICATE_TICKET,
        status.HTTP_409_CONFLICT,
    )


class TicketService:
    """
    Ticket operations over the tickets collection.

    Every method returns an ApiResponse. Expected outcomes (missing ticket,
    malformed id, duplicate ticketId) come back as error envelopes; store
    failures are raised as HTTP 500 exceptions carrying an error envelope.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.tickets = db[TICKETS]

    async def create_ticket(self, data: TicketCreate) -> ApiResponse:
        now = _utcnow()
        ticket = {
            "ticketId": data.ticketId,
            "ticketType": data.ticketType.value,
            "ticketStatus": data.ticketStatus.value,
            "userId": ObjectId(data.userId),
            "messages": [_build_message(m, now) for m in data.messages],
            "createdAt": now,
            "updatedAt": now,
        }

        try:
            result = await self.tickets.insert_one(ticket)
        except DuplicateKeyError:
            logger.warning("Rejected duplicate ticketId %s", data.ticketId)
            return _duplicate()
        except PyMongoError as e:
            raise _internal_error("Failed to create ticket", e)

        ticket["_id"] = result.inserted_id
        logger.info("Created ticket %s (%s)", data.ticketId, result.inserted_id)
        return ApiResponse.success_response(
            serialize_document(ticket),
            "Ticket created successfully",
            status.HTTP_201_CREATED,
        )

    async def list_tickets(
        self,
        page: int = 1,
        limit: int = 10,
        ticket_status: Optional[TicketStatus] = None,
        ticket_type: Optional[TicketType] = None,
    ) -> ApiResponse:
        query = {}
        if ticket_status:
            query["ticketStatus"] = ticket_status.value
        if ticket_type:
            query["ticketType"] = ticket_type.value

        pipeline = [
            {"$match": query},
            {"$sort": {"createdAt": -1}},
            {"$skip": (page - 1) * limit},
            {"$limit": limit},
            *CUSTOMER_LOOKUP,
        ]

        try:
            tickets = await self.tickets.aggregate(pipeline).to_list(length=None)
            total = await self.tickets.count_documents(query)
        except PyMongoError as e:
            raise _internal_error("Failed to retrieve tickets", e)

        return ApiResponse.success_response(
            {"tickets": serialize_document(tickets), "total": total},
            "Tickets retrieved successfully",
        )

    async def search_tickets(
        self, search_text: str = "", page: int = 1, limit: int = 10
    ) -> ApiResponse:
        pipeline = list(CUSTOMER_LOOKUP)
        if search_text:
            pattern = {"$regex": re.escape(search_text), "$options": "i"}
            pipeline.append(
                {"$match": {"$or": [{field: pattern} for field in SEARCH_FIELDS]}}
            )
        pipeline += [
            {"$sort": {"createdAt": -1}},
            {
                "$facet": {
                    "tickets": [{"$skip": (page - 1) * limit}, {"$limit": limit}],
                    "total": [{"$count": "count"}],
                }
            },
        ]

        try:
            result = await self.tickets.aggregate(pipeline).to_list(length=1)
        except PyMongoError as e:
            raise _internal_error("Failed to search tickets", e)

        facet = result[0] if result else {"tickets": [], "total": []}
        total = facet["total"][0]["count"] if facet["total"] else 0
        return ApiResponse.success_response(
            {"tickets": serialize_document(facet["tickets"]), "total": total},
            "Tickets retrieved successfully",
        )

    async def get_ticket(self, ticket_id: str) -> ApiResponse:
        if not ObjectId.is_valid(ticket_id):
            return _invalid_id()

        try:
            ticket = await self.tickets.find_one({"_id": ObjectId(ticket_id)})
        except PyMongoError as e:
            raise _internal_error("Failed to retrieve ticket", e)

        if not ticket:
            return _not_found(ticket_id)
        return ApiResponse.success_response(
            serialize_document(ticket), "Ticket retrieved successfully"
        )

    async def update_ticket(self, ticket_id: str, data: TicketUpdate) -> ApiResponse:
        if not ObjectId.is_valid(ticket_id):
            return _invalid_id()

        fields = data.model_dump(mode="json", exclude_none=True)
        if "userId" in fields:
            fields["userId"] = ObjectId(fields["userId"])
        fields["updatedAt"] = _utcnow()

        try:
            ticket = await self.tickets.find_one_and_update(
                {"_id": ObjectId(ticket_id)},
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            logger.warning("Rejected update of %s to a duplicate ticketId", ticket_id)
            return _duplicate()
        except PyMongoError as e:
            raise _internal_error("Failed to update ticket", e)

        if not ticket:
            return _not_found(ticket_id)
        return ApiResponse.success_response(
            serialize_document(ticket), "Ticket updated successfully"
        )

    async def add_message(self, ticket_id: str, message: MessageCreate) -> ApiResponse:
        if not ObjectId.is_valid(ticket_id):
            return _invalid_id()

        now = _utcnow()
        try:
            ticket = await self.tickets.find_one_and_update(
                {"_id": ObjectId(ticket_id)},
                {
                    "$push": {"messages": _build_message(message, now)},
                    "$set": {"updatedAt": now},
                },
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise _internal_error("Failed to add message to ticket", e)

        if not ticket:
            return _not_found(ticket_id)
        return ApiResponse.success_response(
            serialize_document(ticket),
            "Message added to ticket successfully",
            status.HTTP_201_CREATED,
        )

    async def delete_ticket(self, ticket_id: str) -> ApiResponse:
        if not ObjectId.is_valid(ticket_id):
            return _invalid_id()

        try:
            ticket = await self.tickets.find_one_and_delete({"_id": ObjectId(ticket_id)})
        except PyMongoError as e:
            raise _internal_error("Failed to delete ticket", e)

        if not ticket:
            return _not_found(ticket_id)
        logger.info("Deleted ticket %s", ticket_id)
        return ApiResponse.success_response(
            serialize_document(ticket), "Ticket deleted successfully"
        )
