from enum import Enum
from typing import Annotated, List, Optional

from bson import ObjectId
from pydantic import AfterValidator, AliasChoices, BaseModel, ConfigDict, Field


class TicketType(str, Enum):
    BILLING = "support/billing"
    TECHNICAL = "support/technical"
    GENERAL = "support/general"


class TicketStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


def _check_object_id(value: str) -> str:
    if not ObjectId.is_valid(value):
        raise ValueError("must be a 24-character hex identifier")
    return value.lower()


ObjectIdStr = Annotated[str, AfterValidator(_check_object_id)]


class MessageCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    comments: str = Field(..., min_length=1)
    commentBy: str = Field(..., min_length=1)


class TicketCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    ticketId: str = Field(..., min_length=1)
    ticketType: TicketType = TicketType.GENERAL
    # Older clients still send customerId
    userId: ObjectIdStr = Field(..., validation_alias=AliasChoices("userId", "customerId"))
    ticketStatus: TicketStatus = TicketStatus.OPEN
    messages: List[MessageCreate] = Field(default_factory=list)


class TicketUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    ticketId: Optional[str] = Field(None, min_length=1)
    ticketType: Optional[TicketType] = None
    ticketStatus: Optional[TicketStatus] = None
    userId: Optional[ObjectIdStr] = Field(
        None, validation_alias=AliasChoices("userId", "customerId")
    )
