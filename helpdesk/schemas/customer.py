from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from helpdesk.schemas.ticket import ObjectIdStr


class CustomerCreate(BaseModel):
    """Shape of a document in the users collection, before hashing."""

    fullName: str
    email: EmailStr
    password: str
    gender: Optional[str] = None
    roleType: str
    roleId: ObjectIdStr
    contactNo: str
    address: str
    city: str
    state: str
    userType: str
    rm: List[ObjectIdStr] = Field(default_factory=list)
    isWildCardLoginAccess: bool = False
    createdAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
