# helpdesk/seed.py
import asyncio
from datetime import datetime, timedelta, timezone

from bson import ObjectId

from helpdesk.config import MONGODB_URI
from helpdesk.db import CUSTOMERS, TICKETS, create_client, get_database, init_indexes
from helpdesk.schemas.customer import CustomerCreate
from helpdesk.security import get_password_hash
from helpdesk.utils.logging_config import logger

SAMPLE_CUSTOMERS = [
    CustomerCreate(
        fullName="Asha Rao",
        email="asha.rao@example.com",
        password="changeme-asha",
        roleType="customer",
        roleId="64b7f0c2a1b2c3d4e5f60001",
        contactNo="+91-9000000001",
        address="12 Lake Road",
        city="Pune",
        state="MH",
        userType="external",
    ),
    CustomerCreate(
        fullName="Daniel Okafor",
        email="daniel.okafor@example.com",
        password="changeme-daniel",
        roleType="customer",
        roleId="64b7f0c2a1b2c3d4e5f60001",
        contactNo="+91-9000000002",
        address="4 Hill Street",
        city="Bengaluru",
        state="KA",
        userType="external",
        isWildCardLoginAccess=True,
    ),
]


def build_customer_document(customer: CustomerCreate) -> dict:
    document = customer.model_dump()
    document["password"] = get_password_hash(customer.password)
    document["roleId"] = ObjectId(customer.roleId)
    document["rm"] = [ObjectId(rm) for rm in customer.rm]
    return document


def build_ticket_documents(customer_ids: list) -> list:
    now = datetime.now(timezone.utc)
    samples = [
        ("TCK-1001", "support/billing", "open", "I was charged twice this month"),
        ("TCK-1002", "support/technical", "in_progress", "App crashes on login"),
        ("TCK-1003", "support/general", "resolved", "How do I update my address?"),
    ]

    tickets = []
    for index, (ticket_id, ticket_type, ticket_status, comment) in enumerate(samples):
        created_at = now - timedelta(days=len(samples) - index)
        tickets.append({
            "ticketId": ticket_id,
            "ticketType": ticket_type,
            "ticketStatus": ticket_status,
            "userId": customer_ids[index % len(customer_ids)],
            "messages": [{
                "_id": ObjectId(),
                "comments": comment,
                "commentBy": "customer",
                "createdAt": created_at,
            }],
            "createdAt": created_at,
            "updatedAt": created_at,
        })
    return tickets


async def seed():
    client = create_client(MONGODB_URI)
    db = get_database(client)
    try:
        await db[TICKETS].delete_many({})  # clear existing sample data
        await db[CUSTOMERS].delete_many({})
        await init_indexes(db)

        result = await db[CUSTOMERS].insert_many(
            [build_customer_document(c) for c in SAMPLE_CUSTOMERS]
        )
        await db[TICKETS].insert_many(build_ticket_documents(result.inserted_ids))
        logger.info(
            "Seeded %d customers and tickets into '%s'",
            len(result.inserted_ids),
            db.name,
        )
    finally:
        client.close()


if __name__ == "__main__":
    asyncio.run(seed())
