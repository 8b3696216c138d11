from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from helpdesk.dependencies import get_ticket_service
from helpdesk.main import app
from helpdesk.services.ticket_service import TicketService


@pytest.fixture
def tickets_collection():
    """A stand-in for the Motor tickets collection."""
    collection = MagicMock()
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.count_documents = AsyncMock(return_value=0)
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.find_one_and_delete = AsyncMock(return_value=None)
    collection.aggregate.return_value.to_list = AsyncMock(return_value=[])
    return collection


@pytest.fixture
def service(tickets_collection):
    db = MagicMock()
    db.__getitem__.side_effect = lambda name: {"tickets": tickets_collection}[name]
    return TicketService(db)


@pytest.fixture
def fake_service():
    """Service double for router tests; each method is an AsyncMock."""
    fake = MagicMock(spec=TicketService)
    for name in (
        "create_ticket",
        "list_tickets",
        "search_tickets",
        "get_ticket",
        "update_ticket",
        "add_message",
        "delete_ticket",
    ):
        setattr(fake, name, AsyncMock())
    return fake


@pytest.fixture
def client(fake_service):
    # No context manager: the lifespan (and a real Mongo connection) never runs
    app.dependency_overrides[get_ticket_service] = lambda: fake_service
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
