"""
Realty CRM API - Client Service
=================================

What:  CRUD for the caller's clients (buyers, sellers, leads).
How:   Binds OwnedResourceService to the Client model and schemas.
Who:   Called by app.routes.clients.
"""

from app.models.client import Client
from app.schemas.client import ClientResponse
from app.services.base import OwnedResourceService


class ClientService(OwnedResourceService):
    """Business logic layer for client operations."""

    model = Client
    response_schema = ClientResponse
    resource_name = "Client"


# ── Singleton Instance ────────────────────────────────────────────────────
# Stateless: every call receives its own session
client_service = ClientService()
