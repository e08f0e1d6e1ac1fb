"""
Realty CRM API - Client Request/Response Schemas
==================================================

What:  Pydantic models defining the client API contract.
How:   ClientCreate validates POST bodies, ClientUpdate validates PUT bodies,
       ClientResponse serializes ORM rows.

Create vs Update:
    ClientUpdate declares the same fields with the same constraint types as
    ClientCreate, all optional. A field omitted from a PUT body is left
    untouched; a field required on create may not be set to null.
"""

import uuid
from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import EmailStr, Field, field_validator

from app.schemas.common import INT32_MAX, APIModel, bounded_str

# ── Constraint types shared by Create and Update ──────────────────────────
# Widths match the columns in app.models.client
ClientType = bounded_str(50, required=True)
PersonName = bounded_str(100, required=True)
ShortText = bounded_str(50)
SourceText = bounded_str(100)
LeadScore = Annotated[int, Field(ge=0, le=INT32_MAX)]


class ClientCreate(APIModel):
    """
    Body of POST /api/v1/clients.

    Example:
        {"type": "buyer", "firstName": "Ana", "lastName": "Reyes",
         "email": "ana@example.com", "leadScore": "40"}
    """
    type: ClientType
    first_name: PersonName
    last_name: PersonName
    email: EmailStr  # email-validator caps addresses at 254 chars
    phone: Optional[ShortText] = None
    stage: Optional[ShortText] = None
    status: Optional[ShortText] = None
    lead_score: Optional[LeadScore] = None
    source: Optional[SourceText] = None
    preferences: Optional[Any] = None
    notes: Optional[str] = None


class ClientUpdate(APIModel):
    """Body of PUT /api/v1/clients/{id}: every ClientCreate field, optional."""
    type: Optional[ClientType] = None
    first_name: Optional[PersonName] = None
    last_name: Optional[PersonName] = None
    email: Optional[EmailStr] = None
    phone: Optional[ShortText] = None
    stage: Optional[ShortText] = None
    status: Optional[ShortText] = None
    lead_score: Optional[LeadScore] = None
    source: Optional[SourceText] = None
    preferences: Optional[Any] = None
    notes: Optional[str] = None

    @field_validator("type", "first_name", "last_name", "email")
    @classmethod
    def reject_null(cls, value: Optional[str]) -> str:
        # Defaults are not validated, so this only fires for an explicit null
        if value is None:
            raise ValueError("may be omitted but not set to null")
        return value


class ClientResponse(APIModel):
    """A client as returned by every client endpoint."""
    id: uuid.UUID
    user_id: str
    type: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    stage: Optional[str] = None
    status: Optional[str] = None
    lead_score: Optional[int] = None
    source: Optional[str] = None
    preferences: Optional[Any] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
