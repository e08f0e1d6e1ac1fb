"""
Realty CRM API - Client Route Handlers
========================================

What:  CRUD endpoints for /api/v1/clients.
How:   Gates are declared as dependencies (auth → role → validation), then a
       single ClientService call produces the response.

| Operation | Role          | Validation     | Success           |
|-----------|---------------|----------------|-------------------|
| list      | any           | ?page=&limit=  | 200 envelope      |
| create    | agent, admin  | ClientCreate   | 201 client        |
| get       | any           | none           | 200 client        |
| update    | agent, admin  | ClientUpdate   | 200 client        |
| delete    | admin         | none           | 204 empty         |
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.guards import Identity, authenticate, require_roles, validate_body, validate_query
from app.schemas.client import ClientCreate, ClientResponse, ClientUpdate
from app.schemas.common import ErrorResponse, MessageResponse, Page, PaginationQuery
from app.services.client_service import client_service

router = APIRouter(prefix="/api/v1/clients", tags=["Clients"])

AUTH_RESPONSES = {
    401: {"description": "Missing or invalid bearer token", "model": MessageResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}
WRITE_RESPONSES = {
    **AUTH_RESPONSES,
    400: {"description": "Validation failed", "model": ErrorResponse},
    403: {"description": "Caller lacks the required role", "model": MessageResponse},
}
NOT_FOUND = {404: {"description": "Client not found", "model": ErrorResponse}}


@router.get(
    "",
    response_model=Page[ClientResponse],
    responses={**AUTH_RESPONSES, 400: {"description": "Query validation failed", "model": ErrorResponse}},
    summary="List the caller's clients",
)
async def list_clients(
    identity: Identity = Depends(authenticate),
    query: PaginationQuery = Depends(validate_query(PaginationQuery)),
    db: AsyncSession = Depends(get_db_session),
) -> Page[ClientResponse]:
    """
    Page through the caller's clients, most recently updated first.

    Example:
        GET /api/v1/clients?page=2&limit=10
        → {"data": [...], "meta": {"total": 37, "page": 2, "limit": 10}}
    """
    return await client_service.list_records(db, identity.sub, query)


@router.post(
    "",
    response_model=ClientResponse,
    status_code=status.HTTP_201_CREATED,
    responses=WRITE_RESPONSES,
    summary="Create a client owned by the caller",
)
async def create_client(
    identity: Identity = Depends(require_roles("agent", "admin")),
    payload: ClientCreate = Depends(validate_body(ClientCreate)),
    db: AsyncSession = Depends(get_db_session),
) -> ClientResponse:
    return await client_service.create_record(db, identity.sub, payload)


@router.get(
    "/{client_id}",
    response_model=ClientResponse,
    responses={**AUTH_RESPONSES, **NOT_FOUND},
    summary="Get one of the caller's clients",
)
async def get_client(
    client_id: str,
    identity: Identity = Depends(authenticate),
    db: AsyncSession = Depends(get_db_session),
) -> ClientResponse:
    return await client_service.get_record(db, identity.sub, client_id)


@router.put(
    "/{client_id}",
    response_model=ClientResponse,
    responses={**WRITE_RESPONSES, **NOT_FOUND},
    summary="Partially update one of the caller's clients",
)
async def update_client(
    client_id: str,
    identity: Identity = Depends(require_roles("agent", "admin")),
    payload: ClientUpdate = Depends(validate_body(ClientUpdate)),
    db: AsyncSession = Depends(get_db_session),
) -> ClientResponse:
    return await client_service.update_record(db, identity.sub, client_id, payload)


@router.delete(
    "/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**AUTH_RESPONSES, **NOT_FOUND, 403: {"description": "Admin only", "model": MessageResponse}},
    summary="Delete one of the caller's clients",
)
async def delete_client(
    client_id: str,
    identity: Identity = Depends(require_roles("admin")),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await client_service.delete_record(db, identity.sub, client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
