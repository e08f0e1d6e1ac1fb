"""
Realty CRM API - Transaction Route Handlers
=============================================

What:  CRUD endpoints for /api/v1/transactions.
How:   Same gate chain and status codes as the client routes; the bodies are
       validated by TransactionCreate / TransactionUpdate.

Example:
    POST /api/v1/transactions
    {"transactionType": "purchase", "listPrice": "425000.00"}
    → 201 {"id": "...", "userId": "auth0|...", "listPrice": "425000.00", ...}
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.guards import Identity, authenticate, require_roles, validate_body, validate_query
from app.schemas.common import ErrorResponse, MessageResponse, Page, PaginationQuery
from app.schemas.transaction import TransactionCreate, TransactionResponse, TransactionUpdate
from app.services.transaction_service import transaction_service

router = APIRouter(prefix="/api/v1/transactions", tags=["Transactions"])

AUTH_RESPONSES = {
    401: {"description": "Missing or invalid bearer token", "model": MessageResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}
WRITE_RESPONSES = {
    **AUTH_RESPONSES,
    400: {"description": "Validation failed", "model": ErrorResponse},
    403: {"description": "Caller lacks the required role", "model": MessageResponse},
}
NOT_FOUND = {404: {"description": "Transaction not found", "model": ErrorResponse}}


@router.get(
    "",
    response_model=Page[TransactionResponse],
    responses={**AUTH_RESPONSES, 400: {"description": "Query validation failed", "model": ErrorResponse}},
    summary="List the caller's transactions",
)
async def list_transactions(
    identity: Identity = Depends(authenticate),
    query: PaginationQuery = Depends(validate_query(PaginationQuery)),
    db: AsyncSession = Depends(get_db_session),
) -> Page[TransactionResponse]:
    """
    Page through the caller's transactions, most recently updated first.

    Example:
        GET /api/v1/transactions?page=2&limit=10
        → {"data": [...], "meta": {"total": 37, "page": 2, "limit": 10}}
    """
    return await transaction_service.list_records(db, identity.sub, query)


@router.post(
    "",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    responses=WRITE_RESPONSES,
    summary="Create a transaction owned by the caller",
)
async def create_transaction(
    identity: Identity = Depends(require_roles("agent", "admin")),
    payload: TransactionCreate = Depends(validate_body(TransactionCreate)),
    db: AsyncSession = Depends(get_db_session),
) -> TransactionResponse:
    return await transaction_service.create_record(db, identity.sub, payload)


@router.get(
    "/{transaction_id}",
    response_model=TransactionResponse,
    responses={**AUTH_RESPONSES, **NOT_FOUND},
    summary="Get one of the caller's transactions",
)
async def get_transaction(
    transaction_id: str,
    identity: Identity = Depends(authenticate),
    db: AsyncSession = Depends(get_db_session),
) -> TransactionResponse:
    return await transaction_service.get_record(db, identity.sub, transaction_id)


@router.put(
    "/{transaction_id}",
    response_model=TransactionResponse,
    responses={**WRITE_RESPONSES, **NOT_FOUND},
    summary="Partially update one of the caller's transactions",
)
async def update_transaction(
    transaction_id: str,
    identity: Identity = Depends(require_roles("agent", "admin")),
    payload: TransactionUpdate = Depends(validate_body(TransactionUpdate)),
    db: AsyncSession = Depends(get_db_session),
) -> TransactionResponse:
    return await transaction_service.update_record(db, identity.sub, transaction_id, payload)


@router.delete(
    "/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**AUTH_RESPONSES, **NOT_FOUND, 403: {"description": "Admin only", "model": MessageResponse}},
    summary="Delete one of the caller's transactions",
)
async def delete_transaction(
    transaction_id: str,
    identity: Identity = Depends(require_roles("admin")),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await transaction_service.delete_record(db, identity.sub, transaction_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
