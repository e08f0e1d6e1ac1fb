"""
Realty CRM API - Transaction Request/Response Schemas
=======================================================

What:  Pydantic models defining the transaction API contract.

Money:
    listPrice / finalPrice travel as decimal strings ("425000.00") in both
    directions. JSON numbers are rejected on input so no value ever passes
    through a binary float. Values that NUMERIC(14, 2) cannot hold exactly
    (a third decimal place, more than 12 integer digits) are rejected with 400.

References:
    buyerClientId / sellerClientId must be UUID strings when present.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator, Field, field_validator

from app.schemas.common import APIModel, bounded_str


def _decimal_from_string(value: Any) -> Any:
    if isinstance(value, Decimal):
        return value
    if not isinstance(value, str):
        raise ValueError("must be a decimal string, e.g. \"425000.00\"")
    try:
        parsed = Decimal(value.strip())
    except InvalidOperation:
        raise ValueError("must be a decimal string, e.g. \"425000.00\"") from None
    if not parsed.is_finite():
        raise ValueError("must be a finite decimal")
    return parsed


# ── Constraint types shared by Create and Update ──────────────────────────
# NUMERIC(14, 2): at most 12 integer digits and 2 decimal places, never rounded
DecimalString = Annotated[
    Decimal,
    BeforeValidator(_decimal_from_string),
    Field(max_digits=14, decimal_places=2),
]
TransactionType = bounded_str(50, required=True)
StatusText = bounded_str(50)


class TransactionCreate(APIModel):
    """
    Body of POST /api/v1/transactions.

    Example:
        {"transactionType": "purchase",
         "propertyAddress": {"street": "12 Elm St", "city": "Austin"},
         "listPrice": "425000.00", "buyerClientId": "5b0c...-..."}
    """
    transaction_type: TransactionType
    property_address: Optional[Any] = None
    list_price: Optional[DecimalString] = None
    final_price: Optional[DecimalString] = None
    contract_date: Optional[date] = None
    closing_date: Optional[date] = None
    buyer_client_id: Optional[uuid.UUID] = None
    seller_client_id: Optional[uuid.UUID] = None
    status: Optional[StatusText] = None


class TransactionUpdate(APIModel):
    """Body of PUT /api/v1/transactions/{id}: every TransactionCreate field, optional."""
    transaction_type: Optional[TransactionType] = None
    property_address: Optional[Any] = None
    list_price: Optional[DecimalString] = None
    final_price: Optional[DecimalString] = None
    contract_date: Optional[date] = None
    closing_date: Optional[date] = None
    buyer_client_id: Optional[uuid.UUID] = None
    seller_client_id: Optional[uuid.UUID] = None
    status: Optional[StatusText] = None

    @field_validator("transaction_type")
    @classmethod
    def reject_null(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("may be omitted but not set to null")
        return value


class TransactionResponse(APIModel):
    """A transaction as returned by every transaction endpoint."""
    id: uuid.UUID
    user_id: str
    transaction_type: str
    property_address: Optional[Any] = None
    list_price: Optional[Decimal] = None
    final_price: Optional[Decimal] = None
    contract_date: Optional[date] = None
    closing_date: Optional[date] = None
    buyer_client_id: Optional[uuid.UUID] = None
    seller_client_id: Optional[uuid.UUID] = None
    status: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
