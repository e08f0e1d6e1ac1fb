"""
Realty CRM API - Transaction Service
======================================

What:  CRUD for the caller's transactions (purchases, sales, leases).
How:   Binds OwnedResourceService to the Transaction model and schemas.
       Buyer/seller client ids are stored as given; only their UUID format
       is checked (by TransactionCreate/TransactionUpdate).
"""

from app.models.transaction import Transaction
from app.schemas.transaction import TransactionResponse
from app.services.base import OwnedResourceService


class TransactionService(OwnedResourceService):
    """Business logic layer for transaction operations."""

    model = Transaction
    response_schema = TransactionResponse
    resource_name = "Transaction"


transaction_service = TransactionService()
