# Services package init
"""
Realty CRM API - Services Layer
=================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
How:   Services receive a session and the caller's subject, run one owner-scoped
       statement per operation, and return response schemas.

Service Inventory:
    - OwnedResourceService (base): list/create/get/update/delete scoped to user_id
    - ClientService: binds the base to Client
    - TransactionService: binds the base to Transaction

Services never see HTTP objects; routes never build SQL.
"""
