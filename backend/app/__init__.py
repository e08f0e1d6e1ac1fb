"""
Realty CRM API - Application Package
======================================

What:  CRUD REST API for real-estate clients and transactions.

Architecture:

    ┌─────────────────────────────────────┐
    │   Middleware (request id, logging)  │  ← every request
    ├─────────────────────────────────────┤
    │   Guards (auth → role → validation) │  ← per route, as dependencies
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (owner-scoped CRUD)      │  ← one statement per operation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← shared async engine
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
