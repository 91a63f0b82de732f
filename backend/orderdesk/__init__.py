"""
OrderDesk Backend - Application Package Initializer
===================================================

What: Marks the `orderdesk` directory as a Python package.
Who:  Used by uvicorn (`orderdesk.main:app`), pytest and the service modules.

Architecture Note:
    The backend keeps a layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (authorize, export,      │  ← Domain logic, no HTTP
    │   notify, login)                    │
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database (caller-scoped sessions) │  ← Async SQLAlchemy + RLS claims
    └─────────────────────────────────────┘

    Each handler is stateless: the only process-wide objects are the
    connection pool and the outbound HTTP clients.
"""

__version__ = "1.0.0"
