"""
StudyHub Backend — Application Package Initializer
===================================================

What: Marks the `studyhub` directory as a Python package.
Who:  Imported by uvicorn, Alembic and pytest.

Architecture Note:
    The backend is a thin layered CRUD service:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP envelopes and status codes
    ├─────────────────────────────────────┤
    │   Services (Subject/Resource/Stats) │  ← Queries, counters, not-found rules
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
