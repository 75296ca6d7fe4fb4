"""
HISS Backend — Application Package Initializer
===============================================

What: Marks the `hiss` directory as a Python package.
Why:  Enables module imports like `from hiss.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend is split into the same layers on every request path:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, kind dispatch
    ├─────────────────────────────────────┤
    │     Services (Save Workflow)        │  ← decode → validate → persist
    ├─────────────────────────────────────┤
    │   Repositories (Persistence)        │  ← one per feature kind + reports
    ├─────────────────────────────────────┤
    │  Models & Schemas & Vocabularies    │  ← SQLAlchemy tables + Pydantic records
    ├─────────────────────────────────────┤
    │        Database (Sessions)          │  ← Async SQLAlchemy engine/pool
    └─────────────────────────────────────┘

    Routes never touch SQL. Repositories receive their session through
    their constructor, so tests can hand them an in-memory store.
"""

__version__ = "1.0.0"
