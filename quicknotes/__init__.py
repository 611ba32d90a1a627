"""
QuickNotes — Application Package Initializer
=============================================

A small notes service: list, create, view, edit, favorite and delete short
text notes stored in a single `notes` table.

Architecture Note:

    ┌─────────────────────────────────────┐
    │   Client (cache + page state)       │  ← quicknotes.client
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← the five note procedures
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
