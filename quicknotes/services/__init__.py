# Services package init
"""
QuickNotes Backend — Services Layer
=====================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
Why:   Routes handle HTTP, services handle the note procedures.

Service Inventory:
    - NoteService: list / get / create / update / delete notes

Why services are separate from routes:
    1. Testability: Services can be unit-tested with a mocked session
    2. Reusability: Same service can back other entry points (CLI, jobs)
"""
