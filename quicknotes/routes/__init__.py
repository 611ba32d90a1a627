# Routes package init
"""
QuickNotes Backend — API Routes Package
=========================================

Route Inventory:
    - notes.py:   GET  /api/notes              (list all notes)
                  GET  /api/notes/{id}         (get single note)
                  POST /api/notes/create       (create a note)
                  POST /api/notes/update       (patch a note)
                  POST /api/notes/delete       (delete a note)
    - health.py:  GET  /health                 (service health check)

Design Principle:
    Routes are THIN: they extract request data, call NoteService, and let
    the response model and global exception handlers shape the reply.
"""
