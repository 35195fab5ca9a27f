"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure, except new_person_id() which reads the clock

Design Decisions:
    - Functional core separated from imperative shell (services/ and infrastructure/)
"""
