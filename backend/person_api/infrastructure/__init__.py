"""Infrastructure Layer — database access, the Person store, logging setup.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All SQLAlchemy exceptions mapped to core/errors.py types before leaving this layer
"""
