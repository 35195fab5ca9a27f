"""ORM Models — SQLAlchemy declarative models.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every model imported here so Base.metadata is complete for create_all/alembic
"""

from person_api.models.person import Person  # noqa: F401
