"""Declarative Base — single metadata registry for every Huddle table.

Invariants:
    - Every model in huddle/models/ inherits from Base
    - Alembic autogenerate and the test fixtures read Base.metadata
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
