"""
Declarative base and shared column mixins.
"""

from sqlalchemy import Boolean, CheckConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


class BaseModel(DeclarativeBase):
    """Base class for all tables owned by the projection layer."""


class SingletonRowMixin:
    """
    Marks a table that holds at most one logical row.

    Every insert carries one_row_id = TRUE and the check constraint forbids any
    other value, so ON CONFLICT (one_row_id) always targets the same row.
    """

    one_row_id: Mapped[bool] = mapped_column(
        Boolean,
        primary_key=True,
        default=True,
        comment="Fixed row identity marker"
    )

    @declared_attr.directive
    def __table_args__(cls):
        return (CheckConstraint("one_row_id", name=f"ck_{cls.__tablename__}_one_row"),)
