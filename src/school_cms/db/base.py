from __future__ import annotations

from sqlalchemy import Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class IntIdMixin:
    """Autoincrement integer primary key; every content table is addressed by it."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
