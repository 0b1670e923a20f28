"""SQLAlchemy table definitions.

These map to the frozen dataclass domain models in user_domain/models/.
Repos convert between SQLAlchemy rows and domain dataclasses.
"""

from __future__ import annotations

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from user_domain.db.engine import Base


class UserRow(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, index=True
    )
