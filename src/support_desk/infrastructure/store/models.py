"""
Entity Store Models
===================

SQLAlchemy ORM tables backing the two document collections.

``position`` is an insertion sequence used as the primary key and as the
tie-breaker for sorted listings.
"""

from typing import List, Optional

from sqlalchemy import Boolean, Float, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from support_desk.infrastructure.database import Base


class SupportCaseModel(Base):
    """Database model for the support case collection."""
    __tablename__ = "support_cases"

    position: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)

    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    owner: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_complete: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Weak reference to support_persons.alias; no foreign key
    assigned_support_person: Mapped[Optional[str]] = mapped_column(String(50), index=True, nullable=True)
    support_person_assignment_reasoning: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class SupportPersonModel(Base):
    """
    Database model for the support person collection.

    Soft-deleted rows keep their alias and email, so uniqueness is only
    enforced among active rows.
    """
    __tablename__ = "support_persons"

    position: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    alias: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(320), index=True, nullable=False)
    specializations: Mapped[List[str]] = mapped_column(JSONB, nullable=False, default=list)
    current_workload: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    average_resolution_time: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    customer_satisfaction_rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    seniority: Mapped[str] = mapped_column(String(20), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    __table_args__ = (
        Index(
            "uq_support_persons_active_alias", "alias",
            unique=True, postgresql_where=text("is_active")
        ),
        Index(
            "uq_support_persons_active_email", "email",
            unique=True, postgresql_where=text("is_active")
        ),
    )
