"""SQLAlchemy models for the local ticket store."""

from __future__ import annotations

import uuid
from datetime import date, datetime  # noqa: TC003 - used at runtime for SQLAlchemy
from typing import Any

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)

from deliveryhub.stages import Stage


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class TicketRecord(Base):
    """Ticket row."""

    __tablename__ = "tickets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    stage: Mapped[str] = mapped_column(String(60), nullable=False, index=True)
    priority: Mapped[str | None] = mapped_column(String(20), nullable=True)
    intention: Mapped[str | None] = mapped_column(String(50), nullable=True)
    sort_order: Mapped[float | None] = mapped_column(Float, nullable=True)
    developer_days_size: Mapped[float | None] = mapped_column(Float, nullable=True)
    actual_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    estimated_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    tags: Mapped[str | None] = mapped_column(Text, nullable=True)
    projected_uat_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    calculated_eta: Mapped[date | None] = mapped_column(Date, nullable=True)
    developer: Mapped[str | None] = mapped_column(String(255), nullable=True)
    epic: Mapped[str | None] = mapped_column(String(255), nullable=True)
    owner_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    comments: Mapped[list[CommentRecord]] = relationship(
        "CommentRecord", back_populates="ticket", cascade="all, delete-orphan"
    )

    def __init__(
        self,
        name: str,
        title: str,
        id: str | None = None,
        description: str = "",
        stage: str = Stage.BACKLOG.value,
        priority: str | None = None,
        sort_order: float | None = None,
        is_active: bool = True,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.name = name
        self.title = title
        self.description = description
        self.stage = stage
        self.priority = priority
        self.sort_order = sort_order
        self.is_active = is_active

    def __repr__(self) -> str:
        return f"<TicketRecord(id={self.id!r}, name={self.name!r}, stage={self.stage!r})>"


class DependencyRecord(Base):
    """Blocking edge: ``blocking_ticket_id`` blocks ``blocked_ticket_id``."""

    __tablename__ = "ticket_dependencies"
    __table_args__ = (
        UniqueConstraint("blocking_ticket_id", "blocked_ticket_id", name="uq_dependency_edge"),
        CheckConstraint("blocking_ticket_id != blocked_ticket_id", name="ck_no_self_dependency"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    blocking_ticket_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False
    )
    blocked_ticket_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    def __init__(
        self,
        blocking_ticket_id: str,
        blocked_ticket_id: str,
        id: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.blocking_ticket_id = blocking_ticket_id
        self.blocked_ticket_id = blocked_ticket_id

    def __repr__(self) -> str:
        return (
            f"<DependencyRecord(id={self.id!r}, blocking={self.blocking_ticket_id!r}, "
            f"blocked={self.blocked_ticket_id!r})>"
        )


class CommentRecord(Base):
    """Status comment written alongside a stage change."""

    __tablename__ = "ticket_comments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    ticket_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str | None] = mapped_column(String(255), nullable=True)
    source: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    ticket: Mapped[TicketRecord] = relationship("TicketRecord", back_populates="comments")

    def __init__(
        self,
        ticket_id: str,
        body: str,
        author: str | None = None,
        source: str = "DeliveryHub",
        id: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.ticket_id = ticket_id
        self.body = body
        self.author = author
        self.source = source


class StageRequirementRecord(Base):
    """A field that must be filled before a ticket enters ``stage``."""

    __tablename__ = "stage_requirements"
    __table_args__ = (UniqueConstraint("stage", "field_name", name="uq_stage_field"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    stage: Mapped[str] = mapped_column(String(60), nullable=False, index=True)
    field_name: Mapped[str] = mapped_column(String(100), nullable=False)
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    field_type: Mapped[str] = mapped_column(String(30), nullable=False, default="text")
    required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class FileLinkRecord(Base):
    """An uploaded file attached to a ticket."""

    __tablename__ = "ticket_files"
    __table_args__ = (UniqueConstraint("ticket_id", "file_id", name="uq_ticket_file"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ticket_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False
    )
    file_id: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
