"""Reusable named lists of draw entries."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, select, text
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship, validates

from fairdraw.draw.timestamps import utcnow
from fairdraw.validators import validate_list_name, validate_participants

from .base import ID_TYPE, Base

if TYPE_CHECKING:
    from .draw_record import DrawRecord


class DrawList(Base):
    """A saved list of names, players or items that draws can be run against."""

    __tablename__ = "draw_lists"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    """Primary key."""

    name: Mapped[str] = mapped_column(String(50), nullable=False)
    """Display name chosen by the user."""

    items: Mapped[list] = mapped_column(JSON, nullable=False)
    """Entries of the list, in the order they were entered."""

    kind: Mapped[str] = mapped_column(String(20), nullable=False, default="names")
    """Draw kind the list is meant for (``"names"``, ``"teams"`` or ``"order"``)."""

    is_favorite: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    """Whether the list is pinned to the top of listings."""

    used_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    """Number of draws run against the list."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    """Timestamp when the list was created."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )
    """Timestamp automatically bumped when the list is modified."""

    records: Mapped[list["DrawRecord"]] = relationship(back_populates="draw_list")
    """Draws that were run against this list."""

    def __init__(
        self,
        *,
        name: str,
        items: list,
        kind: str = "names",
        is_favorite: bool = False,
        used_count: int = 0,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> None:
        self.name = name
        self.items = list(items)
        self.kind = kind
        self.is_favorite = is_favorite
        self.used_count = used_count
        if created_at is not None:
            self.created_at = created_at
        if updated_at is not None:
            self.updated_at = updated_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<DrawList(id={id}, name={name}, kind={kind}, items={count})>".format(
            id=self.id,
            name=self.name,
            kind=self.kind,
            count=len(self.items or []),
        )

    @validates("name")
    def _validate_name(self, _key: str, value: str) -> str:
        return validate_list_name(value)

    @validates("items")
    def _validate_items(self, _key: str, value: list) -> list:
        return validate_participants(value)

    def increment_usage(self) -> None:
        """Record that a draw was run against the list."""
        self.used_count = (self.used_count or 0) + 1
        self.updated_at = utcnow()

    def toggle_favorite(self) -> bool:
        """Flip the favourite flag and return the new value."""
        self.is_favorite = not self.is_favorite
        return self.is_favorite

    @classmethod
    def list_all(cls, session: Session, kind: Optional[str] = None) -> list["DrawList"]:
        """Return saved lists, favourites first, then most recently updated."""
        stmt = select(cls)
        if kind is not None:
            stmt = stmt.where(cls.kind == kind)
        stmt = stmt.order_by(cls.is_favorite.desc(), cls.updated_at.desc(), cls.id.desc())
        return list(session.scalars(stmt))


__all__ = ["DrawList"]
